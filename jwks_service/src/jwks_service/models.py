# Dataclasses shared by the generator, encoder, lifecycle and stores.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes


@dataclass(frozen=True, slots=True)
class RsaKeyMaterial:
    modulus: int
    public_exponent: int
    private_key: bytes  # PKCS#8 DER
    key: PrivateKeyTypes = field(repr=False, compare=False)


@dataclass(frozen=True, slots=True)
class EcKeyMaterial:
    x: int
    y: int
    coordinate_size: int
    private_key: bytes  # PKCS#8 DER
    key: PrivateKeyTypes = field(repr=False, compare=False)


@dataclass(frozen=True, slots=True)
class OkpKeyMaterial:
    curve: str
    public_key: bytes
    private_key: bytes  # PKCS#8 DER
    key: PrivateKeyTypes = field(repr=False, compare=False)


KeyMaterial = Union[RsaKeyMaterial, EcKeyMaterial, OkpKeyMaterial]


@dataclass(frozen=True, slots=True)
class JwkFields:
    """Encoded JOSE members of a freshly generated key"""
    kty: str
    alg: str
    kid: str
    private_key: str = field(repr=False)
    crv: Optional[str] = None
    x: Optional[str] = None
    y: Optional[str] = None
    n: Optional[str] = None
    e: Optional[str] = None
    x5c: Optional[List[str]] = None
    x5t: Optional[str] = None


class KeyState(str, Enum):
    ACTIVE = "active"
    PRIVATE_EXPIRED = "private_expired"
    FULLY_EXPIRED = "fully_expired"
    DELETED = "deleted"


_PUBLIC_OPTIONAL = ("crv", "x", "y", "n", "e", "x5c", "x5t")


@dataclass(slots=True)
class JwkRecord:
    """Persisted key entry.

    Only ``deleted_at`` and the two expiry timestamps change after creation.
    """
    id: str
    kty: str
    alg: str
    kid: str
    private_key: str = field(repr=False)
    created_at: datetime
    crv: Optional[str] = None
    x: Optional[str] = None
    y: Optional[str] = None
    n: Optional[str] = None
    e: Optional[str] = None
    x5c: Optional[List[str]] = None
    x5t: Optional[str] = None
    deleted_at: Optional[datetime] = None
    private_key_expires_at: Optional[datetime] = None
    key_expires_at: Optional[datetime] = None

    def public_jwk(self) -> Dict[str, Any]:
        jwk: Dict[str, Any] = {"kty": self.kty, "use": "sig", "alg": self.alg, "kid": self.kid}
        for name in _PUBLIC_OPTIONAL:
            value = getattr(self, name)
            if value is not None:
                jwk[name] = list(value) if name == "x5c" else value
        return jwk

    def private_view(self) -> Dict[str, Any]:
        view: Dict[str, Any] = {"id": self.id}
        view.update(self.public_jwk())
        view["private_key"] = self.private_key
        view["created_at"] = self.created_at.isoformat()
        return view

    def to_dict(self) -> Dict[str, Any]:
        """Full storage representation, timestamps as ISO-8601 strings"""
        data: Dict[str, Any] = {
            "id": self.id,
            "kty": self.kty,
            "alg": self.alg,
            "kid": self.kid,
            "private_key": self.private_key,
        }
        for name in _PUBLIC_OPTIONAL:
            data[name] = getattr(self, name)
        for name in ("created_at", "deleted_at", "private_key_expires_at", "key_expires_at"):
            value = getattr(self, name)
            data[name] = value.isoformat() if value is not None else None
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JwkRecord":
        def _ts(name: str) -> Optional[datetime]:
            raw = data.get(name)
            return datetime.fromisoformat(raw) if raw else None

        created_at = _ts("created_at")
        if created_at is None:
            raise ValueError("Record is missing created_at")
        return cls(
            id=data["id"],
            kty=data["kty"],
            alg=data["alg"],
            kid=data["kid"],
            private_key=data["private_key"],
            created_at=created_at,
            crv=data.get("crv"),
            x=data.get("x"),
            y=data.get("y"),
            n=data.get("n"),
            e=data.get("e"),
            x5c=data.get("x5c"),
            x5t=data.get("x5t"),
            deleted_at=_ts("deleted_at"),
            private_key_expires_at=_ts("private_key_expires_at"),
            key_expires_at=_ts("key_expires_at"),
        )


__all__ = [
    "RsaKeyMaterial",
    "EcKeyMaterial",
    "OkpKeyMaterial",
    "KeyMaterial",
    "JwkFields",
    "JwkRecord",
    "KeyState",
]
