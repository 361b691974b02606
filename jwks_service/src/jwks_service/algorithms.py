"""Closed set of signing algorithms and their per-family parameters.

Every :class:`Algorithm` member maps to exactly one :class:`KeyFamily` and one
curve or digest. The lookup tables below are checked against the enum at
import time so that adding a member without filling in its parameters fails
loudly instead of falling through a string match somewhere else.
"""
from __future__ import annotations

from enum import Enum
from typing import Mapping

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

from .exceptions import UnsupportedAlgorithm


class KeyFamily(str, Enum):
    RSA = "RSA"
    EC = "EC"
    EDDSA = "EdDSA"

    @property
    def kty(self) -> str:
        return _KTY[self]


class Algorithm(str, Enum):
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"
    ES256 = "ES256"
    ES384 = "ES384"
    ES512 = "ES512"
    ED25519 = "Ed25519"
    ED448 = "Ed448"

    @classmethod
    def parse(cls, value: "str | Algorithm") -> "Algorithm":
        if isinstance(value, Algorithm):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedAlgorithm(value) from None

    @property
    def family(self) -> KeyFamily:
        return _FAMILY[self]

    @property
    def kty(self) -> str:
        return self.family.kty

    @property
    def jose_alg(self) -> str:
        """Value published in the JWK ``alg`` member."""
        if self.family is KeyFamily.EDDSA:
            return "EdDSA"
        return self.value

    @property
    def curve(self) -> str | None:
        """JOSE curve name, ``None`` for RSA."""
        return _CURVE.get(self)

    def ec_curve(self) -> ec.EllipticCurve:
        try:
            return _EC_CURVE[self]()
        except KeyError:
            raise UnsupportedAlgorithm(self.value) from None

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        try:
            return _DIGEST[self]()
        except KeyError:
            raise UnsupportedAlgorithm(self.value) from None


_KTY: Mapping[KeyFamily, str] = {
    KeyFamily.RSA: "RSA",
    KeyFamily.EC: "EC",
    KeyFamily.EDDSA: "OKP",
}

_FAMILY: Mapping[Algorithm, KeyFamily] = {
    Algorithm.RS256: KeyFamily.RSA,
    Algorithm.RS384: KeyFamily.RSA,
    Algorithm.RS512: KeyFamily.RSA,
    Algorithm.ES256: KeyFamily.EC,
    Algorithm.ES384: KeyFamily.EC,
    Algorithm.ES512: KeyFamily.EC,
    Algorithm.ED25519: KeyFamily.EDDSA,
    Algorithm.ED448: KeyFamily.EDDSA,
}

_CURVE: Mapping[Algorithm, str] = {
    Algorithm.ES256: "P-256",
    Algorithm.ES384: "P-384",
    Algorithm.ES512: "P-521",
    Algorithm.ED25519: "Ed25519",
    Algorithm.ED448: "Ed448",
}

_EC_CURVE = {
    Algorithm.ES256: ec.SECP256R1,
    Algorithm.ES384: ec.SECP384R1,
    Algorithm.ES512: ec.SECP521R1,
}

# EdDSA hashes internally, so it has no entry here.
_DIGEST = {
    Algorithm.RS256: hashes.SHA256,
    Algorithm.RS384: hashes.SHA384,
    Algorithm.RS512: hashes.SHA512,
    Algorithm.ES256: hashes.SHA256,
    Algorithm.ES384: hashes.SHA384,
    Algorithm.ES512: hashes.SHA512,
}


def _check_tables() -> None:
    if set(_KTY) != set(KeyFamily):
        raise RuntimeError("kty table does not cover every key family")
    if set(_FAMILY) != set(Algorithm):
        raise RuntimeError("family table does not cover every algorithm")
    for alg in Algorithm:
        family = _FAMILY[alg]
        if (alg in _CURVE) == (family is KeyFamily.RSA):
            raise RuntimeError(f"curve table inconsistent for {alg.value}")
        if (alg in _EC_CURVE) != (family is KeyFamily.EC):
            raise RuntimeError(f"EC curve table inconsistent for {alg.value}")
        if (alg in _DIGEST) == (family is KeyFamily.EDDSA):
            raise RuntimeError(f"digest table inconsistent for {alg.value}")


_check_tables()


SUPPORTED_ALGORITHMS: tuple[str, ...] = tuple(alg.value for alg in Algorithm)

__all__ = ["Algorithm", "KeyFamily", "SUPPORTED_ALGORITHMS"]
