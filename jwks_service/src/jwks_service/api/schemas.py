"""Request and response bodies for the HTTP API."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..algorithms import SUPPORTED_ALGORITHMS


class AlgorithmInput(BaseModel):
    alg: str = Field(
        ...,
        description=f"Algorithm name, one of: {', '.join(SUPPORTED_ALGORITHMS)}",
        examples=["RS256"],
    )


class Jwk(BaseModel):
    """A single public JSON Web Key."""

    model_config = ConfigDict(populate_by_name=True)

    kty: str = Field(..., description='Key type ("RSA", "EC" or "OKP")')
    use: str = Field(default="sig", description="Intended key use; always a signature key")
    alg: str = Field(..., description='Algorithm used with the key (e.g. "RS256")')
    kid: str = Field(..., description="Key ID")
    crv: Optional[str] = Field(default=None, description="Curve name for EC and OKP keys")
    x: Optional[str] = Field(default=None, description="Public x coordinate or raw OKP public key")
    y: Optional[str] = None
    n: Optional[str] = Field(default=None, description="RSA modulus, base64url")
    e: Optional[str] = Field(default=None, description="RSA public exponent, base64url")
    x5c: Optional[List[str]] = Field(default=None, description="Self-signed certificate, a single entry")
    x5t: Optional[str] = Field(default=None, description="SHA-1 thumbprint of the certificate")


class Jwks(BaseModel):
    keys: List[Jwk]


class JwkPrivate(Jwk):
    """A key as returned to its owner, private half included."""

    id: str = Field(..., description="Unique record identifier")
    private_key: str = Field(..., description="PKCS#8 DER private key, base64url")
    created_at: str


__all__ = ["AlgorithmInput", "Jwk", "Jwks", "JwkPrivate"]
