"""Key generation, JWK encoding and certificate issuance."""
from __future__ import annotations

from .certificate import CertificateIssuer, thumbprint
from .encoder import JwkEncoder
from .generator import DEFAULT_RSA_KEY_SIZE, KeyMaterialGenerator

__all__ = [
    "CertificateIssuer",
    "JwkEncoder",
    "KeyMaterialGenerator",
    "DEFAULT_RSA_KEY_SIZE",
    "thumbprint",
]
