"""Minimal self-signed X.509 wrapper for RSA signing keys.

The certificate only exists so that relying parties which insist on
``x5c``/``x5t`` can consume the key. Its validity window has no bearing on
key availability; that is decided by the lifecycle timestamps.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from ..algorithms import Algorithm, KeyFamily
from ..exceptions import EncodingError, UnsupportedAlgorithm
from ..utils import b64url_encode

PLACEHOLDER_NAME = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "ANONYMOUS")])
CERTIFICATE_VALIDITY = timedelta(days=365)


def thumbprint(der: bytes) -> str:
    """``x5t``: base64url SHA-1 digest of the DER certificate"""
    digest = hashes.Hash(hashes.SHA1())
    digest.update(der)
    return b64url_encode(digest.finalize())


class CertificateIssuer:
    def issue(
        self,
        public_key: rsa.RSAPublicKey,
        private_key: rsa.RSAPrivateKey,
        alg: str | Algorithm,
        *,
        now: Optional[datetime] = None,
    ) -> Tuple[List[str], str]:
        algorithm = Algorithm.parse(alg)
        if algorithm.family is not KeyFamily.RSA:
            raise UnsupportedAlgorithm(algorithm.value)
        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise EncodingError("Certificate issuance requires an RSA private key")

        not_before = now or datetime.now(timezone.utc)
        builder = (
            x509.CertificateBuilder()
            .subject_name(PLACEHOLDER_NAME)
            .issuer_name(PLACEHOLDER_NAME)
            .public_key(public_key)
            .serial_number(x509.random_serial_number())
            .not_valid_before(not_before)
            .not_valid_after(not_before + CERTIFICATE_VALIDITY)
        )
        try:
            cert = builder.sign(private_key, algorithm.hash_algorithm())
        except (ValueError, TypeError) as exc:
            raise EncodingError(f"Certificate signing failed: {exc}") from exc

        der = cert.public_bytes(serialization.Encoding.DER)
        return [b64url_encode(der)], thumbprint(der)


__all__ = ["CertificateIssuer", "PLACEHOLDER_NAME", "thumbprint"]
