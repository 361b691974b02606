"""Central exception hierarchy"""
from __future__ import annotations


class JwksServiceError(Exception):
    """Base exception for all failures"""


class ConfigError(JwksServiceError):
    """Raised when configuration cannot be loaded or validated"""


class UnsupportedAlgorithm(JwksServiceError):
    """Raised for an algorithm identifier outside the supported set"""

    def __init__(self, alg: object) -> None:
        super().__init__(f"Unsupported algorithm: {alg}")
        self.alg = alg


class GenerationError(JwksServiceError):
    """Raised when the crypto engine fails to produce key material"""


class EncodingError(JwksServiceError):
    """Raised when key material cannot be encoded as JWK fields"""


class NotFound(JwksServiceError):
    """Raised when a record is absent, soft-deleted or fully expired"""

    def __init__(self, record_id: str) -> None:
        super().__init__(f"Key not found: {record_id}")
        self.record_id = record_id


class PrivateKeyGone(JwksServiceError):
    """Raised when a record is still public but its private key has expired"""

    def __init__(self, record_id: str) -> None:
        super().__init__(f"Private key expired: {record_id}")
        self.record_id = record_id


class StoreError(JwksServiceError):
    """Raised when the record store cannot persist or read a record"""


__all__ = [
    "JwksServiceError",
    "ConfigError",
    "UnsupportedAlgorithm",
    "GenerationError",
    "EncodingError",
    "NotFound",
    "PrivateKeyGone",
    "StoreError",
]
