"""JSON Web Key generation and lifecycle service."""
from __future__ import annotations

from .algorithms import Algorithm, KeyFamily
from .exceptions import (
    EncodingError,
    GenerationError,
    JwksServiceError,
    NotFound,
    PrivateKeyGone,
    StoreError,
    UnsupportedAlgorithm,
)
from .version import __version__

__all__ = [
    "Algorithm",
    "KeyFamily",
    "JwksServiceError",
    "UnsupportedAlgorithm",
    "GenerationError",
    "EncodingError",
    "NotFound",
    "PrivateKeyGone",
    "StoreError",
    "__version__",
]
