from __future__ import annotations

from .encoding import (
    b64url_decode,
    b64url_encode,
    b64url_to_uint,
    b64url_uint,
    uint_to_bytes,
)

__all__ = [
    "b64url_encode",
    "b64url_decode",
    "b64url_uint",
    "b64url_to_uint",
    "uint_to_bytes",
]
