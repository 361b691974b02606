"""Base64url and unsigned-integer helpers for JOSE fields."""
from __future__ import annotations

import base64


def b64url_encode(data: bytes) -> str:
    """URL-safe base64 encode without padding"""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def b64url_decode(value: str) -> bytes:
    """URL-safe base64 decode that tolerates missing padding"""
    pad = "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode((value + pad).encode("ascii"))


def uint_to_bytes(value: int, length: int | None = None) -> bytes:
    """Big-endian unsigned encoding.

    Without ``length`` the shortest representation is produced (at least one
    byte). With ``length`` the result is left-padded with zeros, and a value
    that does not fit raises ``ValueError``.
    """
    if value < 0:
        raise ValueError("Cannot encode a negative integer")
    if length is None:
        length = max(1, (value.bit_length() + 7) // 8)
    try:
        return value.to_bytes(length, byteorder="big", signed=False)
    except OverflowError as exc:
        raise ValueError(f"Integer does not fit in {length} bytes") from exc


def b64url_uint(value: int, length: int | None = None) -> str:
    return b64url_encode(uint_to_bytes(value, length))


def b64url_to_uint(value: str) -> int:
    return int.from_bytes(b64url_decode(value), byteorder="big", signed=False)
