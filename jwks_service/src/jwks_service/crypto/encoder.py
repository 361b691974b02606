"""Encode raw key material into JOSE/JWK members (RFC 7517/7518).

Integers and coordinates are written as unsigned big-endian octets and
base64url-encoded without padding. EC coordinates are padded to the full
field size of the curve; RSA ``n`` and ``e`` use their shortest form.
"""
from __future__ import annotations

import uuid

from ..algorithms import Algorithm, KeyFamily
from ..exceptions import EncodingError
from ..models import EcKeyMaterial, JwkFields, KeyMaterial, OkpKeyMaterial, RsaKeyMaterial
from ..utils import b64url_encode, b64url_uint

_MATERIAL_TYPES = {
    KeyFamily.RSA: RsaKeyMaterial,
    KeyFamily.EC: EcKeyMaterial,
    KeyFamily.EDDSA: OkpKeyMaterial,
}


def new_kid() -> str:
    return str(uuid.uuid4())


class JwkEncoder:
    def encode(self, material: KeyMaterial, alg: str | Algorithm) -> JwkFields:
        algorithm = Algorithm.parse(alg)
        expected = _MATERIAL_TYPES[algorithm.family]
        if not isinstance(material, expected):
            raise EncodingError(
                f"{algorithm.value} expects {expected.__name__}, got {type(material).__name__}"
            )
        if not material.private_key:
            raise EncodingError("Key material carries no private key")
        try:
            public = self._public_members(material, algorithm)
        except ValueError as exc:
            raise EncodingError(f"Malformed {algorithm.value} key material: {exc}") from exc
        return JwkFields(
            kty=algorithm.kty,
            alg=algorithm.jose_alg,
            kid=new_kid(),
            private_key=b64url_encode(material.private_key),
            **public,
        )

    def _public_members(self, material: KeyMaterial, alg: Algorithm) -> dict:
        if isinstance(material, RsaKeyMaterial):
            return {
                "n": b64url_uint(material.modulus),
                "e": b64url_uint(material.public_exponent),
            }
        if isinstance(material, EcKeyMaterial):
            size = material.coordinate_size
            return {
                "crv": alg.curve,
                "x": b64url_uint(material.x, size),
                "y": b64url_uint(material.y, size),
            }
        if material.curve != alg.curve:
            raise ValueError(f"curve {material.curve} does not match {alg.curve}")
        return {"crv": material.curve, "x": b64url_encode(material.public_key)}


__all__ = ["JwkEncoder", "new_kid"]
