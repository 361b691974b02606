"""Raw asymmetric key generation for the supported signing algorithms.

Each call draws fresh randomness from the OpenSSL backend used by
``cryptography``; nothing is cached between calls, so a single generator can
serve concurrent requests. The private key always leaves this module as a
PKCS#8 DER blob.
"""
from __future__ import annotations

from typing import Callable, Dict

from cryptography.exceptions import InternalError
from cryptography.exceptions import UnsupportedAlgorithm as BackendUnsupported
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed448, ed25519, rsa
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

from ..algorithms import Algorithm, KeyFamily
from ..exceptions import GenerationError
from ..models import EcKeyMaterial, KeyMaterial, OkpKeyMaterial, RsaKeyMaterial

DEFAULT_RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537

_OKP_KEY_TYPES = {
    Algorithm.ED25519: ed25519.Ed25519PrivateKey,
    Algorithm.ED448: ed448.Ed448PrivateKey,
}


def pkcs8_der(key: PrivateKeyTypes) -> bytes:
    return key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


class KeyMaterialGenerator:
    """Produce raw key pairs for one :class:`Algorithm` at a time"""

    def __init__(
        self,
        rsa_key_size: int = DEFAULT_RSA_KEY_SIZE,
        rsa_public_exponent: int = RSA_PUBLIC_EXPONENT,
    ) -> None:
        self.rsa_key_size = rsa_key_size
        self.rsa_public_exponent = rsa_public_exponent
        self._dispatch: Dict[KeyFamily, Callable[[Algorithm], KeyMaterial]] = {
            KeyFamily.RSA: self._generate_rsa,
            KeyFamily.EC: self._generate_ec,
            KeyFamily.EDDSA: self._generate_okp,
        }

    def generate(self, alg: str | Algorithm) -> KeyMaterial:
        algorithm = Algorithm.parse(alg)
        try:
            return self._dispatch[algorithm.family](algorithm)
        except (ValueError, TypeError, InternalError, BackendUnsupported) as exc:
            raise GenerationError(f"Key generation failed for {algorithm.value}: {exc}") from exc

    def _generate_rsa(self, alg: Algorithm) -> RsaKeyMaterial:
        priv = rsa.generate_private_key(public_exponent=self.rsa_public_exponent, key_size=self.rsa_key_size)
        numbers = priv.public_key().public_numbers()
        return RsaKeyMaterial(
            modulus=numbers.n,
            public_exponent=numbers.e,
            private_key=pkcs8_der(priv),
            key=priv,
        )

    def _generate_ec(self, alg: Algorithm) -> EcKeyMaterial:
        curve = alg.ec_curve()
        priv = ec.generate_private_key(curve)
        numbers = priv.public_key().public_numbers()
        return EcKeyMaterial(
            x=numbers.x,
            y=numbers.y,
            coordinate_size=(curve.key_size + 7) // 8,
            private_key=pkcs8_der(priv),
            key=priv,
        )

    def _generate_okp(self, alg: Algorithm) -> OkpKeyMaterial:
        priv = _OKP_KEY_TYPES[alg].generate()
        raw_public = priv.public_key().public_bytes(
            serialization.Encoding.Raw, serialization.PublicFormat.Raw
        )
        return OkpKeyMaterial(
            curve=alg.value,
            public_key=raw_public,
            private_key=pkcs8_der(priv),
            key=priv,
        )


__all__ = ["KeyMaterialGenerator", "DEFAULT_RSA_KEY_SIZE", "RSA_PUBLIC_EXPONENT", "pkcs8_der"]
