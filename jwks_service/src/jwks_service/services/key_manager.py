# Generate keys and hand them to the lifecycle; list, fetch and delete them.
from __future__ import annotations

import time
from dataclasses import replace
from typing import Any, Dict, List, Optional

from ..algorithms import Algorithm, KeyFamily
from ..config import AppConfig
from ..crypto.certificate import CertificateIssuer
from ..crypto.encoder import JwkEncoder
from ..crypto.generator import DEFAULT_RSA_KEY_SIZE, RSA_PUBLIC_EXPONENT, KeyMaterialGenerator
from ..logging import get_logger
from ..models import JwkRecord
from ..storage import RecordStore, create_store
from .key_lifecycle import Clock, LifecycleManager, utcnow

log = get_logger("jwks_service.keys")


class KeyManager:
    """Generator -> encoder -> (certificate, RSA only) -> lifecycle"""

    def __init__(
        self,
        lifecycle: LifecycleManager,
        *,
        generator: Optional[KeyMaterialGenerator] = None,
        encoder: Optional[JwkEncoder] = None,
        issuer: Optional[CertificateIssuer] = None,
        rsa_key_size: int = DEFAULT_RSA_KEY_SIZE,
        rsa_public_exponent: int = RSA_PUBLIC_EXPONENT,
    ) -> None:
        self.lifecycle = lifecycle
        self.generator = generator or KeyMaterialGenerator(
            rsa_key_size=rsa_key_size, rsa_public_exponent=rsa_public_exponent
        )
        self.encoder = encoder or JwkEncoder()
        self.issuer = issuer or CertificateIssuer()

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        *,
        store: Optional[RecordStore] = None,
        clock: Clock = utcnow,
    ) -> "KeyManager":
        if store is None:
            store = create_store(config.storage)
        lifecycle = LifecycleManager(store, config.lifecycle, clock)
        return cls(
            lifecycle,
            rsa_key_size=config.crypto.rsa_key_size,
            rsa_public_exponent=config.crypto.rsa_public_exponent,
        )

    def create(self, alg: str | Algorithm) -> JwkRecord:
        algorithm = Algorithm.parse(alg)
        started = time.perf_counter()

        material = self.generator.generate(algorithm)
        fields = self.encoder.encode(material, algorithm)
        if algorithm.family is KeyFamily.RSA:
            x5c, x5t = self.issuer.issue(
                material.key.public_key(), material.key, algorithm, now=self.lifecycle.clock()
            )
            fields = replace(fields, x5c=x5c, x5t=x5t)
        record = self.lifecycle.admit(fields)

        log.info(
            "key_generated",
            id=record.id,
            kid=record.kid,
            alg=algorithm.value,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return record

    def jwks(self) -> Dict[str, List[Dict[str, Any]]]:
        return {"keys": [record.public_jwk() for record in self.lifecycle.list_published()]}

    def get(self, record_id: str) -> JwkRecord:
        return self.lifecycle.fetch(record_id)

    def delete(self, record_id: str) -> None:
        self.lifecycle.delete(record_id)
