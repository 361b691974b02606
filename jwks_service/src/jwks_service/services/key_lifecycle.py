"""Time-bounded availability of stored keys.

A record's state is never stored. It is recomputed on every read from the
record's timestamps, the configured retention windows and the current time:

    created_at ──P──> private_key_expires_at ──K──> key_expires_at
       Active              PrivateExpired             FullyExpired

``deleted_at`` overrides everything and is terminal. There is no background
sweeper; records are retained for audit and simply stop being visible.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ..config import LifecycleConfig
from ..exceptions import NotFound, PrivateKeyGone
from ..logging import get_logger
from ..models import JwkFields, JwkRecord, KeyState
from ..storage.base import RecordStore

Clock = Callable[[], datetime]

log = get_logger("jwks_service.lifecycle")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def key_state(record: JwkRecord, now: datetime) -> KeyState:
    if record.deleted_at is not None:
        return KeyState.DELETED
    # A record without a public expiry was never published.
    if record.key_expires_at is None or now >= record.key_expires_at:
        return KeyState.FULLY_EXPIRED
    if record.private_key_expires_at is not None and now > record.private_key_expires_at:
        return KeyState.PRIVATE_EXPIRED
    return KeyState.ACTIVE


def is_published(record: JwkRecord, now: datetime) -> bool:
    return key_state(record, now) in (KeyState.ACTIVE, KeyState.PRIVATE_EXPIRED)


def private_key_available(record: JwkRecord, now: datetime) -> bool:
    """True while the private key may still be handed out for signing."""
    if not is_published(record, now):
        return False
    expires = record.private_key_expires_at
    return expires is None or now < expires


class LifecycleManager:
    def __init__(
        self,
        store: RecordStore,
        config: Optional[LifecycleConfig] = None,
        clock: Clock = utcnow,
    ) -> None:
        self.store = store
        self.config = config or LifecycleConfig()
        self.clock = clock

    def admit(self, fields: JwkFields) -> JwkRecord:
        """Stamp a freshly encoded key and persist it as a new Active record."""
        now = self.clock()
        private_expires = now + self.config.private_key_ttl
        record = JwkRecord(
            id=str(uuid.uuid4()),
            kty=fields.kty,
            alg=fields.alg,
            kid=fields.kid,
            private_key=fields.private_key,
            created_at=now,
            crv=fields.crv,
            x=fields.x,
            y=fields.y,
            n=fields.n,
            e=fields.e,
            x5c=list(fields.x5c) if fields.x5c is not None else None,
            x5t=fields.x5t,
            private_key_expires_at=private_expires,
            key_expires_at=private_expires + self.config.public_key_ttl,
        )
        self.store.insert(record)
        return record

    def state_of(self, record: JwkRecord) -> KeyState:
        return key_state(record, self.clock())

    def list_published(self) -> List[JwkRecord]:
        now = self.clock()
        return [record for record in self.store.list() if is_published(record, now)]

    def fetch(self, record_id: str) -> JwkRecord:
        """Return the record including its private key.

        Raises ``NotFound`` when the record is unknown, deleted or fully
        expired, and ``PrivateKeyGone`` when only the public half is still
        published.
        """
        now = self.clock()
        record = self.store.get(record_id)
        if record is None or not is_published(record, now):
            raise NotFound(record_id)
        if not private_key_available(record, now):
            log.info("private_key_gone", id=record_id, kid=record.kid)
            raise PrivateKeyGone(record_id)
        return record

    def delete(self, record_id: str) -> None:
        if self.store.soft_delete(record_id, self.clock()) == 0:
            raise NotFound(record_id)
        log.info("key_deleted", id=record_id)


__all__ = [
    "Clock",
    "LifecycleManager",
    "is_published",
    "key_state",
    "private_key_available",
    "utcnow",
]
