"""Record store contract.

Stores persist rows and nothing else: visibility and expiry rules live in
:class:`jwks_service.services.key_lifecycle.LifecycleManager`. Every mutating
call touches exactly one record and must be atomic on its own.
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Protocol, runtime_checkable

from ..models import JwkRecord


@runtime_checkable
class RecordStore(Protocol):
    def insert(self, record: JwkRecord) -> None:
        """Persist a new record; an existing id is a ``StoreError``."""

    def get(self, record_id: str) -> Optional[JwkRecord]:
        """Return the stored record, unfiltered, or ``None``."""

    def list(self) -> List[JwkRecord]:
        """Return every stored record in creation order, unfiltered."""

    def soft_delete(self, record_id: str, deleted_at: datetime) -> int:
        """Set ``deleted_at`` if it is still unset; return rows affected (0 or 1)."""
