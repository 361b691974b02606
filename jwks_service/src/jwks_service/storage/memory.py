from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional

from ..exceptions import StoreError
from ..models import JwkRecord


class InMemoryRecordStore:
    """Process-local store, mainly for tests and ephemeral deployments"""

    def __init__(self) -> None:
        self._records: Dict[str, JwkRecord] = {}
        self._lock = threading.Lock()

    def insert(self, record: JwkRecord) -> None:
        with self._lock:
            if record.id in self._records:
                raise StoreError(f"Duplicate record id: {record.id}")
            self._records[record.id] = replace(record)

    def get(self, record_id: str) -> Optional[JwkRecord]:
        with self._lock:
            record = self._records.get(record_id)
            return replace(record) if record is not None else None

    def list(self) -> List[JwkRecord]:
        with self._lock:
            return [replace(record) for record in self._records.values()]

    def soft_delete(self, record_id: str, deleted_at: datetime) -> int:
        with self._lock:
            record = self._records.get(record_id)
            if record is None or record.deleted_at is not None:
                return 0
            record.deleted_at = deleted_at
            return 1
