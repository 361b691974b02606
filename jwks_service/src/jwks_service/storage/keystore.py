from __future__ import annotations

import json
import os
import tempfile
import threading
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

from ..exceptions import StoreError
from ..models import JwkRecord
from .paths import PathResolver


def _is_record_id(value: str) -> bool:
    try:
        return str(uuid.UUID(value)) == value
    except (ValueError, TypeError, AttributeError):
        return False


class FileRecordStore:
    """Filesystem-backed record store under ``StorageConfig.store_dir``.

    Layout:
      - keys.json: index {"keys": [{id, kid, alg, created_at}]} in creation order
      - records/<id>.json: full record, private key included

    Each write goes to a temporary file in the same directory followed by
    ``os.replace`` so readers never observe a half-written record.
    """

    def __init__(self, root: Path | str) -> None:
        self.paths = PathResolver(Path(root))
        self._lock = threading.Lock()
        try:
            self.paths.ensure()
        except OSError as exc:
            raise StoreError(f"Cannot initialise store at {root}: {exc}") from exc

    # ----- File helpers -----
    def _write_atomic(self, target: Path, payload: Any) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _read_json(self, path: Path) -> Any:
        return json.loads(path.read_text(encoding="utf-8"))

    def _load_index(self) -> dict:
        return self._read_json(self.paths.index)

    def _load_record(self, record_id: str) -> Optional[JwkRecord]:
        path = self.paths.record(record_id)
        if not path.exists():
            return None
        return JwkRecord.from_dict(self._read_json(path))

    # ----- RecordStore -----
    def insert(self, record: JwkRecord) -> None:
        if not _is_record_id(record.id):
            raise StoreError(f"Record id must be a UUID: {record.id!r}")
        target = self.paths.record(record.id)
        with self._lock:
            if target.exists():
                raise StoreError(f"Duplicate record id: {record.id}")
            try:
                self._write_atomic(target, record.to_dict())
            except (OSError, ValueError) as exc:
                raise StoreError(f"Failed to store record {record.id}: {exc}") from exc
            try:
                self._add_to_index(record)
            except (OSError, ValueError) as exc:
                # An unindexed record file must not survive a failed insert.
                target.unlink(missing_ok=True)
                raise StoreError(f"Failed to index record {record.id}: {exc}") from exc

    def _add_to_index(self, record: JwkRecord) -> None:
        idx = self._load_index()
        keys = idx.get("keys", [])
        keys.append(
            {
                "id": record.id,
                "kid": record.kid,
                "alg": record.alg,
                "created_at": record.created_at.isoformat(),
            }
        )
        idx["keys"] = keys
        self._write_atomic(self.paths.index, idx)

    def get(self, record_id: str) -> Optional[JwkRecord]:
        if not _is_record_id(record_id):
            return None
        try:
            return self._load_record(record_id)
        except (OSError, ValueError, KeyError) as exc:
            raise StoreError(f"Failed to read record {record_id}: {exc}") from exc

    def list(self) -> List[JwkRecord]:
        records: List[JwkRecord] = []
        try:
            for entry in self._load_index().get("keys", []):
                record = self._load_record(entry["id"])
                if record is not None:
                    records.append(record)
        except (OSError, ValueError, KeyError) as exc:
            raise StoreError(f"Failed to list records: {exc}") from exc
        return records

    def soft_delete(self, record_id: str, deleted_at: datetime) -> int:
        if not _is_record_id(record_id):
            return 0
        with self._lock:
            try:
                record = self._load_record(record_id)
                if record is None or record.deleted_at is not None:
                    return 0
                record.deleted_at = deleted_at
                self._write_atomic(self.paths.record(record_id), record.to_dict())
            except (OSError, ValueError, KeyError) as exc:
                raise StoreError(f"Failed to delete record {record_id}: {exc}") from exc
        return 1


__all__ = ["FileRecordStore"]
