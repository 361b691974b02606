"""Record store implementations."""
from __future__ import annotations

from ..config import StorageConfig
from .base import RecordStore
from .keystore import FileRecordStore
from .memory import InMemoryRecordStore


def create_store(config: StorageConfig) -> RecordStore:
    if config.backend == "memory":
        return InMemoryRecordStore()
    return FileRecordStore(config.store_dir)


__all__ = ["RecordStore", "FileRecordStore", "InMemoryRecordStore", "create_store"]
