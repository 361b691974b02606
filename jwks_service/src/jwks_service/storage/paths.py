# Manage paths and create directories as needed.
from __future__ import annotations

from pathlib import Path


class PathResolver:
    """Compute and ensure paths for the record store"""

    def __init__(self, root: Path):
        self.root = root
        self.records = self.root / "records"
        self.index = self.root / "keys.json"

    def record(self, record_id: str) -> Path:
        return self.records / f"{record_id}.json"

    def ensure(self) -> None:
        self.records.mkdir(parents=True, exist_ok=True)
        if not self.index.exists():
            self.index.write_text('{"keys": []}', encoding="utf-8")
