from __future__ import annotations

from .key_lifecycle import LifecycleManager, key_state, utcnow
from .key_manager import KeyManager

__all__ = ["KeyManager", "LifecycleManager", "key_state", "utcnow"]
