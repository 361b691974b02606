from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from jwks_service.config import AppConfig, LifecycleConfig, LoggingConfig, StorageConfig
from jwks_service.models import JwkFields
from jwks_service.services.key_lifecycle import LifecycleManager
from jwks_service.services.key_manager import KeyManager
from jwks_service.storage import InMemoryRecordStore

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)

    def set(self, offset_seconds: float) -> None:
        self.now = T0 + timedelta(seconds=offset_seconds)


def _make_fields(alg: str = "ES256") -> JwkFields:
    return JwkFields(kty="EC", alg=alg, kid=str(uuid.uuid4()), private_key="cHJpdg", crv="P-256", x="eA", y="eQ")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def short_lifecycle() -> LifecycleConfig:
    # P = 100 s, K = 200 s
    return LifecycleConfig(private_key_ttl_seconds=100, public_key_ttl_seconds=200)


@pytest.fixture
def memory_config(short_lifecycle: LifecycleConfig) -> AppConfig:
    return AppConfig(
        lifecycle=short_lifecycle,
        storage=StorageConfig(backend="memory"),
        logging=LoggingConfig(level="ERROR"),
    )


@pytest.fixture
def lifecycle(clock: FakeClock, short_lifecycle: LifecycleConfig) -> LifecycleManager:
    return LifecycleManager(InMemoryRecordStore(), short_lifecycle, clock)


@pytest.fixture
def key_manager(memory_config: AppConfig, clock: FakeClock) -> KeyManager:
    return KeyManager.from_config(memory_config, store=InMemoryRecordStore(), clock=clock)


@pytest.fixture
def make_fields():
    return _make_fields
