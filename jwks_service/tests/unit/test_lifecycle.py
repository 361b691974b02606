from dataclasses import replace
from datetime import timedelta

import pytest

from jwks_service.exceptions import NotFound, PrivateKeyGone
from jwks_service.models import KeyState
from jwks_service.services.key_lifecycle import is_published, key_state, private_key_available


def test_admit_stamps_timestamps(lifecycle, clock, make_fields):
    record = lifecycle.admit(make_fields())
    assert record.created_at == clock.now
    assert record.private_key_expires_at == clock.now + timedelta(seconds=100)
    assert record.key_expires_at == clock.now + timedelta(seconds=300)
    assert record.deleted_at is None
    assert lifecycle.store.get(record.id) == record


def test_ids_are_unique(lifecycle, make_fields):
    ids = {lifecycle.admit(make_fields()).id for _ in range(20)}
    assert len(ids) == 20


def test_timeline(lifecycle, clock, make_fields):
    record = lifecycle.admit(make_fields())

    clock.set(50)
    assert lifecycle.state_of(record) is KeyState.ACTIVE
    assert lifecycle.fetch(record.id).private_key == record.private_key
    assert [r.id for r in lifecycle.list_published()] == [record.id]

    clock.set(150)
    assert lifecycle.state_of(record) is KeyState.PRIVATE_EXPIRED
    with pytest.raises(PrivateKeyGone):
        lifecycle.fetch(record.id)
    assert [r.id for r in lifecycle.list_published()] == [record.id]

    clock.set(350)
    assert lifecycle.state_of(record) is KeyState.FULLY_EXPIRED
    with pytest.raises(NotFound):
        lifecycle.fetch(record.id)
    assert lifecycle.list_published() == []
    # Records are retained, only hidden.
    assert lifecycle.store.get(record.id) is not None


def test_private_expiry_boundary(lifecycle, clock, make_fields):
    record = lifecycle.admit(make_fields())
    clock.set(100)
    assert lifecycle.state_of(record) is KeyState.ACTIVE
    with pytest.raises(PrivateKeyGone):
        lifecycle.fetch(record.id)


def test_public_expiry_boundary(lifecycle, clock, make_fields):
    record = lifecycle.admit(make_fields())
    clock.set(299)
    assert is_published(record, clock())
    clock.set(300)
    assert lifecycle.state_of(record) is KeyState.FULLY_EXPIRED
    assert lifecycle.list_published() == []


def test_delete_hides_immediately(lifecycle, clock, make_fields):
    record = lifecycle.admit(make_fields())
    keep = lifecycle.admit(make_fields())
    lifecycle.delete(record.id)

    assert [r.id for r in lifecycle.list_published()] == [keep.id]
    with pytest.raises(NotFound):
        lifecycle.fetch(record.id)
    stored = lifecycle.store.get(record.id)
    assert stored.deleted_at == clock.now
    assert key_state(stored, clock()) is KeyState.DELETED


def test_delete_twice_is_not_found(lifecycle, make_fields):
    record = lifecycle.admit(make_fields())
    lifecycle.delete(record.id)
    with pytest.raises(NotFound):
        lifecycle.delete(record.id)


def test_delete_unknown(lifecycle):
    with pytest.raises(NotFound):
        lifecycle.delete("00000000-0000-4000-8000-000000000000")


def test_fetch_unknown(lifecycle):
    with pytest.raises(NotFound):
        lifecycle.fetch("00000000-0000-4000-8000-000000000000")


def test_delete_after_full_expiry_still_marks_record(lifecycle, clock, make_fields):
    record = lifecycle.admit(make_fields())
    clock.set(1000)
    lifecycle.delete(record.id)
    assert lifecycle.store.get(record.id).deleted_at == clock.now


def test_missing_expiry_timestamps(lifecycle, clock, make_fields):
    record = lifecycle.admit(make_fields())
    no_public = replace(record, key_expires_at=None)
    assert key_state(no_public, clock()) is KeyState.FULLY_EXPIRED
    assert not private_key_available(no_public, clock())

    no_private = replace(record, private_key_expires_at=None)
    clock.set(250)
    assert key_state(no_private, clock()) is KeyState.ACTIVE
    assert private_key_available(no_private, clock())
