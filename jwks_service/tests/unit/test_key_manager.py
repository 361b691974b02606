from concurrent.futures import ThreadPoolExecutor

import pytest

from jwks_service.config import CryptoConfig
from jwks_service.exceptions import NotFound, PrivateKeyGone, UnsupportedAlgorithm
from jwks_service.services.key_manager import KeyManager
from jwks_service.storage import InMemoryRecordStore
from jwks_service.utils import b64url_decode


@pytest.mark.parametrize(
    "alg, kty, jose_alg, has_cert",
    [
        ("RS256", "RSA", "RS256", True),
        ("RS384", "RSA", "RS384", True),
        ("RS512", "RSA", "RS512", True),
        ("ES256", "EC", "ES256", False),
        ("ES384", "EC", "ES384", False),
        ("ES512", "EC", "ES512", False),
        ("Ed25519", "OKP", "EdDSA", False),
        ("Ed448", "OKP", "EdDSA", False),
    ],
)
def test_create_each_algorithm(key_manager, clock, alg, kty, jose_alg, has_cert):
    record = key_manager.create(alg)
    assert (record.kty, record.alg) == (kty, jose_alg)
    assert record.created_at == clock.now
    assert (record.x5c is not None) is has_cert
    assert (record.x5t is not None) is has_cert
    assert key_manager.get(record.id).kid == record.kid


def test_jwks_exposes_public_members_only(key_manager):
    rsa_record = key_manager.create("RS256")
    ed_record = key_manager.create("Ed25519")

    keys = key_manager.jwks()["keys"]
    assert [k["kid"] for k in keys] == [rsa_record.kid, ed_record.kid]
    for jwk in keys:
        assert jwk["use"] == "sig"
        assert "private_key" not in jwk
        assert "id" not in jwk
    assert set(keys[0]) == {"kty", "use", "alg", "kid", "n", "e", "x5c", "x5t"}
    assert set(keys[1]) == {"kty", "use", "alg", "kid", "crv", "x"}


def test_unsupported_algorithm_stores_nothing(key_manager):
    with pytest.raises(UnsupportedAlgorithm):
        key_manager.create("HS256")
    assert key_manager.jwks() == {"keys": []}


def test_lifecycle_through_manager(key_manager, clock):
    record = key_manager.create("ES256")
    clock.advance(150)
    with pytest.raises(PrivateKeyGone):
        key_manager.get(record.id)
    assert len(key_manager.jwks()["keys"]) == 1

    key_manager.delete(record.id)
    assert key_manager.jwks() == {"keys": []}
    with pytest.raises(NotFound):
        key_manager.delete(record.id)


def test_concurrent_creation(memory_config):
    manager = KeyManager.from_config(memory_config, store=InMemoryRecordStore())
    with ThreadPoolExecutor(max_workers=8) as pool:
        records = list(pool.map(manager.create, ["ES256", "Ed25519"] * 8))
    assert len({r.id for r in records}) == 16
    assert len({r.kid for r in records}) == 16
    assert len(manager.jwks()["keys"]) == 16


def test_crypto_settings_reach_generator(memory_config):
    config = memory_config.model_copy(
        update={"crypto": CryptoConfig(rsa_key_size=3072, rsa_public_exponent=3)}
    )
    record = KeyManager.from_config(config, store=InMemoryRecordStore()).create("RS256")
    assert record.e == "Aw"
    assert len(b64url_decode(record.n)) == 384
