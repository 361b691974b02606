from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from jwks_service.cli import app
from jwks_service.version import __version__

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for name in ("PRIVATE_KEY_EXPIRATION_SECONDS", "KEY_EXPIRATION_SECONDS", "JWKS_STORE_DIR", "JWKS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "storage": {"backend": "file", "store_dir": str(tmp_path / "store")},
                "logging": {"level": "ERROR"},
            }
        ),
        encoding="utf-8",
    )
    return path


def _invoke(config_path: Path, *args: str):
    return runner.invoke(app, ["--config", str(config_path), *args])


def test_generate_list_show_delete(config_path: Path) -> None:
    created = _invoke(config_path, "generate", "--alg", "ES256")
    assert created.exit_code == 0, created.output
    record = json.loads(created.stdout)
    assert record["alg"] == "ES256"
    assert record["private_key"]

    listed = json.loads(_invoke(config_path, "list").stdout)
    assert [k["kid"] for k in listed["keys"]] == [record["kid"]]
    assert "private_key" not in listed["keys"][0]

    shown = _invoke(config_path, "show", record["id"])
    assert shown.exit_code == 0
    assert json.loads(shown.stdout)["private_key"] == record["private_key"]

    assert _invoke(config_path, "delete", record["id"]).exit_code == 0
    assert _invoke(config_path, "delete", record["id"]).exit_code == 1
    assert _invoke(config_path, "show", record["id"]).exit_code == 1
    assert json.loads(_invoke(config_path, "list").stdout) == {"keys": []}


def test_show_expired_private_key(config_path: Path, tmp_path: Path) -> None:
    record = json.loads(_invoke(config_path, "generate", "--alg", "Ed25519").stdout)
    record_file = tmp_path / "store" / "records" / f"{record['id']}.json"
    stored = json.loads(record_file.read_text(encoding="utf-8"))
    stored["private_key_expires_at"] = (datetime.now(timezone.utc) - timedelta(minutes=1)).isoformat()
    record_file.write_text(json.dumps(stored), encoding="utf-8")

    assert _invoke(config_path, "show", record["id"]).exit_code == 2
    assert len(json.loads(_invoke(config_path, "list").stdout)["keys"]) == 1


def test_generate_unsupported(config_path: Path) -> None:
    result = _invoke(config_path, "generate", "--alg", "HS256")
    assert result.exit_code == 1


def test_bad_config_path(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--config", str(tmp_path / "missing.yaml"), "list"])
    assert result.exit_code == 1


def test_init_config(tmp_path: Path) -> None:
    target = tmp_path / "out" / "config.yaml"
    result = runner.invoke(app, ["init-config", str(target)])
    assert result.exit_code == 0
    data = yaml.safe_load(target.read_text(encoding="utf-8"))
    assert data["lifecycle"]["private_key_ttl_seconds"] == 86400
    assert runner.invoke(app, ["init-config", str(target)]).exit_code == 1


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == __version__


def test_corrupt_store_reports_error(config_path: Path, tmp_path: Path) -> None:
    record = json.loads(_invoke(config_path, "generate", "--alg", "ES256").stdout)
    record_file = tmp_path / "store" / "records" / f"{record['id']}.json"
    record_file.write_text("{not json", encoding="utf-8")

    for args in (("list",), ("show", record["id"]), ("delete", record["id"])):
        result = _invoke(config_path, *args)
        assert result.exit_code == 1, args
        assert result.exception is None or isinstance(result.exception, SystemExit)
