"""Configuration loading for the JWKS service.

Settings come from a YAML file (first match of :func:`config_search_paths`)
and are then overridden by environment variables. The resulting
:class:`AppConfig` is frozen; components receive the section they need.
"""
from __future__ import annotations

import os
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Iterable, List, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigError
from .paths import default_store_dir, runtime_config_dir

# Variable names kept compatible with existing deployments.
ENV_PRIVATE_KEY_TTL = "PRIVATE_KEY_EXPIRATION_SECONDS"
ENV_PUBLIC_KEY_TTL = "KEY_EXPIRATION_SECONDS"
ENV_STORE_DIR = "JWKS_STORE_DIR"
ENV_LOG_LEVEL = "JWKS_LOG_LEVEL"
ENV_ADMIN_SECRET = "JWKS_ADMIN_SECRET"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class LifecycleConfig(_Frozen):
    private_key_ttl_seconds: int = Field(
        default=86400, gt=0, description="How long the private key may be fetched"
    )
    public_key_ttl_seconds: int = Field(
        default=172800,
        gt=0,
        description="Additional time the public key stays published after the private key expires",
    )

    @property
    def private_key_ttl(self) -> timedelta:
        return timedelta(seconds=self.private_key_ttl_seconds)

    @property
    def public_key_ttl(self) -> timedelta:
        return timedelta(seconds=self.public_key_ttl_seconds)


class CryptoConfig(_Frozen):
    rsa_key_size: int = Field(default=2048, ge=2048, description="RSA modulus length in bits")
    rsa_public_exponent: Literal[3, 65537] = Field(default=65537, description="RSA public exponent")


class StorageConfig(_Frozen):
    backend: Literal["file", "memory"] = Field(default="file")
    store_dir: Path = Field(default_factory=default_store_dir)

    @field_validator("store_dir")
    @classmethod
    def _expand(cls, value: Path) -> Path:
        return Path(value).expanduser()


class LoggingConfig(_Frozen):
    level: str = Field(default="INFO", description="Logging verbosity level")

    def normalized_level(self) -> str:
        return self.level.upper()


class ApiConfig(_Frozen):
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080, ge=1, le=65535)
    allow_origins: List[str] = Field(default_factory=lambda: ["*"])
    cors_max_age: int = Field(default=3600, ge=0)
    admin_secret: Optional[str] = Field(
        default=None, description="HS256 secret guarding management routes; unset disables the guard"
    )


class AppConfig(_Frozen):
    lifecycle: LifecycleConfig = Field(default_factory=LifecycleConfig)
    crypto: CryptoConfig = Field(default_factory=CryptoConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)


def config_search_paths(explicit: Optional[Path] = None) -> Iterable[Path]:
    if explicit:
        yield explicit
    yield Path.cwd() / ".jwks" / "config.yaml"
    yield runtime_config_dir() / "config.yaml"


def _env_int(name: str, environ: Dict[str, str]) -> Optional[int]:
    raw = environ.get(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


def apply_env_overrides(data: Dict[str, Any], environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    env = dict(os.environ if environ is None else environ)
    merged = {
        section: dict(values) if isinstance(values, dict) else values
        for section, values in data.items()
    }

    private_ttl = _env_int(ENV_PRIVATE_KEY_TTL, env)
    if private_ttl is not None:
        merged.setdefault("lifecycle", {})["private_key_ttl_seconds"] = private_ttl
    public_ttl = _env_int(ENV_PUBLIC_KEY_TTL, env)
    if public_ttl is not None:
        merged.setdefault("lifecycle", {})["public_key_ttl_seconds"] = public_ttl
    if env.get(ENV_STORE_DIR):
        merged.setdefault("storage", {})["store_dir"] = env[ENV_STORE_DIR]
    if env.get(ENV_LOG_LEVEL):
        merged.setdefault("logging", {})["level"] = env[ENV_LOG_LEVEL]
    if env.get(ENV_ADMIN_SECRET):
        merged.setdefault("api", {})["admin_secret"] = env[ENV_ADMIN_SECRET]
    return merged


def _read_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Malformed YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration in {path} must be a mapping")
    return data


def load_config(path: Optional[Path] = None, environ: Optional[Dict[str, str]] = None) -> AppConfig:
    if path is not None and not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")

    data: Dict[str, Any] = {}
    source = "defaults"
    for candidate in config_search_paths(path):
        if candidate.is_file():
            data = _read_yaml(candidate)
            source = str(candidate)
            break

    try:
        return AppConfig.model_validate(apply_env_overrides(data, environ))
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration ({source}): {exc}") from exc


def dump_default_config(target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(AppConfig().model_dump(mode="json"), handle, sort_keys=False)


__all__ = [
    "AppConfig",
    "ApiConfig",
    "CryptoConfig",
    "LifecycleConfig",
    "LoggingConfig",
    "StorageConfig",
    "apply_env_overrides",
    "config_search_paths",
    "dump_default_config",
    "load_config",
]
