"""Typer-based command line interface for the JWKS service."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer

from .algorithms import SUPPORTED_ALGORITHMS
from .config import AppConfig, dump_default_config, load_config
from .exceptions import ConfigError, JwksServiceError, PrivateKeyGone
from .logging import configure_logging
from .services.key_manager import KeyManager

app = typer.Typer(help="JWKS service command line interface")


@app.callback()
def main(ctx: typer.Context, config: Optional[Path] = typer.Option(None, "--config", metavar="PATH")) -> None:
    if ctx.invoked_subcommand in ("init-config", "version"):
        ctx.obj = None
        return
    try:
        ctx.obj = load_config(config)
    except ConfigError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    configure_logging(ctx.obj.logging.normalized_level())


def _manager(ctx: typer.Context) -> KeyManager:
    config: AppConfig = ctx.obj
    return KeyManager.from_config(config)


def _emit(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2))


@app.command()
def generate(
    ctx: typer.Context,
    alg: str = typer.Option("RS256", "--alg", help=f"One of: {', '.join(SUPPORTED_ALGORITHMS)}"),
) -> None:
    """Generate a key and print it with its private half."""
    try:
        record = _manager(ctx).create(alg)
    except JwksServiceError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    _emit(record.private_view())


@app.command("list")
def list_keys(ctx: typer.Context) -> None:
    """Print the published key set."""
    try:
        jwks = _manager(ctx).jwks()
    except JwksServiceError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    _emit(jwks)


@app.command()
def show(ctx: typer.Context, record_id: str = typer.Argument(..., metavar="ID")) -> None:
    """Print a key with its private half."""
    try:
        record = _manager(ctx).get(record_id)
    except PrivateKeyGone as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)
    except JwksServiceError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    _emit(record.private_view())


@app.command()
def delete(ctx: typer.Context, record_id: str = typer.Argument(..., metavar="ID")) -> None:
    """Soft-delete a key."""
    try:
        _manager(ctx).delete(record_id)
    except JwksServiceError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Deleted {record_id}")


@app.command()
def serve(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(None, "--host", help="Override api.host"),
    port: Optional[int] = typer.Option(None, "--port", help="Override api.port"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    from .api import create_app

    config: AppConfig = ctx.obj
    uvicorn.run(
        create_app(config),
        host=host or config.api.host,
        port=port or config.api.port,
        log_config=None,
    )


@app.command("init-config")
def init_config(path: Path = typer.Argument(..., help="Where to write the default configuration")) -> None:
    if path.exists():
        typer.echo(f"Refusing to overwrite {path}", err=True)
        raise typer.Exit(code=1)
    dump_default_config(path)
    typer.echo(f"Default configuration written to {path}")


@app.command()
def version() -> None:
    from .version import __version__

    typer.echo(__version__)


if __name__ == "__main__":  # pragma: no cover
    app()
