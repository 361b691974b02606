from __future__ import annotations

import time
import uuid
from typing import Optional

import jwt
from fastapi import Depends, FastAPI, Header, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

from ..config import AppConfig, load_config
from ..exceptions import JwksServiceError, NotFound, PrivateKeyGone, UnsupportedAlgorithm
from ..logging import get_logger
from ..services.key_lifecycle import Clock, utcnow
from ..services.key_manager import KeyManager
from ..storage import RecordStore
from ..version import __version__
from .schemas import AlgorithmInput, Jwks, JwkPrivate

log = get_logger("jwks_service.api")


# ---- Metrics ----
REQS = Counter("jwks_requests_total", "Total API requests", ["path", "method"])
LAT = Histogram("jwks_request_seconds", "Request latency", ["path", "method"])
KEYS_CREATED = Counter("jwks_keys_created_total", "Keys generated", ["alg"])


def get_key_manager(request: Request) -> KeyManager:
    return request.app.state.key_manager


def auth_dependency(request: Request, authorization: Optional[str] = Header(default=None)):
    """Bearer HS256 guard for management routes; a no-op without a configured secret."""
    secret = request.app.state.config.api.admin_secret
    if not secret:
        return None
    if not authorization:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Missing Authorization header")
    try:
        scheme, token = authorization.split(" ", 1)
        if scheme.lower() != "bearer":
            raise ValueError("bad scheme")
        return jwt.decode(token, secret, algorithms=["HS256"])
    except (ValueError, jwt.InvalidTokenError):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid token") from None


_STATUS = (
    (UnsupportedAlgorithm, status.HTTP_400_BAD_REQUEST),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (PrivateKeyGone, status.HTTP_410_GONE),
)


async def _service_error_handler(request: Request, exc: JwksServiceError) -> JSONResponse:
    for exc_type, code in _STATUS:
        if isinstance(exc, exc_type):
            return JSONResponse(status_code=code, content={"detail": str(exc)})
    # Generation, encoding and store failures stay server-side.
    log.error("request_failed", path=request.url.path, error=type(exc).__name__, detail=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal error"},
    )


def create_app(
    config: Optional[AppConfig] = None,
    *,
    store: Optional[RecordStore] = None,
    clock: Clock = utcnow,
) -> FastAPI:
    config = config or load_config()
    app = FastAPI(
        title="JWKS Service",
        description="API for managing JSON Web Keys",
        version=__version__,
        openapi_url="/api-docs/openapi.json",
        docs_url="/api-docs",
        redoc_url=None,
    )
    app.state.config = config
    app.state.key_manager = KeyManager.from_config(config, store=store, clock=clock)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.api.allow_origins),
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
        max_age=config.api.cors_max_age,
    )
    app.add_exception_handler(JwksServiceError, _service_error_handler)

    @app.get("/.well-known/jwks.json", response_model=Jwks, response_model_exclude_none=True, tags=["JWK Service"])
    def list_jwks(km: KeyManager = Depends(get_key_manager)):
        """Publish every key that is neither deleted nor fully expired."""
        with LAT.labels("/.well-known/jwks.json", "GET").time():
            REQS.labels("/.well-known/jwks.json", "GET").inc()
            return km.jwks()

    @app.post(
        "/jwks",
        status_code=status.HTTP_201_CREATED,
        response_model=JwkPrivate,
        response_model_exclude_none=True,
        tags=["JWK Service"],
    )
    def add_jwk(req: AlgorithmInput, km: KeyManager = Depends(get_key_manager), _user=Depends(auth_dependency)):
        """Generate a key for ``alg`` and return it with its private half."""
        with LAT.labels("/jwks", "POST").time():
            REQS.labels("/jwks", "POST").inc()
            record = km.create(req.alg)
            KEYS_CREATED.labels(req.alg).inc()
            return record.private_view()

    @app.get(
        "/jwks/{key_id}",
        response_model=JwkPrivate,
        response_model_exclude_none=True,
        responses={404: {"description": "Key not found"}, 410: {"description": "Private key expired"}},
        tags=["JWK Service"],
    )
    def get_jwk(key_id: uuid.UUID, km: KeyManager = Depends(get_key_manager), _user=Depends(auth_dependency)):
        """Fetch a key including its private half."""
        with LAT.labels("/jwks/{id}", "GET").time():
            REQS.labels("/jwks/{id}", "GET").inc()
            return km.get(str(key_id)).private_view()

    @app.delete(
        "/jwks/{key_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        responses={404: {"description": "Key not found"}},
        tags=["JWK Service"],
    )
    def delete_jwk(key_id: uuid.UUID, km: KeyManager = Depends(get_key_manager), _user=Depends(auth_dependency)):
        """Soft-delete a key; it disappears from every view immediately."""
        with LAT.labels("/jwks/{id}", "DELETE").time():
            REQS.labels("/jwks/{id}", "DELETE").inc()
            km.delete(str(key_id))
            return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/healthz")
    def healthz():
        return {"status": "ok", "ts": int(time.time()), "version": __version__}

    @app.get("/metrics")
    def metrics():
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app


__all__ = ["create_app", "auth_dependency"]
