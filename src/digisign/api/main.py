"""Key registry HTTP service.

Serves ``/api/pubkey`` for the web client and for ``HttpKeyRegistry``.
"""
from __future__ import annotations

import time
from typing import Optional

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest
from pydantic import BaseModel

from digisign import __version__
from digisign.crypto.keys import KeyCodec
from digisign.exceptions import KeyFormatError, RegistryConflict, RegistryError
from digisign.registry.base import KeyRegistry, normalize_username
from digisign.registry.memory import InMemoryKeyRegistry

logger = structlog.get_logger("digisign.api")

MSG_REQUIRED = "Username and public key are required"
MSG_CONFLICT = "Username already exists. Please choose a different username."
MSG_BAD_KEY = "Public key is not a valid P-256 SPKI key"
MSG_NOT_FOUND = "User not found"

class RegisterRequest(BaseModel):
    username: Optional[str] = None
    publicKey: Optional[str] = None

def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"success": False, "message": message})

def create_app(registry: KeyRegistry | None = None) -> FastAPI:
    app = FastAPI(title="DigiSign Key Registry", version=__version__)
    store: KeyRegistry = registry if registry is not None else InMemoryKeyRegistry()
    codec = KeyCodec()

    # ---- Metrics ----
    metrics = CollectorRegistry()
    reqs = Counter("digisign_requests_total", "Total API requests", ["path", "method"], registry=metrics)
    lat = Histogram("digisign_request_seconds", "Request latency", ["path", "method"], registry=metrics)

    @app.middleware("http")
    async def _observe(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        route = request.scope.get("route")
        path = getattr(route, "path", None) or request.url.path
        lat.labels(path, request.method).observe(time.perf_counter() - started)
        reqs.labels(path, request.method).inc()
        return response

    @app.post("/api/pubkey/register")
    async def register(req: RegisterRequest):
        username = normalize_username(req.username or "")
        public_key = (req.publicKey or "").strip()
        if not username or not public_key:
            return _error(400, MSG_REQUIRED)
        try:
            codec.decode_public(public_key)
        except KeyFormatError:
            return _error(400, MSG_BAD_KEY)
        try:
            entry = await store.register(username, public_key)
        except RegistryConflict:
            return _error(409, MSG_CONFLICT)
        except RegistryError as exc:
            return _error(400, str(exc))
        logger.info("key_registered", username=username)
        return JSONResponse(
            status_code=201,
            content={
                "success": True,
                "message": "Registration successful",
                "data": {"username": entry.username, "createdAt": entry.created_at},
            },
        )

    @app.get("/api/pubkey/{username}")
    async def get_public_key(username: str):
        public_key = await store.lookup(username)
        if public_key is None:
            return _error(404, MSG_NOT_FOUND)
        return {"success": True, "data": {"username": normalize_username(username), "publicKey": public_key}}

    @app.get("/healthz")
    def healthz():
        return {"status": "ok", "ts": int(time.time())}

    @app.get("/metrics")
    def metrics_endpoint():
        return Response(generate_latest(metrics), media_type=CONTENT_TYPE_LATEST)

    return app


def build_app() -> FastAPI:
    """Factory for ``uvicorn --factory digisign.api.main:build_app``"""
    from digisign.config import load_config
    from digisign.logging import configure_logging
    from digisign.registry.store import FileKeyRegistry

    config = load_config()
    configure_logging(config.logging.normalized_level())
    return create_app(FileKeyRegistry(config.store.dir))


__all__ = ["build_app", "create_app"]
