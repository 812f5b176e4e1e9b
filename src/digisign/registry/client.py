"""Async HTTP client for the key registry service."""
from __future__ import annotations

from typing import Optional
from urllib.parse import quote

import httpx
import structlog

from ..config import RegistryConfig
from ..exceptions import RegistryConflict, RegistryError, TransportFailure
from ..models import RegisteredKey
from .base import normalize_username

logger = structlog.get_logger("digisign.registry")


class HttpKeyRegistry:
    """Talks to ``/api/pubkey`` on a registry service.

    A 404 on lookup means the user is unknown and yields ``None``. Any other
    non-success status or network error is a ``TransportFailure``.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        defaults = RegistryConfig()
        self.base_url = (base_url or defaults.url).rstrip("/")
        self._timeout = httpx.Timeout(timeout or defaults.timeout)
        self._http = http_client
        self._owns_client = http_client is None

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self._timeout)
        return self._http

    async def aclose(self) -> None:
        if self._http is not None and self._owns_client:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> "HttpKeyRegistry":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api/pubkey/{path}"

    async def lookup(self, username: str) -> Optional[str]:
        name = normalize_username(username)
        try:
            response = await self._client().get(self._url(quote(name, safe="")))
        except httpx.HTTPError as exc:
            raise TransportFailure(f"Registry unreachable: {exc}") from exc

        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise TransportFailure(f"Registry lookup failed with HTTP {response.status_code}")
        try:
            return response.json()["data"]["publicKey"]
        except (ValueError, KeyError, TypeError) as exc:
            raise TransportFailure("Registry returned a malformed lookup response") from exc

    async def register(self, username: str, public_key: str) -> RegisteredKey:
        payload = {"username": normalize_username(username), "publicKey": public_key}
        try:
            response = await self._client().post(self._url("register"), json=payload)
        except httpx.HTTPError as exc:
            raise TransportFailure(f"Registry unreachable: {exc}") from exc

        if response.status_code == 409:
            raise RegistryConflict(_message(response, "Username already exists"))
        if response.status_code == 400:
            raise RegistryError(_message(response, "Registration rejected"))
        if response.status_code not in (200, 201):
            raise TransportFailure(f"Registry registration failed with HTTP {response.status_code}")
        data = _data(response)
        logger.info("key_registered", username=payload["username"])
        return RegisteredKey(
            username=data.get("username", payload["username"]),
            public_key=public_key,
            created_at=data.get("createdAt") or "",
        )


def _data(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    data = body.get("data") if isinstance(body, dict) else None
    return data if isinstance(data, dict) else {}


def _message(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return default


__all__ = ["HttpKeyRegistry"]
