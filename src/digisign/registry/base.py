from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ..models import RegisteredKey


@runtime_checkable
class KeyRegistry(Protocol):
    """Authority of record for username -> public key.

    ``lookup`` returns ``None`` for unknown users; that is an ordinary outcome,
    not an error. ``register`` enforces username uniqueness.
    """

    async def lookup(self, username: str) -> Optional[str]: ...

    async def register(self, username: str, public_key: str) -> RegisteredKey: ...


def normalize_username(username: str) -> str:
    return username.strip()


__all__ = ["KeyRegistry", "normalize_username"]
