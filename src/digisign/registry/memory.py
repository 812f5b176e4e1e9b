from __future__ import annotations

from typing import Dict, Optional

from ..exceptions import RegistryConflict, RegistryError
from ..models import RegisteredKey
from .base import normalize_username


class InMemoryKeyRegistry:
    """Dict-backed registry for tests and single-process use"""

    def __init__(self) -> None:
        self._entries: Dict[str, RegisteredKey] = {}
        self.lookups = 0

    async def lookup(self, username: str) -> Optional[str]:
        self.lookups += 1
        entry = self._entries.get(normalize_username(username))
        return entry.public_key if entry else None

    async def register(self, username: str, public_key: str) -> RegisteredKey:
        name = normalize_username(username)
        if not name or not public_key:
            raise RegistryError("Username and public key are required")
        if name in self._entries:
            raise RegistryConflict(f"Username already exists: {name}")
        entry = RegisteredKey(username=name, public_key=public_key)
        self._entries[name] = entry
        return entry

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["InMemoryKeyRegistry"]
