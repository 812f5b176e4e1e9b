from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import List, Optional

from ..config import StoreConfig
from ..exceptions import RegistryConflict, RegistryError
from ..models import RegisteredKey
from .base import normalize_username


class FileKeyRegistry:
    """Filesystem-backed registry under a store directory.

    Layout:
      - registry.json: {"keys": [{username, publicKey, createdAt}]}
    """

    INDEX_NAME = "registry.json"

    def __init__(self, root: Optional[Path | str] = None) -> None:
        self.root = Path(root) if root else StoreConfig().dir
        self.index = self.root / self.INDEX_NAME
        self._lock = asyncio.Lock()
        self.ensure()

    def ensure(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        if not self.index.exists():
            self.index.write_text('{"keys": []}', encoding="utf-8")

    # ----- Index helpers -----
    def _load_index(self) -> dict:
        return json.loads(self.index.read_text(encoding="utf-8"))

    def _save_index(self, data: dict) -> None:
        tmp = self.index.with_name(self.index.name + ".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.replace(tmp, self.index)

    def list_keys(self) -> List[RegisteredKey]:
        return [RegisteredKey.model_validate(k) for k in self._load_index().get("keys", [])]

    def _find(self, username: str) -> Optional[RegisteredKey]:
        for entry in self.list_keys():
            if entry.username == username:
                return entry
        return None

    def _append(self, entry: RegisteredKey) -> None:
        idx = self._load_index()
        keys = idx.get("keys", [])
        if any(k.get("username") == entry.username for k in keys):
            raise RegistryConflict(f"Username already exists: {entry.username}")
        keys.append(entry.model_dump(by_alias=True))
        idx["keys"] = keys
        self._save_index(idx)

    # ----- KeyRegistry -----
    async def lookup(self, username: str) -> Optional[str]:
        entry = await asyncio.to_thread(self._find, normalize_username(username))
        return entry.public_key if entry else None

    async def register(self, username: str, public_key: str) -> RegisteredKey:
        name = normalize_username(username)
        if not name or not public_key:
            raise RegistryError("Username and public key are required")
        entry = RegisteredKey(username=name, public_key=public_key)
        async with self._lock:
            await asyncio.to_thread(self._append, entry)
        return entry


__all__ = ["FileKeyRegistry"]
