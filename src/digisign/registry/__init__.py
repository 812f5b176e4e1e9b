from .base import KeyRegistry, normalize_username
from .client import HttpKeyRegistry
from .memory import InMemoryKeyRegistry
from .store import FileKeyRegistry

__all__ = ["FileKeyRegistry", "HttpKeyRegistry", "InMemoryKeyRegistry", "KeyRegistry", "normalize_username"]
