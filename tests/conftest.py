from __future__ import annotations

import pytest

from digisign.crypto.keys import KeyCodec, KeyPair
from digisign.registry.memory import InMemoryKeyRegistry


@pytest.fixture(scope="session")
def codec() -> KeyCodec:
    return KeyCodec()


@pytest.fixture(scope="session")
def alice_keys(codec: KeyCodec) -> KeyPair:
    return codec.generate()


@pytest.fixture
def registry() -> InMemoryKeyRegistry:
    return InMemoryKeyRegistry()


@pytest.fixture
def sample_pdf() -> bytes:
    return b"%PDF-1.7\n1 0 obj\n<< /Type /Catalog >>\nendobj\n\xe2\xe3\xcf\xd3\n%%EOF\n"
