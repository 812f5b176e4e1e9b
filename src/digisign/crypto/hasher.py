# SHA-256 and base64 helpers shared by signing and verification.
from __future__ import annotations

import base64
import binascii
import hashlib
from pathlib import Path

_FILE_CHUNK = 1 << 20


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def sha256_file(path: Path) -> str:
    """Hex digest of a file, read in 1 MiB chunks"""
    digest = hashlib.sha256()
    with open(path, "rb") as handle:
        for chunk in iter(lambda: handle.read(_FILE_CHUNK), b""):
            digest.update(chunk)
    return digest.hexdigest()


def b64e(data: bytes) -> str:
    """Standard base64 with padding, as produced by ``btoa``"""
    return base64.b64encode(data).decode("ascii")


def b64d(value: str) -> bytes:
    """Strict standard base64 decode; raises ValueError on malformed input"""
    try:
        return base64.b64decode(value.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise ValueError(f"Invalid base64: {exc}") from exc


__all__ = ["b64d", "b64e", "sha256", "sha256_file"]
