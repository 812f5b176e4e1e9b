from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path
from typing import Protocol, Union, runtime_checkable


@runtime_checkable
class DocumentSource(Protocol):
    async def read(self) -> bytes: ...


@runtime_checkable
class DocumentSink(Protocol):
    async def write(self, data: bytes) -> None: ...


class BytesSource:
    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)

    async def read(self) -> bytes:
        return self._data


class FileSource:
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    async def read(self) -> bytes:
        return await asyncio.to_thread(self.path.read_bytes)


class FileSink:
    def __init__(self, path: Path | str, *, mode: int = 0o644) -> None:
        self.path = Path(path)
        self.mode = mode

    def _write(self, data: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp", delete=False
        ) as handle:
            handle.write(data)
            tmp = Path(handle.name)
        try:
            os.chmod(tmp, self.mode)
            os.replace(tmp, self.path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise

    async def write(self, data: bytes) -> None:
        await asyncio.to_thread(self._write, data)


Readable = Union[bytes, bytearray, memoryview, DocumentSource]


async def read_document(source: Readable) -> bytes:
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    return await source.read()


__all__ = ["BytesSource", "DocumentSink", "DocumentSource", "FileSink", "FileSource", "Readable", "read_document"]
