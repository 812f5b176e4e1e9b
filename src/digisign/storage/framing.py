from __future__ import annotations

"""Signed document framing.

A signed document is the untouched original followed by a text block::

    \\n%DigiSign-Signature-Start\\n{json}\\n%DigiSign-Signature-End\\n

The block is located by scanning the UTF-8 decoding of the document, the same
view a browser ``TextDecoder`` gives, so documents signed by the web client and
by this package are interchangeable.
"""

from typing import Iterator

START_SENTINEL = "%DigiSign-Signature-Start"
END_SENTINEL = "%DigiSign-Signature-End"
MAX_CANDIDATES = 4


def build_block(package_json: str) -> bytes:
    return f"\n{START_SENTINEL}\n{package_json}\n{END_SENTINEL}\n".encode("utf-8")


def frame(original: bytes, package_json: str) -> bytes:
    return bytes(original) + build_block(package_json)


def iter_block_candidates(document: bytes, limit: int = MAX_CANDIDATES) -> Iterator[str]:
    """Yield trimmed text between a start sentinel and the last end sentinel.

    Candidates are produced from the last start sentinel backwards, at most
    ``limit`` of them. The appended block is always the last one, so the first
    candidate that parses wins even when the original content itself contains a
    sentinel string. A sentinel inside the package JSON costs one extra candidate.
    """
    text = bytes(document).decode("utf-8", errors="replace")
    end = text.rfind(END_SENTINEL)
    if end < 0:
        return
    start = text.rfind(START_SENTINEL, 0, end)
    produced = 0
    while start >= 0 and produced < limit:
        yield text[start + len(START_SENTINEL):end].strip()
        produced += 1
        start = text.rfind(START_SENTINEL, 0, start)


__all__ = ["END_SENTINEL", "MAX_CANDIDATES", "START_SENTINEL", "build_block", "frame", "iter_block_candidates"]
