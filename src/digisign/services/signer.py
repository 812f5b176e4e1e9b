# Sign a document and append the signature block.
from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

import structlog

from ..crypto.hasher import b64e
from ..crypto.keys import KeyCodec, SigningKey
from ..exceptions import SigningError
from ..models import ALGORITHM, SignaturePackage, utc_timestamp
from ..registry.base import normalize_username
from ..storage.file_io import Readable, read_document
from ..storage.framing import frame

logger = structlog.get_logger("digisign.signer")


class DocumentSigner:
    """Produce signed copies of documents.

    The SHA-256 digest of the original bytes is what gets signed, and the
    provider's ECDSA/SHA-256 primitive hashes that digest once more. Existing
    signatures depend on this construction, so it is kept as is.
    """

    def __init__(
        self,
        codec: KeyCodec | None = None,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.codec = codec or KeyCodec()
        self._clock = clock

    def _timestamp(self) -> str:
        return utc_timestamp(self._clock() if self._clock else None)

    def create_package(self, original: bytes, private_key: SigningKey | str, username: str) -> SignaturePackage:
        key = self.codec.decode_private(private_key) if isinstance(private_key, str) else private_key
        digest = self.codec.provider.digest(original)
        signature = key.sign(digest)
        return SignaturePackage(
            signature=b64e(signature),
            document_hash=b64e(digest),
            original_size=len(original),
            username=normalize_username(username),
            timestamp=self._timestamp(),
            algorithm=ALGORITHM,
        )

    async def sign(self, source: Readable, private_key: SigningKey | str, username: str) -> bytes:
        """Return ``original || signature block``.

        ``private_key`` may be a decoded ``SigningKey`` or its encoded text.
        Any failure is raised as a single ``SigningError``.
        """
        try:
            original = await read_document(source)
            package = self.create_package(original, private_key, username)
        except Exception as exc:
            raise SigningError(f"Failed to sign document: {exc}") from exc

        logger.info("document_signed", username=package.username, size=package.original_size)
        return frame(original, package.to_json())


__all__ = ["DocumentSigner"]
