# Verify signed documents against keys held by the registry.
from __future__ import annotations

import inspect
import secrets
from typing import Awaitable, Callable, Optional, Union

import structlog

from ..crypto.hasher import b64d, b64e
from ..crypto.keys import KeyCodec
from ..exceptions import UserNotFound
from ..models import SignaturePackage, VerificationResult, VerificationStatus
from ..registry.base import KeyRegistry, normalize_username
from ..storage.file_io import Readable, read_document
from .extractor import SignatureExtractor

logger = structlog.get_logger("digisign.verifier")

LookupFn = Callable[[str], Union[Awaitable[Optional[str]], Optional[str]]]
RegistryLookup = Union[KeyRegistry, LookupFn]

MSG_NOT_SIGNED = "No signature found in the document. This document is not signed."
MSG_IDENTITY = 'Username mismatch. Document was signed by "{signer}", not "{claimed}".'
MSG_INTEGRITY = (
    "Document has been modified after signing. "
    "The content does not match the original signed document."
)
MSG_USER_NOT_FOUND = 'User "{username}" not found in the system.'
MSG_INVALID = "Signature verification failed. The signature does not match the signer's public key."
MSG_VALID = (
    "Signature is valid! This document was authentically signed by the specified user "
    "and has not been modified."
)
MSG_ERROR = "Error during verification: {error}"


async def resolve_public_key(registry: RegistryLookup, username: str) -> Optional[str]:
    """Ask the registry for ``username``; ``None`` means not registered"""
    lookup = getattr(registry, "lookup", registry)
    try:
        result = lookup(username)
        if inspect.isawaitable(result):
            result = await result
    except UserNotFound:
        return None
    return result


class DocumentVerifier:
    """Check integrity and authorship of a signed document.

    ``verify`` never raises. Every outcome, including unexpected failures, is
    reported as a ``VerificationResult``.
    """

    def __init__(self, codec: KeyCodec | None = None, extractor: SignatureExtractor | None = None) -> None:
        self.codec = codec or KeyCodec()
        self.extractor = extractor or SignatureExtractor()

    async def verify(self, source: Readable, claimed_username: str, registry: RegistryLookup) -> VerificationResult:
        try:
            result = await self._verify(source, claimed_username, registry)
        except Exception as exc:
            logger.warning("verification_error", username=claimed_username, exc_info=True)
            return VerificationResult(
                is_valid=False,
                message=MSG_ERROR.format(error=exc),
                status=VerificationStatus.ERROR,
            )
        logger.info("verification_complete", username=claimed_username, status=result.status.value)
        return result

    async def _verify(self, source: Readable, claimed_username: str, registry: RegistryLookup) -> VerificationResult:
        document = await read_document(source)

        package = self.extractor.extract(document)
        if package is None:
            return VerificationResult(is_valid=False, message=MSG_NOT_SIGNED, status=VerificationStatus.NOT_SIGNED)

        claimed_username = normalize_username(claimed_username)
        if normalize_username(package.username) != claimed_username:
            return _failure(
                package,
                MSG_IDENTITY.format(signer=package.username, claimed=claimed_username),
                VerificationStatus.IDENTITY_MISMATCH,
            )

        original = document[: package.original_size]
        digest = self.codec.provider.digest(original)
        if len(original) != package.original_size or not secrets.compare_digest(
            b64e(digest).encode("ascii"), package.document_hash.encode("utf-8")
        ):
            return _failure(package, MSG_INTEGRITY, VerificationStatus.INTEGRITY_MISMATCH)

        public_text = await resolve_public_key(registry, claimed_username)
        if public_text is None:
            return VerificationResult(
                is_valid=False,
                message=MSG_USER_NOT_FOUND.format(username=claimed_username),
                status=VerificationStatus.USER_NOT_FOUND,
            )

        public_key = self.codec.decode_public(public_text)
        signature = b64d(package.signature)
        hashed = b64d(package.document_hash)
        if not public_key.verify(signature, hashed):
            return _failure(package, MSG_INVALID, VerificationStatus.SIGNATURE_INVALID)

        return VerificationResult(
            is_valid=True,
            message=MSG_VALID,
            status=VerificationStatus.VALID,
            details=package.details(),
        )


def _failure(package: SignaturePackage, message: str, status: VerificationStatus) -> VerificationResult:
    return VerificationResult(is_valid=False, message=message, status=status, details=package.details())


__all__ = ["DocumentVerifier", "RegistryLookup", "resolve_public_key"]
