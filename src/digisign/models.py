# Typed models shared by signing, extraction, verification and the registry.

from __future__ import annotations

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import (
    ExtractionMiss,
    IdentityMismatch,
    IntegrityMismatch,
    SignatureInvalid,
    UserNotFound,
    VerificationError,
)

ALGORITHM = "ECDSA-P256-SHA256"
PACKAGE_VERSION = 1


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix"""
    now = (now or datetime.now(tz=timezone.utc)).astimezone(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SignaturePackage(BaseModel):
    """Signer metadata plus signature, embedded after the signed document"""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    signature: str
    document_hash: str = Field(alias="documentHash")
    original_size: int = Field(alias="originalSize", ge=0)
    username: str
    timestamp: str
    algorithm: str = ALGORITHM
    version: int = Field(default=PACKAGE_VERSION, ge=1)

    def to_json(self) -> str:
        payload: Dict[str, Any] = {
            "signature": self.signature,
            "documentHash": self.document_hash,
            "originalSize": self.original_size,
            "username": self.username,
            "timestamp": self.timestamp,
            "algorithm": self.algorithm,
        }
        # Version 1 packages are written without the field so the block stays
        # byte-compatible with documents signed before versioning existed.
        if self.version != PACKAGE_VERSION:
            payload["version"] = self.version
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> "SignaturePackage":
        return cls.model_validate(json.loads(text))

    def details(self) -> "VerificationDetails":
        return VerificationDetails(signer=self.username, timestamp=self.timestamp, algorithm=self.algorithm)


class VerificationStatus(str, Enum):
    VALID = "valid"
    NOT_SIGNED = "not_signed"
    IDENTITY_MISMATCH = "identity_mismatch"
    INTEGRITY_MISMATCH = "integrity_mismatch"
    USER_NOT_FOUND = "user_not_found"
    SIGNATURE_INVALID = "signature_invalid"
    ERROR = "error"


_STATUS_ERRORS = {
    VerificationStatus.NOT_SIGNED: ExtractionMiss,
    VerificationStatus.IDENTITY_MISMATCH: IdentityMismatch,
    VerificationStatus.INTEGRITY_MISMATCH: IntegrityMismatch,
    VerificationStatus.USER_NOT_FOUND: UserNotFound,
    VerificationStatus.SIGNATURE_INVALID: SignatureInvalid,
}


class VerificationDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    signer: str
    timestamp: str
    algorithm: str


class VerificationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    is_valid: bool = Field(alias="isValid")
    message: str
    status: VerificationStatus
    details: Optional[VerificationDetails] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def raise_for_status(self) -> "VerificationResult":
        """Return ``self`` when valid, otherwise raise the matching error"""
        if self.is_valid:
            return self
        raise _STATUS_ERRORS.get(self.status, VerificationError)(self.message)


class RegisteredKey(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    username: str
    public_key: str = Field(alias="publicKey")
    created_at: str = Field(default_factory=utc_timestamp, alias="createdAt")


__all__ = [
    "ALGORITHM",
    "PACKAGE_VERSION",
    "RegisteredKey",
    "SignaturePackage",
    "VerificationDetails",
    "VerificationResult",
    "VerificationStatus",
    "utc_timestamp",
]
