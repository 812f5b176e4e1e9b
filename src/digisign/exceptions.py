from __future__ import annotations

"""Central exception hierarchy"""


class DigiSignError(Exception):
    """Base exception for all failures"""


class KeyFormatError(DigiSignError):
    """Raised when key text is not valid base64 or not a P-256 key container"""


class SigningError(DigiSignError):
    """Raised when a document cannot be signed"""


class ExtractionMiss(DigiSignError):
    """Raised by callers that require an embedded signature block"""


class VerificationError(DigiSignError):
    """Base for conditions that make a signed document invalid"""


class IdentityMismatch(VerificationError):
    """Claimed signer differs from the embedded signer"""


class IntegrityMismatch(VerificationError):
    """Recomputed digest differs from the embedded digest"""


class SignatureInvalid(VerificationError):
    """Cryptographic verification failed"""


class RegistryError(DigiSignError):
    """Raised when the key registry rejects a request"""


class UserNotFound(RegistryError):
    """Raised when a username has no registered key"""


class RegistryConflict(RegistryError):
    """Raised when a username is already registered"""


class TransportFailure(RegistryError):
    """Raised when the registry is unreachable or answers unexpectedly"""


__all__ = [
    "DigiSignError",
    "ExtractionMiss",
    "IdentityMismatch",
    "IntegrityMismatch",
    "KeyFormatError",
    "RegistryConflict",
    "RegistryError",
    "SignatureInvalid",
    "SigningError",
    "TransportFailure",
    "UserNotFound",
    "VerificationError",
]
