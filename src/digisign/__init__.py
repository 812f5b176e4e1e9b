"""Detached document signing with ECDSA P-256 and a username key registry."""

__version__ = "1.0.0"

from .crypto.keys import KeyCodec, KeyPair
from .exceptions import DigiSignError, KeyFormatError, SigningError
from .models import ALGORITHM, SignaturePackage, VerificationResult, VerificationStatus
from .services import DocumentSigner, DocumentVerifier, SignatureExtractor

__all__ = [
    "ALGORITHM",
    "DigiSignError",
    "DocumentSigner",
    "DocumentVerifier",
    "KeyCodec",
    "KeyFormatError",
    "KeyPair",
    "SignatureExtractor",
    "SignaturePackage",
    "SigningError",
    "VerificationResult",
    "VerificationStatus",
    "__version__",
]
