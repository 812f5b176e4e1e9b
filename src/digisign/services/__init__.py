from .extractor import SignatureExtractor
from .signer import DocumentSigner
from .verifier import DocumentVerifier, resolve_public_key

__all__ = ["DocumentSigner", "DocumentVerifier", "SignatureExtractor", "resolve_public_key"]
