from .hasher import b64d, b64e, sha256, sha256_file
from .keys import KeyCodec, KeyPair, SigningKey, VerifyingKey
from .provider import DEFAULT_PROVIDER, CryptoProvider, EcdsaP256Provider

__all__ = [
    "CryptoProvider",
    "DEFAULT_PROVIDER",
    "EcdsaP256Provider",
    "KeyCodec",
    "KeyPair",
    "SigningKey",
    "VerifyingKey",
    "b64d",
    "b64e",
    "sha256",
    "sha256_file",
]
