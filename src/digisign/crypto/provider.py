"""Cryptographic capability used by the signing pipeline.

The pipeline never touches a crypto library directly. It talks to a
``CryptoProvider`` so that another backend (an HSM, a KMS, a test double) can be
injected. ``EcdsaP256Provider`` is the default and uses ``cryptography``.

Signatures cross the provider boundary in IEEE P1363 form (``r || s``), which is
what browser Web Crypto emits and what existing signed documents contain.
"""
from __future__ import annotations

from typing import Protocol, Tuple, runtime_checkable

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from ..exceptions import KeyFormatError
from .hasher import sha256

CURVE_NAME = "secp256r1"
COORDINATE_SIZE = 32
SIGNATURE_SIZE = 2 * COORDINATE_SIZE


@runtime_checkable
class CryptoProvider(Protocol):
    def generate_keypair(self) -> Tuple[object, object]: ...

    def export_private(self, key: object) -> bytes: ...

    def export_public(self, key: object) -> bytes: ...

    def import_private(self, der: bytes) -> object: ...

    def import_public(self, der: bytes) -> object: ...

    def sign(self, key: object, message: bytes) -> bytes: ...

    def verify(self, key: object, signature: bytes, message: bytes) -> bool: ...

    def digest(self, data: bytes) -> bytes: ...


class EcdsaP256Provider:
    """ECDSA over P-256 with SHA-256, backed by ``cryptography``"""

    def generate_keypair(self) -> Tuple[ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey]:
        private = ec.generate_private_key(ec.SECP256R1())
        return private, private.public_key()

    def export_private(self, key: ec.EllipticCurvePrivateKey) -> bytes:
        return key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )

    def export_public(self, key: ec.EllipticCurvePublicKey) -> bytes:
        return key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    def import_private(self, der: bytes) -> ec.EllipticCurvePrivateKey:
        try:
            key = serialization.load_der_private_key(der, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise KeyFormatError(f"Not a PKCS8 private key: {exc}") from exc
        if not isinstance(key, ec.EllipticCurvePrivateKey) or key.curve.name != CURVE_NAME:
            raise KeyFormatError("Private key is not an ECDSA P-256 key")
        return key

    def import_public(self, der: bytes) -> ec.EllipticCurvePublicKey:
        try:
            key = serialization.load_der_public_key(der)
        except (ValueError, UnsupportedAlgorithm) as exc:
            raise KeyFormatError(f"Not an SPKI public key: {exc}") from exc
        if not isinstance(key, ec.EllipticCurvePublicKey) or key.curve.name != CURVE_NAME:
            raise KeyFormatError("Public key is not an ECDSA P-256 key")
        return key

    def sign(self, key: ec.EllipticCurvePrivateKey, message: bytes) -> bytes:
        # ECDSA(SHA256()) hashes ``message`` itself; callers pass a digest, so
        # the signed value is SHA-256(SHA-256(document)).
        der = key.sign(message, ec.ECDSA(hashes.SHA256()))
        r, s = decode_dss_signature(der)
        return r.to_bytes(COORDINATE_SIZE, "big") + s.to_bytes(COORDINATE_SIZE, "big")

    def verify(self, key: ec.EllipticCurvePublicKey, signature: bytes, message: bytes) -> bool:
        if len(signature) != SIGNATURE_SIZE:
            return False
        r = int.from_bytes(signature[:COORDINATE_SIZE], "big")
        s = int.from_bytes(signature[COORDINATE_SIZE:], "big")
        try:
            key.verify(encode_dss_signature(r, s), message, ec.ECDSA(hashes.SHA256()))
        except InvalidSignature:
            return False
        return True

    def digest(self, data: bytes) -> bytes:
        return sha256(data)


DEFAULT_PROVIDER = EcdsaP256Provider()

__all__ = ["CryptoProvider", "DEFAULT_PROVIDER", "EcdsaP256Provider", "SIGNATURE_SIZE"]
