# Vault - Encryption Adapter
#
# Secret -> Encryption key (PBKDF2, derived once at construction)
# Record encryption (AES-256-GCM, fresh nonce per message)
# Ciphertext is base64(nonce || ciphertext+tag), safe to embed in a
# ledger message.

import base64
import binascii
import os
from typing import Protocol, Tuple, runtime_checkable

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..core.errors import EncryptionError


@runtime_checkable
class EncryptionAdapter(Protocol):
    """Capability the record codec needs: string in, string out.

    The secret is bound when the adapter is constructed.
    """

    async def encrypt(self, plaintext: str) -> str:
        ...

    async def decrypt(self, ciphertext: str) -> str:
        ...


class EncryptionService:
    """
    Low-level AES-256-GCM helpers.

    Flow:
    1. Secret (passphrase or explicit encryption secret) configured
    2. PBKDF2 derives 256-bit key from secret + application salt
    3. AES-256-GCM encrypts/decrypts record payloads
    4. Each payload has a unique nonce for GCM
    """

    PBKDF2_ITERATIONS = 600_000  # OWASP 2023: 600k iterations for PBKDF2-SHA256
    KEY_LENGTH = 32  # 256 bits for AES-256
    NONCE_LENGTH = 12  # 96-bit nonce for GCM (recommended)

    # Records must be readable from any device holding the secret, so the
    # salt is fixed per application rather than stored alongside the data.
    APPLICATION_SALT = b"jupiter-password-manager/records/v1"

    @staticmethod
    def derive_key(
        secret: str,
        salt: bytes = APPLICATION_SALT,
        iterations: int = PBKDF2_ITERATIONS,
    ) -> bytes:
        """
        Derive encryption key from a secret using PBKDF2.

        Args:
            secret: Passphrase or explicit encryption secret
            salt: Salt for the derivation
            iterations: PBKDF2 iteration count

        Returns:
            256-bit encryption key
        """
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=EncryptionService.KEY_LENGTH,
            salt=salt,
            iterations=iterations,
            backend=default_backend()
        )

        return kdf.derive(secret.encode('utf-8'))

    @staticmethod
    def encrypt(plaintext: str, key: bytes) -> Tuple[bytes, bytes]:
        """
        Encrypt plaintext using AES-256-GCM.

        Returns:
            Tuple of (nonce, ciphertext)
            Both needed for decryption
        """
        # Generate random nonce (must be unique per encryption)
        nonce = os.urandom(EncryptionService.NONCE_LENGTH)

        aesgcm = AESGCM(key)
        ciphertext = aesgcm.encrypt(nonce, plaintext.encode('utf-8'), None)

        return nonce, ciphertext

    @staticmethod
    def decrypt(nonce: bytes, ciphertext: bytes, key: bytes) -> str:
        """
        Decrypt ciphertext using AES-256-GCM.

        Raises:
            cryptography.exceptions.InvalidTag: If authentication fails
        """
        aesgcm = AESGCM(key)
        plaintext_bytes = aesgcm.decrypt(nonce, ciphertext, None)

        return plaintext_bytes.decode('utf-8')

    @staticmethod
    def encode_for_storage(data: bytes) -> str:
        """Encode binary data as base64 text for a ledger message."""
        return base64.b64encode(data).decode('ascii')

    @staticmethod
    def decode_from_storage(data: str) -> bytes:
        """Decode base64-encoded data from a ledger message."""
        return base64.b64decode(data.encode('ascii'), validate=True)


class AESGCMEncryption:
    """EncryptionAdapter backed by AES-256-GCM.

    Usage::

        encryption = AESGCMEncryption(config.encryption_secret)
        token = await encryption.encrypt('{"site": "example.com"}')
        plaintext = await encryption.decrypt(token)
    """

    def __init__(
        self,
        secret: str,
        iterations: int = EncryptionService.PBKDF2_ITERATIONS,
    ):
        if not secret:
            raise EncryptionError("encryption secret must not be empty")
        self._key = EncryptionService.derive_key(secret, iterations=iterations)

    async def encrypt(self, plaintext: str) -> str:
        try:
            nonce, ciphertext = EncryptionService.encrypt(plaintext, self._key)
        except (TypeError, ValueError, UnicodeError) as exc:
            raise EncryptionError(f"encryption failed: {type(exc).__name__}") from exc
        return EncryptionService.encode_for_storage(nonce + ciphertext)

    async def decrypt(self, ciphertext: str) -> str:
        try:
            blob = EncryptionService.decode_from_storage(ciphertext)
        except (binascii.Error, ValueError, UnicodeError, AttributeError) as exc:
            raise EncryptionError("ciphertext is not valid base64") from exc

        nonce_len = EncryptionService.NONCE_LENGTH
        if len(blob) <= nonce_len:
            raise EncryptionError("ciphertext is too short")

        try:
            return EncryptionService.decrypt(blob[:nonce_len], blob[nonce_len:], self._key)
        except InvalidTag as exc:
            raise EncryptionError("decryption failed: wrong secret or tampered data") from exc
        except UnicodeDecodeError as exc:
            raise EncryptionError("decrypted payload is not UTF-8 text") from exc
