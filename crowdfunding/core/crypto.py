"""
Symmetric encryption for payment-gateway service data.

AES-256-GCM with a key derived from the caller's secret through HKDF-SHA256.
Blob layout: 12-byte nonce followed by ciphertext and tag.
"""
import secrets

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from crowdfunding.exceptions import MissingSecretError, ServiceDataDecryptionError

NONCE_SIZE = 12
KEY_SALT = b"crowdfunding.service_data"
KEY_INFO = b"aes-256-gcm"


def derive_key(secret: str) -> bytes:
    hkdf = HKDF(
        algorithm=hashes.SHA256(),
        length=32,
        salt=KEY_SALT,
        info=KEY_INFO,
    )
    return hkdf.derive(secret.encode("utf-8"))


class ServiceDataCipher:
    """Encrypts and decrypts service data blobs with one secret."""

    def __init__(self, secret: str):
        if not secret:
            raise MissingSecretError("A secret key is required.")
        self._aead = AESGCM(derive_key(secret))

    def encrypt(self, plaintext: bytes) -> bytes:
        nonce = secrets.token_bytes(NONCE_SIZE)
        return nonce + self._aead.encrypt(nonce, plaintext, None)

    def decrypt(self, blob: bytes) -> bytes:
        """
        Decrypt a blob produced by ``encrypt``.

        Raises:
            ServiceDataDecryptionError: Blob is truncated or was encrypted
                with another secret
        """
        if len(blob) <= NONCE_SIZE:
            raise ServiceDataDecryptionError("Encrypted blob is too short")
        nonce, ciphertext = blob[:NONCE_SIZE], blob[NONCE_SIZE:]
        try:
            return self._aead.decrypt(nonce, ciphertext, None)
        except InvalidTag as e:
            raise ServiceDataDecryptionError("Service data failed authentication") from e
