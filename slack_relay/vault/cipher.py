"""AES-GCM encryption for bot credentials stored in the database."""

import base64
import binascii
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from slack_relay.errors import IntegrityError

KEY_SIZE = 32
NONCE_SIZE = 12
TAG_SIZE = 16


def derive_key(secret: str) -> bytes:
    """Truncate or zero-pad the configured secret to a 256-bit key.

    This is not a KDF. Deployments should configure a random 32-byte secret.
    """
    return secret.encode("utf-8")[:KEY_SIZE].ljust(KEY_SIZE, b"0")


def encrypt(plaintext: str, key: str) -> str:
    """Encrypt a credential. The random nonce is stored in front of the ciphertext."""
    nonce = os.urandom(NONCE_SIZE)
    sealed = AESGCM(derive_key(key)).encrypt(nonce, plaintext.encode("utf-8"), None)
    return base64.b64encode(nonce + sealed).decode("ascii")


def decrypt(blob: str, key: str) -> str:
    """Decrypt a blob produced by :func:`encrypt`."""
    try:
        data = base64.b64decode(blob.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise IntegrityError("Credential blob is not valid base64") from e

    if len(data) < NONCE_SIZE + TAG_SIZE:
        raise IntegrityError("Credential blob is truncated")

    nonce, sealed = data[:NONCE_SIZE], data[NONCE_SIZE:]
    try:
        plaintext = AESGCM(derive_key(key)).decrypt(nonce, sealed, None)
    except InvalidTag as e:
        raise IntegrityError("Credential blob failed authentication") from e

    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as e:
        raise IntegrityError("Credential blob is not UTF-8 text") from e


class CredentialCipher:
    """Encrypts and decrypts credentials with one server-held key."""

    def __init__(self, key: str):
        if not key:
            raise ValueError("An encryption key is required")
        self._key = key

    def encrypt(self, plaintext: str) -> str:
        return encrypt(plaintext, self._key)

    def decrypt(self, blob: str) -> str:
        return decrypt(blob, self._key)
