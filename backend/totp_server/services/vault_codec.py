"""
Vault codec: AES-256-GCM over a scrypt-derived key.

On-disk layout, no header and no version byte:

    [salt 32B][nonce 12B][ciphertext + GCM tag 16B]

Security Note:
    A failed tag check is reported as AuthenticationError whatever the cause
    (wrong password, flipped bit, truncated tag). Callers must not try to
    tell those apart.
"""
import os
import logging

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from totp_server.errors import AuthenticationError, MalformedVaultError
from totp_server.utils.security import SALT_SIZE, derive_key, generate_salt

logger = logging.getLogger("totp_server.vault")

NONCE_SIZE = 12  # 96-bit GCM nonce
TAG_SIZE = 16


def encrypt(plaintext: bytes, key: bytes) -> tuple[bytes, bytes]:
    """Seal plaintext under key with a fresh random nonce.

    Returns:
        (nonce, ciphertext_with_tag)
    """
    nonce = os.urandom(NONCE_SIZE)
    ct = AESGCM(key).encrypt(nonce, plaintext, None)
    return nonce, ct


def decrypt(key: bytes, nonce: bytes, ciphertext_with_tag: bytes) -> bytes:
    """Open a sealed payload.

    Raises:
        AuthenticationError: If the tag does not verify.
    """
    try:
        return AESGCM(key).decrypt(nonce, ciphertext_with_tag, None)
    except InvalidTag as exc:
        raise AuthenticationError("vault authentication failed") from exc


def split_vault(blob: bytes) -> tuple[bytes, bytes, bytes]:
    """Cut a vault blob into (salt, nonce, ciphertext_with_tag).

    Raises:
        MalformedVaultError: If the blob cannot hold a salt and a nonce.
    """
    _min = SALT_SIZE + NONCE_SIZE
    if len(blob) < _min:
        raise MalformedVaultError(
            f"vault too short: {len(blob)} bytes (minimum {_min})"
        )
    salt = blob[:SALT_SIZE]
    nonce = blob[SALT_SIZE:_min]
    return salt, nonce, blob[_min:]


def seal_vault(plaintext: bytes, password: bytes) -> bytes:
    salt = generate_salt()
    key = derive_key(password, salt)
    nonce, ct = encrypt(plaintext, key)
    return salt + nonce + ct


def open_vault(blob: bytes, password: bytes) -> bytes:
    """Derive the key from the stored salt and decrypt the vault payload."""
    salt, nonce, ct = split_vault(blob)
    key = derive_key(password, salt)
    plaintext = decrypt(key, nonce, ct)
    logger.debug("Vault payload decrypted (%d bytes)", len(plaintext))
    return plaintext
