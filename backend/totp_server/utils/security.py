import hmac
import secrets

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from totp_server.errors import KeyDerivationError

# Cost parameters are not stored in the vault. Changing any of them makes
# every existing vault file undecryptable.
SCRYPT_N = 32768
SCRYPT_R = 8
SCRYPT_P = 1
KEY_LENGTH = 32  # AES-256
SALT_SIZE = 32
TOKEN_BYTES = 16  # 128 bits


def generate_salt() -> bytes:
    return secrets.token_bytes(SALT_SIZE)


def derive_key(password: bytes, salt: bytes, n: int = SCRYPT_N, r: int = SCRYPT_R, p: int = SCRYPT_P) -> bytes:
    """Stretch a password into a 32-byte key with scrypt.

    The same password and salt always yield the same key. Only invalid cost
    parameters can make this fail; any password, including an empty one, is
    accepted.
    """
    try:
        kdf = Scrypt(salt=salt, length=KEY_LENGTH, n=n, r=r, p=p)
        return kdf.derive(password)
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise KeyDerivationError(f"invalid scrypt parameters n={n} r={r} p={p}") from exc


def generate_token() -> str:
    return secrets.token_hex(TOKEN_BYTES)


def tokens_match(expected: str, candidate: str | None) -> bool:
    if not expected or not candidate:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), candidate.encode("utf-8"))
