import enum
import logging
from dataclasses import dataclass

from totp_server.errors import (
    AuthenticationError,
    MalformedVaultError,
    SchemaError,
    SessionInvalidError,
    UnlockFailedError,
)
from totp_server.schemas.account import CodeDisplay, parse_accounts
from totp_server.services.code_generator import CodeGenerator
from totp_server.services.secret_store import SecretStore
from totp_server.services.session_manager import SessionManager
from totp_server.services.vault_codec import open_vault

logger = logging.getLogger("totp_server.unlock")


class VaultState(str, enum.Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"


@dataclass
class UnlockResult:
    token: str
    expires_in_seconds: int
    codes: list[CodeDisplay]


class UnlockService:
    """Binds vault decryption, the secret store and the session manager.

    Locked -> unlock(password) -> Unlocked -> (expiry | bare landing | lock) -> Locked
    """

    def __init__(self, vault_blob: bytes, store: SecretStore, sessions: SessionManager, generator: CodeGenerator):
        self._vault_blob = vault_blob
        self._store = store
        self._sessions = sessions
        self._generator = generator

    @property
    def state(self) -> VaultState:
        return VaultState.UNLOCKED if self._store.is_unlocked() else VaultState.LOCKED

    def unlock(self, password: str) -> UnlockResult:
        if not password:
            logger.info("Unlock rejected: empty password")
            raise UnlockFailedError()

        # scrypt runs here, before the store lock is taken.
        try:
            plaintext = open_vault(self._vault_blob, password.encode("utf-8"))
            accounts = parse_accounts(plaintext)
        except MalformedVaultError as exc:
            logger.warning("Unlock failed: %s", exc)
            raise UnlockFailedError() from None
        except AuthenticationError:
            logger.info("Unlock failed: wrong password or tampered vault")
            raise UnlockFailedError() from None
        except SchemaError as exc:
            logger.warning("Unlock failed: %s", exc)
            raise UnlockFailedError() from None

        token = self._sessions.start(accounts)
        logger.info("Secrets successfully decrypted and loaded into memory.")
        return UnlockResult(
            token=token,
            expires_in_seconds=int(self._sessions.ttl),
            codes=self._generator.generate(accounts),
        )

    def landing(self, token: str | None) -> list[CodeDisplay] | None:
        """Codes for a caller holding the live token; anyone else re-locks the vault.

        A reload without the token (new tab, back navigation, expired page)
        is treated as an explicit re-lock rather than a silent continuation.
        """
        accounts = self._sessions.authorize(token)
        if accounts is not None:
            return self._generator.generate(accounts)
        self._sessions.revoke()
        return None

    def fetch_codes(self, token: str | None) -> list[CodeDisplay]:
        accounts = self._sessions.authorize(token)
        if accounts is None:
            raise SessionInvalidError()
        return self._generator.generate(accounts)

    def lock(self, token: str | None):
        if not self._sessions.validate(token):
            raise SessionInvalidError()
        self._sessions.revoke()

    def close(self):
        """Drop decrypted secrets and stop the code workers."""
        self._sessions.revoke()
        self._generator.shutdown()
