import logging
from typing import Sequence

from totp_server.schemas.account import Account
from totp_server.services.secret_store import SecretStore
from totp_server.utils.security import generate_token, tokens_match

logger = logging.getLogger("totp_server.session")

SESSION_TTL_SECONDS = 180  # 3 minutes


class SessionManager:
    def __init__(self, store: SecretStore, ttl: float = SESSION_TTL_SECONDS):
        self._store = store
        self.ttl = ttl

    def issue(self) -> str:
        return generate_token()

    def start(self, accounts: Sequence[Account]) -> str:
        """Install a new account set and a new token in one store transition.

        Any previous token stops validating at the same instant.
        """
        token = self.issue()
        self._store.replace(accounts, token, self.ttl)
        logger.info("Session started for %d account(s), expires in %ss", len(accounts), self.ttl)
        return token

    def authorize(self, candidate: str | None) -> tuple[Account, ...] | None:
        """Accounts of the live session if ``candidate`` is its token, else None.

        Token, expiry and accounts come from one snapshot, so the accounts
        returned always belong to the session the token was checked against.
        """
        snap = self._store.snapshot()
        if snap.accounts and not snap.unlocked:
            # Expiry is observed lazily; drop the secrets on first sight.
            if self._store.clear_if_token(snap.token):
                logger.info("Session expired, vault re-locked")
            return None
        if not snap.unlocked or not tokens_match(snap.token, candidate):
            return None
        return snap.accounts

    def validate(self, candidate: str | None) -> bool:
        return self.authorize(candidate) is not None

    def revoke(self):
        if self._store.is_unlocked():
            logger.info("Session revoked, vault re-locked")
        self._store.clear()
