import time
from dataclasses import dataclass
from typing import Callable, Sequence

from totp_server.schemas.account import Account
from totp_server.utils.locking import ReadWriteLock


@dataclass(frozen=True)
class StoreSnapshot:
    accounts: tuple[Account, ...]
    token: str
    expires_at: float
    now: float

    @property
    def unlocked(self) -> bool:
        return bool(self.accounts) and self.now < self.expires_at


class SecretStore:
    """The only holder of decrypted accounts and session metadata.

    Accounts, token and expiry are always written together under the write
    lock, so readers never observe a token without its accounts or the
    reverse.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._lock = ReadWriteLock()
        self._clock = clock
        self._accounts: tuple[Account, ...] = ()
        self._token = ""
        self._expires_at = 0.0

    def is_unlocked(self) -> bool:
        return self.snapshot().unlocked

    def snapshot(self) -> StoreSnapshot:
        with self._lock.read():
            return StoreSnapshot(
                accounts=self._accounts,
                token=self._token,
                expires_at=self._expires_at,
                now=self._clock(),
            )

    def read_accounts(self) -> tuple[Account, ...]:
        with self._lock.read():
            return self._accounts

    def replace(self, accounts: Sequence[Account], token: str, ttl: float):
        new_accounts = tuple(accounts)
        with self._lock.write():
            self._accounts = new_accounts
            self._token = token
            self._expires_at = self._clock() + ttl

    def clear(self):
        with self._lock.write():
            self._accounts = ()
            self._token = ""
            self._expires_at = 0.0

    def clear_if_token(self, token: str) -> bool:
        """Clear only if the live token is still ``token``.

        Lets a caller that saw an expired session re-lock without wiping a
        session another request started in the meantime.
        """
        with self._lock.write():
            if self._token != token:
                return False
            self._accounts = ()
            self._token = ""
            self._expires_at = 0.0
            return True
