import logging
from concurrent.futures import ThreadPoolExecutor, wait
from datetime import datetime, timezone
from typing import Sequence

import pyotp

from totp_server.errors import PerAccountCodeError
from totp_server.schemas.account import Account, CodeDisplay

logger = logging.getLogger("totp_server.codes")

ERROR_CODE = "Error"


def generate_code(secret: str, at: datetime) -> str:
    """Current RFC 6238 code (6 digits, 30 s step, SHA-1) for a base32 secret.

    Surrounding whitespace from a pasted seed is ignored.
    """
    return pyotp.TOTP(secret.strip()).at(at)


class CodeGenerator:
    def __init__(self, max_workers: int = 8):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="totp-code")

    def _compute(self, account: Account, at: datetime) -> str:
        try:
            return generate_code(account.secret, at)
        except (ValueError, TypeError) as exc:
            # binascii.Error from a malformed base32 seed is a ValueError.
            raise PerAccountCodeError(account.name, str(exc)) from exc

    def _fill(self, results: list, index: int, account: Account, at: datetime):
        try:
            code = self._compute(account, at)
        except PerAccountCodeError as exc:
            logger.warning("%s", exc)
            code = ERROR_CODE
        results[index] = CodeDisplay(name=account.name, code=code)

    def generate(self, accounts: Sequence[Account], at: datetime | None = None) -> list[CodeDisplay]:
        """One CodeDisplay per account, in input order.

        Every account is computed on the pool and written to its own slot;
        the call returns only after all of them finish.
        """
        at = at or datetime.now(timezone.utc)
        results: list[CodeDisplay | None] = [None] * len(accounts)
        futures = [
            self._executor.submit(self._fill, results, i, account, at)
            for i, account in enumerate(accounts)
        ]
        wait(futures)
        for future in futures:
            future.result()
        return results

    def shutdown(self):
        self._executor.shutdown(wait=True)
