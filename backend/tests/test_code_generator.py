import time
from datetime import datetime, timezone

import pyotp
import pytest

from totp_server.schemas.account import Account
from totp_server.services import code_generator
from totp_server.services.code_generator import ERROR_CODE, CodeGenerator

AT = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def generator():
    g = CodeGenerator(max_workers=4)
    yield g
    g.shutdown()


class TestCodeGenerator:
    def test_matches_standard_totp(self, generator):
        accounts = [Account(name="github", secret="JBSWY3DPEHPK3PXP")]
        [display] = generator.generate(accounts, at=AT)
        assert display.name == "github"
        assert display.code == pyotp.TOTP("JBSWY3DPEHPK3PXP").at(AT)
        assert len(display.code) == 6 and display.code.isdigit()

    def test_partial_failure_is_isolated(self, generator):
        accounts = [
            Account(name="A", secret="JBSWY3DPEHPK3PXP"),
            Account(name="B", secret="!!!invalid"),
        ]
        result = generator.generate(accounts, at=AT)
        assert [d.name for d in result] == ["A", "B"]
        assert result[0].code == pyotp.TOTP("JBSWY3DPEHPK3PXP").at(AT)
        assert result[1].code == ERROR_CODE

    def test_surrounding_whitespace_is_ignored(self, generator):
        accounts = [
            Account(name="padded", secret=" JBSWY3DPEHPK3PXP\n"),
            Account(name="plain", secret="JBSWY3DPEHPK3PXP"),
        ]
        padded, plain = generator.generate(accounts, at=AT)
        assert padded.code == plain.code == pyotp.TOTP("JBSWY3DPEHPK3PXP").at(AT)

    def test_empty_input(self, generator):
        assert generator.generate([], at=AT) == []

    def test_order_independent_of_completion(self, generator, monkeypatch):
        real = code_generator.generate_code

        def slow_first(secret, at):
            # The first account finishes last.
            if secret == "GEZDGNBVGY3TQOJQ":
                time.sleep(0.2)
            return real(secret, at)

        monkeypatch.setattr(code_generator, "generate_code", slow_first)
        secrets = ["GEZDGNBVGY3TQOJQ", "JBSWY3DPEHPK3PXP", "MFRGGZDFMZTWQ2LK", "ONSWG4TFOQ======"]
        accounts = [Account(name=f"acct{i}", secret=s) for i, s in enumerate(secrets)]
        result = generator.generate(accounts, at=AT)
        assert [d.name for d in result] == ["acct0", "acct1", "acct2", "acct3"]
        assert [d.code for d in result] == [pyotp.TOTP(s).at(AT) for s in secrets]

    def test_uses_current_time_by_default(self, generator):
        accounts = [Account(name="github", secret="JBSWY3DPEHPK3PXP")]
        before = pyotp.TOTP("JBSWY3DPEHPK3PXP").now()
        [display] = generator.generate(accounts)
        after = pyotp.TOTP("JBSWY3DPEHPK3PXP").now()
        assert display.code in (before, after)
