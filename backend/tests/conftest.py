import json

import pytest
from fastapi.testclient import TestClient

from totp_server.dependencies import get_unlock_service
from totp_server.main import app, build_unlock_service
from totp_server.services.secret_store import SecretStore
from totp_server.services.vault_codec import seal_vault

PASSWORD = "correct-horse"
ACCOUNTS = [
    {"name": "github", "secret": "JBSWY3DPEHPK3PXP"},
    {"name": "gitlab", "secret": "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"},
]


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture(scope="session")
def vault_blob():
    # scrypt is deliberately slow; seal once per run.
    return seal_vault(json.dumps(ACCOUNTS).encode("utf-8"), PASSWORD.encode("utf-8"))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return SecretStore(clock=clock)


@pytest.fixture
def unlock_service(vault_blob, store):
    service = build_unlock_service(vault_blob, store=store, workers=4)
    yield service
    service.close()


@pytest.fixture
def client(unlock_service):
    app.dependency_overrides[get_unlock_service] = lambda: unlock_service
    c = TestClient(app)
    yield c
    app.dependency_overrides.clear()


@pytest.fixture
def password():
    return PASSWORD


@pytest.fixture
def accounts():
    return [dict(a) for a in ACCOUNTS]
