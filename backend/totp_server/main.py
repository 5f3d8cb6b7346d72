import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from totp_server.config import settings
from totp_server.errors import VaultFileError
from totp_server.routers import codes, vault
from totp_server.services.code_generator import CodeGenerator
from totp_server.services.encrypt_service import load_vault_file
from totp_server.services.secret_store import SecretStore
from totp_server.services.session_manager import SessionManager
from totp_server.services.unlock_service import UnlockService

logger = logging.getLogger("totp_server")

VERSION = "0.1.0"


def build_unlock_service(vault_blob: bytes, store: SecretStore | None = None, workers: int | None = None) -> UnlockService:
    store = store or SecretStore()
    return UnlockService(
        vault_blob=vault_blob,
        store=store,
        sessions=SessionManager(store),
        generator=CodeGenerator(max_workers=workers or settings.code_workers),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: the vault is read once; without it there is nothing to serve.
    if getattr(app.state, "unlock_service", None) is None:
        try:
            blob = load_vault_file(settings.vault_file)
        except VaultFileError:
            logger.critical("Cannot start: vault file %s is missing or unreadable.", settings.vault_file)
            raise
        app.state.unlock_service = build_unlock_service(blob)
        logger.info("Loaded vault %s (%d bytes)", settings.vault_file, len(blob))
    yield
    # Shutdown: lock the vault
    app.state.unlock_service.close()
    app.state.unlock_service = None


app = FastAPI(
    title="TOTP Vault Server",
    description="Session-gated viewer for TOTP codes kept in an encrypted vault file",
    version=VERSION,
    lifespan=lifespan,
)
app.state.unlock_service = None

app.include_router(vault.router)
app.include_router(codes.router)


@app.get("/health")
async def health():
    return {"status": "ok", "version": VERSION}
