import logging
import os
import tempfile
from pathlib import Path

from totp_server.errors import VaultFileError
from totp_server.schemas.account import parse_accounts
from totp_server.services.vault_codec import seal_vault

logger = logging.getLogger("totp_server.encrypt")

VAULT_FILENAME = "secrets.enc"


def encrypt_secrets_file(input_path: Path, password: str, output_dir: Path | None = None) -> Path:
    """Encrypt a plaintext JSON account list into ``<output_dir>/secrets.enc``.

    The input is validated first so a vault that could never unlock is not
    written.
    """
    try:
        plaintext = input_path.read_bytes()
    except OSError as exc:
        raise VaultFileError(f"Failed to read secrets file {input_path}: {exc}") from exc

    accounts = parse_accounts(plaintext)

    blob = seal_vault(plaintext, password.encode("utf-8"))

    out_dir = output_dir or input_path.parent
    out_path = out_dir / VAULT_FILENAME
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        _write_atomic(out_path, blob)
    except OSError as exc:
        raise VaultFileError(f"Failed to write {out_path}: {exc}") from exc

    logger.info("Encrypted %d account(s) into %s", len(accounts), out_path)
    return out_path


def _write_atomic(path: Path, data: bytes):
    # mkstemp creates the file 0600; an existing vault survives a failed write.
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def load_vault_file(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise VaultFileError(
            f"{path} not found or unreadable. Create it with totp-encrypt. ({exc})"
        ) from exc
