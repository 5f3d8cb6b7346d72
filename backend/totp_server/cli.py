import argparse
import getpass
import logging
import sys
from pathlib import Path

import uvicorn

from totp_server.config import settings
from totp_server.errors import VaultError
from totp_server.services.encrypt_service import encrypt_secrets_file

logger = logging.getLogger("totp_server")


def _read_password() -> str:
    password = getpass.getpass("Enter encryption password: ")
    if not password:
        raise SystemExit("Password cannot be empty.")
    if getpass.getpass("Repeat encryption password: ") != password:
        raise SystemExit("Passwords do not match.")
    return password


def encrypt_main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="totp-encrypt", description="Encrypt a secrets JSON file into a vault.")
    parser.add_argument("input", type=Path, help="plaintext JSON array of {name, secret} objects")
    parser.add_argument("-o", "--output-dir", type=Path, default=None, help="directory for secrets.enc (default: next to input)")
    args = parser.parse_args(argv)

    print("--- 2FA Secrets Encryptor ---")
    password = _read_password()
    try:
        out_path = encrypt_secrets_file(args.input, password, args.output_dir)
    except VaultError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Successfully encrypted {args.input} -> {out_path}")
    print(f"You can now safely delete {args.input}.")
    return 0


def serve_main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="totp-server", description="Serve TOTP codes from an encrypted vault.")
    parser.add_argument("--vault-file", type=Path, default=settings.vault_file)
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not args.vault_file.is_file():
        logger.critical("%s not found. Create it with totp-encrypt.", args.vault_file)
        return 1
    settings.vault_file = args.vault_file

    logger.info("Starting 2FA server on %s:%d", args.host, args.port)
    uvicorn.run("totp_server.main:app", host=args.host, port=args.port)
    return 0
