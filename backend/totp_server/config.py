from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    vault_file: Path = Path("secrets.enc")
    host: str = "127.0.0.1"
    port: int = 3450
    # Upper bound on threads computing codes for one request.
    code_workers: int = 8
    log_level: str = "INFO"

    model_config = {"env_prefix": "TOTP_"}


settings = Settings()
