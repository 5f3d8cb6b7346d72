from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from totp_server.errors import SchemaError


class Account(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    secret: str


class CodeDisplay(BaseModel):
    name: str
    code: str


AccountList = TypeAdapter(list[Account])


def parse_accounts(plaintext: bytes) -> list[Account]:
    try:
        accounts = AccountList.validate_json(plaintext)
    except ValidationError as exc:
        raise SchemaError(f"payload is not an account list ({exc.error_count()} error(s))") from exc
    if not accounts:
        raise SchemaError("payload holds no accounts")
    return accounts
