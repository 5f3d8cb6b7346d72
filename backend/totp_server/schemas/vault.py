from pydantic import BaseModel

from totp_server.schemas.account import CodeDisplay


class UnlockResponse(BaseModel):
    token: str
    expires_in_seconds: int
    codes: list[CodeDisplay]


class LandingResponse(BaseModel):
    locked: bool
    token: str | None = None
    codes: list[CodeDisplay] = []
