from fastapi import Header, HTTPException, Request

from totp_server.services.unlock_service import UnlockService


def get_unlock_service(request: Request) -> UnlockService:
    return request.app.state.unlock_service


async def require_session_token(x_session_token: str | None = Header(default=None)):
    # Presence only; the match against the live session happens in the service.
    if not x_session_token:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return x_session_token
