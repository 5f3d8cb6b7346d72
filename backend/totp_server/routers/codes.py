from fastapi import APIRouter, Depends, HTTPException

from totp_server.dependencies import get_unlock_service, require_session_token
from totp_server.errors import SessionInvalidError
from totp_server.schemas.account import CodeDisplay
from totp_server.services.unlock_service import UnlockService

router = APIRouter(prefix="/api", tags=["codes"])


@router.get("/codes", response_model=list[CodeDisplay])
def list_codes(token: str = Depends(require_session_token), service: UnlockService = Depends(get_unlock_service)):
    try:
        return service.fetch_codes(token)
    except SessionInvalidError:
        raise HTTPException(status_code=401, detail="Unauthorized")
