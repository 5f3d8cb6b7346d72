from fastapi import APIRouter, Depends, Form, HTTPException, Query
from fastapi.responses import RedirectResponse

from totp_server.dependencies import get_unlock_service, require_session_token
from totp_server.errors import SessionInvalidError, UnlockFailedError
from totp_server.schemas.vault import LandingResponse, UnlockResponse
from totp_server.services.unlock_service import UnlockService

router = APIRouter(tags=["vault"])


@router.get("/", response_model=LandingResponse)
def landing(token: str | None = Query(default=None), service: UnlockService = Depends(get_unlock_service)):
    codes = service.landing(token)
    if codes is None:
        return LandingResponse(locked=True)
    return LandingResponse(locked=False, token=token, codes=codes)


@router.get("/unlock", include_in_schema=False)
def unlock_redirect():
    return RedirectResponse("/", status_code=303)


# Plain def endpoints: scrypt and code generation run on the threadpool,
# not on the event loop.
@router.post("/unlock", response_model=UnlockResponse)
def unlock(password: str = Form(default=""), service: UnlockService = Depends(get_unlock_service)):
    try:
        result = service.unlock(password)
    except UnlockFailedError as exc:
        raise HTTPException(status_code=401, detail=exc.public_message)
    return UnlockResponse(
        token=result.token,
        expires_in_seconds=result.expires_in_seconds,
        codes=result.codes,
    )


@router.post("/lock")
def lock(token: str = Depends(require_session_token), service: UnlockService = Depends(get_unlock_service)):
    try:
        service.lock(token)
    except SessionInvalidError:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return {"message": "Vault locked"}
