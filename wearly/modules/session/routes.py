from fastapi import APIRouter, Depends, HTTPException, Response
from wearly.core.dependencies import get_auth_service
from wearly.modules.auth.service import AuthService
from wearly.modules.session.schemas import SessionSetRequest
from wearly.modules.session.service import set_session_cookies, clear_session_cookies

router = APIRouter(prefix="/session", tags=["session"])


@router.post("/set")
async def set_session(
    body: SessionSetRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Validate the access token and store both tokens as HttpOnly cookies"""
    if not body.access_token or not body.refresh_token:
        raise HTTPException(status_code=400, detail="Missing tokens")
    try:
        user = auth_service.get_current_user(body.access_token)
    except HTTPException:
        raise HTTPException(status_code=401, detail="Invalid access token")
    set_session_cookies(response, body.access_token, body.refresh_token)
    return {"ok": True, "user": {"id": user["id"], "email": user.get("email")}}


@router.post("/clear")
async def clear_session(response: Response):
    """Expire the session cookies"""
    clear_session_cookies(response)
    return {"ok": True}
