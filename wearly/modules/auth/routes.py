from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse
from wearly.database.supabase_client import new_session_client
from wearly.modules.auth.schemas import (
    LoginRequest, RefreshRequest, TokenResponse, RefreshResponse, AuthStatusResponse
)
from wearly.modules.auth.service import AuthService, build_google_authorize_url
from wearly.core.dependencies import get_current_user
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/auth", tags=["auth"])


def get_session_auth_service(supabase: Client = Depends(new_session_client)) -> AuthService:
    return AuthService(supabase)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_session_auth_service)
):
    """Login and get access + refresh tokens"""
    return service.login(login_data)


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(
    refresh_data: RefreshRequest,
    service: AuthService = Depends(get_session_auth_service)
):
    """Rotate the session using a refresh token"""
    return service.refresh(refresh_data.refresh_token)


@router.get("/status", response_model=AuthStatusResponse)
async def status(current_user: Dict = Depends(get_current_user)):
    """Report the user behind the bearer token or session cookie"""
    return AuthStatusResponse(userId=current_user["id"], email=current_user.get("email"))


@router.get("/google/authorize")
async def google_authorize(extension_id: Optional[str] = None):
    """Redirect to Supabase's hosted Google sign-in for the browser extension"""
    return RedirectResponse(build_google_authorize_url(extension_id), status_code=302)


@router.get("/google/exchange")
async def google_exchange(
    code: Optional[str] = None,
    code_verifier: Optional[str] = None,
    service: AuthService = Depends(get_session_auth_service)
):
    """Finish the OAuth round trip. Without a PKCE verifier the tokens travel in the callback fragment."""
    if not code:
        raise HTTPException(status_code=400, detail="Missing code")
    if not code_verifier:
        return {"ok": True}
    return service.exchange_code(code, code_verifier)
