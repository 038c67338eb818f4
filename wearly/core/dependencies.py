"""
Core dependencies for route protection
"""

from urllib.parse import unquote
from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from wearly.database.supabase_client import get_supabase
from wearly.modules.auth.service import AuthService
from supabase import Client
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "sb_at"
REFRESH_TOKEN_COOKIE = "sb_rt"

# auto_error=False so the sb_at cookie can be used when no header is sent
security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
) -> str:
    """Access token from the Authorization header, falling back to the sb_at cookie"""
    if credentials and credentials.credentials:
        return credentials.credentials
    cookie_token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if cookie_token:
        return unquote(cookie_token)
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized"
    )


def get_current_user(
    token: str = Depends(get_session_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> Dict[str, Any]:
    """Resolve the Supabase user behind the session token"""
    return auth_service.get_current_user(token)
