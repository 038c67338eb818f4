import hashlib
import logging
import time
from urllib.parse import urlencode
from supabase import Client
from wearly.modules.auth.schemas import LoginRequest, TokenResponse, RefreshResponse, SessionUser
from wearly.config.settings import settings
from fastapi import HTTPException
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def clear_user_cache() -> None:
    _AUTH_USER_CACHE.clear()


def _cache_user(cache_key: str, user_data: Dict[str, Any], now: float) -> None:
    if len(_AUTH_USER_CACHE) >= _AUTH_CACHE_MAX_SIZE:
        for key in [k for k, (_, expiry) in _AUTH_USER_CACHE.items() if expiry <= now]:
            del _AUTH_USER_CACHE[key]
    # Still full: drop the oldest insertion
    while len(_AUTH_USER_CACHE) >= _AUTH_CACHE_MAX_SIZE:
        del _AUTH_USER_CACHE[next(iter(_AUTH_USER_CACHE))]
    _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth"""
        if not login_data.password:
            raise HTTPException(status_code=400, detail="Missing email or password")
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except Exception as e:
            logger.info("Login rejected for %s: %s", login_data.email, e)
            raise HTTPException(status_code=401, detail=str(e) or "Invalid credentials")

        if not auth_response or not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Invalid credentials")

        return TokenResponse(
            access_token=auth_response.session.access_token,
            refresh_token=auth_response.session.refresh_token,
            user=SessionUser(
                id=auth_response.user.id,
                email=auth_response.user.email or login_data.email,
            ),
        )

    def refresh(self, refresh_token: str) -> RefreshResponse:
        """Exchange a refresh token for a new token pair"""
        if not refresh_token:
            raise HTTPException(status_code=400, detail="Missing refresh_token")
        try:
            auth_response = self.supabase.auth.refresh_session(refresh_token)
        except Exception as e:
            logger.info("Session refresh rejected: %s", e)
            raise HTTPException(status_code=401, detail=str(e) or "Refresh failed")

        if not auth_response or not auth_response.session:
            raise HTTPException(status_code=401, detail="Refresh failed")

        return RefreshResponse(
            access_token=auth_response.session.access_token,
            refresh_token=auth_response.session.refresh_token,
        )

    def exchange_code(self, code: str, code_verifier: str) -> TokenResponse:
        """Complete a PKCE OAuth flow started by the browser extension"""
        try:
            auth_response = self.supabase.auth.exchange_code_for_session({
                "auth_code": code,
                "code_verifier": code_verifier,
            })
        except Exception as e:
            logger.warning("OAuth code exchange failed: %s", e)
            raise HTTPException(status_code=401, detail=str(e) or "Code exchange failed")

        if not auth_response or not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Code exchange failed")

        return TokenResponse(
            access_token=auth_response.session.access_token,
            refresh_token=auth_response.session.refresh_token,
            user=SessionUser(id=auth_response.user.id, email=auth_response.user.email),
        )

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Unauthorized")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
            }
            _cache_user(cache_key, user_data, now)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            logger.debug("Token validation failed: %s", e)
            raise HTTPException(status_code=401, detail="Unauthorized")


def build_google_authorize_url(extension_id: Optional[str]) -> str:
    """Supabase hosted Google OAuth URL that redirects back to the extension's chromiumapp domain."""
    extension_id = extension_id or settings.extension_id
    if not extension_id or not settings.supabase_url:
        raise HTTPException(status_code=400, detail="Missing extension_id or Supabase URL")
    query = urlencode({
        "provider": "google",
        "redirect_to": f"https://{extension_id}.chromiumapp.org/",
    })
    return f"{settings.supabase_url.rstrip('/')}/auth/v1/authorize?{query}"
