"""Admin console session: a single configured account, HS256 JWT in the admin_jwt cookie."""
import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Request, Response

from wearly.config import settings

logger = logging.getLogger(__name__)

ADMIN_COOKIE = "admin_jwt"
ADMIN_JWT_ALGORITHM = "HS256"


def validate_admin_credentials(username: str, password: str) -> bool:
    if not settings.admin_password:
        logger.warning("Admin login attempted but ADMIN_PASSWORD is not configured")
        return False
    user_ok = hmac.compare_digest(username.encode(), settings.admin_username.encode())
    password_ok = hmac.compare_digest(password.encode(), settings.admin_password.encode())
    return user_ok and password_ok


def create_admin_jwt(payload: Dict[str, Any]) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        **payload,
        "iat": now,
        "exp": now + timedelta(days=settings.admin_session_days),
    }
    return jwt.encode(claims, settings.admin_jwt_secret, algorithm=ADMIN_JWT_ALGORITHM)


def verify_admin_jwt(token: Optional[str]) -> Optional[Dict[str, Any]]:
    """Decoded claims, or None for a missing, expired or forged token"""
    if not token:
        return None
    try:
        return jwt.decode(token, settings.admin_jwt_secret, algorithms=[ADMIN_JWT_ALGORITHM])
    except jwt.PyJWTError as e:
        logger.debug(f"Admin token rejected: {e}")
        return None


def get_admin_claims(request: Request) -> Optional[Dict[str, Any]]:
    return verify_admin_jwt(request.cookies.get(ADMIN_COOKIE))


def set_admin_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=ADMIN_COOKIE,
        value=token,
        max_age=settings.admin_session_days * 24 * 3600,
        path="/",
        secure=True,
        httponly=True,
        samesite="lax",
    )


def clear_admin_cookie(response: Response) -> None:
    response.delete_cookie(key=ADMIN_COOKIE, path="/", secure=True, httponly=True, samesite="lax")
