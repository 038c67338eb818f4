"""Supabase session relay through HttpOnly cookies (sb_at / sb_rt)."""
from fastapi import Response
from wearly.config import settings
from wearly.core.dependencies import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE

ACCESS_TOKEN_MAX_AGE = 60 * 60
REFRESH_TOKEN_MAX_AGE = 60 * 60 * 24 * 30


def set_session_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    # SameSite=None so the extension's cross-site requests carry the cookies
    for name, value, max_age in (
        (ACCESS_TOKEN_COOKIE, access_token, ACCESS_TOKEN_MAX_AGE),
        (REFRESH_TOKEN_COOKIE, refresh_token, REFRESH_TOKEN_MAX_AGE),
    ):
        response.set_cookie(
            key=name,
            value=value,
            max_age=max_age,
            path="/",
            secure=settings.secure_cookies,
            httponly=True,
            samesite="none",
        )


def clear_session_cookies(response: Response) -> None:
    for name in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        response.delete_cookie(key=name, path="/", secure=True, httponly=True, samesite="none")
