from pydantic import BaseModel, EmailStr
from typing import Optional


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class SessionUser(BaseModel):
    id: str
    email: Optional[str] = None


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    user: SessionUser


class RefreshResponse(BaseModel):
    access_token: str
    refresh_token: str


class AuthStatusResponse(BaseModel):
    userId: str
    email: Optional[str] = None
