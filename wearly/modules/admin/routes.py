from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from wearly.modules.admin.schemas import AdminLoginRequest
from wearly.modules.admin.service import (
    clear_admin_cookie, create_admin_jwt, get_admin_claims, set_admin_cookie, validate_admin_credentials
)

router = APIRouter(prefix="/admin", tags=["admin"])

# Console landing data, served outside /api behind the admin guard middleware
console_router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/login")
async def admin_login(body: AdminLoginRequest, response: Response):
    """Sign in to the admin console"""
    if not validate_admin_credentials(body.username, body.password):
        return JSONResponse(status_code=401, content={"ok": False, "error": "Invalid credentials"})
    token = create_admin_jwt({"sub": "admin", "username": body.username})
    set_admin_cookie(response, token)
    return {"ok": True}


@router.get("/me")
async def admin_me(request: Request):
    claims = get_admin_claims(request)
    if not claims:
        return JSONResponse(status_code=401, content={"ok": False})
    return {"ok": True, "username": claims.get("username")}


@router.post("/logout")
async def admin_logout(response: Response):
    clear_admin_cookie(response)
    return {"ok": True}


@console_router.get("")
async def admin_console(request: Request):
    claims = get_admin_claims(request) or {}
    return {"ok": True, "username": claims.get("username")}
