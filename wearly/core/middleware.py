from starlette.requests import Request
from starlette.responses import RedirectResponse

from wearly.modules.admin.service import get_admin_claims

# Razorpay checkout runs scripts and frames from its own domains
CONTENT_SECURITY_POLICY = (
    "default-src 'self'; "
    "script-src 'self' 'unsafe-inline' 'unsafe-eval' https://checkout.razorpay.com; "
    "style-src 'self' 'unsafe-inline'; "
    "img-src 'self' data: https:; "
    "font-src 'self' data:; "
    "connect-src 'self' https:; "
    "object-src 'none'; "
    "base-uri 'self'; "
    "form-action 'self' https://api.razorpay.com; "
    "frame-src 'self' https://api.razorpay.com https://checkout.razorpay.com;"
)

ADMIN_PREFIX = "/admin"
ADMIN_LOGIN_PATH = "/admin/login"


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"X-XSS-Protection", b"1; mode=block"),
                    (b"Content-Security-Policy", CONTENT_SECURITY_POLICY.encode()),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


def is_guarded_admin_path(path: str) -> bool:
    if path != ADMIN_PREFIX and not path.startswith(ADMIN_PREFIX + "/"):
        return False
    return not path.startswith(ADMIN_LOGIN_PATH)


class AdminGuardMiddleware:
    """Redirect unauthenticated /admin/* page requests (except /admin/login) to the login page."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http" or not is_guarded_admin_path(scope["path"]):
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        if get_admin_claims(request) is None:
            response = RedirectResponse(url=ADMIN_LOGIN_PATH, status_code=307)
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)
