import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from wearly.config import settings
from wearly.core.middleware import AdminGuardMiddleware, SecurityHeadersMiddleware
from wearly.core.rate_limit import limiter
from wearly.modules.auth import routes as auth_routes
from wearly.modules.session import routes as session_routes
from wearly.modules.credits import routes as credits_routes
from wearly.modules.generated import routes as generated_routes
from wearly.modules.product import routes as product_routes
from wearly.modules.tryon import routes as tryon_routes
from wearly.modules.replicate import routes as replicate_routes
from wearly.modules.razorpay import routes as razorpay_routes
from wearly.modules.admin import routes as admin_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Dict details are already shaped for the client (ok/error/method)
    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    fields = [".".join(str(p) for p in err["loc"] if p != "body") for err in exc.errors()]
    missing = ", ".join(f for f in fields if f)
    message = f"Invalid or missing fields: {missing}" if missing else "Invalid request body"
    return JSONResponse(status_code=400, content={"error": message, "fields": fields})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
    return JSONResponse(status_code=500, content={"error": str(exc) or "Unexpected error"})


app.add_middleware(SlowAPIMiddleware)
app.add_middleware(AdminGuardMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api")
app.include_router(session_routes.router, prefix="/api")
app.include_router(credits_routes.router, prefix="/api")
app.include_router(generated_routes.router, prefix="/api")
app.include_router(product_routes.router, prefix="/api")
app.include_router(tryon_routes.router, prefix="/api")
app.include_router(replicate_routes.router, prefix="/api")
app.include_router(razorpay_routes.router, prefix="/api")
app.include_router(admin_routes.router, prefix="/api")
app.include_router(admin_routes.console_router)


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup")
    problems = settings.validate_environment()
    for problem in problems:
        logger.error("Environment validation: %s", problem)
    if problems and settings.is_production:
        raise RuntimeError("Environment validation failed: " + "; ".join(problems))
    if settings.is_production and settings.admin_jwt_secret == "dev_admin_secret_please_change":
        logger.warning("ADMIN_JWT_SECRET is using the development default")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": "Welcome to wearly-api", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe: reports configuration problems without calling upstream services."""
    problems = settings.validate_environment()
    if problems:
        return JSONResponse(status_code=503, content={"status": "not_ready", "problems": problems})
    return {"status": "ready"}
