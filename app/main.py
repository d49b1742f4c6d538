import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.config import settings
from app.core.rate_limit import limiter
from app.modules.auth import routes as auth_routes
from app.modules.profiles import routes as profiles_routes
from app.modules.appearance import routes as appearance_routes
from app.modules.friends import routes as friends_routes
from app.modules.groups import routes as groups_routes
from app.modules.group_chats import routes as group_chats_routes
from app.modules.chats import routes as chats_routes
from app.modules.feeds import routes as feeds_routes
from app.modules.forums import routes as forums_routes
from app.modules.notifications import routes as notifications_routes
from app.modules.media import routes as media_routes
from app.modules.diagnostics import routes as diagnostics_routes

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


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    message = str(first.get("msg", "Invalid request"))
    # Messages raised from field validators carry pydantic's prefix
    if message.startswith("Value error, "):
        return message[len("Value error, "):]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{field}: {message}" if field else message


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": _validation_message(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=500, content={"detail": str(exc)})


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
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix=settings.api_prefix)
app.include_router(profiles_routes.router, prefix=settings.api_prefix)
app.include_router(appearance_routes.router, prefix=settings.api_prefix)
app.include_router(friends_routes.router, prefix=settings.api_prefix)
app.include_router(groups_routes.router, prefix=settings.api_prefix)
app.include_router(groups_routes.join_requests_router, prefix=settings.api_prefix)
app.include_router(group_chats_routes.router, prefix=settings.api_prefix)
app.include_router(chats_routes.router, prefix=settings.api_prefix)
app.include_router(feeds_routes.router, prefix=settings.api_prefix)
app.include_router(forums_routes.router, prefix=settings.api_prefix)
app.include_router(notifications_routes.router, prefix=settings.api_prefix)
app.include_router(media_routes.router, prefix=settings.api_prefix)
app.include_router(diagnostics_routes.router, prefix=settings.api_prefix)


@app.on_event("startup")
async def startup_event():
    logger.info(f"Application startup ({settings.environment})")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.app_name}", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe: reports whether Supabase is configured."""
    configured = bool(settings.supabase_url and settings.supabase_key)
    return {"status": "ready" if configured else "not_configured"}
