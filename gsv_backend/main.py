import asyncio
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from gsv_backend.config import settings
from gsv_backend.core.rate_limit import limiter
from gsv_backend.modules.auth import routes as auth_routes
from gsv_backend.modules.users import routes as users_routes
from gsv_backend.modules.permissions import routes as permissions_routes
from gsv_backend.modules.notifications import routes as notifications_routes
from gsv_backend.modules.materials import routes as materials_routes
from gsv_backend.modules.admin_settings import routes as admin_settings_routes
from gsv_backend.modules.localization import routes as localization_routes
from gsv_backend.modules.volunteers import routes as volunteers_routes
from gsv_backend.modules.hours import routes as hours_routes
from gsv_backend.modules.documents import routes as documents_routes
from gsv_backend.modules.forms import routes as forms_routes
from gsv_backend.modules.chapters import routes as chapters_routes
from gsv_backend.modules.presentations import routes as presentations_routes
from gsv_backend.modules.reminders import routes as reminders_routes
from gsv_backend.modules.action_items import routes as action_items_routes

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
    content = {"ok": False}
    if isinstance(exc.detail, dict):
        content["error"] = exc.detail.get("message", "Request failed")
        content["errors"] = exc.detail.get("errors", [])
    else:
        content["error"] = exc.detail
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


def _describe_validation_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    message = error.get("msg", "Invalid value").removeprefix("Value error, ")
    return f"{location}: {message}" if location else message


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = [_describe_validation_error(error) for error in exc.errors()]
    return JSONResponse(status_code=400, content={"ok": False, "error": "; ".join(messages)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"ok": False, "error": "Internal server error"})
    return JSONResponse(status_code=500, content={"ok": False, "error": str(exc)})


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
app.include_router(auth_routes.router, prefix="/api/v1")
app.include_router(users_routes.router, prefix="/api/v1")
app.include_router(permissions_routes.router, prefix="/api/v1")
app.include_router(notifications_routes.router, prefix="/api/v1")
app.include_router(materials_routes.router, prefix="/api/v1")
app.include_router(admin_settings_routes.router, prefix="/api/v1")
app.include_router(localization_routes.router, prefix="/api/v1")
app.include_router(volunteers_routes.router, prefix="/api/v1")
app.include_router(hours_routes.router, prefix="/api/v1")
app.include_router(documents_routes.router, prefix="/api/v1")
app.include_router(forms_routes.router, prefix="/api/v1")
app.include_router(chapters_routes.router, prefix="/api/v1")
app.include_router(presentations_routes.router, prefix="/api/v1")
app.include_router(reminders_routes.router, prefix="/api/v1")
app.include_router(action_items_routes.router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup")

    if settings.reminder_scheduler_enabled:
        from gsv_backend.modules.reminders.scheduler import reminder_scheduler_loop
        app.state.reminder_task = asyncio.create_task(reminder_scheduler_loop())
        logger.info(
            "Reminder scheduler started - will deliver due reminders every %d seconds",
            settings.reminder_poll_interval_seconds
        )


@app.on_event("shutdown")
async def shutdown_event():
    task = getattr(app.state, "reminder_task", None)
    if task is not None:
        task.cancel()
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": "Welcome to gsv-backend", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe"""
    return {"status": "ready"}
