import logging
import time
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from intranet.api.router import api_router
from intranet.core.config import settings
from intranet.core.limiter import limiter
from intranet.core.logging import setup_logging
from intranet.core.security import ADMIN_TOKEN, verify_token
from intranet.db import init_db, session_factory
from intranet.services import settings as settings_service
from intranet.services.web_push import PushConfig, PushDeliveryService, WebPushSender

logger = logging.getLogger(__name__)

# Reachable by anyone while maintenance mode is on. Admin bearer tokens pass on every path
MAINTENANCE_EXEMPT_PREFIXES = (
    f"{settings.API_V1_STR}/admin",
    f"{settings.API_V1_STR}/health",
    f"{settings.API_V1_STR}/settings/public",
    f"{settings.API_V1_STR}/auth/refresh",
)


def is_admin_request(request: Request) -> bool:
    """True when the request carries a valid admin bearer token."""
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        return False
    try:
        verify_token(token, token_type=ADMIN_TOKEN)
    except ValueError:
        return False
    return True


def maintenance_message() -> Optional[str]:
    """Message to show while maintenance mode is on, None when it is off."""
    with session_factory() as session:
        if not settings_service.is_maintenance_mode(session):
            return None
        return settings_service.get_maintenance_message(session)


def create_application() -> FastAPI:
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.PROJECT_NAME, version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    push_config = PushConfig.from_settings(settings)
    app.state.push_config = push_config
    app.state.push_service = PushDeliveryService(push_config, WebPushSender(), session_factory)
    if not push_config.is_configured:
        logger.warning("VAPID keys not set, push notifications are disabled")

    @app.middleware("http")
    async def maintenance_mode(request: Request, call_next):
        path = request.url.path
        if (
            path.startswith(settings.API_V1_STR)
            and not path.startswith(MAINTENANCE_EXEMPT_PREFIXES)
            and not is_admin_request(request)
        ):
            message = await run_in_threadpool(maintenance_message)
            if message is not None:
                return JSONResponse(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    content={"detail": message, "maintenance": True},
                )
        return await call_next(request)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": jsonable_errors(exc)},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.on_event("startup")
    def _startup() -> None:
        init_db()
        logger.info("%s started (environment=%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)

    return app


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may carry the raw exception object, which JSONResponse cannot encode
    return jsonable_encoder(exc.errors(), custom_encoder={Exception: str})


app = create_application()
