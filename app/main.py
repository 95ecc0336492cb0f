"""FastAPI application entrypoint. No business logic; only wiring, middleware and error translation."""

from dotenv import load_dotenv

load_dotenv()

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1 import router as api_router
from app.core.config import LOG_DATEFMT, LOG_FORMAT, settings
from app.core.errors import AppError, UnauthenticatedError
from app.schemas.common import ErrorResponse

APP_VERSION = "1.0.0"

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format=LOG_FORMAT,
    datefmt=LOG_DATEFMT,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup checks. A missing JWT secret is a warning, not a failure."""
    if not settings.jwt_secret_configured:
        logger.warning(
            "JWT_SECRET is not set; using an insecure default signing key. "
            "Set JWT_SECRET to a random string of at least 32 characters before deploying."
        )
    logger.info("User Management API starting (env=%s)", settings.APP_ENV)
    yield
    logger.info("User Management API shutdown complete")


app = FastAPI(
    title="User Management API",
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Accept"],
    max_age=86400,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


def _error(status_code: int, message: str, **extra: object) -> JSONResponse:
    content = ErrorResponse(message=message).model_dump(exclude_none=True)
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Translate service-layer errors 1:1 to their HTTP status."""
    response = _error(exc.status_code, exc.message)
    if isinstance(exc, UnauthenticatedError):
        response.headers["WWW-Authenticate"] = "Bearer"
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 with one message per failed field."""
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        msg = str(err.get("msg", "Invalid value")).removeprefix("Value error, ")
        errors.append(f"{field}: {msg}" if field else msg)
    return _error(400, "Validation error", errors=errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Keep the envelope for framework errors (unknown route, wrong method)."""
    if exc.status_code == 404:
        return _error(404, "Route not found", path=request.url.path, method=request.method)
    response = _error(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log full detail server-side; clients only see the text when DEBUG is on."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    message = str(exc) if settings.DEBUG else "Internal server error"
    return _error(500, message)


app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
def root() -> dict[str, object]:
    """Root route; minimal payload for discovery."""
    prefix = settings.API_PREFIX
    return {
        "success": True,
        "message": "User Management System API",
        "version": APP_VERSION,
        "endpoints": {
            "health": f"{prefix}/health",
            "auth": f"{prefix}/auth",
            "users": f"{prefix}/users",
        },
    }
