"""
Talent Portal - Main Application

FastAPI backend with:
- MongoDB for user documents (identity + candidate profile)
- bcrypt password hashing
- JWT bearer authentication

Every response uses the same envelope:
    {success, message, user?/data?, token?, errors?: [{field, message}]}

Run: uvicorn talent_portal.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from talent_portal import __version__
from talent_portal.api.routes import api_router
from talent_portal.core.config import get_settings
from talent_portal.core.exceptions import (
    AuthenticationFailed,
    PortalError,
    RateLimitExceeded,
    ValidationFailed,
)
from talent_portal.core.logging_config import configure_logging
from talent_portal.core.rate_limit import RateLimiter
from talent_portal.db.mongodb import close_mongo_client, init_mongo_indexes, test_mongo_connection

settings = get_settings()
logger = configure_logging(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create MongoDB indexes on startup, close the client on shutdown."""
    try:
        init_mongo_indexes()
    except PyMongoError as e:
        # The API still starts; requests will fail until MongoDB is reachable
        logger.error("MongoDB index initialization failed: %s", e)
    logger.info("%s v%s starting (%s)", settings.app_name, __version__, settings.environment)
    yield
    close_mongo_client()
    logger.info("%s shutting down", settings.app_name)


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="""
    Recruitment platform backend.

    ## Features
    - **Authentication**: registration and login with JWT bearer tokens
    - **Profile**: read and update your own candidate profile
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Process-scoped limiter state
app.state.rate_limiter = RateLimiter()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------
def _error_response(status_code: int, message: str, **extra) -> JSONResponse:
    body = {"success": False, "message": message}
    body.update({key: value for key, value in extra.items() if value is not None})
    return JSONResponse(status_code=status_code, content=body)


def _validation_message(error: dict) -> str:
    # Strip pydantic's "Value error, " prefix from our own validator messages
    if error.get("type") == "value_error" and error.get("ctx", {}).get("error") is not None:
        return str(error["ctx"]["error"])
    return error["msg"]


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Pydantic errors become 400 with one {field, message} entry per violation."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"] if loc != "body")
        errors.append({"field": field or "body", "message": _validation_message(error)})
    return _error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", errors=errors)


@app.exception_handler(PortalError)
async def portal_exception_handler(request: Request, exc: PortalError) -> JSONResponse:
    headers = None
    extra = {}
    if isinstance(exc, ValidationFailed):
        extra["errors"] = [error.to_dict() for error in exc.errors]
    elif isinstance(exc, RateLimitExceeded):
        extra["retryAfter"] = exc.retry_after
        headers = {"Retry-After": str(exc.retry_after)}
    elif isinstance(exc, AuthenticationFailed):
        headers = {"WWW-Authenticate": "Bearer"}

    response = _error_response(exc.status_code, exc.message, **extra)
    if headers:
        response.headers.update(headers)
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "Route not found" if exc.status_code == status.HTTP_404_NOT_FOUND else str(exc.detail)
    return _error_response(exc.status_code, message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Catch-all for unexpected errors.
    production  -> generic message; traceback logged server-side only.
    otherwise   -> exception type & message included.
    """
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=True)
    if settings.is_production:
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        f"Internal server error: {type(exc).__name__}: {exc}",
    )


# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/api/health", tags=["Health"])
async def api_health():
    return {
        "success": True,
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected",
    }
