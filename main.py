"""Authflow - cookie-session authentication API."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.config import get_settings
from app.database import SessionLocal
from app.exceptions import AuthError
from app.rate_limit import limiter
from app.routers import auth_router
from app.services.cleanup import ExpiredAccountSweeper

# Logging
logger = logging.getLogger("authflow")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

settings = get_settings()
for warning in settings.validate():
    logger.warning("CONFIG %s", warning)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the expired-account sweeper for the lifetime of the process."""
    sweeper = ExpiredAccountSweeper(SessionLocal, settings.CLEANUP_INTERVAL_SECONDS)
    sweeper.start()
    app.state.sweeper = sweeper
    logger.info("Expired account sweeper started (every %ss)", settings.CLEANUP_INTERVAL_SECONDS)
    try:
        yield
    finally:
        await sweeper.stop()
        logger.info("Expired account sweeper stopped")


app = FastAPI(title="Authflow", version="0.1.0", lifespan=lifespan)
app.state.limiter = limiter


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


# --- Security headers middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"
        response.headers["Cache-Control"] = "no-store"
        return response


# --- Request size limit middleware ---
class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    MAX_BODY_SIZE = 64 * 1024  # JSON credential payloads only

    async def dispatch(self, request: Request, call_next) -> Response:
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.MAX_BODY_SIZE:
            return error_response(413, "Request body too large")
        return await call_next(request)


# --- Audit logging middleware ---
class AuditLogMiddleware(BaseHTTPMiddleware):
    AUDIT_PREFIX = "/api/v1/auth/"

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start) * 1000

        path = request.url.path
        if request.method == "POST" and path.startswith(self.AUDIT_PREFIX):
            # Reset tokens travel in the path
            if path.startswith(self.AUDIT_PREFIX + "reset-password/"):
                path = self.AUDIT_PREFIX + "reset-password/***"
            logger.info(
                "AUDIT %s %s -> %d (%.0fms) from %s",
                request.method,
                path,
                response.status_code,
                duration_ms,
                request.client.host if request.client else "unknown",
            )

        return response


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestSizeLimitMiddleware)
app.add_middleware(AuditLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CLIENT_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)

# API routers
app.include_router(auth_router)


# --- Error handlers: every failure uses the {success, message} envelope ---
@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Business-rule failures raised by the auth workflow."""
    return error_response(exc.status_code, exc.message)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit exceeded with the route's static message."""
    logger.warning(
        "RATE LIMIT %s %s from %s",
        request.method,
        request.url.path,
        request.client.host if request.client else "unknown",
    )
    return error_response(429, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors, not schema dumps."""
    return error_response(400, "Invalid request payload.")


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Routing-level errors (404, 405) in the same envelope."""
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: never leak internals to the caller."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, "Internal server error.")


# --- Health check ---
@app.get("/api/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "app": "authflow", "version": "0.1.0"}
