"""codenote ASGI application.

``create_app()`` wires middleware, error handlers, and the v1 router;
``app`` is the instance served by ``uvicorn codenote.main:app``.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from codenote.api.v1.router import router as v1_router
from codenote.core.config import settings
from codenote.core.database import engine
from codenote.core.errors import APIError, InternalError, ValidationError
from codenote.core.rate_limiting import limiter, rate_limit_exceeded_handler
from codenote.core.responses import ErrorDetail, ErrorResponse

logger = structlog.get_logger()

# Sent on every response. The API never serves HTML, so nothing may be
# framed or loaded.
_SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
}
_HSTS = "max-age=31536000; includeSubDomains"
_NO_STORE = "no-store, max-age=0"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach hardening headers.

    API paths also get ``Cache-Control: no-store`` since they return note
    contents and Set-Cookie headers. HSTS is added in production only, where
    TLS terminates at the reverse proxy.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)

        for name, value in _SECURITY_HEADERS.items():
            response.headers[name] = value
        if request.url.path.startswith("/api/"):
            response.headers["Cache-Control"] = _NO_STORE
        if settings.environment == "production":
            response.headers["Strict-Transport-Security"] = _HSTS

        return response


def _error_json(
    status_code: int,
    code: str,
    message: str,
    details: list[dict] | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=ErrorDetail(code=code, message=message, details=details)
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


def api_error_handler(_request: Request, exc: APIError) -> JSONResponse:
    """Render an APIError with its own status, code, and message."""
    return _error_json(exc.status_code, exc.code, exc.message, exc.details)


def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as 400 VALIDATION_ERROR.

    Covers malformed JSON, a missing email, unknown body fields, and a
    duration choice outside the offered set. Each problem becomes one
    ``{"loc", "msg", "type"}`` entry in ``details``.
    """
    details = [
        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]
    return api_error_handler(request, ValidationError(details=details))


def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log anything unhandled and answer with a generic 500.

    Security: the exception text never reaches the client; it may contain
    hostnames or SQL.
    """
    logger.exception("unhandled_exception", exc_info=exc, path=request.url.path)
    fallback = InternalError()
    return _error_json(fallback.status_code, fallback.code, fallback.message)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    logger.info("startup", environment=settings.environment)
    yield
    await engine.dispose()
    logger.info("shutdown")


def create_app() -> FastAPI:
    """Build a fresh application instance.

    Tests call this directly to get an app they can attach throwaway routes
    and dependency overrides to.
    """
    app = FastAPI(
        title="codenote API",
        version="1.0.0",
        description="Personal notes with emailed one-time login codes",
        lifespan=lifespan,
    )

    # Starlette runs the last-added middleware first; CORS has to see
    # preflight requests before anything else does.
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept"],
    )

    app.state.limiter = limiter
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, internal_error_handler)

    app.include_router(v1_router, prefix="/api/v1")

    @app.get("/health")
    def health_check() -> dict:
        """Liveness probe; does not touch the database."""
        return {"status": "healthy"}

    return app


app = create_app()
