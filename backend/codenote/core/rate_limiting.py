"""Brute-force protection for login code redemption.

A 6-digit code has 900,000 possible values and stays valid for 15 minutes,
so ``POST /auth/verify-code`` is throttled per client address. Requesting
codes is not throttled.

Usage in routers:
    from codenote.core.rate_limiting import limiter, verify_code_limit

    @router.post("/verify-code")
    @limiter.limit(verify_code_limit)
    async def verify_code(request: Request, ...):
        ...
"""

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from codenote.core.config import settings
from codenote.core.responses import ErrorDetail, ErrorResponse

# In-memory counters: correct for a single process. Several workers need a
# shared backend via RATELIMIT_STORAGE_URL.
limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.rate_limit_enabled,
)

_DEFAULT_RETRY_AFTER_SECONDS = 60


def verify_code_limit() -> str:
    """Current verify-code limit, read per request so settings can change."""
    return settings.rate_limit_verify_code


def _retry_after(exc: RateLimitExceeded) -> int:
    """Seconds until the exceeded window resets."""
    try:
        return int(exc.limit.limit.get_expiry())
    except AttributeError:
        return _DEFAULT_RETRY_AFTER_SECONDS


def rate_limit_exceeded_handler(
    _request: Request,
    exc: RateLimitExceeded,
) -> Response:
    """Render a slowapi rejection as a 429 error envelope.

    Args:
        request: The incoming request.
        exc: The rate limit exception.

    Returns:
        JSONResponse with RATE_LIMITED code and a Retry-After header.
    """
    return JSONResponse(
        status_code=429,
        content=ErrorResponse(
            error=ErrorDetail(
                code="RATE_LIMITED",
                message=f"Too many attempts: limit is {exc.detail}",
            )
        ).model_dump(),
        headers={"Retry-After": str(_retry_after(exc))},
    )
