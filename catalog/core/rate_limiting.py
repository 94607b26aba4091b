"""Per-client rate limits for the credential endpoints.

Registration and token minting are limited per client IP, which bounds
online password guessing against POST /tokens/authentication. Bearer
tokens are not inspected here; authentication happens in deps.py.

Usage in routers:
    from catalog.core.rate_limiting import limiter

    @router.post("/tokens/authentication")
    @limiter.limit(lambda: settings.rate_limit_auth)
    async def create_authentication_token(request: Request, ...):
        ...
"""

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from catalog.core.config import settings
from catalog.core.responses import ErrorDetail, ErrorResponse

# Used when the exceeded limit does not expose its window
DEFAULT_RETRY_AFTER_SECONDS = 60

# In-memory counters; a multi-instance deployment sets RATELIMIT_STORAGE_URL
limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.rate_limit_enabled,
)


def _window_seconds(exc: RateLimitExceeded) -> int:
    try:
        return int(exc.limit.limit.get_expiry())
    except (AttributeError, TypeError, ValueError):
        return DEFAULT_RETRY_AFTER_SECONDS


def rate_limit_exceeded_handler(
    _request: Request,
    exc: RateLimitExceeded,
) -> Response:
    """Answer 429 RATE_LIMITED in the standard error envelope.

    Retry-After is the length of the exceeded limit's window, so a client
    that waits that long always finds a fresh budget.
    """
    body = ErrorResponse(
        error=ErrorDetail(
            code="RATE_LIMITED",
            message=f"Rate limit exceeded: {exc.detail}",
        )
    )
    return JSONResponse(
        status_code=429,
        content=body.model_dump(exclude_none=True),
        headers={"Retry-After": str(_window_seconds(exc))},
    )
