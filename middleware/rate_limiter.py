"""
Rate limiting for the compliance engine API (slowapi).

Limits are read from the environment once at import:
RATE_LIMIT_DEFAULT, RATE_LIMIT_CALCULATION, RATE_LIMIT_HEALTH.
Storage defaults to process memory; set REDIS_URL to share counters.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from fastapi import Request, FastAPI
from fastapi.responses import JSONResponse
import os
import logging

logger = logging.getLogger(__name__)

RATE_LIMITS = {
    "default": os.getenv("RATE_LIMIT_DEFAULT", "100/minute"),
    "calculation": os.getenv("RATE_LIMIT_CALCULATION", "60/minute"),
    "health": os.getenv("RATE_LIMIT_HEALTH", "300/minute"),
}

RETRY_AFTER_SECONDS = 60


def get_client_identifier(request: Request) -> str:
    """Client key: X-Real-IP, else the first X-Forwarded-For hop, else the peer address."""
    proxied = request.headers.get("X-Real-IP") or request.headers.get("X-Forwarded-For", "")
    client = proxied.split(",")[0].strip()
    return client or get_remote_address(request)


limiter = Limiter(
    key_func=get_client_identifier,
    default_limits=[RATE_LIMITS["default"]],
    storage_uri=os.getenv("REDIS_URL", "memory://"),
    strategy="fixed-window",
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 with the exceeded limit and a Retry-After header."""
    limit = str(exc.detail)
    logger.warning(
        f"Rate limit {limit} exceeded for {get_client_identifier(request)} on {request.url.path}"
    )
    return JSONResponse(
        status_code=429,
        content={
            "error": "rate_limit_exceeded",
            "detail": limit,
            "retry_after": RETRY_AFTER_SECONDS,
        },
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )


def setup_rate_limiting(app: FastAPI) -> None:
    """Attach the limiter, its middleware and the 429 handler to the app."""
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    logger.info(f"Rate limiting configured: {RATE_LIMITS}")


def limit_calculation(func):
    """Apply the tool invocation rate limit."""
    return limiter.limit(RATE_LIMITS["calculation"])(func)


def limit_health(func):
    """Apply the health/discovery rate limit."""
    return limiter.limit(RATE_LIMITS["health"])(func)
