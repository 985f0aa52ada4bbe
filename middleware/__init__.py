"""Middleware package for the compliance engine API."""

from .rate_limiter import (
    limiter,
    setup_rate_limiting,
    limit_calculation,
    limit_health,
    RATE_LIMITS,
)

__all__ = [
    "limiter",
    "setup_rate_limiting",
    "limit_calculation",
    "limit_health",
    "RATE_LIMITS",
]
