"""
Compliance Engine - FastAPI Backend

Entry point for the HTTP service exposing the five compliance tools:
- calc_penalty: late-payment penalty with cap and interest
- calc_tax: progressive income tax with surcharge
- check_voting: vote passage eligibility
- distribute_waterfall: senior/junior/equity cash waterfall
- check_housing_grant: housing grant eligibility
"""

from dotenv import load_dotenv

# Load environment variables FIRST - before importing modules that need them
load_dotenv()

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from typing import Dict
import os
import logging

from api.tools import router as tools_router
from config import get_engine_config
from middleware.rate_limiter import setup_rate_limiting, limiter, limit_health
from services.input_security import sanitize_for_error_message
from services.tool_service import SERVICE_NAME, SERVICE_VERSION

# Configure logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Load configuration eagerly so a bad environment shows up in startup logs
    get_engine_config()
    logger.info(f"{SERVICE_NAME} {SERVICE_VERSION} started")
    yield
    logger.info(f"{SERVICE_NAME} stopped")


app = FastAPI(
    title="Compliance Engine API",
    description="Deterministic penalty, tax, voting, waterfall and housing grant calculations with step-by-step explanations",
    version=SERVICE_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Setup rate limiting (before other middleware)
setup_rate_limiting(app)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    422 body without the rejected input.

    Only the error type, the field location and the message are returned;
    string location parts are sanitized like every other echoed value.
    """
    errors = [
        {
            "type": error.get("type"),
            "loc": [
                sanitize_for_error_message(part) if isinstance(part, str) else part
                for part in error.get("loc", ())
            ],
            "msg": error.get("msg"),
        }
        for error in exc.errors()
    ]
    logger.warning(f"Request validation failed on {request.url.path}: {len(errors)} error(s)")
    return JSONResponse(status_code=422, content={"detail": errors})


app.include_router(tools_router)


@app.get("/", response_model=Dict[str, str])
@limiter.limit("100/minute")
async def root(request: Request) -> Dict[str, str]:
    """
    Root endpoint with API information.

    Returns:
        Dict containing API name, version, and documentation links
    """
    return {
        "service": "Compliance Engine API",
        "version": SERVICE_VERSION,
        "docs": "/docs",
        "tools": "/api/tools",
        "health": "/health",
        "status": "running",
    }


@app.get("/health", response_model=Dict[str, str])
@limit_health
async def health_check(request: Request) -> Dict[str, str]:
    """Health check endpoint for monitoring and load balancers."""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
    }


@app.get("/metrics")
async def metrics():
    """Prometheus metrics in text exposition format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


if __name__ == "__main__":
    import uvicorn

    # Run with: python main.py
    # Or use: uvicorn main:app --reload --port 8000
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
        log_level="info",
    )
