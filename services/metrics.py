"""
Prometheus metrics for tool invocations.

METRICS EXPOSED
---------------
- compliance_tool_requests_total{tool}: every invocation
- compliance_tool_errors_total{tool}: invocations that ended in an error
- compliance_tool_request_duration_seconds{tool}: invocation latency
"""

import logging
import time
from contextlib import contextmanager
from typing import Iterator

from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)


TOOL_REQUESTS = Counter(
    "compliance_tool_requests_total",
    "Total number of tool invocations",
    ["tool"]
)

TOOL_ERRORS = Counter(
    "compliance_tool_errors_total",
    "Total number of tool invocations that returned an error",
    ["tool"]
)

TOOL_DURATION = Histogram(
    "compliance_tool_request_duration_seconds",
    "Tool invocation latency in seconds",
    ["tool"]
)


def record_request(tool: str) -> None:
    """Count one invocation of a tool."""
    TOOL_REQUESTS.labels(tool=tool).inc()


def record_error(tool: str) -> None:
    """Count one failed invocation of a tool."""
    TOOL_ERRORS.labels(tool=tool).inc()
    logger.debug(f"Metric: tool_error | tool={tool}")


@contextmanager
def track_request(tool: str) -> Iterator[None]:
    """
    Count an invocation and time it until the block exits.

    The duration is observed whether the block returns or raises.
    """
    record_request(tool)
    start = time.perf_counter()
    try:
        yield
    finally:
        TOOL_DURATION.labels(tool=tool).observe(time.perf_counter() - start)
