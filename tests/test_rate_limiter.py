"""
Tests for rate limiter client identification and the 429 response.
"""

import asyncio
from unittest.mock import MagicMock

from starlette.requests import Request

from middleware.rate_limiter import get_client_identifier, rate_limit_exceeded_handler


def _request(headers=None, client=("10.0.0.9", 5000)) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/tools/calc_tax",
        "query_string": b"",
        "headers": [
            (name.lower().encode(), value.encode())
            for name, value in (headers or {}).items()
        ],
        "client": client,
        "server": ("testserver", 80),
        "scheme": "http",
    }
    return Request(scope)


def test_real_ip_header_wins():
    request = _request({"X-Real-IP": "1.2.3.4", "X-Forwarded-For": "5.6.7.8"})
    assert get_client_identifier(request) == "1.2.3.4"


def test_first_forwarded_hop():
    request = _request({"X-Forwarded-For": " 5.6.7.8 , 9.9.9.9"})
    assert get_client_identifier(request) == "5.6.7.8"


def test_falls_back_to_peer_address():
    assert get_client_identifier(_request()) == "10.0.0.9"


def test_exceeded_response():
    exc = MagicMock()
    exc.detail = "60 per 1 minute"

    response = asyncio.run(rate_limit_exceeded_handler(_request(), exc))

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "60"
    assert b'"detail":"60 per 1 minute"' in response.body
