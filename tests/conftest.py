"""
Pytest configuration and shared fixtures.

Rate limits are raised before the application is imported so that the
API tests, which all come from the same test client, never hit 429.
"""

import os

os.environ.setdefault("RATE_LIMIT_CALCULATION", "10000/minute")
os.environ.setdefault("RATE_LIMIT_HEALTH", "10000/minute")
os.environ.setdefault("RATE_LIMIT_DEFAULT", "10000/minute")

import pytest

from config import EngineConfig
from services.tool_service import ComplianceToolService


@pytest.fixture
def default_config():
    """Engine configuration with the built-in defaults, ignoring the environment."""
    return EngineConfig()


@pytest.fixture
def service(default_config):
    return ComplianceToolService(default_config)


@pytest.fixture
def engine_params(default_config):
    """Calculator parameters derived from the default configuration."""
    return default_config.to_dict()
