"""
Engine Configuration

Environment variables and defaults for the calculation engine.

The configuration is read once and never mutated afterwards. Callers
receive the EngineConfig instance explicitly; get_engine_config() is the
cached accessor used by the HTTP layer.
"""

import os
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    """Read a float from the environment, falling back to default when unset or invalid."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        logger.warning(f"Ignoring invalid value for {name}; using default {default}")
        return default


def parse_float_list(raw: str) -> Optional[Tuple[float, ...]]:
    """
    Parse a comma-separated list of floats.

    Returns None if any element fails to parse, so the caller can fall
    back to its default list as a whole.
    """
    try:
        return tuple(float(part.strip()) for part in raw.split(","))
    except ValueError:
        return None


def _env_float_list(name: str, default: Tuple[float, ...]) -> Tuple[float, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    parsed = parse_float_list(raw)
    if parsed is None:
        logger.warning(f"Ignoring invalid list for {name}; using default {list(default)}")
        return default
    return parsed


@dataclass(frozen=True)
class EngineConfig:
    """Immutable configuration snapshot shared by all calculations."""

    # Penalty
    default_rate_per_day: float = 100.0
    default_cap: float = 1000.0
    default_interest_rate: float = 0.05

    # Progressive tax
    default_thresholds: Tuple[float, ...] = field(default=(10000.0,))
    default_rates: Tuple[float, ...] = field(default=(0.10, 0.20))
    default_surcharge_threshold: float = 5000.0
    default_surcharge_rate: float = 0.02

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from ENGINE_DEFAULT_* environment variables."""
        defaults = cls()
        return cls(
            default_rate_per_day=_env_float(
                "ENGINE_DEFAULT_RATE_PER_DAY", defaults.default_rate_per_day
            ),
            default_cap=_env_float("ENGINE_DEFAULT_CAP", defaults.default_cap),
            default_interest_rate=_env_float(
                "ENGINE_DEFAULT_INTEREST_RATE", defaults.default_interest_rate
            ),
            default_thresholds=_env_float_list(
                "ENGINE_DEFAULT_THRESHOLDS", defaults.default_thresholds
            ),
            default_rates=_env_float_list(
                "ENGINE_DEFAULT_RATES", defaults.default_rates
            ),
            default_surcharge_threshold=_env_float(
                "ENGINE_DEFAULT_SURCHARGE_THRESHOLD", defaults.default_surcharge_threshold
            ),
            default_surcharge_rate=_env_float(
                "ENGINE_DEFAULT_SURCHARGE_RATE", defaults.default_surcharge_rate
            ),
        )

    def to_dict(self) -> dict:
        """Export config as dict for logs and API responses."""
        return {
            'rate_per_day': self.default_rate_per_day,
            'cap': self.default_cap,
            'interest_rate': self.default_interest_rate,
            'tax_thresholds': list(self.default_thresholds),
            'tax_rates': list(self.default_rates),
            'surcharge_threshold': self.default_surcharge_threshold,
            'surcharge_rate': self.default_surcharge_rate,
        }


@lru_cache(maxsize=1)
def get_engine_config() -> EngineConfig:
    """Load the engine configuration once per process."""
    config = EngineConfig.from_env()
    logger.info(f"Engine configuration loaded: {config.to_dict()}")
    return config
