"""
Base class for the rule calculators.

Each calculator validates its domain constraints, computes its result and
records every step of the derivation. Constraint violations are collected
as strings rather than raised, so a caller sees all of them at once; when
any are present the calculator returns a zeroed result with a generic
failure explanation instead of a partial derivation.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

# Separator used when joining explanation steps for display
EXPLANATION_SEPARATOR = ". "


class BaseCalculator(ABC):
    """
    Abstract base for calculators.

    Subclasses set `tool_name` and `failure_explanation` and implement
    calculate() taking already-parsed, typed inputs.
    """

    tool_name: str = ""
    failure_explanation: str = "Calculation failed due to invalid inputs"

    def __init__(self, params: Optional[Dict[str, Any]] = None):
        """
        Args:
            params: Engine parameters (see EngineConfig.to_dict()). Calculators
                    without configurable parameters ignore them.
        """
        self.params = params or {}

    @abstractmethod
    def calculate(self, *args, **kwargs):
        """Run the calculation and return the tool's response model."""
        pass

    @staticmethod
    def join_explanation(parts: List[str]) -> str:
        return EXPLANATION_SEPARATOR.join(parts)

    def log_result(self, summary: str) -> None:
        logger.info(f"{self.__class__.__name__}: {summary}")
