"""
Rule calculators.

Named Calculator Registry pattern: each tool is a separate class,
dispatched via the CALCULATORS dict keyed by tool name.
"""

from typing import Any, Dict, Optional, Type

from .base_calculator import BaseCalculator
from .penalty import PenaltyCalculator
from .tax import TaxCalculator
from .voting import VotingCalculator
from .waterfall import WaterfallCalculator
from .housing_grant import HousingGrantCalculator

CALCULATORS: Dict[str, Type[BaseCalculator]] = {
    PenaltyCalculator.tool_name: PenaltyCalculator,
    TaxCalculator.tool_name: TaxCalculator,
    VotingCalculator.tool_name: VotingCalculator,
    WaterfallCalculator.tool_name: WaterfallCalculator,
    HousingGrantCalculator.tool_name: HousingGrantCalculator,
}


def get_calculator(tool_name: str, params: Optional[Dict[str, Any]] = None) -> BaseCalculator:
    """
    Instantiate the calculator registered for a tool.

    Raises:
        ValueError: If no calculator is registered under tool_name
    """
    calculator_class = CALCULATORS.get(tool_name)
    if calculator_class is None:
        raise ValueError(
            f"Unknown tool '{tool_name}'. Available: {sorted(CALCULATORS)}"
        )
    return calculator_class(params)


__all__ = [
    "BaseCalculator",
    "PenaltyCalculator",
    "TaxCalculator",
    "VotingCalculator",
    "WaterfallCalculator",
    "HousingGrantCalculator",
    "CALCULATORS",
    "get_calculator",
]
