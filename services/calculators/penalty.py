"""
Late-payment penalty with cap and interest.

    penalty = min(days_late × rate_per_day, cap)
    final   = penalty + penalty × interest_rate

rate_per_day, cap and interest_rate come from the engine configuration.
"""

from models.calculation import CalcPenaltyResponse
from services.calculators.base_calculator import BaseCalculator
from services.input_normalizer import format_number

HIGH_INTEREST_RATE = 0.10


class PenaltyCalculator(BaseCalculator):
    """Capped daily penalty plus simple interest."""

    tool_name = "calc_penalty"
    failure_explanation = "Calculation failed due to invalid inputs"

    def __init__(self, params: dict = None):
        super().__init__(params)
        self.rate_per_day = float(self.params.get('rate_per_day', 100.0))
        self.cap = float(self.params.get('cap', 1000.0))
        self.interest_rate = float(self.params.get('interest_rate', 0.05))

    def validate(self, days_late: float) -> list:
        errors = []
        if days_late < 0:
            errors.append("Days late cannot be negative")
        if self.rate_per_day < 0:
            errors.append("Rate per day cannot be negative")
        if self.cap < 0:
            errors.append("Cap cannot be negative")
        if self.interest_rate < 0:
            errors.append("Interest rate cannot be negative")
        return errors

    def calculate(self, days_late: float) -> CalcPenaltyResponse:
        errors = self.validate(days_late)
        if errors:
            return CalcPenaltyResponse(
                penalty=0.0,
                explanation=self.failure_explanation,
                errors=errors,
            )

        rate_per_day = self.rate_per_day
        cap = self.cap
        interest_rate = self.interest_rate
        steps = []
        warnings = []

        base_penalty = days_late * rate_per_day
        steps.append(
            f"Base penalty: {format_number(days_late)} days × "
            f"{format_number(rate_per_day)} = {base_penalty:.2f}"
        )

        penalty = min(base_penalty, cap)
        if base_penalty > cap:
            steps.append(f"Applied cap: {base_penalty:.2f} capped at {cap:.2f}")
            warnings.append(f"Base penalty {base_penalty:.2f} exceeded cap of {cap:.2f}")
        else:
            steps.append(f"No cap applied ({base_penalty:.2f} ≤ {cap:.2f})")

        interest = penalty * interest_rate
        steps.append(f"Interest: {penalty:.2f} × {interest_rate * 100:.1f}% = {interest:.2f}")

        final_penalty = penalty + interest
        steps.append(f"Final penalty: {penalty:.2f} + {interest:.2f} = {final_penalty:.2f}")

        if interest_rate > HIGH_INTEREST_RATE:
            warnings.append(f"High interest rate: {interest_rate * 100:.1f}%")

        self.log_result(f"days_late={format_number(days_late)}, penalty={final_penalty:.2f}")

        return CalcPenaltyResponse(
            penalty=final_penalty,
            explanation=self.join_explanation(steps),
            errors=[],
            warnings=warnings,
        )
