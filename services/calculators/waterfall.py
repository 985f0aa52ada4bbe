"""
Cash waterfall: senior debt, then junior debt, then equity.
"""

from models.calculation import DistributeWaterfallResponse, WaterfallDistribution
from services.calculators.base_calculator import BaseCalculator


class WaterfallCalculator(BaseCalculator):
    """Allocate available cash to each level in priority order."""

    tool_name = "distribute_waterfall"
    failure_explanation = "Waterfall distribution failed due to invalid inputs"

    def validate(self, cash_available: float, senior_debt: float, junior_debt: float) -> list:
        errors = []
        if cash_available < 0:
            errors.append("Cash available cannot be negative")
        if senior_debt < 0:
            errors.append("Senior debt cannot be negative")
        if junior_debt < 0:
            errors.append("Junior debt cannot be negative")
        return errors

    def calculate(
        self,
        cash_available: float,
        senior_debt: float,
        junior_debt: float
    ) -> DistributeWaterfallResponse:
        errors = self.validate(cash_available, senior_debt, junior_debt)
        if errors:
            return DistributeWaterfallResponse(
                distribution=WaterfallDistribution(senior=0.0, junior=0.0, equity=0.0),
                explanation=self.failure_explanation,
                errors=errors,
            )

        steps = [f"Starting cash: {cash_available:.2f}"]
        warnings = []
        remaining = cash_available

        # Senior
        senior_payment = min(remaining, senior_debt)
        remaining -= senior_payment
        if senior_debt > 0:
            if senior_payment == senior_debt:
                steps.append(f"Senior debt: {senior_debt:.2f} fully paid")
            else:
                steps.append(
                    f"Senior debt: {senior_payment:.2f} partially paid "
                    f"({senior_payment:.2f} of {senior_debt:.2f})"
                )
                warnings.append(f"Senior debt underpaid by {senior_debt - senior_payment:.2f}")
        else:
            steps.append("No senior debt to pay")
        steps.append(f"Remaining after senior: {remaining:.2f}")

        # Junior
        junior_payment = min(remaining, junior_debt)
        remaining -= junior_payment
        if junior_debt > 0:
            if junior_payment == junior_debt:
                steps.append(f"Junior debt: {junior_debt:.2f} fully paid")
            elif junior_payment > 0:
                steps.append(
                    f"Junior debt: {junior_payment:.2f} partially paid "
                    f"({junior_payment:.2f} of {junior_debt:.2f})"
                )
                warnings.append(f"Junior debt underpaid by {junior_debt - junior_payment:.2f}")
            else:
                steps.append("Junior debt: no funds available")
                warnings.append(f"Junior debt unpaid ({junior_debt:.2f})")
        else:
            steps.append("No junior debt to pay")
        steps.append(f"Remaining for equity: {remaining:.2f}")

        # Equity
        equity_payment = remaining
        if equity_payment > 0:
            steps.append(f"Equity distribution: {equity_payment:.2f}")
        else:
            steps.append("No funds available for equity")

        total_debt = senior_debt + junior_debt
        if cash_available < total_debt:
            warnings.append(
                f"Insufficient cash: {cash_available:.2f} available vs {total_debt:.2f} total debt"
            )

        self.log_result(
            f"senior={senior_payment:.2f}, junior={junior_payment:.2f}, equity={equity_payment:.2f}"
        )

        return DistributeWaterfallResponse(
            distribution=WaterfallDistribution(
                senior=senior_payment,
                junior=junior_payment,
                equity=equity_payment,
            ),
            explanation=self.join_explanation(steps),
            errors=[],
            warnings=warnings,
        )
