"""
Progressive income tax with surcharge.

Brackets are defined by ascending thresholds and one more rate than
thresholds: bracket i covers (thresholds[i-1], thresholds[i]] at rates[i],
and income above the last threshold is taxed at the final rate. When the
bracket tax exceeds surcharge_threshold, surcharge_rate is applied to the
whole of it.
"""

from typing import List, Sequence

from models.calculation import CalcTaxResponse
from services.calculators.base_calculator import BaseCalculator

HIGH_SURCHARGE_RATE = 0.05


class TaxCalculator(BaseCalculator):
    """Bracketed tax plus a flat surcharge above a threshold."""

    tool_name = "calc_tax"
    failure_explanation = "Tax calculation failed due to invalid inputs"

    def __init__(self, params: dict = None):
        super().__init__(params)
        self.thresholds: List[float] = [float(t) for t in self.params.get('tax_thresholds', [10000.0])]
        self.rates: List[float] = [float(r) for r in self.params.get('tax_rates', [0.10, 0.20])]
        self.surcharge_threshold = float(self.params.get('surcharge_threshold', 5000.0))
        self.surcharge_rate = float(self.params.get('surcharge_rate', 0.02))

    def validate(self, income: float) -> List[str]:
        errors = []
        thresholds = self.thresholds
        rates = self.rates

        if income < 0:
            errors.append("Income cannot be negative")
        if len(rates) != len(thresholds) + 1:
            errors.append(
                f"Invalid bracket configuration: {len(rates)} rates for "
                f"{len(thresholds)} thresholds (should be {len(thresholds) + 1} rates)"
            )
        if self.surcharge_threshold < 0:
            errors.append("Surcharge threshold cannot be negative")
        if self.surcharge_rate < 0:
            errors.append("Surcharge rate cannot be negative")
        if not _is_strictly_ascending(thresholds):
            errors.append("Tax thresholds must be in ascending order")
        return errors

    def calculate(self, income: float) -> CalcTaxResponse:
        errors = self.validate(income)
        if errors:
            return CalcTaxResponse(
                tax=0.0,
                explanation=self.failure_explanation,
                errors=errors,
            )

        thresholds = self.thresholds
        rates = self.rates
        steps = [f"Starting income: {income:.2f}"]
        warnings = []

        tax = 0.0
        remaining = income
        for i, threshold in enumerate(thresholds):
            if remaining <= 0:
                break
            prev_threshold = thresholds[i - 1] if i > 0 else 0.0
            taxable = min(remaining, threshold - prev_threshold)
            bracket_tax = taxable * rates[i]
            tax += bracket_tax
            remaining -= taxable
            steps.append(
                f"Bracket {i + 1} ({prev_threshold:.0f}-{threshold:.0f}): "
                f"{taxable:.2f} × {rates[i] * 100:.1f}% = {bracket_tax:.2f}"
            )

        if remaining > 0:
            highest_rate = rates[-1]
            highest_tax = remaining * highest_rate
            tax += highest_tax
            prev_threshold = thresholds[-1] if thresholds else 0.0
            steps.append(
                f"Highest bracket ({prev_threshold:.0f}+): "
                f"{remaining:.2f} × {highest_rate * 100:.1f}% = {highest_tax:.2f}"
            )

        steps.append(f"Subtotal tax: {tax:.2f}")

        if tax > self.surcharge_threshold:
            pre_surcharge = tax
            surcharge = pre_surcharge * self.surcharge_rate
            tax = pre_surcharge + surcharge
            steps.append(
                f"Surcharge applied (tax {pre_surcharge:.2f} > {self.surcharge_threshold:.2f}): "
                f"{pre_surcharge:.2f} × {self.surcharge_rate * 100:.1f}% = {surcharge:.2f}"
            )
            steps.append(f"Final tax with surcharge: {tax:.2f}")
        else:
            steps.append(f"No surcharge (tax {tax:.2f} ≤ {self.surcharge_threshold:.2f})")

        if self.surcharge_rate > HIGH_SURCHARGE_RATE:
            warnings.append(f"High surcharge rate: {self.surcharge_rate * 100:.1f}%")

        self.log_result(f"income={income:.2f}, tax={tax:.2f}")

        return CalcTaxResponse(
            tax=tax,
            explanation=self.join_explanation(steps),
            errors=[],
            warnings=warnings,
        )


def _is_strictly_ascending(values: Sequence[float]) -> bool:
    return all(later > earlier for earlier, later in zip(values, values[1:]))
