"""
Housing grant eligibility against Area Median Income (AMI).

A household is eligible when it has no other housing subsidy and its
income is at most 60% of AMI, raised by 10% for households larger than
four people.
"""

from models.calculation import CheckHousingGrantResponse
from services.calculators.base_calculator import BaseCalculator

AMI_FRACTION = 0.60
LARGE_HOUSEHOLD_SIZE = 4
LARGE_HOUSEHOLD_ADJUSTMENT = 1.10
NEAR_THRESHOLD_FRACTION = 0.9

REQUIREMENT_NO_OTHER_SUBSIDY = "Must not have any other housing subsidies or assistance"
REQUIREMENT_PROOF_OF_INCOME = "Must provide proof of income documentation"
REQUIREMENT_PROGRAM_CRITERIA = "Must be a first-time homebuyer or meet other program criteria"
REQUIREMENT_LARGE_HOUSEHOLD = "Large household size may require additional documentation"
REQUIREMENT_NEAR_THRESHOLD = "Income is close to threshold - verify all deductions are included"


class HousingGrantCalculator(BaseCalculator):

    tool_name = "check_housing_grant"
    failure_explanation = "Housing grant eligibility check failed due to invalid inputs"

    def validate(self, ami: float, household_size: int, income: float) -> list:
        errors = []
        if ami <= 0:
            errors.append("Area Median Income (AMI) must be positive")
        if household_size <= 0:
            errors.append("Household size must be positive")
        if income < 0:
            errors.append("Income cannot be negative")
        return errors

    def calculate(
        self,
        ami: float,
        household_size: int,
        income: float,
        has_other_subsidy: bool
    ) -> CheckHousingGrantResponse:
        errors = self.validate(ami, household_size, income)
        if errors:
            return CheckHousingGrantResponse(
                eligible=False,
                explanation=self.failure_explanation,
                errors=errors,
            )

        steps = [
            f"Area Median Income (AMI): {ami:.2f}",
            f"Household size: {household_size}",
            f"Household income: {income:.2f}",
            f"Has other subsidy: {'Yes' if has_other_subsidy else 'No'}",
        ]
        requirements = []

        if has_other_subsidy:
            steps.append("Subsidy check: FAILED (already has another subsidy)")
            steps.append("Result: NOT ELIGIBLE")
            requirements.append(REQUIREMENT_NO_OTHER_SUBSIDY)
            self.log_result("not eligible (other subsidy)")
            return CheckHousingGrantResponse(
                eligible=False,
                explanation=self.join_explanation(steps),
                additional_requirements=requirements,
            )
        steps.append("Subsidy check: PASSED (no other subsidies)")

        base_threshold = AMI_FRACTION * ami
        steps.append(f"Base income threshold: 60% of AMI = {base_threshold:.2f}")

        if household_size > LARGE_HOUSEHOLD_SIZE:
            threshold = base_threshold * LARGE_HOUSEHOLD_ADJUSTMENT
            steps.append(
                f"Household size adjustment: {household_size} > 4, "
                f"threshold increased by 10% to {threshold:.2f}"
            )
        else:
            threshold = base_threshold
            steps.append(f"No household size adjustment needed ({household_size} ≤ 4)")

        eligible = income <= threshold
        steps.append(
            f"Income eligibility: {income:.2f} {'≤' if eligible else '>'} {threshold:.2f} - "
            f"{'PASSED' if eligible else 'FAILED'}"
        )
        steps.append(f"Final result: {'ELIGIBLE' if eligible else 'NOT ELIGIBLE'}")

        requirements.append(REQUIREMENT_PROOF_OF_INCOME)
        requirements.append(REQUIREMENT_PROGRAM_CRITERIA)
        if household_size > LARGE_HOUSEHOLD_SIZE:
            requirements.append(REQUIREMENT_LARGE_HOUSEHOLD)
        if income > threshold * NEAR_THRESHOLD_FRACTION:
            requirements.append(REQUIREMENT_NEAR_THRESHOLD)

        self.log_result(f"{'eligible' if eligible else 'not eligible'} (threshold={threshold:.2f})")

        return CheckHousingGrantResponse(
            eligible=eligible,
            explanation=self.join_explanation(steps),
            errors=[],
            additional_requirements=requirements,
        )
