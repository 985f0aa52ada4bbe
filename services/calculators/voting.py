"""
Vote passage check.

Two gates, evaluated in order:
1. Turnout: turnout / eligible_voters must be at least 60%.
2. Vote share: a general proposal needs strictly more than half of the
   votes cast; an amendment needs at least two thirds.
"""

from models.calculation import CheckVotingResponse
from services.calculators.base_calculator import BaseCalculator
from services.input_security import sanitize_for_error_message

PROPOSAL_TYPES = ('general', 'amendment')

MIN_TURNOUT = 0.60
LOW_TURNOUT_WARNING = 0.70
GENERAL_MAJORITY = 0.50
AMENDMENT_MAJORITY = 2.0 / 3.0


class VotingCalculator(BaseCalculator):

    tool_name = "check_voting"
    failure_explanation = "Voting check failed due to invalid inputs"

    def validate(self, eligible_voters: int, turnout: int, yes_votes: int, proposal_type: str) -> list:
        errors = []
        if eligible_voters <= 0:
            errors.append("Eligible voters must be positive")
        if turnout < 0:
            errors.append("Turnout cannot be negative")
        if yes_votes < 0:
            errors.append("Yes votes cannot be negative")
        if turnout > eligible_voters:
            errors.append("Turnout cannot exceed eligible voters")
        if yes_votes > turnout:
            errors.append("Yes votes cannot exceed turnout")
        if proposal_type not in PROPOSAL_TYPES:
            errors.append(
                f"Invalid proposal type '{sanitize_for_error_message(proposal_type)}' "
                f"(must be 'general' or 'amendment')"
            )
        return errors

    def calculate(
        self,
        eligible_voters: int,
        turnout: int,
        yes_votes: int,
        proposal_type: str
    ) -> CheckVotingResponse:
        errors = self.validate(eligible_voters, turnout, yes_votes, proposal_type)
        if errors:
            return CheckVotingResponse(
                passes=False,
                explanation=self.failure_explanation,
                errors=errors,
            )

        steps = []
        warnings = []

        turnout_ratio = turnout / eligible_voters
        steps.append(
            f"Turnout: {turnout} out of {eligible_voters} eligible voters "
            f"({turnout_ratio * 100:.1f}%)"
        )

        if turnout_ratio < MIN_TURNOUT:
            steps.append("Turnout requirement: ≥60% - FAILED")
            steps.append("Proposal fails due to insufficient turnout")
            self.log_result(f"{proposal_type} proposal fails on turnout ({turnout_ratio:.3f})")
            return CheckVotingResponse(
                passes=False,
                explanation=self.join_explanation(steps),
            )
        steps.append("Turnout requirement: ≥60% - PASSED")

        yes_ratio = yes_votes / turnout
        steps.append(f"Yes votes: {yes_votes} out of {turnout} ({yes_ratio * 100:.1f}%)")

        if proposal_type == 'general':
            passes = yes_ratio > GENERAL_MAJORITY
            steps.append("General proposal requirement: >50%")
            steps.append(
                f"Vote threshold: {yes_ratio * 100:.1f}% > 50% - {'PASSED' if passes else 'FAILED'}"
            )
        else:
            passes = yes_ratio >= AMENDMENT_MAJORITY
            steps.append("Amendment requirement: ≥66.7%")
            steps.append(
                f"Vote threshold: {yes_ratio * 100:.1f}% ≥ 66.7% - {'PASSED' if passes else 'FAILED'}"
            )

        steps.append(f"Final result: Proposal {'PASSES' if passes else 'FAILS'}")

        if turnout_ratio < LOW_TURNOUT_WARNING:
            warnings.append("Low turnout (below 70%)")
        if turnout > 0 and yes_votes == 0:
            warnings.append("No yes votes recorded")

        self.log_result(f"{proposal_type} proposal {'passes' if passes else 'fails'}")

        return CheckVotingResponse(
            passes=passes,
            explanation=self.join_explanation(steps),
            errors=[],
            warnings=warnings,
        )
