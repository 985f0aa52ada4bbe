"""
Tool Service

Runs the input pipeline for each tool and assembles the outcome:

    request model (normalized text) -> security checks -> typed parsing
    -> calculator -> JSON envelope or error text

Every invocation returns a ToolCallResult; no exception escapes for bad
input. Format and security failures stop at the first failing field,
domain validation failures report every violated constraint.
"""

import json
import logging
from typing import Callable, TypeVar

from pydantic import BaseModel

from config import EngineConfig
from models.calculation import (
    CalcPenaltyParams,
    CalcTaxParams,
    CheckVotingParams,
    DistributeWaterfallParams,
    CheckHousingGrantParams,
    ToolCallResult,
    ToolCatalogResponse,
    ToolInfo,
)
from services.calculators import get_calculator
from services.errors import InputParseError, SerializationError
from services.metrics import record_error, track_request
from services.parsers import parse_boolean, parse_integer, parse_number

logger = logging.getLogger(__name__)

T = TypeVar("T")

SERVICE_NAME = "compliance-engine"
SERVICE_VERSION = "1.3.3"

SERVICE_INSTRUCTIONS = (
    "Compliance Engine providing five calculation and eligibility functions:\n\n"
    "1. calc_penalty - Calculate penalty with cap and interest\n"
    "2. calc_tax - Calculate progressive tax with surcharge\n"
    "3. check_voting - Check voting proposal eligibility\n"
    "4. distribute_waterfall - Distribute cash in waterfall structure\n"
    "5. check_housing_grant - Check housing grant eligibility\n\n"
    "All functions are strongly typed and provide explicit calculations."
)

TOOL_DESCRIPTIONS = {
    "calc_penalty": (
        "Calculate penalty with cap and interest. Returns structured response with penalty "
        "amount, detailed explanation of calculation steps, errors for invalid inputs, and "
        "warnings. Logic: penalty = min(days_late × rate_per_day, cap), then add "
        "interest = penalty × interest_rate. Rate, cap, and interest values are configured "
        "via environment variables. Example: '12' days late → uses configured defaults"
    ),
    "calc_tax": (
        "Calculate progressive tax with surcharge. Returns structured response with tax "
        "amount, detailed explanation of bracket calculations and surcharge application, "
        "errors for invalid inputs, and warnings. Logic: apply progressive brackets defined "
        "by thresholds and rates. If total tax > surcharge_threshold, add "
        "surcharge = tax × surcharge_rate. Tax brackets, rates, and surcharge values are "
        "configured via environment variables. Example: '40000' income → uses configured "
        "tax brackets"
    ),
    "check_voting": (
        "Check voting proposal eligibility. Returns structured response with pass/fail "
        "result, detailed explanation of turnout and voting threshold checks, validation "
        "errors, and warnings. Logic: turnout must be ≥60% of eligible. Then check: If "
        "proposal_type = 'general' → yes_votes / turnout > 0.50. If proposal_type = "
        "'amendment' → yes_votes / turnout ≥ 2/3. Example: '100' eligible, turnout = '70', "
        "yes_votes = '55', proposal_type = 'amendment' → turnout = 70%, yes% = 78.6%, passes"
    ),
    "distribute_waterfall": (
        "Distribute cash in waterfall structure. Returns structured response with "
        "distribution amounts, detailed explanation of waterfall payments, validation "
        "errors, and warnings about underpayments. Logic: Pay senior first (up to "
        "senior_debt). Then junior (up to junior_debt). Any remainder goes to equity. "
        "Example: cash = '15000000', senior = '8000000', junior = '10000000' → "
        "{senior: 8M, junior: 7M, equity: 0}"
    ),
    "check_housing_grant": (
        "Check housing grant eligibility. Returns structured response with eligibility "
        "result, detailed explanation of threshold calculations and checks, validation "
        "errors, and additional requirements. Logic: Base threshold = 0.60 × AMI. If "
        "household_size > 4, threshold = threshold × 1.10. Must satisfy income ≤ threshold. "
        "Must not have another subsidy. Example A: AMI = '50000', household_size = '5', "
        "income = '32000', has_other_subsidy = 'false' → eligible. Example B: same AMI & "
        "size, income = '34000' → not eligible. Example C: income = '32000' but "
        "has_other_subsidy = 'true' → not eligible"
    ),
}

# Error text prefixes for domain validation failures
CALCULATION_ERRORS = "Calculation errors"
VALIDATION_ERRORS = "Validation errors"


class _FieldError(Exception):
    """A request field failed parsing; carries the caller-facing text."""

    def __init__(self, text: str):
        super().__init__(text)
        self.text = text


def _parse_field(parser: Callable[[str], T], value: str, field_name: str) -> T:
    try:
        return parser(value)
    except InputParseError as e:
        logger.warning(f"Rejected {field_name} ({e.code}): {e.message}")
        raise _FieldError(f"Invalid {field_name} parameter: {e.message}")


def serialize_response(response: BaseModel) -> str:
    """
    Encode a response envelope as pretty-printed JSON.

    Raises:
        SerializationError: If the envelope holds values JSON cannot represent
    """
    try:
        return json.dumps(
            response.model_dump(),
            indent=2,
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        raise SerializationError(str(e)) from e


class ComplianceToolService:
    """
    Entry point for the five tools.

    Holds the immutable engine configuration; safe to share across threads.
    """

    def __init__(self, config: EngineConfig):
        self._params = config.to_dict()

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    def calc_penalty(self, params: CalcPenaltyParams) -> ToolCallResult:
        tool = "calc_penalty"
        with track_request(tool):
            try:
                days_late = _parse_field(parse_number, params.days_late, "days_late")
            except _FieldError as e:
                return self._error(tool, e.text)

            result = get_calculator(tool, self._params).calculate(days_late)
            return self._finish(tool, result, CALCULATION_ERRORS)

    def calc_tax(self, params: CalcTaxParams) -> ToolCallResult:
        tool = "calc_tax"
        with track_request(tool):
            try:
                income = _parse_field(parse_number, params.income, "income")
            except _FieldError as e:
                return self._error(tool, e.text)

            result = get_calculator(tool, self._params).calculate(income)
            return self._finish(tool, result, CALCULATION_ERRORS)

    def check_voting(self, params: CheckVotingParams) -> ToolCallResult:
        tool = "check_voting"
        with track_request(tool):
            try:
                eligible_voters = _parse_field(parse_integer, params.eligible_voters, "eligible_voters")
                turnout = _parse_field(parse_integer, params.turnout, "turnout")
                yes_votes = _parse_field(parse_integer, params.yes_votes, "yes_votes")
            except _FieldError as e:
                return self._error(tool, e.text)

            result = get_calculator(tool, self._params).calculate(
                eligible_voters, turnout, yes_votes, params.proposal_type
            )
            return self._finish(tool, result, VALIDATION_ERRORS)

    def distribute_waterfall(self, params: DistributeWaterfallParams) -> ToolCallResult:
        tool = "distribute_waterfall"
        with track_request(tool):
            try:
                cash_available = _parse_field(parse_number, params.cash_available, "cash_available")
                senior_debt = _parse_field(parse_number, params.senior_debt, "senior_debt")
                junior_debt = _parse_field(parse_number, params.junior_debt, "junior_debt")
            except _FieldError as e:
                return self._error(tool, e.text)

            result = get_calculator(tool, self._params).calculate(
                cash_available, senior_debt, junior_debt
            )
            return self._finish(tool, result, VALIDATION_ERRORS)

    def check_housing_grant(self, params: CheckHousingGrantParams) -> ToolCallResult:
        tool = "check_housing_grant"
        with track_request(tool):
            try:
                ami = _parse_field(parse_number, params.ami, "ami")
                household_size = _parse_field(parse_integer, params.household_size, "household_size")
                income = _parse_field(parse_number, params.income, "income")
                has_other_subsidy = _parse_field(
                    parse_boolean, params.has_other_subsidy, "has_other_subsidy"
                )
            except _FieldError as e:
                return self._error(tool, e.text)

            result = get_calculator(tool, self._params).calculate(
                ami, household_size, income, has_other_subsidy
            )
            return self._finish(tool, result, VALIDATION_ERRORS)

    # ------------------------------------------------------------------
    # Catalogue
    # ------------------------------------------------------------------

    def list_tools(self) -> ToolCatalogResponse:
        return ToolCatalogResponse(
            service=SERVICE_NAME,
            version=SERVICE_VERSION,
            instructions=SERVICE_INSTRUCTIONS,
            tools=[
                ToolInfo(name=name, description=description)
                for name, description in TOOL_DESCRIPTIONS.items()
            ],
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _error(self, tool: str, text: str) -> ToolCallResult:
        record_error(tool)
        return ToolCallResult(is_error=True, text=text)

    def _finish(
        self,
        tool: str,
        result: BaseModel,
        error_prefix: str
    ) -> ToolCallResult:
        errors = result.errors
        if errors:
            logger.info(f"{tool}: {len(errors)} validation error(s)")
            return self._error(tool, f"{error_prefix}: {', '.join(errors)}")

        try:
            body = serialize_response(result)
        except SerializationError as e:
            logger.error(f"{tool}: failed to serialize response: {e}")
            return self._error(tool, f"Error serializing response: {e}")

        return ToolCallResult(is_error=False, text=body)
