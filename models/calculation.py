"""
Pydantic models for the calculation tools.

Request models accept each field in any supported representation (native
JSON number/boolean or string) and normalize it to canonical text at the
boundary. Parsing that text into typed values happens in the tool service,
so the calculators only ever see validated numbers and booleans.

Response models are the envelopes returned to callers: a result field,
an explanation of each calculation step, and lists of errors and warnings.
"""

from pydantic import BaseModel, Field, ConfigDict, BeforeValidator
from typing import Annotated, List

from services.input_normalizer import (
    normalize_number_field,
    normalize_integer_field,
    normalize_boolean_field,
)

# Field types: accepted representations -> canonical text
NumberLike = Annotated[str, BeforeValidator(normalize_number_field)]
IntegerLike = Annotated[str, BeforeValidator(normalize_integer_field)]
BooleanLike = Annotated[str, BeforeValidator(normalize_boolean_field)]


# =============================================================================
# REQUEST MODELS
# =============================================================================

class CalcPenaltyParams(BaseModel):
    """Parameters for calc_penalty."""

    days_late: NumberLike = Field(..., description="Number of days late")

    model_config = ConfigDict(json_schema_extra={"example": {"days_late": "12"}})


class CalcTaxParams(BaseModel):
    """Parameters for calc_tax."""

    income: NumberLike = Field(..., description="Total income")

    model_config = ConfigDict(json_schema_extra={"example": {"income": "40000"}})


class CheckVotingParams(BaseModel):
    """Parameters for check_voting."""

    eligible_voters: IntegerLike = Field(..., description="Total number of eligible voters")
    turnout: IntegerLike = Field(..., description="Actual turnout (number of people who voted)")
    yes_votes: IntegerLike = Field(..., description="Number of yes votes")
    proposal_type: str = Field(..., description="Type of proposal: 'general' or 'amendment'")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "eligible_voters": "100",
                "turnout": "70",
                "yes_votes": "55",
                "proposal_type": "amendment",
            }
        }
    )


class DistributeWaterfallParams(BaseModel):
    """Parameters for distribute_waterfall."""

    cash_available: NumberLike = Field(..., description="Total cash available for distribution")
    senior_debt: NumberLike = Field(..., description="Senior debt amount")
    junior_debt: NumberLike = Field(..., description="Junior debt amount")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "cash_available": "15000000",
                "senior_debt": "8000000",
                "junior_debt": "10000000",
            }
        }
    )


class CheckHousingGrantParams(BaseModel):
    """Parameters for check_housing_grant."""

    ami: NumberLike = Field(..., description="Area Median Income (AMI)")
    household_size: IntegerLike = Field(..., description="Household size")
    income: NumberLike = Field(..., description="Household income")
    has_other_subsidy: BooleanLike = Field(
        ...,
        description="Whether the household has another subsidy (true/false, yes/no, 1/0)"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "ami": 50000,
                "household_size": 5,
                "income": 32000,
                "has_other_subsidy": False,
            }
        }
    )


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class CalcPenaltyResponse(BaseModel):
    """Result of a penalty calculation."""

    penalty: float = Field(..., description="Calculated penalty amount")
    explanation: str = Field(..., description="Explanation of calculation steps")
    errors: List[str] = Field(default_factory=list, description="Any errors in input validation")
    warnings: List[str] = Field(default_factory=list, description="Warnings or additional information")


class CalcTaxResponse(BaseModel):
    """Result of a progressive tax calculation."""

    tax: float = Field(..., description="Calculated tax amount")
    explanation: str = Field(..., description="Explanation of calculation steps")
    errors: List[str] = Field(default_factory=list, description="Any errors in input validation")
    warnings: List[str] = Field(default_factory=list, description="Warnings or additional information")


class CheckVotingResponse(BaseModel):
    """Result of a voting check."""

    passes: bool = Field(..., description="Whether the proposal passes")
    explanation: str = Field(..., description="Explanation of voting calculation")
    errors: List[str] = Field(default_factory=list, description="Any errors in input validation")
    warnings: List[str] = Field(default_factory=list, description="Warnings or additional information")


class WaterfallDistribution(BaseModel):
    """Amounts allocated at each level of the waterfall."""

    senior: float = Field(..., description="Amount allocated to senior debt")
    junior: float = Field(..., description="Amount allocated to junior debt")
    equity: float = Field(..., description="Amount allocated to equity")


class DistributeWaterfallResponse(BaseModel):
    """Result of a waterfall distribution."""

    distribution: WaterfallDistribution = Field(..., description="Distribution results")
    explanation: str = Field(..., description="Explanation of waterfall distribution")
    errors: List[str] = Field(default_factory=list, description="Any errors in input validation")
    warnings: List[str] = Field(default_factory=list, description="Warnings or additional information")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "distribution": {"senior": 8000000.0, "junior": 7000000.0, "equity": 0.0},
                "explanation": "Starting cash: 15000000.00. Senior debt: 8000000.00 fully paid. ...",
                "errors": [],
                "warnings": ["Junior debt underpaid by 3000000.00"],
            }
        }
    )


class CheckHousingGrantResponse(BaseModel):
    """Result of a housing grant eligibility check."""

    eligible: bool = Field(..., description="Whether eligible for housing grant")
    explanation: str = Field(..., description="Explanation of eligibility calculation")
    errors: List[str] = Field(default_factory=list, description="Any errors in input validation")
    additional_requirements: List[str] = Field(
        default_factory=list, description="Additional requirements or warnings"
    )


class ToolCallResult(BaseModel):
    """
    Transport-neutral outcome of one tool invocation.

    On success `text` holds the pretty-printed JSON envelope; on failure it
    holds the error message, prefixed by its category.
    """

    is_error: bool = Field(..., description="Whether the invocation failed")
    text: str = Field(..., description="JSON response body or error message")


class ToolInfo(BaseModel):
    """Catalogue entry for one tool."""

    name: str
    description: str


class ToolCatalogResponse(BaseModel):
    """Service metadata and the list of available tools."""

    service: str
    version: str
    instructions: str
    tools: List[ToolInfo] = Field(default_factory=list)
