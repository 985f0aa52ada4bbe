"""
Tests for the tool service: parsing, error signalling, serialization
and metrics for each tool.
"""

import json

import pytest
from prometheus_client import REGISTRY

from config import EngineConfig
from models.calculation import (
    CalcPenaltyParams,
    CalcTaxParams,
    CheckHousingGrantParams,
    CheckVotingParams,
    DistributeWaterfallParams,
)
from services.tool_service import ComplianceToolService, TOOL_DESCRIPTIONS


def _sample(name: str, tool: str) -> float:
    return REGISTRY.get_sample_value(name, {"tool": tool}) or 0.0


def _body(result) -> dict:
    assert result.is_error is False, result.text
    return json.loads(result.text)


# calc_penalty

def test_calc_penalty(service):
    result = service.calc_penalty(CalcPenaltyParams(days_late="12"))
    response = _body(result)

    # min(12 * 100, 1000) = 1000, then 1000 + 1000 * 0.05 = 1050
    assert response["penalty"] == 1050.0
    assert response["errors"] == []
    assert "Applied cap" in response["explanation"]
    assert "Interest" in response["explanation"]


def test_calc_penalty_body_is_pretty_json(service):
    result = service.calc_penalty(CalcPenaltyParams(days_late=12))

    assert result.text.startswith('{\n  "penalty": 1050.0,\n  "explanation": ')
    # Non-ASCII characters are kept as-is
    assert "×" in result.text


def test_calc_penalty_whitespace_and_decimal(service):
    response = _body(service.calc_penalty(CalcPenaltyParams(days_late="  12.5  ")))
    assert response["penalty"] > 0


def test_calc_penalty_ten_days(service):
    response = _body(service.calc_penalty(CalcPenaltyParams(days_late="10")))
    assert response["penalty"] == pytest.approx(1050.0)


def test_calc_penalty_unparseable(service):
    result = service.calc_penalty(CalcPenaltyParams(days_late="abc"))

    assert result.is_error is True
    assert result.text == "Invalid days_late parameter: Cannot parse 'abc' as a number"


def test_calc_penalty_empty(service):
    result = service.calc_penalty(CalcPenaltyParams(days_late=""))

    assert result.is_error is True
    assert result.text == "Invalid days_late parameter: Empty string cannot be parsed as number"


def test_calc_penalty_non_finite(service):
    result = service.calc_penalty(CalcPenaltyParams(days_late="inf"))
    assert result.text == "Invalid days_late parameter: Invalid number: 'inf'"


def test_calc_penalty_negative(service):
    result = service.calc_penalty(CalcPenaltyParams(days_late="-5"))

    assert result.is_error is True
    assert result.text == "Calculation errors: Days late cannot be negative"


def test_calc_penalty_high_interest_from_config():
    service = ComplianceToolService(EngineConfig(default_interest_rate=0.15))
    response = _body(service.calc_penalty(CalcPenaltyParams(days_late="1")))

    assert "High interest rate: 15.0%" in response["warnings"]


def test_calc_penalty_serialization_error():
    # 0 days × inf rate has no numeric value, which JSON cannot carry
    service = ComplianceToolService(EngineConfig(default_rate_per_day=float("inf")))
    result = service.calc_penalty(CalcPenaltyParams(days_late="0"))

    assert result.is_error is True
    assert result.text.startswith("Error serializing response: ")


# calc_tax

def test_calc_tax(service):
    response = _body(service.calc_tax(CalcTaxParams(income="40000")))

    # 10000 * 0.10 + 30000 * 0.20 = 7000; 7000 > 5000 so 7000 + 7000 * 0.02 = 7140
    assert response["tax"] == 7140.0
    assert response["errors"] == []
    assert "Bracket 1" in response["explanation"]
    assert "Surcharge applied" in response["explanation"]


def test_calc_tax_formatted_income(service):
    response = _body(service.calc_tax(CalcTaxParams(income="40,000.00")))
    assert response["tax"] == 7140.0


def test_calc_tax_fifty_thousand(service):
    response = _body(service.calc_tax(CalcTaxParams(income=50000)))
    assert response["tax"] == pytest.approx(9180.0)


def test_calc_tax_negative(service):
    result = service.calc_tax(CalcTaxParams(income="-100"))
    assert result.text == "Calculation errors: Income cannot be negative"


def test_calc_tax_invalid_bracket_configuration():
    service = ComplianceToolService(EngineConfig(default_rates=(0.10,)))
    result = service.calc_tax(CalcTaxParams(income="40000"))

    assert result.is_error is True
    assert result.text == (
        "Calculation errors: Invalid bracket configuration: "
        "1 rates for 1 thresholds (should be 2 rates)"
    )


# check_voting

def test_check_voting_amendment_passes(service):
    result = service.check_voting(CheckVotingParams(
        eligible_voters="100", turnout="70", yes_votes="55", proposal_type="amendment"
    ))
    response = _body(result)

    assert response["passes"] is True
    assert response["errors"] == []
    assert "78.6%" in response["explanation"]


def test_check_voting_general_fails_at_half(service):
    response = _body(service.check_voting(CheckVotingParams(
        eligible_voters=100, turnout=80, yes_votes=40, proposal_type="general"
    )))
    assert response["passes"] is False


def test_check_voting_insufficient_turnout(service):
    response = _body(service.check_voting(CheckVotingParams(
        eligible_voters="100", turnout="50", yes_votes="50", proposal_type="general"
    )))

    assert response["passes"] is False
    assert "insufficient turnout" in response["explanation"]


def test_check_voting_integer_with_separator(service):
    response = _body(service.check_voting(CheckVotingParams(
        eligible_voters="1,000", turnout="700", yes_votes="550", proposal_type="general"
    )))
    assert response["passes"] is True


def test_check_voting_fractional_string(service):
    result = service.check_voting(CheckVotingParams(
        eligible_voters="100", turnout="70.5", yes_votes="55", proposal_type="general"
    ))
    assert result.text == "Invalid turnout parameter: Cannot parse '70.5' as an integer"


def test_check_voting_first_failing_field_reported(service):
    result = service.check_voting(CheckVotingParams(
        eligible_voters="x", turnout="y", yes_votes="z", proposal_type="general"
    ))
    assert result.text.startswith("Invalid eligible_voters parameter:")


def test_check_voting_invalid_proposal_type(service):
    result = service.check_voting(CheckVotingParams(
        eligible_voters="100", turnout="70", yes_votes="55", proposal_type="<b>ballot</b>"
    ))

    assert result.is_error is True
    assert result.text == (
        "Validation errors: Invalid proposal type '?b?ballot?/b?' "
        "(must be 'general' or 'amendment')"
    )


def test_check_voting_errors_joined(service):
    result = service.check_voting(CheckVotingParams(
        eligible_voters="0", turnout="10", yes_votes="20", proposal_type="general"
    ))
    assert result.text == (
        "Validation errors: Eligible voters must be positive, "
        "Turnout cannot exceed eligible voters, Yes votes cannot exceed turnout"
    )


# distribute_waterfall

def test_distribute_waterfall(service):
    response = _body(service.distribute_waterfall(DistributeWaterfallParams(
        cash_available="15000000", senior_debt="8000000", junior_debt="10000000"
    )))

    assert response["distribution"] == {"senior": 8000000.0, "junior": 7000000.0, "equity": 0.0}
    assert response["errors"] == []
    assert "Junior debt underpaid by 3000000.00" in response["warnings"]


def test_distribute_waterfall_currency_strings(service):
    response = _body(service.distribute_waterfall(DistributeWaterfallParams(
        cash_available="$15,000,000", senior_debt="$8000000", junior_debt="$10,000,000.00"
    )))
    assert response["distribution"] == {"senior": 8000000.0, "junior": 7000000.0, "equity": 0.0}


def test_distribute_waterfall_native_floats(service):
    response = _body(service.distribute_waterfall(DistributeWaterfallParams(
        cash_available=15000000.0, senior_debt=8000000.0, junior_debt=10000000.0
    )))
    assert response["distribution"]["junior"] == 7000000.0


def test_distribute_waterfall_negative(service):
    result = service.distribute_waterfall(DistributeWaterfallParams(
        cash_available="-1", senior_debt="0", junior_debt="0"
    ))
    assert result.text == "Validation errors: Cash available cannot be negative"


def test_distribute_waterfall_security_violation(service):
    result = service.distribute_waterfall(DistributeWaterfallParams(
        cash_available="1" * 101, senior_debt="0", junior_debt="0"
    ))
    assert result.text == (
        "Invalid cash_available parameter: Invalid number: input too long (max 100 characters)"
    )


# check_housing_grant

@pytest.mark.parametrize("income, subsidy, eligible", [
    ("32000", "false", True),
    ("34000", "false", False),
    ("32000", "true", False),
])
def test_check_housing_grant_examples(service, income, subsidy, eligible):
    response = _body(service.check_housing_grant(CheckHousingGrantParams(
        ami="50000", household_size="5", income=income, has_other_subsidy=subsidy
    )))
    assert response["eligible"] is eligible
    assert response["errors"] == []


def test_check_housing_grant_native_types(service):
    response = _body(service.check_housing_grant(CheckHousingGrantParams(
        ami=65000, household_size=7, income=40000, has_other_subsidy=True
    )))

    assert response["eligible"] is False
    assert response["additional_requirements"] == [
        "Must not have any other housing subsidies or assistance"
    ]
    assert "warnings" not in response


@pytest.mark.parametrize("subsidy", ["yes", "NO", "1", "0", "on", "off", "T", "f"])
def test_check_housing_grant_boolean_synonyms(service, subsidy):
    result = service.check_housing_grant(CheckHousingGrantParams(
        ami="50000", household_size="3", income="10000", has_other_subsidy=subsidy
    ))
    assert result.is_error is False


def test_check_housing_grant_invalid_boolean(service):
    result = service.check_housing_grant(CheckHousingGrantParams(
        ami="50000", household_size="3", income="10000", has_other_subsidy="maybe"
    ))
    assert result.text == (
        "Invalid has_other_subsidy parameter: Cannot parse 'maybe' as a boolean "
        "(expected: true/false, yes/no, 1/0, etc.)"
    )


def test_check_housing_grant_null_byte(service):
    result = service.check_housing_grant(CheckHousingGrantParams(
        ami="50\x00000", household_size="3", income="10000", has_other_subsidy="no"
    ))
    assert result.text == "Invalid ami parameter: Invalid number: input contains null bytes"


def test_check_housing_grant_control_characters(service):
    result = service.check_housing_grant(CheckHousingGrantParams(
        ami="50000", household_size="3\x01\x02\x03\x04\x05", income="10000", has_other_subsidy="no"
    ))
    assert result.text == (
        "Invalid household_size parameter: Invalid integer: input contains too many control characters"
    )


def test_check_housing_grant_validation_errors(service):
    result = service.check_housing_grant(CheckHousingGrantParams(
        ami="0", household_size="0", income="-1", has_other_subsidy="no"
    ))
    assert result.text == (
        "Validation errors: Area Median Income (AMI) must be positive, "
        "Household size must be positive, Income cannot be negative"
    )


# Metrics

def test_requests_counted(service):
    before = _sample("compliance_tool_requests_total", "calc_tax")
    service.calc_tax(CalcTaxParams(income="40000"))
    service.calc_tax(CalcTaxParams(income="abc"))
    after = _sample("compliance_tool_requests_total", "calc_tax")

    assert after - before == 2


def test_errors_counted_only_for_failures(service):
    before = _sample("compliance_tool_errors_total", "check_voting")
    service.check_voting(CheckVotingParams(
        eligible_voters="100", turnout="70", yes_votes="55", proposal_type="amendment"
    ))
    service.check_voting(CheckVotingParams(
        eligible_voters="100", turnout="70", yes_votes="55", proposal_type="other"
    ))
    after = _sample("compliance_tool_errors_total", "check_voting")

    assert after - before == 1


def test_duration_observed(service):
    before = _sample("compliance_tool_request_duration_seconds_count", "distribute_waterfall")
    service.distribute_waterfall(DistributeWaterfallParams(
        cash_available="1", senior_debt="1", junior_debt="1"
    ))
    after = _sample("compliance_tool_request_duration_seconds_count", "distribute_waterfall")

    assert after - before == 1


# Catalogue

def test_list_tools(service):
    catalog = service.list_tools()

    assert [tool.name for tool in catalog.tools] == list(TOOL_DESCRIPTIONS)
    assert len(catalog.tools) == 5
    assert "calc_penalty" in catalog.instructions
    assert all(tool.description for tool in catalog.tools)


# Repeatability

@pytest.mark.parametrize("tool, params", [
    ("calc_penalty", CalcPenaltyParams(days_late="12.5")),
    ("calc_tax", CalcTaxParams(income="40,000.00")),
    ("check_voting", CheckVotingParams(
        eligible_voters="100", turnout="65", yes_votes="50", proposal_type="general"
    )),
    ("distribute_waterfall", DistributeWaterfallParams(
        cash_available="$15,000,000", senior_debt="8000000", junior_debt="10000000"
    )),
    ("check_housing_grant", CheckHousingGrantParams(
        ami="50000", household_size="5", income="32000", has_other_subsidy="no"
    )),
    ("check_voting", CheckVotingParams(
        eligible_voters="0", turnout="10", yes_votes="20", proposal_type="<x>"
    )),
])
def test_same_inputs_give_identical_results(service, tool, params):
    first = getattr(service, tool)(params)
    second = getattr(service, tool)(params)
    fresh = getattr(ComplianceToolService(EngineConfig()), tool)(params)

    assert first == second == fresh
    assert first.text == second.text == fresh.text
