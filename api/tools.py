"""
API endpoints for the compliance tools.

Each tool is exposed as POST /api/tools/<tool>. A successful invocation
returns the pretty-printed JSON envelope as produced by the tool service;
a failed one returns 400 with the error text as `detail`.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from config import EngineConfig, get_engine_config
from middleware.rate_limiter import limit_calculation, limit_health
from models.calculation import (
    CalcPenaltyParams,
    CalcTaxParams,
    CheckVotingParams,
    DistributeWaterfallParams,
    CheckHousingGrantParams,
    CalcPenaltyResponse,
    CalcTaxResponse,
    CheckVotingResponse,
    DistributeWaterfallResponse,
    CheckHousingGrantResponse,
    ToolCallResult,
    ToolCatalogResponse,
)
from services.tool_service import ComplianceToolService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tools", tags=["Compliance Tools"])


def get_tool_service(config: EngineConfig = Depends(get_engine_config)) -> ComplianceToolService:
    return ComplianceToolService(config)


def _to_response(result: ToolCallResult) -> Response:
    if result.is_error:
        raise HTTPException(status_code=400, detail=result.text)
    return Response(content=result.text, media_type="application/json")


def _run(tool: str, invoke) -> Response:
    try:
        return _to_response(invoke())
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"{tool} failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"{tool} failed: {str(e)}"
        )


# Endpoints

@router.get("", response_model=ToolCatalogResponse)
@limit_health
async def list_tools(
    request: Request,
    service: ComplianceToolService = Depends(get_tool_service),
) -> ToolCatalogResponse:
    """List the available tools with their descriptions."""
    return service.list_tools()


@router.post("/calc_penalty", response_model=CalcPenaltyResponse)
@limit_calculation
async def calc_penalty(
    request: Request,
    params: CalcPenaltyParams,
    service: ComplianceToolService = Depends(get_tool_service),
):
    """
    Calculate a late-payment penalty with cap and interest.

    **Example Request:**
    ```json
    {"days_late": "12"}
    ```

    **Example Response:**
    ```json
    {
      "penalty": 1050.0,
      "explanation": "Base penalty: 12 days × 100 = 1200.00. Applied cap: ...",
      "errors": [],
      "warnings": ["Base penalty 1200.00 exceeded cap of 1000.00"]
    }
    ```
    """
    return _run("calc_penalty", lambda: service.calc_penalty(params))


@router.post("/calc_tax", response_model=CalcTaxResponse)
@limit_calculation
async def calc_tax(
    request: Request,
    params: CalcTaxParams,
    service: ComplianceToolService = Depends(get_tool_service),
):
    """Calculate progressive income tax with surcharge."""
    return _run("calc_tax", lambda: service.calc_tax(params))


@router.post("/check_voting", response_model=CheckVotingResponse)
@limit_calculation
async def check_voting(
    request: Request,
    params: CheckVotingParams,
    service: ComplianceToolService = Depends(get_tool_service),
):
    """
    Check whether a proposal passes.

    Turnout must reach 60% of eligible voters; a general proposal then
    needs more than 50% yes votes, an amendment at least two thirds.
    """
    return _run("check_voting", lambda: service.check_voting(params))


@router.post("/distribute_waterfall", response_model=DistributeWaterfallResponse)
@limit_calculation
async def distribute_waterfall(
    request: Request,
    params: DistributeWaterfallParams,
    service: ComplianceToolService = Depends(get_tool_service),
):
    """Distribute cash to senior debt, junior debt and equity, in that order."""
    return _run("distribute_waterfall", lambda: service.distribute_waterfall(params))


@router.post("/check_housing_grant", response_model=CheckHousingGrantResponse)
@limit_calculation
async def check_housing_grant(
    request: Request,
    params: CheckHousingGrantParams,
    service: ComplianceToolService = Depends(get_tool_service),
):
    """Check housing grant eligibility against Area Median Income."""
    return _run("check_housing_grant", lambda: service.check_housing_grant(params))
