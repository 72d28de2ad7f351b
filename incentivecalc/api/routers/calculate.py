"""Router for incentive calculation endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from incentivecalc.api.deps import get_engine
from incentivecalc.core import IncentiveEngine
from incentivecalc.export.json_export import result_to_json
from incentivecalc.models import CalculationRequest, Policy

router = APIRouter(tags=["calculate"])


def _inline_policy(request: CalculationRequest) -> Policy | None:
    try:
        return request.parsed_policy()
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail={"policy": e.errors(include_url=False, include_context=False)},
        ) from e


@router.post("/calculate")
async def calculate_incentives(
    request: CalculationRequest,
    engine: IncentiveEngine = Depends(get_engine),
) -> dict[str, Any]:
    """Calculate per-author incentives and points.

    Args:
        request: Roster, publication metadata and optional inline policy.
        engine: Injected IncentiveEngine.

    Returns:
        Calculation result with per-author shares and totals.

    Raises:
        HTTPException: 422 if the policy is malformed or the roster
            fails consistency checks.
    """
    policy = _inline_policy(request)
    if policy is None:
        policy = await engine.resolve_policy(request.metadata)

    problems = engine.validate(request.roster, request.metadata, policy)
    if problems:
        raise HTTPException(status_code=422, detail={"problems": problems})

    result = engine.calculate(request.roster, request.metadata, policy)
    return result_to_json(result)


@router.post("/validate")
def validate_roster(
    request: CalculationRequest,
    engine: IncentiveEngine = Depends(get_engine),
) -> dict[str, Any]:
    """Check a roster without calculating.

    Args:
        request: Roster, publication metadata and optional inline policy.
        engine: Injected IncentiveEngine.

    Returns:
        ``valid`` flag and the list of problems found.
    """
    policy = _inline_policy(request)
    problems = engine.validate(request.roster, request.metadata, policy)
    return {"valid": not problems, "problems": problems}
