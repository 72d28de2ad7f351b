"""Router for policy lookup endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from incentivecalc.api.deps import get_engine
from incentivecalc.core import IncentiveEngine
from incentivecalc.models import (
    ConferenceSubType,
    PublicationMetadata,
    PublicationType,
)

router = APIRouter(prefix="/policies", tags=["policies"])


@router.get("")
def list_policies(
    publication_type: PublicationType | None = Query(
        None, description="Filter by publication type"
    ),
    engine: IncentiveEngine = Depends(get_engine),
) -> list[dict[str, Any]]:
    """List configured policies, newest first.

    Args:
        publication_type: Publication type to filter by.
        engine: Injected IncentiveEngine.

    Returns:
        Policy records.
    """
    return [
        p.model_dump(mode="json") for p in engine.list_policies(publication_type)
    ]


@router.get("/{publication_type}/active")
def get_active_policy(
    publication_type: PublicationType,
    on: date | None = Query(None, description="Publication date (YYYY-MM-DD)"),
    sub_type: ConferenceSubType | None = Query(
        None, description="Conference sub-type"
    ),
    engine: IncentiveEngine = Depends(get_engine),
) -> dict[str, Any]:
    """Get the policy applicable to a publication type on a date.

    Args:
        publication_type: Publication type.
        on: Date to check; today when omitted.
        sub_type: Conference sub-type (conference papers only).
        engine: Injected IncentiveEngine.

    Returns:
        The applicable policy record.

    Raises:
        HTTPException: 404 if no active policy covers the date.
    """
    metadata = PublicationMetadata(
        publication_type=publication_type,
        publication_date=on,
        conference_sub_type=sub_type,
    )
    policy = engine.find_policy(metadata)
    if policy is None:
        raise HTTPException(
            status_code=404,
            detail=f"No active {publication_type.value} policy found",
        )
    return policy.model_dump(mode="json")
