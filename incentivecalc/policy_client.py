"""HTTP client for the portal's policy endpoints.

Fetches the policy that applies to a publication from the research
portal's REST API. Responses are wrapped as ``{"success": bool, "data":
{...}}``. Research policies arrive in the portal's nested layout and are
flattened by ``research_record``. Any transport, decoding or validation
failure is logged and reported as "no policy", which the calculator
prices at zero.
"""

import logging
from datetime import date
from typing import Any

import httpx
from pydantic import ValidationError
from pydantic.alias_generators import to_snake

from incentivecalc.models import (
    AuthorRole,
    ConferenceSubType,
    Policy,
    PublicationMetadata,
    PublicationType,
    parse_policy,
)

logger = logging.getLogger(__name__)


def _snake_keys(value: Any) -> Any:
    """Recursively convert camelCase dict keys to snake_case."""
    if isinstance(value, dict):
        return {to_snake(str(k)): _snake_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_snake_keys(v) for v in value]
    return value


_RESEARCH_TABLES = (
    "quartile_incentives",
    "sjr_ranges",
    "indexing_category_bonuses",
    "role_percentages",
)


def research_record(data: dict[str, Any]) -> dict[str, Any]:
    """Flatten a portal research policy into ResearchPaperPolicy fields.

    The portal keeps the lookup tables under ``indexing_bonuses`` (NAAS
    ratings one level deeper, under ``nested_category_incentives``) and
    stores the role split in the ``first_author_percentage`` and
    ``corresponding_author_percentage`` columns. The columns win over a
    ``role_percentages`` table when both are set. Top-level tables are
    left as they are.

    Args:
        data: Policy record with snake_case keys.

    Returns:
        A new record shaped like ResearchPaperPolicy.
    """
    record = dict(data)
    bonuses = record.pop("indexing_bonuses", None) or {}
    if isinstance(bonuses, dict):
        for key in _RESEARCH_TABLES:
            if key in bonuses:
                record.setdefault(key, bonuses[key])
        nested = bonuses.get("nested_category_incentives")
        if isinstance(nested, dict) and "naas_rating_incentives" in nested:
            record.setdefault(
                "naas_rating_incentives", nested["naas_rating_incentives"]
            )

    first = record.pop("first_author_percentage", None)
    corresponding = record.pop("corresponding_author_percentage", None)
    if first and corresponding:
        record["role_percentages"] = [
            {"role": AuthorRole.FIRST, "percentage": first},
            {"role": AuthorRole.CORRESPONDING, "percentage": corresponding},
        ]
    return record


def policy_endpoint(
    publication_type: PublicationType,
    sub_type: ConferenceSubType | None = None,
) -> str | None:
    """Return the API path for a publication type's active policy.

    Args:
        publication_type: Publication type.
        sub_type: Conference sub-type (conferences only).

    Returns:
        Relative URL path, or None when a conference has no sub-type.
    """
    if publication_type == PublicationType.RESEARCH_PAPER:
        return "/research-policies/applicable"
    if publication_type == PublicationType.CONFERENCE_PAPER:
        if sub_type is None:
            return None
        return f"/conference-policies/active/{sub_type.value}"
    if publication_type == PublicationType.BOOK:
        return "/book-policies/active/book"
    return "/book-chapter-policies/active"


class PolicyClient:
    """Async client for looking up active incentive policies."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._transport = transport

    async def fetch_policy(self, metadata: PublicationMetadata) -> Policy | None:
        """Fetch the policy applicable to a publication.

        Args:
            metadata: Publication metadata; type, date and conference
                sub-type drive the lookup.

        Returns:
            Parsed policy, or None if not found or on any error.
        """
        path = policy_endpoint(
            metadata.publication_type, metadata.conference_sub_type
        )
        if path is None:
            return None

        params: dict[str, str] = {}
        if metadata.publication_type == PublicationType.RESEARCH_PAPER:
            params["publicationType"] = metadata.publication_type.value
            on = metadata.publication_date or date.today()
            params["publicationDate"] = on.isoformat()

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(path, params=params)
                if response.status_code == 404:
                    logger.info("No active policy at %s", path)
                    return None
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError:
            logger.exception("Failed to fetch policy from %s", path)
            return None
        except ValueError:
            logger.warning("Non-JSON response from %s", path)
            return None

        if not isinstance(body, dict):
            logger.warning("Unexpected %s body from %s", type(body).__name__, path)
            return None
        data = body.get("data")
        if not body.get("success") or not isinstance(data, dict) or not data:
            logger.info("Policy lookup at %s returned no data", path)
            return None

        record = _snake_keys(data)
        if metadata.publication_type == PublicationType.RESEARCH_PAPER:
            record = research_record(record)
        try:
            return parse_policy(metadata.publication_type, record)
        except ValidationError:
            logger.exception("Malformed policy returned by %s", path)
            return None
