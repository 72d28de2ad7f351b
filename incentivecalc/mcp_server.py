"""MCP server for incentivecalc using FastMCP.

Exposes incentive calculation and policy lookup to MCP-compatible
clients.
"""

import logging
from pathlib import Path

import orjson
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import ValidationError

from incentivecalc.core import IncentiveEngine
from incentivecalc.export.json_export import result_to_json
from incentivecalc.models import CalculationRequest, PublicationType

logger = logging.getLogger(__name__)

_READ_ONLY = ToolAnnotations(
    readOnlyHint=True,
    destructiveHint=False,
    idempotentHint=True,
    openWorldHint=False,
)


def create_mcp_server(config_path: str | Path = "incentivecalc.yaml") -> FastMCP:
    """Create and configure the incentivecalc MCP server.

    Args:
        config_path: Path to incentivecalc.yaml configuration file.

    Returns:
        Configured FastMCP server instance.
    """
    mcp = FastMCP("incentivecalc")
    engine = IncentiveEngine(config_path)

    @mcp.tool(name="incentivecalc_calculate", annotations=_READ_ONLY)
    async def calculate_incentives(request_json: str) -> str:
        """Calculate per-author incentives for a publication.

        Args:
            request_json: JSON object with ``roster``, ``metadata`` and
                an optional inline ``policy``.
        """
        try:
            request = CalculationRequest.model_validate_json(request_json)
            policy = request.parsed_policy()
        except ValidationError as e:
            return f"Invalid request: {e}"

        if policy is None:
            policy = await engine.resolve_policy(request.metadata)
        problems = engine.validate(request.roster, request.metadata, policy)
        if problems:
            return "Roster failed validation:\n" + "\n".join(
                f"- {p}" for p in problems
            )
        result = engine.calculate(request.roster, request.metadata, policy)
        return orjson.dumps(
            result_to_json(result), option=orjson.OPT_INDENT_2
        ).decode()

    @mcp.tool(name="incentivecalc_list_policies", annotations=_READ_ONLY)
    async def list_policies(publication_type: str | None = None) -> str:
        """List configured incentive policies.

        Args:
            publication_type: One of research_paper, conference_paper,
                book, book_chapter. Omit for all.
        """
        try:
            pub_type = PublicationType(publication_type) if publication_type else None
        except ValueError:
            return f"Unknown publication type: {publication_type}"
        found = engine.list_policies(pub_type)
        if not found:
            return "No policies configured."
        return orjson.dumps(
            [p.model_dump(mode="json") for p in found],
            option=orjson.OPT_INDENT_2,
        ).decode()

    return mcp
