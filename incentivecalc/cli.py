"""CLI interface for incentivecalc using Click.

Wraps the core engine for batch recalculation, CI checks, and
interactive terminal use.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
import orjson
from pydantic import ValidationError

from incentivecalc.core import IncentiveEngine
from incentivecalc.export.json_export import result_to_json, results_to_json
from incentivecalc.models import (
    CalculationRequest,
    CalculationResult,
    Policy,
    PublicationType,
)

logger = logging.getLogger(__name__)


def _get_engine(config: str) -> IncentiveEngine:
    """Create an IncentiveEngine from a config path.

    Args:
        config: Path to incentivecalc.yaml.

    Returns:
        Initialized IncentiveEngine instance.
    """
    try:
        return IncentiveEngine(config)
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _load_request(path: str) -> tuple[CalculationRequest, Policy | None]:
    """Read and validate a calculation request JSON file.

    Args:
        path: Path to the request file.

    Returns:
        Validated CalculationRequest and its inline policy, if any.
    """
    try:
        raw = orjson.loads(Path(path).read_bytes())
        request = CalculationRequest.model_validate(raw)
        return request, request.parsed_policy()
    except (orjson.JSONDecodeError, ValidationError) as e:
        click.echo(f"Error: invalid request {path}: {e}", err=True)
        sys.exit(1)


def _echo_result(result: CalculationResult) -> None:
    click.echo(
        f"Pool: {result.pool_amount} ({result.pool_points} points)"
        + (f" from {result.selected_category}" if result.selected_category else "")
    )
    if result.distribution_method:
        click.echo(f"Distribution: {result.distribution_method.value}")
    for share in result.shares.values():
        click.echo(
            f"  {share.name} [{share.category.value}]: "
            f"{share.incentive} / {share.points} pts -- {share.note}"
        )
    click.echo(f"Total: {result.total_incentive} / {result.total_points} pts")


@click.group()
@click.option(
    "-c",
    "--config",
    default="incentivecalc.yaml",
    help="Path to incentivecalc.yaml",
    type=click.Path(),
)
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config: str, verbose: bool) -> None:
    """incentivecalc -- Research contribution incentive calculator."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@main.command()
@click.argument("inputs", nargs=-1, required=True, type=click.Path(exists=True))
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON.")
@click.option(
    "--skip-validation",
    is_flag=True,
    help="Price the roster even if it fails consistency checks.",
)
@click.pass_context
def calculate(
    ctx: click.Context,
    inputs: tuple[str, ...],
    as_json: bool,
    skip_validation: bool,
) -> None:
    """Calculate incentives for one or more request files."""
    engine = _get_engine(ctx.obj["config"])
    results: list[CalculationResult] = []

    for path in inputs:
        request, policy = _load_request(path)
        if policy is None:
            policy = asyncio.run(engine.resolve_policy(request.metadata))
        if not skip_validation:
            problems = engine.validate(request.roster, request.metadata, policy)
            if problems:
                click.echo(f"Error: {path} failed validation:", err=True)
                for p in problems:
                    click.echo(f"  - {p}", err=True)
                sys.exit(1)
        results.append(engine.calculate(request.roster, request.metadata, policy))

    if as_json:
        payload = (
            result_to_json(results[0]) if len(results) == 1
            else results_to_json(results)
        )
        click.echo(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())
        return

    for path, result in zip(inputs, results):
        if len(results) > 1:
            click.echo(f"== {path}")
        _echo_result(result)


@main.command()
@click.argument("input_file", type=click.Path(exists=True))
@click.pass_context
def validate(ctx: click.Context, input_file: str) -> None:
    """Check a request file's roster for consistency."""
    engine = _get_engine(ctx.obj["config"])
    request, policy = _load_request(input_file)
    problems = engine.validate(request.roster, request.metadata, policy)
    if not problems:
        click.echo("Roster is consistent.")
        return
    for p in problems:
        click.echo(f"  - {p}")
    sys.exit(1)


@main.command()
@click.option(
    "--type",
    "publication_type",
    default=None,
    type=click.Choice([t.value for t in PublicationType]),
    help="Filter by publication type.",
)
@click.pass_context
def policies(ctx: click.Context, publication_type: str | None) -> None:
    """List configured policies."""
    engine = _get_engine(ctx.obj["config"])
    found = engine.list_policies(
        PublicationType(publication_type) if publication_type else None
    )
    if not found:
        click.echo("No policies configured.")
        return
    for p in found:
        until = p.effective_to.isoformat() if p.effective_to else "open"
        status = "" if p.is_active else " (inactive)"
        name = p.policy_name or type(p).__name__
        click.echo(f"  {name}: {p.effective_from.isoformat()} -> {until}{status}")


@main.command("mcp")
@click.pass_context
def mcp_serve(ctx: click.Context) -> None:
    """Start the MCP server (stdio transport)."""
    from incentivecalc.mcp_server import create_mcp_server

    config_path = ctx.obj["config"]
    server = create_mcp_server(config_path)
    server.run()


@main.command()
@click.option("--host", default="127.0.0.1", help="Bind address.")
@click.option("--port", default=8000, type=int, help="Port number.")
@click.option("--reload", "auto_reload", is_flag=True, help="Auto-reload on changes.")
@click.pass_context
def serve(
    ctx: click.Context,
    host: str,
    port: int,
    auto_reload: bool,
) -> None:
    """Start the REST API server (requires incentivecalc[api])."""
    try:
        import uvicorn  # noqa: F811
    except ImportError:
        click.echo(
            "REST API dependencies not installed. Run: pip install incentivecalc[api]",
            err=True,
        )
        sys.exit(1)

    from incentivecalc.api.app import create_app

    config_path = ctx.obj["config"]
    app = create_app(config_path)
    uvicorn.run(app, host=host, port=port, reload=auto_reload)
