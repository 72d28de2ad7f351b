"""FastAPI application factory for incentivecalc."""

from __future__ import annotations

from fastapi import FastAPI

from incentivecalc.api.routers import calculate, policies


def create_app(config_path: str = "incentivecalc.yaml") -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config_path: Path to incentivecalc.yaml config file.

    Returns:
        Configured FastAPI instance with all routers mounted.
    """
    from incentivecalc.api.deps import set_config_path

    set_config_path(config_path)

    application = FastAPI(
        title="incentivecalc API",
        description="REST API for research contribution incentives",
        version="0.1.0",
    )

    application.include_router(calculate.router)
    application.include_router(policies.router)

    return application
