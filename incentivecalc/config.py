"""Configuration loading and validation for incentivecalc.

Reads a YAML config file and produces a validated IncentiveConfig object.
"""

import logging
from datetime import date
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from incentivecalc.models import MAX_ELIGIBLE_POSITION
from incentivecalc.pools import DEFAULT_CUTOVER_DATE

logger = logging.getLogger(__name__)


class PolicyApiConfig(BaseModel):
    """Portal REST API used to look up active policies."""

    base_url: str
    token: str | None = None
    timeout: float = 10.0


class IncentiveConfig(BaseModel):
    """Top-level incentivecalc configuration."""

    institution: str = ""
    cutover_date: date = DEFAULT_CUTOVER_DATE
    max_eligible_position: int = Field(default=MAX_ELIGIBLE_POSITION, ge=1)
    policies_path: str | None = None
    policy_api: PolicyApiConfig | None = None

    @property
    def resolved_policies_path(self) -> Path | None:
        """Return the policy file path with ~ expanded."""
        if self.policies_path is None:
            return None
        return Path(self.policies_path).expanduser()


def load_config(config_path: str | Path) -> IncentiveConfig:
    """Load and validate an incentivecalc YAML configuration file.

    Args:
        config_path: Path to the YAML config file.

    Returns:
        Validated IncentiveConfig instance.

    Raises:
        FileNotFoundError: If the config file does not exist.
        yaml.YAMLError: If the YAML is malformed.
        pydantic.ValidationError: If the config fails validation.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    config = IncentiveConfig.model_validate(raw)
    logger.info(
        "Loaded config from %s (cutover %s)",
        path,
        config.cutover_date,
    )
    return config
