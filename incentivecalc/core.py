"""Core orchestration engine for incentivecalc.

Ties together configuration, policy lookup, validation and calculation.
This is the single entry point used by all consumer interfaces (CLI,
REST API, MCP, library).
"""

import logging
from pathlib import Path

from incentivecalc.calculator import calculate
from incentivecalc.config import IncentiveConfig, load_config
from incentivecalc.distribution import resolve_distribution_method
from incentivecalc.models import (
    CalculationResult,
    DistributionMethod,
    Policy,
    PublicationMetadata,
    PublicationType,
    ResearchPaperPolicy,
    Roster,
)
from incentivecalc.policy_client import PolicyClient
from incentivecalc.policy_store import PolicyStore
from incentivecalc.validation import validate_roster

logger = logging.getLogger(__name__)


def _init_store(config: IncentiveConfig, config_dir: Path) -> PolicyStore:
    """Load the policy file named in the config, if any.

    Args:
        config: Validated configuration.
        config_dir: Directory relative policy paths are resolved from.

    Returns:
        Populated or empty PolicyStore.
    """
    path = config.resolved_policies_path
    if path is None:
        return PolicyStore()
    if not path.is_absolute():
        path = config_dir / path
    return PolicyStore.from_yaml(path)


def _init_client(config: IncentiveConfig) -> PolicyClient | None:
    if config.policy_api is None:
        return None
    return PolicyClient(
        base_url=config.policy_api.base_url,
        token=config.policy_api.token,
        timeout=config.policy_api.timeout,
    )


class IncentiveEngine:
    """Main orchestrator for incentive calculation.

    Used by CLI, REST API, MCP server, and library consumers.
    """

    def __init__(self, config_path: str | Path = "incentivecalc.yaml") -> None:
        """Initialize the engine with a configuration file.

        Args:
            config_path: Path to the incentivecalc YAML config file.
        """
        config_path = Path(config_path)
        self.config = load_config(config_path)
        self.store = _init_store(self.config, config_path.parent)
        self.client = _init_client(self.config)

    def find_policy(self, metadata: PublicationMetadata) -> Policy | None:
        """Look up the applicable policy in the local policy file."""
        return self.store.find_active(
            metadata.publication_type,
            on=metadata.publication_date,
            sub_type=metadata.conference_sub_type,
        )

    async def resolve_policy(
        self, metadata: PublicationMetadata
    ) -> Policy | None:
        """Find the applicable policy, falling back to the portal API.

        Args:
            metadata: Publication metadata.

        Returns:
            Local policy if one applies, otherwise the remote one, or
            None when neither source has a policy.
        """
        policy = self.find_policy(metadata)
        if policy is None and self.client is not None:
            logger.debug("No local policy; asking %s", self.client.base_url)
            policy = await self.client.fetch_policy(metadata)
        return policy

    def list_policies(
        self, publication_type: PublicationType | None = None
    ) -> list[Policy]:
        """Return locally configured policies, newest first."""
        return self.store.list_policies(publication_type)

    def validate(
        self,
        roster: Roster,
        metadata: PublicationMetadata,
        policy: Policy | None = None,
    ) -> list[str]:
        """Check a roster against the rules of its distribution method.

        Args:
            roster: Roster to check.
            metadata: Publication metadata.
            policy: Policy in use, for the distribution method.

        Returns:
            Problems found; empty when the roster can be priced.
        """
        method = DistributionMethod.ROLE_BASED
        if metadata.publication_type == PublicationType.RESEARCH_PAPER and isinstance(
            policy, ResearchPaperPolicy
        ):
            method = resolve_distribution_method(policy)
        return validate_roster(roster, method)

    def calculate(
        self,
        roster: Roster,
        metadata: PublicationMetadata,
        policy: Policy | None = None,
    ) -> CalculationResult:
        """Calculate incentives with the configured cutover and limits.

        Args:
            roster: Every contributor, the submitter included.
            metadata: Publication metadata.
            policy: Policy to apply. Looked up in the local policy file
                when omitted.

        Returns:
            CalculationResult for the roster.
        """
        if policy is None:
            policy = self.find_policy(metadata)
        return calculate(
            roster,
            policy,
            metadata,
            cutover_date=self.config.cutover_date,
            max_position=self.config.max_eligible_position,
        )
