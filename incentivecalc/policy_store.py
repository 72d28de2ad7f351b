"""File-backed policy lookup.

Policies are kept in a YAML file with one list per publication type::

    research_paper:
      - policy_name: "Research 2025"
        effective_from: 2025-01-01
        ...
    conference_paper:
      - conference_sub_type: paper_indexed_scopus
        ...

The store answers the same question as the portal's policy endpoints:
which active policy applies to a publication type on a given date.
"""

import logging
from datetime import date
from pathlib import Path

import yaml

from incentivecalc.models import (
    ConferencePolicy,
    ConferenceSubType,
    Policy,
    PublicationType,
    parse_policy,
)

logger = logging.getLogger(__name__)


class PolicyStore:
    """In-memory collection of effective-dated policies."""

    def __init__(self, policies: list[tuple[PublicationType, Policy]] | None = None) -> None:
        self._policies: dict[PublicationType, list[Policy]] = {
            t: [] for t in PublicationType
        }
        for publication_type, policy in policies or []:
            self.add(publication_type, policy)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "PolicyStore":
        """Load policies from a YAML file.

        Args:
            path: Path to the policy file.

        Returns:
            Populated PolicyStore.

        Raises:
            FileNotFoundError: If the file does not exist.
            yaml.YAMLError: If the YAML is malformed.
            ValueError: If a top-level key is not a publication type.
            pydantic.ValidationError: If a policy record is invalid.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Policy file not found: {path}")

        with open(path) as f:
            raw = yaml.safe_load(f) or {}

        store = cls()
        for key, records in raw.items():
            publication_type = PublicationType(key)
            for record in records or []:
                store.add(publication_type, parse_policy(publication_type, record))
        logger.info("Loaded %d policies from %s", len(store), path)
        return store

    def __len__(self) -> int:
        return sum(len(p) for p in self._policies.values())

    def add(self, publication_type: PublicationType, policy: Policy) -> None:
        """Register a policy under its publication type."""
        self._policies[PublicationType(publication_type)].append(policy)

    def list_policies(
        self, publication_type: PublicationType | None = None
    ) -> list[Policy]:
        """Return stored policies, newest first.

        Args:
            publication_type: Restrict to one type. Omit for all.

        Returns:
            Policies ordered by ``effective_from`` descending.
        """
        if publication_type is None:
            policies = [p for group in self._policies.values() for p in group]
        else:
            policies = list(self._policies[PublicationType(publication_type)])
        return sorted(policies, key=lambda p: p.effective_from, reverse=True)

    def find_active(
        self,
        publication_type: PublicationType,
        on: date | None = None,
        sub_type: ConferenceSubType | None = None,
    ) -> Policy | None:
        """Find the active policy covering a date.

        Picks the most recently started active policy whose window
        contains ``on``. Conference policies must also match the
        sub-type.

        Args:
            publication_type: Publication type to look up.
            on: Date to check; today when omitted.
            sub_type: Conference sub-type, required for conferences.

        Returns:
            The applicable policy, or None.
        """
        on = on or date.today()
        publication_type = PublicationType(publication_type)
        if publication_type == PublicationType.CONFERENCE_PAPER and sub_type is None:
            logger.debug("Conference sub-type not selected; no policy lookup")
            return None

        for policy in self.list_policies(publication_type):
            if not policy.is_active or not policy.covers(on):
                continue
            if (
                isinstance(policy, ConferencePolicy)
                and policy.conference_sub_type != sub_type
            ):
                continue
            return policy

        logger.info("No active %s policy for %s", publication_type.value, on)
        return None
