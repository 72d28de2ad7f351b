"""Tests for the file-backed policy store."""

from datetime import date
from pathlib import Path

import pytest

from incentivecalc.models import (
    BookChapterPolicy,
    ConferenceSubType,
    PublicationType,
    ResearchPaperPolicy,
)
from incentivecalc.policy_store import PolicyStore


class TestPolicyStore:
    """Tests for PolicyStore."""

    def test_from_yaml(self, policies_file: Path) -> None:
        """Every record in the file is loaded."""
        store = PolicyStore.from_yaml(policies_file)
        assert len(store) == 5
        assert isinstance(
            store.list_policies(PublicationType.BOOK_CHAPTER)[0], BookChapterPolicy
        )

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing policy file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            PolicyStore.from_yaml(tmp_path / "missing.yaml")

    def test_unknown_type_rejected(self, tmp_path: Path) -> None:
        """Top-level keys must be publication types."""
        path = tmp_path / "policies.yaml"
        path.write_text("patent:\n  - effective_from: 2025-01-01\n")
        with pytest.raises(ValueError):
            PolicyStore.from_yaml(path)

    def test_list_newest_first(self, policies_file: Path) -> None:
        """Policies are listed by effective date, newest first."""
        store = PolicyStore.from_yaml(policies_file)
        names = [
            p.policy_name
            for p in store.list_policies(PublicationType.RESEARCH_PAPER)
        ]
        assert names == ["Research 2025", "Research 2024"]

    def test_find_by_date(self, policies_file: Path) -> None:
        """The policy whose window covers the date is chosen."""
        store = PolicyStore.from_yaml(policies_file)
        old = store.find_active(PublicationType.RESEARCH_PAPER, date(2024, 5, 1))
        new = store.find_active(PublicationType.RESEARCH_PAPER, date(2025, 5, 1))
        assert old.policy_name == "Research 2024"
        assert new.policy_name == "Research 2025"
        assert store.find_active(PublicationType.RESEARCH_PAPER, date(2023, 5, 1)) is None

    def test_inactive_skipped(self, policies_file: Path) -> None:
        """Inactive policies are never returned."""
        store = PolicyStore.from_yaml(policies_file)
        assert store.find_active(PublicationType.BOOK_CHAPTER, date(2025, 5, 1)) is None

    def test_conference_sub_type(self, policies_file: Path) -> None:
        """Conference lookups need a matching sub-type."""
        store = PolicyStore.from_yaml(policies_file)
        on = date(2025, 5, 1)
        assert store.find_active(PublicationType.CONFERENCE_PAPER, on) is None
        assert (
            store.find_active(
                PublicationType.CONFERENCE_PAPER,
                on,
                ConferenceSubType.PAPER_INDEXED_SCOPUS,
            )
            is None
        )
        found = store.find_active(
            PublicationType.CONFERENCE_PAPER, on, ConferenceSubType.PAPER_NOT_INDEXED
        )
        assert found.flat_incentive_amount == 9000

    def test_add(self) -> None:
        """Policies can be registered programmatically."""
        store = PolicyStore()
        policy = ResearchPaperPolicy(effective_from=date(2025, 1, 1))
        store.add(PublicationType.RESEARCH_PAPER, policy)
        assert len(store) == 1
        assert store.find_active("research_paper", date(2025, 2, 1)) is policy
