"""Shared pytest fixtures for incentivecalc tests."""

from datetime import date
from pathlib import Path

import pytest

from incentivecalc.models import (
    BookPolicy,
    ConferencePolicy,
    ConferenceSubType,
    PublicationMetadata,
    PublicationType,
    ResearchPaperPolicy,
    Roster,
)
from tests.factories import internal


@pytest.fixture
def research_policy() -> ResearchPaperPolicy:
    """Research policy effective from the 2025 cutover."""
    return ResearchPaperPolicy(
        policy_name="Research 2025",
        effective_from=date(2025, 1, 1),
        quartile_incentives=[
            {"quartile": "Top 1%", "incentive_amount": 75000, "points": 75},
            {"quartile": "Q1", "incentive_amount": 50000, "points": 50},
            {"quartile": "Q2", "incentive_amount": 30000, "points": 30},
        ],
        sjr_ranges=[
            {"min": 2.0, "max": 999, "incentive_amount": 50000, "points": 50},
            {"min": 1.0, "max": 1.99, "incentive_amount": 30000, "points": 30},
        ],
        naas_rating_incentives=[
            {"min_rating": 8, "max_rating": 9.99, "incentive_amount": 20000, "points": 20},
            {"min_rating": 6, "max_rating": 7.99, "incentive_amount": 10000, "points": 10},
        ],
        indexing_category_bonuses=[
            {"category": "naas_rating_6_plus", "incentive_amount": 8000, "points": 8},
            {"category": "subsidiary_if_above_20", "incentive_amount": 100000, "points": 50},
            {"category": "pubmed", "incentive_amount": 15000, "points": 15},
        ],
    )


@pytest.fixture
def research_metadata() -> PublicationMetadata:
    """Scopus Q1 research paper published inside the policy window."""
    return PublicationMetadata(
        publication_type=PublicationType.RESEARCH_PAPER,
        publication_date=date(2025, 6, 15),
        indexing_categories=["scopus"],
        quartile="Q1",
    )


@pytest.fixture
def scopus_conference_policy() -> ConferencePolicy:
    """Policy for Scopus-indexed conference proceedings."""
    return ConferencePolicy(
        policy_name="Conference Scopus",
        conference_sub_type=ConferenceSubType.PAPER_INDEXED_SCOPUS,
        effective_from=date(2025, 1, 1),
        quartile_incentives=[
            {"quartile": "Q1", "incentive_amount": 40000, "points": 40},
        ],
        international_bonus=5000,
        best_paper_award_bonus=3000,
    )


@pytest.fixture
def book_policy() -> BookPolicy:
    """Book policy worth 30000 / 30 points for authored books."""
    return BookPolicy(
        policy_name="Books 2025",
        effective_from=date(2025, 1, 1),
        authored_incentive_amount=30000,
        authored_points=30,
        edited_incentive_amount=20000,
        edited_points=20,
        indexing_bonuses={"scopus_indexed": 6000, "sgt_publication_house": 3000},
        international_bonus=3000,
    )


@pytest.fixture
def three_author_roster() -> Roster:
    """Submitter First author, internal Corresponding, internal co-author."""
    return Roster(
        authors=[
            internal("u1", "first", is_submitter=True),
            internal("u2", "corresponding"),
            internal("u3"),
        ]
    )


@pytest.fixture
def policies_file(tmp_path: Path) -> Path:
    """Write a policy YAML file with one policy per publication type."""
    content = """
research_paper:
  - policy_name: "Research 2024"
    effective_from: 2024-01-01
    effective_to: 2024-12-31
    quartile_incentives:
      - {quartile: Q1, incentive_amount: 40000, points: 40}
  - policy_name: "Research 2025"
    effective_from: 2025-01-01
    distribution_method: author_role_based
    quartile_incentives:
      - {quartile: Q1, incentive_amount: 50000, points: 50}
conference_paper:
  - policy_name: "Not indexed"
    conference_sub_type: paper_not_indexed
    effective_from: 2025-01-01
    flat_incentive_amount: 9000
    flat_points: 9
book:
  - policy_name: "Books"
    effective_from: 2025-01-01
    authored_incentive_amount: 30000
    authored_points: 30
book_chapter:
  - policy_name: "Chapters (retired)"
    is_active: false
    effective_from: 2025-01-01
    authored_incentive_amount: 10000
    authored_points: 10
"""
    path = tmp_path / "policies.yaml"
    path.write_text(content)
    return path


@pytest.fixture
def tmp_config(tmp_path: Path, policies_file: Path) -> Path:
    """Create a temporary incentivecalc.yaml config file."""
    config_content = f"""
institution: "Test University"
cutover_date: 2025-01-01
policies_path: "{policies_file.name}"
"""
    config_path = tmp_path / "incentivecalc.yaml"
    config_path.write_text(config_content)
    return config_path
