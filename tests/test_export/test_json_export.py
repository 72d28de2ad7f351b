"""Tests for native JSON export."""

from incentivecalc.export.json_export import result_to_json, results_to_json
from incentivecalc.models import (
    AuthorCategory,
    AuthorShare,
    CalculationResult,
    DistributionMethod,
    PublicationType,
)


def _result() -> CalculationResult:
    return CalculationResult(
        publication_type=PublicationType.RESEARCH_PAPER,
        distribution_method=DistributionMethod.ROLE_BASED,
        pool_amount=50000,
        pool_points=50,
        selected_category="scopus",
        shares={
            "u1": AuthorShare(
                identity="u1",
                name="Asha Rao",
                category=AuthorCategory.INTERNAL,
                incentive=50000,
                points=50,
                note="Single eligible author: 100%",
            )
        },
        total_incentive=50000,
        total_points=50,
    )


class TestResultToJson:
    """Tests for result_to_json()."""

    def test_enums_as_values(self) -> None:
        """Enums are rendered as their string values."""
        data = result_to_json(_result())
        assert data["publication_type"] == "research_paper"
        assert data["distribution_method"] == "role_based"
        assert data["shares"]["u1"]["category"] == "internal"

    def test_contains_totals(self) -> None:
        """Pool and totals are exported."""
        data = result_to_json(_result())
        assert data["pool_amount"] == 50000
        assert data["total_points"] == 50
        assert data["selected_category"] == "scopus"


class TestResultsToJson:
    """Tests for results_to_json()."""

    def test_empty_list(self) -> None:
        """Empty input returns empty list."""
        assert results_to_json([]) == []

    def test_returns_dicts(self) -> None:
        """Each result is exported as a dict."""
        result = results_to_json([_result(), _result()])
        assert len(result) == 2
        assert all(isinstance(r, dict) for r in result)
