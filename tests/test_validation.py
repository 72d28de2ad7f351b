"""Tests for roster consistency checks."""

from incentivecalc.models import DistributionMethod, Roster
from incentivecalc.validation import validate_roster
from tests.factories import external, internal


class TestValidateRoster:
    """Tests for validate_roster()."""

    def test_consistent_roster(self, three_author_roster: Roster) -> None:
        """A well-formed roster has no problems."""
        assert validate_roster(three_author_roster) == []

    def test_empty_roster(self) -> None:
        """An empty roster is reported on its own."""
        assert validate_roster(Roster()) == ["Roster has no authors"]

    def test_missing_submitter(self) -> None:
        """Exactly one submitter is required."""
        problems = validate_roster(Roster(authors=[internal("u1")]))
        assert problems == ["Roster must have exactly one submitter, found 0"]

    def test_two_first_authors(self) -> None:
        """First may be held by one author only."""
        roster = Roster(
            authors=[
                internal("u1", "first", is_submitter=True),
                external("Ext", "first_and_corresponding"),
            ]
        )
        problems = validate_roster(roster)
        assert "More than one First author: U1, Ext" in problems
        assert not any("Corresponding" in p for p in problems)

    def test_two_corresponding_authors(self) -> None:
        """Corresponding may be held by one author only."""
        roster = Roster(
            authors=[
                internal("u1", "corresponding", is_submitter=True),
                internal("u2", "corresponding"),
            ]
        )
        assert validate_roster(roster) == [
            "More than one Corresponding author: U1, U2"
        ]

    def test_duplicate_identity(self) -> None:
        """The same author cannot appear twice."""
        roster = Roster(
            authors=[internal("u1", is_submitter=True), internal("u1")]
        )
        assert "Duplicate author identity: u1" in validate_roster(roster)

    def test_duplicate_paper_position(self) -> None:
        """Explicit paper positions must be unique."""
        roster = Roster(
            authors=[
                internal("u1", is_submitter=True),
                internal("u2", paper_position=1),
            ]
        )
        assert validate_roster(roster) == [
            "Paper position 1 is used more than once"
        ]

    def test_duplicate_author_position_position_based(self) -> None:
        """Position-based rosters need unique positions 1..5."""
        roster = Roster(
            authors=[
                internal("u1", is_submitter=True, position=2),
                internal("u2", position=2),
                internal("u3", position="6+"),
                internal("u4", position="6+"),
            ]
        )
        assert validate_roster(roster) == []
        assert validate_roster(roster, DistributionMethod.POSITION_BASED) == [
            "Author position 2 is used more than once"
        ]

    def test_declared_counts(self) -> None:
        """Declared head-counts must agree with the roster."""
        roster = Roster(
            authors=[
                internal("u1", is_submitter=True),
                internal("u2"),
                external("Ext"),
            ],
            total_authors=3,
            internal_authors=3,
            internal_co_authors=1,
        )
        assert validate_roster(roster) == [
            "Declared internal authors (3) does not match roster (2)"
        ]
