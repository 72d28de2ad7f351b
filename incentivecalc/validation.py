"""Roster consistency checks.

These are the form-level preconditions the calculator relies on but does
not enforce itself. Callers (CLI, API) run them before calculating and
refuse to price a roster that fails.
"""

from collections import Counter

from incentivecalc.models import (
    MAX_ELIGIBLE_POSITION,
    DistributionMethod,
    Roster,
    RosterComposition,
)


def _duplicates(values: list) -> list:
    return sorted(v for v, n in Counter(values).items() if n > 1)


def validate_roster(
    roster: Roster,
    method: DistributionMethod = DistributionMethod.ROLE_BASED,
) -> list[str]:
    """Check a roster for shape problems.

    Args:
        roster: Roster to check.
        method: Distribution method the roster will be priced with;
            position uniqueness is only enforced for position-based.

    Returns:
        Human-readable problems; empty when the roster is consistent.
    """
    problems: list[str] = []

    if not roster.authors:
        return ["Roster has no authors"]

    submitters = [a for a in roster.authors if a.is_submitter]
    if len(submitters) != 1:
        problems.append(
            f"Roster must have exactly one submitter, found {len(submitters)}"
        )

    first_holders = [a for a in roster.authors if a.holds_first]
    if len(first_holders) > 1:
        names = ", ".join(a.display_name for a in first_holders)
        problems.append(f"More than one First author: {names}")

    corresponding_holders = [a for a in roster.authors if a.holds_corresponding]
    if len(corresponding_holders) > 1:
        names = ", ".join(a.display_name for a in corresponding_holders)
        problems.append(f"More than one Corresponding author: {names}")

    for identity in _duplicates([a.identity for a in roster.authors]):
        problems.append(f"Duplicate author identity: {identity}")

    for position in _duplicates([a.paper_position for a in roster.authors]):
        problems.append(f"Paper position {position} is used more than once")

    if method == DistributionMethod.POSITION_BASED:
        positions = [
            a.position
            for a in roster.authors
            if a.position is not None and a.position <= MAX_ELIGIBLE_POSITION
        ]
        for position in _duplicates(positions):
            problems.append(f"Author position {position} is used more than once")

    comp = RosterComposition.from_roster(roster)
    declared = {
        "total authors": (roster.total_authors, comp.total),
        "internal authors": (roster.internal_authors, comp.internal),
        "internal co-authors": (roster.internal_co_authors, comp.internal_co_authors),
    }
    for label, (stated, actual) in declared.items():
        if stated is not None and stated != actual:
            problems.append(
                f"Declared {label} ({stated}) does not match roster ({actual})"
            )

    return problems
