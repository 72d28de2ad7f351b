"""Apportionment of an incentive pool across a publication's authors.

Two mutually exclusive strategies exist for research papers: role-based
(first / corresponding / co-author labels) and position-based (ordinal
slot 1..5). Both return percentage shares keyed by author identity; the
calculator turns those into floored amounts. Shares that belong to an
external or ineligible author are dropped, never handed on to others,
so the shares of a roster can sum to less than 100.
"""

import logging
from fractions import Fraction
from typing import NamedTuple

from incentivecalc.models import (
    MAX_ELIGIBLE_POSITION,
    AuthorRole,
    DistributionMethod,
    ExternalAuthor,
    InternalAuthor,
    ResearchPaperPolicy,
    Roster,
)
from incentivecalc.normalize import normalize_distribution_method

logger = logging.getLogger(__name__)

HUNDRED = Fraction(100)

DEFAULT_POSITION_PERCENTAGES: dict[int, float] = {
    1: 40,
    2: 25,
    3: 15,
    4: 12,
    5: 8,
}


class Share(NamedTuple):
    """Percentages of the incentive and points pools owed to one author."""

    incentive_pct: Fraction
    points_pct: Fraction
    note: str


class RoleSplit(NamedTuple):
    """Role percentages taken from a policy."""

    first: Fraction
    corresponding: Fraction

    @property
    def combined(self) -> Fraction:
        return self.first + self.corresponding

    @property
    def co_author_pool(self) -> Fraction:
        return max(HUNDRED - self.combined, Fraction(0))

    @classmethod
    def from_percentages(cls, first: float, corresponding: float) -> "RoleSplit":
        return cls(_fraction(first), _fraction(corresponding))


def _fraction(value: float) -> Fraction:
    # str() keeps decimal policy values such as 33.3 exact.
    return Fraction(str(value))


def _fmt(pct: Fraction) -> str:
    if pct.denominator == 1:
        return f"{pct.numerator}%"
    return f"{float(pct):.2f}%"


def resolve_distribution_method(
    policy: ResearchPaperPolicy | None,
) -> DistributionMethod:
    """Pick the distribution strategy configured on a research policy.

    Args:
        policy: Research-paper policy, or None.

    Returns:
        ``POSITION_BASED`` only when the policy asks for it; anything
        missing or unrecognised resolves to ``ROLE_BASED``.
    """
    method = normalize_distribution_method(
        policy.distribution_method if policy else None
    )
    if method == DistributionMethod.POSITION_BASED:
        return DistributionMethod.POSITION_BASED
    return DistributionMethod.ROLE_BASED


def eligible_authors(
    roster: Roster, max_position: int = MAX_ELIGIBLE_POSITION
) -> list[InternalAuthor]:
    """Return internal authors whose paper position is within the first five.

    External authors still take up a paper position, so they can push
    an internal author out of the eligible range.

    Args:
        roster: Full author roster.
        max_position: Last paper position that can earn an incentive.

    Returns:
        Eligible internal authors in roster order.
    """
    return [
        a
        for a in roster.authors
        if a.is_internal and a.paper_position is not None
        and a.paper_position <= max_position
    ]


def has_distinct_primary_pair(roster: Roster) -> bool:
    """True when First and Corresponding are held by two different authors."""
    has_first = any(a.role == AuthorRole.FIRST for a in roster.authors)
    has_corresponding = any(
        a.role == AuthorRole.CORRESPONDING for a in roster.authors
    )
    return has_first and has_corresponding


def primary_roles_held_by(roster: Roster, identities: set[str]) -> bool:
    """True when every First or Corresponding role sits on one of ``identities``.

    Rosters with no primary role at all also qualify.
    """
    return all(
        a.identity in identities
        for a in roster.authors
        if a.holds_first or a.holds_corresponding
    )


def _role_percentage(role: AuthorRole, split: RoleSplit) -> Fraction:
    if role == AuthorRole.FIRST_AND_CORRESPONDING:
        return split.combined
    if role == AuthorRole.FIRST:
        return split.first
    if role == AuthorRole.CORRESPONDING:
        return split.corresponding
    return Fraction(0)


def role_based_shares(
    roster: Roster,
    split: RoleSplit,
    max_position: int = MAX_ELIGIBLE_POSITION,
) -> dict[str, Share]:
    """Apportion by authorship role.

    Rules, with ``N`` eligible internal authors:

    * ``N == 1``: the single eligible author takes 100%.
    * ``N == 2`` without a distinct First/Corresponding pair, and with
      any primary role held by one of the two: 50/50 when either holds
      First & Corresponding, otherwise 60 to the First author and 40 to
      the other.
    * Otherwise every primary-role holder takes its role percentage and
      the plain co-authors split the co-author pool equally. Percentages
      of external or ineligible primary holders are forfeited.

    Co-author points are split among non-student co-authors only, so
    students do not dilute the points of employees.

    Args:
        roster: Full author roster.
        split: First and corresponding percentages from the policy.
        max_position: Last eligible paper position.

    Returns:
        Shares keyed by author identity; authors absent from the map
        receive nothing.
    """
    eligible = eligible_authors(roster, max_position)
    count = len(eligible)
    shares: dict[str, Share] = {}

    if count == 0:
        logger.debug("No eligible internal authors in the first %d", max_position)
        return shares

    if count == 1:
        shares[eligible[0].identity] = Share(
            HUNDRED, HUNDRED, "Single eligible author: 100%"
        )
        return shares

    eligible_ids = {a.identity for a in eligible}
    if (
        count == 2
        and not has_distinct_primary_pair(roster)
        and primary_roles_held_by(roster, eligible_ids)
    ):
        if any(a.role == AuthorRole.FIRST_AND_CORRESPONDING for a in eligible):
            half = HUNDRED / 2
            for author in eligible:
                shares[author.identity] = Share(
                    half, half, "Two authors with First & Corresponding: 50%"
                )
            return shares
        for author in eligible:
            if author.role == AuthorRole.FIRST:
                pct, note = Fraction(60), "Two authors, First author: 60%"
            else:
                pct, note = Fraction(40), "Two authors, second author: 40%"
            shares[author.identity] = Share(pct, pct, note)
        return shares

    for author in roster.authors:
        if author.role == AuthorRole.CO_AUTHOR or author.identity in eligible_ids:
            continue
        logger.debug(
            "Forfeiting %s share of %s author %s",
            author.role.value,
            author.category,
            author.display_name,
        )

    co_authors = [a for a in eligible if a.role == AuthorRole.CO_AUTHOR]
    employees = [a for a in co_authors if not a.is_student]
    co_pool = split.co_author_pool
    co_pct = co_pool / max(len(co_authors), 1)
    co_points_pct = co_pool / max(len(employees), 1)

    for author in eligible:
        if author.role == AuthorRole.CO_AUTHOR:
            shares[author.identity] = Share(
                co_pct,
                co_points_pct,
                f"Co-author: {_fmt(co_pool)} / {len(co_authors)} = {_fmt(co_pct)}",
            )
            continue
        pct = _role_percentage(author.role, split)
        label = author.role.value.replace("_", " ").capitalize()
        shares[author.identity] = Share(pct, pct, f"{label} author: {_fmt(pct)}")
    return shares


def _position_holders(
    roster: Roster, max_position: int
) -> list[InternalAuthor | ExternalAuthor]:
    holders = [
        a
        for a in roster.authors
        if a.position is not None and a.position <= max_position
    ]
    return sorted(holders, key=lambda a: a.position)


def position_based_shares(
    roster: Roster,
    split: RoleSplit,
    position_percentages: dict[int, float] | None = None,
    max_position: int = MAX_ELIGIBLE_POSITION,
) -> dict[str, Share]:
    """Apportion by ordinal author position.

    Rules, with ``M`` internal authors holding positions 1..5 (``6+``
    never earns anything, nor does any position past ``max_position``):

    * ``M == 1``: 100%.
    * ``M == 2``: 50/50 when the later-positioned author is
      Corresponding, otherwise 60/40 in position order.
    * ``M > 2``: if the position-1 author is also Corresponding it takes
      the combined First + Corresponding share and the rest split the
      co-author pool; if First and Corresponding are different people
      each takes its role share and the rest split the co-author pool.
      With no identifiable Corresponding author the per-position table
      applies.

    Args:
        roster: Full author roster.
        split: First and corresponding percentages from the policy.
        position_percentages: Percentage per position; defaults to
            40/25/15/12/8.
        max_position: Last position that can earn an incentive.

    Returns:
        Shares keyed by author identity.
    """
    holders = _position_holders(roster, max_position)
    internal = [a for a in holders if a.is_internal]
    count = len(internal)
    shares: dict[str, Share] = {}

    if count == 0:
        return shares

    if count == 1:
        shares[internal[0].identity] = Share(
            HUNDRED, HUNDRED, "Single positioned author: 100%"
        )
        return shares

    if count == 2:
        lead, other = internal
        if other.holds_corresponding:
            half = HUNDRED / 2
            shares[lead.identity] = Share(half, half, "Two authors: 50%")
            shares[other.identity] = Share(
                half, half, "Two authors, Corresponding: 50%"
            )
        else:
            shares[lead.identity] = Share(
                Fraction(60), Fraction(60), f"Position {lead.position}: 60%"
            )
            shares[other.identity] = Share(
                Fraction(40), Fraction(40), f"Position {other.position}: 40%"
            )
        return shares

    first = next((a for a in holders if a.position == 1), None)
    corresponding = next(
        (a for a in holders if a.holds_corresponding and a is not first), None
    )

    if first is not None and first.holds_corresponding:
        primaries = [first]
        primary_pcts = {id(first): split.combined}
    elif first is not None and corresponding is not None:
        primaries = [first, corresponding]
        primary_pcts = {
            id(first): split.first,
            id(corresponding): split.corresponding,
        }
    else:
        table = (
            position_percentages
            if position_percentages is not None
            else DEFAULT_POSITION_PERCENTAGES
        )
        for author in internal:
            pct = _fraction(table.get(author.position, 0))
            shares[author.identity] = Share(
                pct, pct, f"Position {author.position}: {_fmt(pct)}"
            )
        return shares

    rest = [a for a in internal if all(a is not p for p in primaries)]
    co_pool = split.co_author_pool
    rest_pct = co_pool / max(len(rest), 1)
    for author in primaries:
        if not author.is_internal:
            logger.debug(
                "Forfeiting position %d share of external author %s",
                author.position,
                author.display_name,
            )
            continue
        pct = primary_pcts[id(author)]
        shares[author.identity] = Share(
            pct, pct, f"Position {author.position} primary author: {_fmt(pct)}"
        )
    for author in rest:
        shares[author.identity] = Share(
            rest_pct,
            rest_pct,
            f"Position {author.position}: {_fmt(co_pool)} / {len(rest)}"
            f" = {_fmt(rest_pct)}",
        )
    return shares
