"""Contribution incentive calculation.

``calculate`` is a pure function of a roster, a policy and publication
metadata. It never raises on incomplete input: anything that cannot be
priced yields zero for every author.
"""

import logging
import math
from datetime import date
from fractions import Fraction

from incentivecalc.distribution import (
    HUNDRED,
    RoleSplit,
    Share,
    position_based_shares,
    resolve_distribution_method,
    role_based_shares,
)
from incentivecalc.models import (
    MAX_ELIGIBLE_POSITION,
    AuthorCategory,
    AuthorShare,
    BookChapterPolicy,
    BookPolicy,
    CalculationResult,
    ConferencePolicy,
    ConferenceSubType,
    DistributionMethod,
    Policy,
    PublicationMetadata,
    PublicationType,
    ResearchPaperPolicy,
    Roster,
)
from incentivecalc.pools import (
    DEFAULT_CUTOVER_DATE,
    EMPTY_POOL,
    Pool,
    book_pool,
    conference_pool,
    research_paper_pool,
)

logger = logging.getLogger(__name__)

_EXPECTED_POLICY: dict[PublicationType, type] = {
    PublicationType.RESEARCH_PAPER: ResearchPaperPolicy,
    PublicationType.CONFERENCE_PAPER: ConferencePolicy,
    PublicationType.BOOK: BookPolicy,
    PublicationType.BOOK_CHAPTER: BookChapterPolicy,
}

_SOLE_RECIPIENT_SUB_TYPES = (
    ConferenceSubType.KEYNOTE_SPEAKER_INVITED_TALKS,
    ConferenceSubType.ORGANIZER_COORDINATOR_MEMBER,
)


def _floor_share(total: int, pct: Fraction) -> int:
    return max(math.floor(total * pct / HUNDRED), 0)


def _equal_shares(roster: Roster, note: str) -> dict[str, Share]:
    pct = HUNDRED / max(len(roster.authors), 1)
    return {a.identity: Share(pct, pct, note) for a in roster.authors}


def _apply(
    roster: Roster,
    pool: Pool,
    shares: dict[str, Share],
) -> dict[str, AuthorShare]:
    """Turn percentage shares into floored amounts for every author."""
    results: dict[str, AuthorShare] = {}
    for author in roster.authors:
        entry = AuthorShare(
            identity=author.identity,
            name=author.display_name,
            category=AuthorCategory(author.category),
        )
        results[author.identity] = entry
        if not author.is_internal:
            entry.note = "External author: no incentive"
            continue
        share = shares.get(author.identity)
        if share is None or pool.is_empty:
            entry.note = "Not eligible" if not pool.is_empty else "Empty pool"
            continue
        entry.incentive = _floor_share(pool.amount, share.incentive_pct)
        entry.note = share.note
        if author.is_student:
            entry.note += "; students earn no points"
        else:
            entry.points = _floor_share(pool.points, share.points_pct)
    return results


def _research_shares(
    roster: Roster,
    policy: ResearchPaperPolicy,
    max_position: int,
) -> tuple[DistributionMethod, dict[str, Share]]:
    method = resolve_distribution_method(policy)
    split = RoleSplit.from_percentages(
        policy.first_percentage, policy.corresponding_percentage
    )
    if method == DistributionMethod.POSITION_BASED:
        return method, position_based_shares(
            roster, split, policy.position_based_distribution, max_position
        )
    return method, role_based_shares(roster, split, max_position)


def _conference_shares(
    roster: Roster,
    policy: ConferencePolicy,
    metadata: PublicationMetadata,
    max_position: int,
) -> dict[str, Share]:
    sub_type = metadata.conference_sub_type
    if sub_type == ConferenceSubType.PAPER_INDEXED_SCOPUS:
        split = RoleSplit.from_percentages(
            policy.first_percentage, policy.corresponding_percentage
        )
        return role_based_shares(roster, split, max_position)
    if sub_type in _SOLE_RECIPIENT_SUB_TYPES:
        submitter = roster.submitter
        if submitter is None:
            return {}
        return {
            submitter.identity: Share(HUNDRED, HUNDRED, "Sole recipient: 100%")
        }
    return _equal_shares(roster, f"Equal split among {len(roster.authors)} authors")


def calculate(
    roster: Roster,
    policy: Policy | None,
    metadata: PublicationMetadata,
    cutover_date: date = DEFAULT_CUTOVER_DATE,
    max_position: int = MAX_ELIGIBLE_POSITION,
) -> CalculationResult:
    """Compute each author's incentive and points for a publication.

    External authors always receive zero; students receive an incentive
    but zero points. Amounts are floored so the total paid never
    exceeds the pool.

    Args:
        roster: Every contributor, the submitter included.
        policy: Policy applicable to the publication, or None.
        metadata: Publication facts entered on the form.
        cutover_date: Earliest research-policy ``effective_from`` honored.
        max_position: Last paper position (role-based) or author
            position (position-based) that can earn an incentive.

    Returns:
        CalculationResult with per-author shares and totals.
    """
    pub_type = metadata.publication_type
    expected = _EXPECTED_POLICY[pub_type]
    if policy is not None and not isinstance(policy, expected):
        logger.warning(
            "Ignoring %s for a %s", type(policy).__name__, pub_type.value
        )
        policy = None

    method: DistributionMethod | None = None
    shares: dict[str, Share] = {}
    pool = EMPTY_POOL

    if pub_type == PublicationType.RESEARCH_PAPER:
        pool = research_paper_pool(policy, metadata, cutover_date)
        if not pool.is_empty:
            method, shares = _research_shares(roster, policy, max_position)
    elif pub_type == PublicationType.CONFERENCE_PAPER:
        pool = conference_pool(policy, metadata)
        if (
            metadata.conference_sub_type == ConferenceSubType.PAPER_NOT_INDEXED
            and metadata.is_presenter is False
        ):
            logger.info("Submitter is not the presenter; pool forced to zero")
            pool = EMPTY_POOL
        if not pool.is_empty:
            shares = _conference_shares(roster, policy, metadata, max_position)
    else:
        pool = book_pool(policy, metadata)
        if not pool.is_empty:
            shares = _equal_shares(
                roster, f"Equal split among {len(roster.authors)} authors"
            )

    per_author = _apply(roster, pool, shares)
    result = CalculationResult(
        publication_type=pub_type,
        distribution_method=method,
        pool_amount=pool.amount,
        pool_points=pool.points,
        selected_category=(
            pool.source if pub_type == PublicationType.RESEARCH_PAPER else None
        ),
        shares=per_author,
        total_incentive=sum(s.incentive for s in per_author.values()),
        total_points=sum(s.points for s in per_author.values()),
    )
    logger.debug(
        "Calculated %s: pool %d/%d, paid %d/%d",
        pub_type.value,
        result.pool_amount,
        result.pool_points,
        result.total_incentive,
        result.total_points,
    )
    return result
