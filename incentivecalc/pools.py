"""Per-publication-type incentive pool calculators.

Each function maps a policy and publication metadata onto the total
amount and points available to the author team, before apportionment.
Missing policies or metrics produce an empty pool rather than an error.
"""

import logging
from datetime import date

from pydantic import BaseModel

from incentivecalc.models import (
    BookChapterPolicy,
    BookIndexingType,
    BookPolicy,
    BookType,
    ConferencePolicy,
    ConferenceSubType,
    IndexingCategory,
    PublicationMetadata,
    QuartileIncentive,
    ResearchPaperPolicy,
)
from incentivecalc.normalize import normalize_quartile

logger = logging.getLogger(__name__)

# Research policies that took effect before this date are no longer honored.
DEFAULT_CUTOVER_DATE = date(2025, 1, 1)

NAAS_MIN_RATING = 6
SUBSIDIARY_MIN_IMPACT_FACTOR = 20


class Pool(BaseModel):
    """Total incentive amount and points to be apportioned."""

    amount: int = 0
    points: int = 0
    source: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.amount <= 0


EMPTY_POOL = Pool()


def _match_quartile(
    table: list[QuartileIncentive], quartile: str | None
) -> QuartileIncentive | None:
    wanted = normalize_quartile(quartile)
    if wanted is None:
        return None
    for row in table:
        if (normalize_quartile(row.quartile) or "").lower() == wanted.lower():
            return row
    return None


def research_policy_applies(
    policy: ResearchPaperPolicy,
    publication_date: date | None,
    cutover_date: date = DEFAULT_CUTOVER_DATE,
) -> bool:
    """Check the effective-date rules for a research-paper policy.

    Args:
        policy: Research-paper policy.
        publication_date: Date the paper was published.
        cutover_date: Earliest ``effective_from`` still honored.

    Returns:
        True only when the policy starts on or after the cutover and the
        publication date lies inside its effective window.
    """
    if publication_date is None:
        logger.info("No publication date; research policy not applied")
        return False
    if policy.effective_from < cutover_date:
        logger.warning(
            "Policy %r effective from %s predates cutover %s",
            policy.policy_name,
            policy.effective_from,
            cutover_date,
        )
        return False
    if not policy.covers(publication_date):
        logger.info(
            "Publication date %s outside policy %r window",
            publication_date,
            policy.policy_name,
        )
        return False
    return True


def _flat_bonus(
    policy: ResearchPaperPolicy, category: str
) -> tuple[int, int]:
    bonus = next(
        (b for b in policy.indexing_category_bonuses if b.category == category),
        None,
    )
    if bonus is None:
        return 0, 0
    return bonus.incentive_amount, bonus.points


def indexing_candidate(
    policy: ResearchPaperPolicy,
    category: str,
    metadata: PublicationMetadata,
) -> tuple[int, int]:
    """Compute the (amount, points) a single indexing category is worth.

    Args:
        policy: Research-paper policy holding the lookup tables.
        category: Selected indexing category.
        metadata: Publication metrics (quartile, SJR, rating, IF).

    Returns:
        Amount and points, (0, 0) when the category's metric is missing
        or no table row matches.
    """
    if category == IndexingCategory.SCOPUS:
        row = _match_quartile(policy.quartile_incentives, metadata.quartile)
        if row is None:
            logger.info("Scopus selected without a matching quartile")
            return 0, 0
        return row.incentive_amount, row.points

    if category == IndexingCategory.SCIE_WOS:
        if metadata.sjr is None:
            logger.info("SCIE/WOS selected without an SJR value")
            return 0, 0
        row = next(
            (r for r in policy.sjr_ranges if r.min <= metadata.sjr <= r.max),
            None,
        )
        return (row.incentive_amount, row.points) if row else (0, 0)

    if category == IndexingCategory.NAAS_RATING_6_PLUS:
        rating = metadata.naas_rating
        if rating is None or rating < NAAS_MIN_RATING:
            logger.info("NAAS rating missing or below %d", NAAS_MIN_RATING)
            return 0, 0
        row = next(
            (
                r
                for r in policy.naas_rating_incentives
                if r.min_rating <= rating <= r.max_rating
            ),
            None,
        )
        if row is not None:
            return row.incentive_amount, row.points
        return _flat_bonus(policy, category)

    if category == IndexingCategory.SUBSIDIARY_IF_ABOVE_20:
        impact = metadata.subsidiary_impact_factor
        if impact is None:
            impact = metadata.impact_factor
        if impact is None or impact <= SUBSIDIARY_MIN_IMPACT_FACTOR:
            logger.info("Subsidiary impact factor must exceed 20, got %s", impact)
            return 0, 0
        return _flat_bonus(policy, category)

    return _flat_bonus(policy, category)


def research_paper_pool(
    policy: ResearchPaperPolicy | None,
    metadata: PublicationMetadata,
    cutover_date: date = DEFAULT_CUTOVER_DATE,
) -> Pool:
    """Select the research-paper pool from the best indexing category.

    Every selected category yields a candidate; the pool is the single
    highest-amount candidate, never a sum, so overlapping indexing
    claims are not counted twice.

    Args:
        policy: Applicable research-paper policy, or None.
        metadata: Publication metadata.
        cutover_date: Earliest ``effective_from`` still honored.

    Returns:
        Pool whose ``source`` names the winning category.
    """
    if policy is None:
        logger.info("No research paper policy; pool is empty")
        return EMPTY_POOL
    if not research_policy_applies(policy, metadata.publication_date, cutover_date):
        return EMPTY_POOL

    best = EMPTY_POOL
    for category in metadata.indexing_categories:
        amount, points = indexing_candidate(policy, category, metadata)
        logger.debug("Category %s: %d (%d points)", category, amount, points)
        if amount > best.amount:
            best = Pool(amount=amount, points=points, source=category)

    if best.is_empty:
        logger.info("No indexing category produced an incentive")
        return EMPTY_POOL
    logger.debug("Selected category %s for pool %d", best.source, best.amount)
    return best


def conference_pool(
    policy: ConferencePolicy | None,
    metadata: PublicationMetadata,
) -> Pool:
    """Compute the pool for a conference contribution.

    Scopus-indexed proceedings use the proceedings quartile; the other
    sub-types use the policy's flat amount. International and best-paper
    bonuses add to the amount only.

    Args:
        policy: Policy for the contribution's conference sub-type.
        metadata: Publication metadata.

    Returns:
        The conference pool, empty when the policy or quartile is missing.
    """
    sub_type = metadata.conference_sub_type
    if policy is None or sub_type is None:
        logger.info("Conference sub-type or policy missing; pool is empty")
        return EMPTY_POOL
    if policy.conference_sub_type != sub_type:
        logger.warning(
            "Policy %r is for %s, not %s",
            policy.policy_name,
            policy.conference_sub_type,
            sub_type,
        )
        return EMPTY_POOL

    if sub_type == ConferenceSubType.PAPER_INDEXED_SCOPUS:
        row = _match_quartile(policy.quartile_incentives, metadata.proceedings_quartile)
        if row is None:
            logger.info("Scopus proceedings without a matching quartile")
            return EMPTY_POOL
        amount, points = row.incentive_amount, row.points
    else:
        amount, points = policy.flat_incentive_amount, policy.flat_points

    if metadata.is_international:
        amount += policy.international_bonus
    if metadata.conference_best_paper_award:
        amount += policy.best_paper_award_bonus

    if amount <= 0:
        return EMPTY_POOL
    return Pool(amount=amount, points=points, source=sub_type.value)


def book_pool(
    policy: BookPolicy | BookChapterPolicy | None,
    metadata: PublicationMetadata,
) -> Pool:
    """Compute the pool for a book or book chapter.

    The base is the authored or edited amount (authored when not
    stated), plus at most one indexing bonus and the international
    bonus.

    Args:
        policy: Book or book-chapter policy.
        metadata: Publication metadata.

    Returns:
        The book pool, empty without a policy.
    """
    if policy is None:
        logger.info("No book policy; pool is empty")
        return EMPTY_POOL

    if metadata.book_publication_type == BookType.EDITED:
        amount, points = policy.edited_incentive_amount, policy.edited_points
        source = BookType.EDITED.value
    else:
        amount, points = policy.authored_incentive_amount, policy.authored_points
        source = BookType.AUTHORED.value

    if metadata.book_indexing_type == BookIndexingType.SCOPUS_INDEXED:
        amount += policy.indexing_bonuses.scopus_indexed
    elif metadata.book_indexing_type == BookIndexingType.SGT_PUBLICATION_HOUSE:
        amount += policy.indexing_bonuses.sgt_publication_house

    if metadata.is_international:
        amount += policy.international_bonus

    if amount <= 0:
        return EMPTY_POOL
    return Pool(amount=amount, points=points, source=source)
