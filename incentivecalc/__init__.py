"""incentivecalc -- Incentive and points calculation for research contributions."""

from incentivecalc.calculator import calculate
from incentivecalc.core import IncentiveEngine
from incentivecalc.models import (
    AuthorRole,
    AuthorShare,
    AuthorSubType,
    BookChapterPolicy,
    BookPolicy,
    CalculationResult,
    ConferencePolicy,
    ConferenceSubType,
    DistributionMethod,
    ExternalAuthor,
    InternalAuthor,
    PublicationMetadata,
    PublicationType,
    ResearchPaperPolicy,
    Roster,
)

__all__ = [
    "AuthorRole",
    "AuthorShare",
    "AuthorSubType",
    "BookChapterPolicy",
    "BookPolicy",
    "CalculationResult",
    "ConferencePolicy",
    "ConferenceSubType",
    "DistributionMethod",
    "ExternalAuthor",
    "IncentiveEngine",
    "InternalAuthor",
    "PublicationMetadata",
    "PublicationType",
    "ResearchPaperPolicy",
    "Roster",
    "calculate",
]
