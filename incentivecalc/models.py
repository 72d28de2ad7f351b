"""Pydantic data models for incentivecalc.

Defines the core domain types: authors and rosters, the per-type policy
records, publication metadata, and calculation results.
"""

from datetime import date, datetime
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)

from incentivecalc.normalize import normalize_role

# Highest paper position that can still earn an incentive.
MAX_ELIGIBLE_POSITION = 5


class PublicationType(StrEnum):
    """Kind of research contribution being claimed."""

    RESEARCH_PAPER = "research_paper"
    CONFERENCE_PAPER = "conference_paper"
    BOOK = "book"
    BOOK_CHAPTER = "book_chapter"


class DistributionMethod(StrEnum):
    """How a research-paper pool is apportioned between authors."""

    ROLE_BASED = "role_based"
    POSITION_BASED = "position_based"


class AuthorCategory(StrEnum):
    """Institutional affiliation of an author."""

    INTERNAL = "internal"
    EXTERNAL = "external"


class AuthorSubType(StrEnum):
    """Finer classification of an author within their category."""

    FACULTY = "faculty"
    STUDENT = "student"
    ACADEMIC = "academic"
    INDUSTRY = "industry"
    INTERNATIONAL_AUTHOR = "international_author"


class AuthorRole(StrEnum):
    """Authorship role used by role-based distribution."""

    FIRST = "first"
    CORRESPONDING = "corresponding"
    FIRST_AND_CORRESPONDING = "first_and_corresponding"
    CO_AUTHOR = "co_author"


class ConferenceSubType(StrEnum):
    """Conference contribution sub-types, each with its own policy."""

    PAPER_INDEXED_SCOPUS = "paper_indexed_scopus"
    PAPER_NOT_INDEXED = "paper_not_indexed"
    KEYNOTE_SPEAKER_INVITED_TALKS = "keynote_speaker_invited_talks"
    ORGANIZER_COORDINATOR_MEMBER = "organizer_coordinator_member"


class BookType(StrEnum):
    """Whether a book (or chapter) was authored or edited."""

    AUTHORED = "authored"
    EDITED = "edited"


class BookIndexingType(StrEnum):
    """Indexing status of a book or its publisher."""

    SCOPUS_INDEXED = "scopus_indexed"
    NON_INDEXED = "non_indexed"
    SGT_PUBLICATION_HOUSE = "sgt_publication_house"


class IndexingCategory(StrEnum):
    """Research-paper indexing categories with special lookup rules.

    Any other category string is treated as a flat bonus category and
    looked up in the policy's indexing category bonuses.
    """

    SCOPUS = "scopus"
    SCIE_WOS = "scie_wos"
    NAAS_RATING_6_PLUS = "naas_rating_6_plus"
    SUBSIDIARY_IF_ABOVE_20 = "subsidiary_if_above_20"


# ── Authors ──────────────────────────────────────────────────


def _parse_position(value: Any) -> int | None:
    """Coerce a form position ("1".."5", "6+") into an int, 6 meaning 6+."""
    if value is None or value == "":
        return None
    if isinstance(value, str) and value.strip().endswith("+"):
        value = value.strip()[:-1]
    position = int(value)
    if position < 1:
        raise ValueError(f"Author position must be 1 or more, got {position}")
    return min(position, MAX_ELIGIBLE_POSITION + 1)


class _AuthorBase(BaseModel):
    """Fields shared by internal and external authors."""

    role: AuthorRole = AuthorRole.CO_AUTHOR
    position: int | None = None
    paper_position: int | None = Field(default=None, ge=1)
    is_submitter: bool = False

    @field_validator("role", mode="before")
    @classmethod
    def _normalize_role(cls, value: Any) -> Any:
        if isinstance(value, str):
            return normalize_role(value)
        return value

    @field_validator("position", mode="before")
    @classmethod
    def _normalize_position(cls, value: Any) -> int | None:
        return _parse_position(value)

    @property
    def is_internal(self) -> bool:
        return self.category == AuthorCategory.INTERNAL

    @property
    def is_student(self) -> bool:
        return self.sub_type == AuthorSubType.STUDENT

    @property
    def holds_first(self) -> bool:
        return self.role in (AuthorRole.FIRST, AuthorRole.FIRST_AND_CORRESPONDING)

    @property
    def holds_corresponding(self) -> bool:
        return self.role in (
            AuthorRole.CORRESPONDING,
            AuthorRole.FIRST_AND_CORRESPONDING,
        )


class InternalAuthor(_AuthorBase):
    """A contributor affiliated with the institution."""

    category: Literal["internal"] = "internal"
    uid: str
    name: str | None = None
    sub_type: AuthorSubType = AuthorSubType.FACULTY

    @field_validator("sub_type")
    @classmethod
    def _internal_sub_type(cls, value: AuthorSubType) -> AuthorSubType:
        if value not in (AuthorSubType.FACULTY, AuthorSubType.STUDENT):
            raise ValueError(f"Internal authors cannot be '{value}'")
        return value

    @property
    def identity(self) -> str:
        return self.uid

    @property
    def display_name(self) -> str:
        return self.name or self.uid


class ExternalAuthor(_AuthorBase):
    """A collaborator from outside the institution."""

    category: Literal["external"] = "external"
    name: str
    email: str | None = None
    affiliation: str | None = None
    designation: str | None = None
    sub_type: AuthorSubType = AuthorSubType.ACADEMIC

    @field_validator("sub_type")
    @classmethod
    def _external_sub_type(cls, value: AuthorSubType) -> AuthorSubType:
        if value in (AuthorSubType.FACULTY, AuthorSubType.STUDENT):
            raise ValueError(f"External authors cannot be '{value}'")
        return value

    @property
    def identity(self) -> str:
        return self.email or self.name

    @property
    def display_name(self) -> str:
        return self.name


Author = Annotated[InternalAuthor | ExternalAuthor, Field(discriminator="category")]


class Roster(BaseModel):
    """Ordered list of every contributor, the submitter included.

    The declared counts are what the submission form reported; they are
    checked against the roster by ``validate_roster`` and never used by
    the calculators themselves.
    """

    authors: list[Author] = Field(default_factory=list)
    total_authors: int | None = None
    internal_authors: int | None = None
    internal_co_authors: int | None = None

    @model_validator(mode="after")
    def _fill_paper_positions(self) -> "Roster":
        for index, author in enumerate(self.authors, start=1):
            if author.paper_position is None:
                author.paper_position = index
        return self

    @property
    def submitter(self) -> InternalAuthor | ExternalAuthor | None:
        return next((a for a in self.authors if a.is_submitter), None)

    def internal(self) -> list[InternalAuthor]:
        return [a for a in self.authors if a.is_internal]


class RosterComposition(BaseModel):
    """Head-counts derived from a roster."""

    total: int = 0
    internal: int = 0
    external: int = 0
    internal_co_authors: int = 0
    internal_employee_co_authors: int = 0
    students: int = 0

    @classmethod
    def from_roster(cls, roster: Roster) -> "RosterComposition":
        comp = cls(total=len(roster.authors))
        for author in roster.authors:
            if not author.is_internal:
                comp.external += 1
                continue
            comp.internal += 1
            if author.is_student:
                comp.students += 1
            if not author.is_submitter:
                comp.internal_co_authors += 1
                if not author.is_student:
                    comp.internal_employee_co_authors += 1
        return comp


# ── Policies ─────────────────────────────────────────────────


class QuartileIncentive(BaseModel):
    """Incentive for a journal or proceedings quartile (Q1..Q4, Top 1%/5%)."""

    quartile: str
    incentive_amount: int = 0
    points: int = 0


class SjrRange(BaseModel):
    """Incentive for an inclusive SJR range."""

    min: float = Field(validation_alias=AliasChoices("min", "min_sjr"))
    max: float = Field(validation_alias=AliasChoices("max", "max_sjr"))
    incentive_amount: int = 0
    points: int = 0


class CategoryBonus(BaseModel):
    """Flat incentive for an indexing category."""

    category: str
    incentive_amount: int = 0
    points: int = 0


class NaasRatingIncentive(BaseModel):
    """Incentive for an inclusive NAAS rating range."""

    min_rating: float
    max_rating: float
    incentive_amount: int = 0
    points: int = 0


class RolePercentage(BaseModel):
    """Share of the pool awarded to a primary authorship role."""

    role: AuthorRole
    percentage: float = Field(ge=0, le=100)

    @field_validator("role", mode="before")
    @classmethod
    def _normalize_role(cls, value: Any) -> Any:
        if isinstance(value, str):
            return normalize_role(value)
        return value


def _default_role_percentages() -> list[RolePercentage]:
    return [
        RolePercentage(role=AuthorRole.FIRST, percentage=40),
        RolePercentage(role=AuthorRole.CORRESPONDING, percentage=40),
    ]


class _PolicyBase(BaseModel):
    """Fields common to every policy record."""

    policy_name: str = ""
    is_active: bool = True
    effective_from: date
    effective_to: date | None = None

    @field_validator("effective_from", "effective_to", mode="before")
    @classmethod
    def _date_part(cls, value: Any) -> Any:
        # The portal sends timestamps such as 2025-01-01T00:00:00.000Z.
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value

    def covers(self, on: date) -> bool:
        """Return True when ``on`` falls inside the effective window."""
        if on < self.effective_from:
            return False
        return self.effective_to is None or on <= self.effective_to


class _RoleSplitPolicy(_PolicyBase):
    role_percentages: list[RolePercentage] = Field(
        default_factory=_default_role_percentages
    )

    @model_validator(mode="after")
    def _check_role_percentages(self) -> "_RoleSplitPolicy":
        if self.first_percentage + self.corresponding_percentage > 100:
            raise ValueError(
                "First and corresponding author percentages exceed 100"
            )
        return self

    def _percentage_for(self, role: AuthorRole) -> float:
        match = next((rp for rp in self.role_percentages if rp.role == role), None)
        if match is None:
            defaults = {rp.role: rp.percentage for rp in _default_role_percentages()}
            return defaults.get(role, 0)
        return match.percentage

    @property
    def first_percentage(self) -> float:
        return self._percentage_for(AuthorRole.FIRST)

    @property
    def corresponding_percentage(self) -> float:
        return self._percentage_for(AuthorRole.CORRESPONDING)


def _drop_six_plus(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: v for k, v in value.items() if str(k) != "6+"}
    return value


class ResearchPaperPolicy(_RoleSplitPolicy):
    """Incentive policy for journal research papers."""

    distribution_method: str | None = None
    quartile_incentives: list[QuartileIncentive] = Field(default_factory=list)
    sjr_ranges: list[SjrRange] = Field(default_factory=list)
    indexing_category_bonuses: list[CategoryBonus] = Field(default_factory=list)
    naas_rating_incentives: list[NaasRatingIncentive] = Field(
        default_factory=list
    )
    position_based_distribution: dict[int, float] | None = None

    @field_validator("position_based_distribution", mode="before")
    @classmethod
    def _strip_six_plus(cls, value: Any) -> Any:
        return _drop_six_plus(value)

    @model_validator(mode="after")
    def _check_positions(self) -> "ResearchPaperPolicy":
        table = self.position_based_distribution or {}
        for position in table:
            if not 1 <= position <= MAX_ELIGIBLE_POSITION:
                raise ValueError(f"Position {position} outside 1..5")
        if sum(table.values()) > 100:
            raise ValueError("Position percentages exceed 100")
        return self


class ConferencePolicy(_RoleSplitPolicy):
    """Incentive policy for one conference sub-type."""

    conference_sub_type: ConferenceSubType
    quartile_incentives: list[QuartileIncentive] = Field(default_factory=list)
    flat_incentive_amount: int = 0
    flat_points: int = 0
    international_bonus: int = 0
    best_paper_award_bonus: int = 0


class BookIndexingBonuses(BaseModel):
    """Bonus amounts for book indexing; at most one applies."""

    scopus_indexed: int = 0
    sgt_publication_house: int = 0


class _BookPolicyBase(_PolicyBase):
    authored_incentive_amount: int = 0
    authored_points: int = 0
    edited_incentive_amount: int = 0
    edited_points: int = 0
    indexing_bonuses: BookIndexingBonuses = Field(
        default_factory=BookIndexingBonuses
    )
    international_bonus: int = 0


class BookPolicy(_BookPolicyBase):
    """Incentive policy for whole books."""


class BookChapterPolicy(_BookPolicyBase):
    """Incentive policy for book chapters."""


Policy = ResearchPaperPolicy | ConferencePolicy | BookPolicy | BookChapterPolicy

POLICY_MODELS: dict[PublicationType, type[_PolicyBase]] = {
    PublicationType.RESEARCH_PAPER: ResearchPaperPolicy,
    PublicationType.CONFERENCE_PAPER: ConferencePolicy,
    PublicationType.BOOK: BookPolicy,
    PublicationType.BOOK_CHAPTER: BookChapterPolicy,
}


def parse_policy(
    publication_type: PublicationType, data: dict[str, Any]
) -> Policy:
    """Validate a raw policy record against the model for its type.

    Args:
        publication_type: Type the policy applies to.
        data: Raw policy dictionary (e.g. from YAML or the portal API).

    Returns:
        The matching policy model.

    Raises:
        pydantic.ValidationError: If the record is malformed.
    """
    return POLICY_MODELS[PublicationType(publication_type)].model_validate(data)


# ── Metadata and results ─────────────────────────────────────


class PublicationMetadata(BaseModel):
    """Publication facts the calculators read, as entered on the form."""

    publication_type: PublicationType
    publication_date: date | None = None

    # Research paper
    indexing_categories: list[str] = Field(default_factory=list)
    quartile: str | None = None
    sjr: float | None = None
    impact_factor: float | None = None
    subsidiary_impact_factor: float | None = None
    naas_rating: float | None = None

    # Conference paper
    conference_sub_type: ConferenceSubType | None = None
    proceedings_quartile: str | None = None
    conference_type: str | None = None
    conference_best_paper_award: bool = False
    is_presenter: bool | None = None

    # Book / book chapter
    book_publication_type: BookType | None = None
    book_indexing_type: BookIndexingType | None = None
    national_international: str | None = None

    @property
    def is_international(self) -> bool:
        return "international" in (
            (self.conference_type or "").lower(),
            (self.national_international or "").lower(),
        )


class AuthorShare(BaseModel):
    """What one author receives from a calculation."""

    identity: str
    name: str
    category: AuthorCategory
    incentive: int = 0
    points: int = 0
    note: str = ""


class CalculationResult(BaseModel):
    """Per-author incentives and points for one publication."""

    publication_type: PublicationType
    distribution_method: DistributionMethod | None = None
    pool_amount: int = 0
    pool_points: int = 0
    selected_category: str | None = None
    shares: dict[str, AuthorShare] = Field(default_factory=dict)
    total_incentive: int = 0
    total_points: int = 0


class CalculationRequest(BaseModel):
    """Input bundle accepted by the CLI and the HTTP API.

    ``policy`` is optional; when omitted the engine looks one up.
    """

    roster: Roster
    metadata: PublicationMetadata
    policy: dict[str, Any] | None = None

    def parsed_policy(self) -> Policy | None:
        if self.policy is None:
            return None
        return parse_policy(self.metadata.publication_type, self.policy)
