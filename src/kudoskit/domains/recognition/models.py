"""Pydantic models for the effort-to-recognition domain."""

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    return datetime.now(UTC)


def new_id() -> str:
    return uuid.uuid4().hex


class EffortSource(str, Enum):
    """Integration that reported an effort."""

    JIRA = "jira"
    GITHUB = "github"
    BITBUCKET = "bitbucket"
    SLACK = "slack"
    TEST = "test"
    UNKNOWN = "unknown"

    @classmethod
    def from_tag(cls, tag: str | None) -> "EffortSource":
        """Maps a free-form source tag to a member, case-insensitively. Unrecognized tags map to UNKNOWN."""
        try:
            return cls((tag or "").strip().lower())
        except ValueError:
            return cls.UNKNOWN


class EffortCategory(str, Enum):
    """Classification taxonomy. Declaration order is the tie-break order."""

    BUG_FIX = "bug-fix"
    FEATURE_WORK = "feature-work"
    CODE_REVIEW = "code-review"
    COLLABORATION = "collaboration"
    MENTORING = "mentoring"
    LEARNING = "learning"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)


class ImpactTier(str, Enum):
    TRANSFORMATIONAL = "transformational"
    SIGNIFICANT = "significant"
    MODERATE = "moderate"
    SMALL = "small"
    MINIMAL = "minimal"


class BadgeId(str, Enum):
    """Badges with an award rule. A new badge needs a new member and a new rule."""

    COLLABORATION_HERO = "collaboration-hero"
    PROBLEM_SOLVER = "problem-solver"
    KNOWLEDGE_SHARER = "knowledge-sharer"
    CONSISTENCY_CHAMPION = "consistency-champion"
    INNOVATION_SPARK = "innovation-spark"
    TEAM_PLAYER = "team-player"


class DomainModel(BaseModel):
    """Base model for stored records. Instances are immutable; use ``model_copy(update=...)``."""

    model_config = ConfigDict(
        frozen=True,
        use_enum_values=True,
        validate_default=True,
    )


class Effort(DomainModel):
    """One observed unit of work.

    ``category`` and ``impact_score`` stay ``None`` until the pipeline sets them. The payload
    is the untouched source event.
    """

    id: str | None = None
    employee_id: str | None = None
    source: EffortSource = EffortSource.UNKNOWN
    category: str | None = None
    impact_score: int | None = Field(None, ge=1, le=10)
    payload: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=utc_now)

    @property
    def is_processed(self) -> bool:
        return self.category is not None and self.impact_score is not None


class Recognition(DomainModel):
    id: str = Field(default_factory=new_id)
    effort_id: str | None = None
    employee_id: str | None = None
    message: str = Field(..., min_length=1)
    badge: str
    category: str | None = None
    impact_score: int | None = None
    timestamp: datetime = Field(default_factory=utc_now)


class Badge(DomainModel):
    """Achievement definition. ``criteria`` maps threshold names to numbers."""

    badge_id: str
    name: str
    description: str = ""
    icon: str = ""
    rarity: str | None = None
    points: int | None = None
    criteria: dict[str, float] = Field(default_factory=dict)


class BadgeAward(DomainModel):
    id: str = Field(default_factory=new_id)
    employee_id: str
    badge_id: str
    earned_date: datetime = Field(default_factory=utc_now)
    progress_percentage: int = 100


class BadgeProgress(DomainModel):
    badge_id: str
    earned: bool
    progress: int = Field(..., ge=0, le=100)
    earned_date: datetime | None = None


class Employee(DomainModel):
    id: str
    name: str = ""
    email: str | None = None
    github_username: str | None = None
    slack_id: str | None = None


class WeeklyDigest(DomainModel):
    """Narrative summary of one employee's efforts over ``[week_start, week_end)``."""

    id: str = Field(default_factory=new_id)
    employee_id: str
    week_start: datetime
    week_end: datetime
    summary: str = ""
    narrative: str = ""
    metrics: dict[str, Any] = Field(default_factory=dict)
    highlights: list[str] = Field(default_factory=list)
    top_contributors: list[str] = Field(default_factory=list)
    top_recognitions: list[str] = Field(default_factory=list)
    learning_wins: list[str] = Field(default_factory=list)
    collaboration_score: float = Field(0.0, ge=0.0, le=10.0)
    total_efforts: int = 0
    total_recognitions: int = 0
    created_at: datetime = Field(default_factory=utc_now)
