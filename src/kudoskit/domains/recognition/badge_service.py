from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable

from kudoskit.domains.recognition.models import (
    Badge,
    BadgeAward,
    BadgeId,
    BadgeProgress,
    Effort,
    EffortCategory,
)
from kudoskit.domains.recognition.stores import BadgeAwardStore, BadgeStore, EffortStore
from kudoskit.utils.logging.logging_manager import LogManager

MAX_UNEARNED_PROGRESS = 99
CONSISTENCY_WINDOW_DAYS = 30


@dataclass(frozen=True)
class Requirement:
    """One threshold of a badge rule: ``current`` must reach ``required``.

    Thresholds stay as configured, so a fractional threshold is never rounded down.
    """

    name: str
    current: int
    required: float

    @property
    def met(self) -> bool:
        return self.current >= self.required

    @property
    def percent(self) -> int:
        if self.required <= 0:
            return 100
        return min(100, int(self.current * 100 // self.required))


def _criterion(criteria: dict[str, Any], name: str, default: float) -> float:
    value = criteria.get(name)
    return default if value is None else float(value)


def _count(efforts: list[Effort], category: EffortCategory, min_score: float | None = None) -> int:
    return sum(
        1
        for e in efforts
        if e.category == category.value
        and (min_score is None or (e.impact_score is not None and e.impact_score >= min_score))
    )


def _collaboration_hero(efforts: list[Effort], criteria: dict[str, Any]) -> list[Requirement]:
    required = _criterion(criteria, "minCollaborationEfforts", 10)
    return [Requirement("collaboration efforts", _count(efforts, EffortCategory.COLLABORATION), required)]


def _problem_solver(efforts: list[Effort], criteria: dict[str, Any]) -> list[Requirement]:
    min_score = _criterion(criteria, "minImpactScore", 8)
    required = _criterion(criteria, "minBugFixes", 5)
    return [Requirement("high-impact bug fixes", _count(efforts, EffortCategory.BUG_FIX, min_score), required)]


def _knowledge_sharer(efforts: list[Effort], criteria: dict[str, Any]) -> list[Requirement]:
    return [
        Requirement(
            "mentoring efforts",
            _count(efforts, EffortCategory.MENTORING),
            _criterion(criteria, "minMentoringEfforts", 5),
        ),
        Requirement(
            "code reviews",
            _count(efforts, EffortCategory.CODE_REVIEW),
            _criterion(criteria, "minCodeReviews", 10),
        ),
    ]


def _consistency_champion(efforts: list[Effort], criteria: dict[str, Any]) -> list[Requirement]:
    required = _criterion(criteria, "minDailyEfforts", 3) * CONSISTENCY_WINDOW_DAYS
    # An empty history never qualifies, even with a zero threshold.
    return [Requirement("total efforts", len(efforts), max(required, 1))]


def _innovation_spark(efforts: list[Effort], criteria: dict[str, Any]) -> list[Requirement]:
    min_score = _criterion(criteria, "minImpactScore", 9)
    required = _criterion(criteria, "minInnovativeFeatures", 3)
    return [
        Requirement("high-impact features", _count(efforts, EffortCategory.FEATURE_WORK, min_score), required)
    ]


def _team_player(efforts: list[Effort], criteria: dict[str, Any]) -> list[Requirement]:
    required = _criterion(criteria, "minTeamEfforts", 20)
    return [Requirement("team efforts", _count(efforts, EffortCategory.COLLABORATION), required)]


BADGE_RULES: MappingProxyType = MappingProxyType(
    {
        BadgeId.COLLABORATION_HERO.value: _collaboration_hero,
        BadgeId.PROBLEM_SOLVER.value: _problem_solver,
        BadgeId.KNOWLEDGE_SHARER.value: _knowledge_sharer,
        BadgeId.CONSISTENCY_CHAMPION.value: _consistency_champion,
        BadgeId.INNOVATION_SPARK.value: _innovation_spark,
        BadgeId.TEAM_PLAYER.value: _team_player,
    }
)

# category -> (minimum impact score, badge awarded straight from the pipeline)
EFFORT_BADGE_SHORTCUTS: MappingProxyType = MappingProxyType(
    {
        EffortCategory.BUG_FIX.value: (8, BadgeId.PROBLEM_SOLVER),
        EffortCategory.FEATURE_WORK.value: (9, BadgeId.INNOVATION_SPARK),
        EffortCategory.CODE_REVIEW.value: (7, BadgeId.KNOWLEDGE_SHARER),
        EffortCategory.COLLABORATION.value: (7, BadgeId.COLLABORATION_HERO),
        EffortCategory.MENTORING.value: (8, BadgeId.KNOWLEDGE_SHARER),
    }
)


class BadgeService:
    """Evaluates badge criteria against effort history and issues awards at most once per employee."""

    def __init__(self, badge_store: BadgeStore, award_store: BadgeAwardStore, effort_store: EffortStore):
        self.logger = LogManager.get_instance().get_logger("BadgeService")
        self.badge_store = badge_store
        self.award_store = award_store
        self.effort_store = effort_store

    def get_all_badges(self) -> list[Badge]:
        return self.badge_store.find_all()

    def get_badges_by_employee(self, employee_id: str) -> list[Badge]:
        """Definitions of the badges the employee has earned."""
        earned_ids = [award.badge_id for award in self.award_store.find_by_employee(employee_id)]
        self.logger.debug(f"Employee {employee_id} has earned badges: {earned_ids}")
        badges = []
        for badge_id in earned_ids:
            badge = self.badge_store.find_by_badge_id(badge_id)
            if badge is None:
                self.logger.warning(f"Award for unknown badge '{badge_id}' on employee {employee_id}")
                continue
            badges.append(badge)
        return badges

    def award_badge(self, employee_id: str, badge_id: str) -> BadgeAward:
        """Awards a badge, or returns the existing award if the employee already has it."""
        award, created = self.award_store.create_if_absent(BadgeAward(employee_id=employee_id, badge_id=badge_id))
        if created:
            self.logger.info(f"Badge {badge_id} awarded to employee {employee_id}")
        else:
            self.logger.debug(f"Badge {badge_id} already earned by employee {employee_id}")
        return award

    def should_award_badge(self, employee_id: str, badge: Badge, efforts: list[Effort] | None = None) -> bool:
        """True when every threshold of the badge's rule is met by the employee's effort history."""
        requirements = self._requirements(employee_id, badge, efforts)
        return requirements is not None and all(r.met for r in requirements)

    def evaluate_badge_criteria(self, employee_id: str) -> list[BadgeAward]:
        """Checks every badge definition and awards the satisfied ones.

        Returns:
            list[BadgeAward]: Awards for every satisfied badge, whether new or already held.
        """
        self.logger.info(f"Evaluating badge criteria for employee {employee_id}")
        efforts = self.effort_store.find_by_employee(employee_id)

        awards = []
        for badge in self.get_all_badges():
            if self.should_award_badge(employee_id, badge, efforts):
                awards.append(self.award_badge(employee_id, badge.badge_id))
        self.logger.info(f"Employee {employee_id} satisfies {len(awards)} badge(s)")
        return awards

    def award_badge_for_effort(self, effort: Effort) -> BadgeAward | None:
        """Awards the badge a single high-impact effort earns by itself, if any."""
        shortcut = EFFORT_BADGE_SHORTCUTS.get(effort.category)
        if shortcut is None or effort.impact_score is None:
            return None

        min_score, badge_id = shortcut
        if effort.impact_score < min_score:
            return None
        if not effort.employee_id:
            self.logger.warning(f"Effort {effort.id} qualifies for {badge_id.value} but has no employee")
            return None

        self.logger.info(
            f"Awarding badge for effort {effort.id} of type {effort.category} with impact {effort.impact_score}"
        )
        return self.award_badge(effort.employee_id, badge_id.value)

    def get_badge_progress(self, employee_id: str, badge_id: str) -> BadgeProgress | None:
        """Progress toward one badge: 100 once earned, otherwise at most 99. None for an unknown badge."""
        badge = self.badge_store.find_by_badge_id(badge_id)
        if badge is None:
            return None

        earned = self.award_store.find_by_employee_and_badge(employee_id, badge_id)
        if earned is not None:
            return BadgeProgress(badge_id=badge_id, earned=True, progress=100, earned_date=earned.earned_date)

        requirements = self._requirements(employee_id, badge)
        if not requirements:
            progress = 0
        else:
            average = sum(r.percent for r in requirements) // len(requirements)
            progress = min(average, MAX_UNEARNED_PROGRESS)
        return BadgeProgress(badge_id=badge_id, earned=False, progress=progress)

    def _requirements(
        self, employee_id: str, badge: Badge, efforts: list[Effort] | None = None
    ) -> list[Requirement] | None:
        rule: Callable[[list[Effort], dict[str, Any]], list[Requirement]] | None = BADGE_RULES.get(badge.badge_id)
        if rule is None:
            self.logger.warning(f"No award rule for badge '{badge.badge_id}'")
            return None
        if efforts is None:
            efforts = self.effort_store.find_by_employee(employee_id)
        return rule(efforts, badge.criteria)
