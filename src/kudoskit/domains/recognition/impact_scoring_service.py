import json
from dataclasses import asdict, dataclass
from types import MappingProxyType
from typing import Any

from kudoskit.domains.recognition.models import Effort, EffortCategory, ImpactTier
from kudoskit.utils.logging.logging_manager import LogManager

MIN_SCORE = 1
MAX_SCORE = 10
DEFAULT_SCORE = 5

BASE_SCORES: MappingProxyType = MappingProxyType(
    {
        EffortCategory.BUG_FIX.value: 5,
        EffortCategory.FEATURE_WORK.value: 7,
        EffortCategory.CODE_REVIEW.value: 4,
        EffortCategory.COLLABORATION.value: 3,
        EffortCategory.MENTORING.value: 6,
        EffortCategory.LEARNING.value: 2,
    }
)

COMPLEXITY_CAP = 3
SCOPE_CAP = 2
QUALITY_CAP = 2

# (any of these terms, bonus)
COMPLEXITY_TERMS = (
    (("refactor", "architecture"), 2),
    (("performance", "optimization"), 2),
    (("security", "vulnerability"), 2),
    (("database", "migration"), 2),
)
SCOPE_TERMS = (
    (("api", "endpoint"), 1),
    (("multiple", "several"), 1),
    (("cross-", "team"), 1),
    (("breaking", "migration"), 2),
)
QUALITY_TERMS = (
    (("test", "testing"), 1),
    (("documentation", "doc"), 1),
    (("approved",), 1),
    (("merged",), 1),
)

# Tier thresholds, highest first.
TIER_THRESHOLDS = (
    (9, ImpactTier.TRANSFORMATIONAL),
    (7, ImpactTier.SIGNIFICANT),
    (5, ImpactTier.MODERATE),
    (3, ImpactTier.SMALL),
)


def get_impact_category(score: int | None) -> ImpactTier:
    """Maps an impact score to its tier. A missing score counts as the neutral default."""
    value = DEFAULT_SCORE if score is None else score
    for threshold, tier in TIER_THRESHOLDS:
        if value >= threshold:
            return tier
    return ImpactTier.MINIMAL


@dataclass(frozen=True)
class ScoreBreakdown:
    total_score: int
    base_score: int
    complexity_bonus: int
    scope_bonus: int
    quality_bonus: int
    category: str | None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _term_bonus(text: str, rules: tuple[tuple[tuple[str, ...], int], ...]) -> int:
    return sum(bonus for terms, bonus in rules if any(term in text for term in terms))


def _pr_number(pull_request: dict[str, Any], key: str) -> float | None:
    value = pull_request.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


class ImpactScoringService:
    """Rates an effort's significance on a 1-10 scale.

    The score is the category base plus three capped bonuses (complexity, scope and quality)
    found in the lowercased JSON text of the payload and in numeric pull request metadata.
    """

    def __init__(self):
        self.logger = LogManager.get_instance().get_logger("ImpactScoringService")

    def score_impact(self, effort: Effort) -> int:
        try:
            score = self._compute(effort).total_score
            self.logger.debug(f"Scored effort {effort.id} with impact score: {score}")
            return score
        except Exception as e:
            self.logger.error(f"Error scoring effort {getattr(effort, 'id', None)}: {e}", exc_info=True)
            return DEFAULT_SCORE

    def get_score_breakdown(self, effort: Effort) -> ScoreBreakdown | None:
        """Returns each component of the score, or None when the payload cannot be analyzed."""
        try:
            return self._compute(effort)
        except Exception as e:
            self.logger.error(f"Error getting score breakdown: {e}", exc_info=True)
            return None

    def _compute(self, effort: Effort) -> ScoreBreakdown:
        payload = effort.payload
        text = json.dumps(payload, default=str).lower()
        pull_request = payload.get("pull_request")
        if pull_request is not None and not isinstance(pull_request, dict):
            raise TypeError(f"'pull_request' is {type(pull_request).__name__}, expected an object")
        pull_request = pull_request or {}

        base = BASE_SCORES.get(effort.category, DEFAULT_SCORE)
        complexity = self._analyze_complexity(text, pull_request)
        scope = self._analyze_scope(text, pull_request)
        quality = self._analyze_quality(text, pull_request)
        total = max(MIN_SCORE, min(MAX_SCORE, base + complexity + scope + quality))

        return ScoreBreakdown(
            total_score=total,
            base_score=base,
            complexity_bonus=complexity,
            scope_bonus=scope,
            quality_bonus=quality,
            category=effort.category,
        )

    @staticmethod
    def _analyze_complexity(text: str, pull_request: dict[str, Any]) -> int:
        complexity = _term_bonus(text, COMPLEXITY_TERMS)
        additions = _pr_number(pull_request, "additions")
        deletions = _pr_number(pull_request, "deletions")
        if additions is not None and additions > 500:
            complexity += 1
        if deletions is not None and deletions > 200:
            complexity += 1
        return min(complexity, COMPLEXITY_CAP)

    @staticmethod
    def _analyze_scope(text: str, pull_request: dict[str, Any]) -> int:
        scope = _term_bonus(text, SCOPE_TERMS)
        changed_files = _pr_number(pull_request, "changed_files")
        if changed_files is not None and changed_files > 5:
            scope += 1
        return min(scope, SCOPE_CAP)

    @staticmethod
    def _analyze_quality(text: str, pull_request: dict[str, Any]) -> int:
        quality = _term_bonus(text, QUALITY_TERMS)
        review_comments = _pr_number(pull_request, "review_comments")
        if review_comments is not None and review_comments > 3:
            quality += 1
        if pull_request.get("merged") is True:
            quality += 1
        return min(quality, QUALITY_CAP)
