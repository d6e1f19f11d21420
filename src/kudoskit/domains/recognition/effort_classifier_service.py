import re
from types import MappingProxyType
from typing import Any

from kudoskit.domains.recognition.models import Effort, EffortCategory
from kudoskit.utils.logging.logging_manager import LogManager

DEFAULT_CATEGORY = EffortCategory.COLLABORATION.value
KEYWORD_WEIGHT = 10
UNKNOWN_CATEGORY_CONFIDENCE = 30
ERROR_CONFIDENCE = 50

CATEGORY_KEYWORDS: MappingProxyType = MappingProxyType(
    {
        EffortCategory.BUG_FIX: ("bug", "fix", "issue", "error", "crash", "defect", "patch"),
        EffortCategory.FEATURE_WORK: ("feature", "enhancement", "epic", "story", "implement", "build", "develop"),
        EffortCategory.CODE_REVIEW: ("review", "approved", "requested changes", "comment", "cr", "peer review"),
        EffortCategory.COLLABORATION: ("discuss", "meeting", "sync", "pair", "together", "help", "support"),
        EffortCategory.MENTORING: ("mentor", "guide", "teach", "onboard", "junior", "training", "guidance"),
        EffortCategory.LEARNING: ("learn", "study", "course", "training", "skill", "development", "education"),
    }
)

_KEYWORD_PATTERNS: dict[str, tuple[re.Pattern, ...]] = {
    category.value: tuple(re.compile(rf"\b{re.escape(keyword)}\b") for keyword in keywords)
    for category, keywords in CATEGORY_KEYWORDS.items()
}

# (nested section, fields) read in this order; None means top-level fields.
TEXT_FIELDS: tuple[tuple[str | None, tuple[str, ...]], ...] = (
    ("issue", ("summary", "description")),
    ("pull_request", ("title", "body")),
    ("commit", ("message",)),
    ("event", ("text",)),
    (None, ("text", "title", "description")),
)


def extract_text(payload: dict[str, Any]) -> str:
    """Flattens the descriptive fields of a payload into one lowercase blob.

    Raises:
        TypeError: If a nested section is present but is not an object.
    """
    parts: list[str] = []
    for section_key, fields in TEXT_FIELDS:
        if section_key is None:
            section = payload
        else:
            section = payload.get(section_key)
            if section is None:
                continue
            if not isinstance(section, dict):
                raise TypeError(f"'{section_key}' is {type(section).__name__}, expected an object")
        parts.extend(str(section.get(field) or "") for field in fields)
    return " ".join(parts).lower()


def count_keyword_matches(text: str, category: str) -> int:
    """Number of distinct keywords of ``category`` present in ``text`` as whole words."""
    return sum(1 for pattern in _KEYWORD_PATTERNS[category] if pattern.search(text))


class EffortClassifierService:
    """Assigns one taxonomy category to an effort using keyword evidence."""

    def __init__(self):
        self.logger = LogManager.get_instance().get_logger("EffortClassifierService")

    def classify_effort(self, effort: Effort) -> str:
        """Returns the effort's category.

        A valid explicit category always wins. Otherwise the category with the strictly highest
        keyword evidence is chosen, ties going to the first in declaration order. No evidence,
        empty text or any extraction error yields ``collaboration``.
        """
        try:
            if effort.category:
                if effort.category in _KEYWORD_PATTERNS:
                    return effort.category
                self.logger.warning(
                    f"Effort {effort.id} has unknown category '{effort.category}', classifying by keywords"
                )

            text = extract_text(effort.payload)
            category = self._classify_by_keywords(text)
            self.logger.debug(f"Classified effort {effort.id} as: {category}")
            return category
        except Exception as e:
            self.logger.error(f"Error classifying effort {getattr(effort, 'id', None)}: {e}", exc_info=True)
            return DEFAULT_CATEGORY

    @staticmethod
    def _classify_by_keywords(text: str) -> str:
        if not text.strip():
            return DEFAULT_CATEGORY

        best_category, best_score = DEFAULT_CATEGORY, 0
        for category in EffortCategory.values():
            score = count_keyword_matches(text, category) * KEYWORD_WEIGHT
            if score > best_score:
                best_category, best_score = category, score
        return best_category

    def get_confidence_score(self, effort: Effort, category: str) -> int:
        """Share of ``category``'s keywords found in the effort text, as a 0-100 integer."""
        try:
            patterns = _KEYWORD_PATTERNS.get(category)
            if patterns is None:
                return UNKNOWN_CATEGORY_CONFIDENCE

            matches = count_keyword_matches(extract_text(effort.payload), category)
            return min(100, matches * 100 // len(patterns))
        except Exception as e:
            self.logger.error(f"Error calculating confidence score: {e}", exc_info=True)
            return ERROR_CONFIDENCE
