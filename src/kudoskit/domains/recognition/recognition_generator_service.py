import random
from typing import Any

from kudoskit.domains.recognition.error import RecognitionGenerationError
from kudoskit.domains.recognition.impact_scoring_service import get_impact_category
from kudoskit.domains.recognition.models import Effort, EffortCategory, Recognition
from kudoskit.domains.recognition.recognition_templates import (
    BADGE_GLYPHS,
    DEFAULT_BADGE_GLYPH,
    DEFAULT_DESCRIPTION,
    EFFORT_PLACEHOLDER,
    GENERIC_THANK_YOU,
    IMPACT_PHRASES,
    RECOGNITION_TEMPLATES,
)
from kudoskit.domains.recognition.stores import RecognitionStore
from kudoskit.utils.logging.logging_manager import LogManager

# (nested section or None for top level, field) in lookup order.
DESCRIPTION_FIELDS = (
    (None, "title"),
    (None, "summary"),
    ("issue", "summary"),
    ("pull_request", "title"),
)


def extract_effort_description(payload: dict[str, Any]) -> str:
    """Short human-readable description of the work behind a payload.

    Falls back to ``"your contribution"`` when no descriptive field is present.
    """
    for section_key, field in DESCRIPTION_FIELDS:
        section = payload if section_key is None else payload.get(section_key)
        if isinstance(section, dict) and section.get(field):
            return str(section[field]).strip()

    commit = payload.get("commit")
    if isinstance(commit, dict) and commit.get("message"):
        first_line = str(commit["message"]).strip().splitlines()
        if first_line and first_line[0].strip():
            return first_line[0].strip()

    return DEFAULT_DESCRIPTION


def assign_badge(category: str | None) -> str:
    """Glyph shown next to a recognition for the given category."""
    return BADGE_GLYPHS.get(category, DEFAULT_BADGE_GLYPH)


class RecognitionGeneratorService:
    """Composes recognition messages from category templates and persists Recognition records.

    Template and phrase choice is random. Pass a seeded ``random.Random`` to make it
    reproducible.
    """

    def __init__(self, recognition_store: RecognitionStore | None = None, rng: random.Random | None = None):
        self.logger = LogManager.get_instance().get_logger("RecognitionGeneratorService")
        self.recognition_store = recognition_store
        self.rng = rng or random.Random()

    def generate_recognition(self, effort: Effort) -> Recognition:
        """Builds (and stores, when a store is configured) the recognition for one effort.

        Raises:
            RecognitionGenerationError: If the input is not an Effort or the record cannot be stored.
        """
        if not isinstance(effort, Effort):
            raise RecognitionGenerationError(None, TypeError(f"expected an Effort, got {type(effort).__name__}"))

        recognition = Recognition(
            effort_id=effort.id,
            employee_id=effort.employee_id,
            message=self.generate_message(effort),
            badge=self.assign_badge(effort.category),
            category=effort.category,
            impact_score=effort.impact_score,
        )

        if self.recognition_store is not None:
            try:
                recognition = self.recognition_store.create(recognition)
            except Exception as e:
                raise RecognitionGenerationError(effort.id, e) from e

        self.logger.info(f"Generated recognition for effort {effort.id}: {recognition.message}")
        return recognition

    def generate_message(self, effort: Effort) -> str:
        """Recognition text for an effort. Never raises; falls back to a generic thank-you."""
        try:
            tier = get_impact_category(effort.impact_score)
            templates = RECOGNITION_TEMPLATES.get(
                effort.category, RECOGNITION_TEMPLATES[EffortCategory.COLLABORATION.value]
            )
            template = self.rng.choice(templates)
            message = template.replace(EFFORT_PLACEHOLDER, extract_effort_description(effort.payload))

            phrases = IMPACT_PHRASES.get(tier.value)
            if phrases:
                message = f"{message} {self.rng.choice(phrases)}"
            return message
        except Exception as e:
            self.logger.error(f"Error generating message for effort {getattr(effort, 'id', None)}: {e}", exc_info=True)
            return GENERIC_THANK_YOU

    @staticmethod
    def assign_badge(category: str | None) -> str:
        return assign_badge(category)

    def generate_bulk_recognitions(self, efforts: list[Effort]) -> list[Recognition]:
        """One recognition per effort. Efforts that fail are logged and left out of the result."""
        recognitions = []
        for effort in efforts:
            try:
                recognitions.append(self.generate_recognition(effort))
            except Exception as e:
                self.logger.error(f"Error generating recognition for effort {getattr(effort, 'id', None)}: {e}")
        self.logger.info(f"Generated {len(recognitions)} of {len(efforts)} recognitions")
        return recognitions

    def generate_personalized_message(
        self, effort: Effort, recipient_name: str, award_badges: list[str] | None = None
    ) -> str:
        """Addresses the recognition to a person and lists any badges they just earned."""
        message = f"Hey {recipient_name}! {self.generate_message(effort)}"
        if award_badges:
            message += f"\n\nYou've earned: {', '.join(award_badges)}"
        return message
