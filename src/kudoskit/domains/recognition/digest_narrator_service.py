import math
import os
import random
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any

from jinja2 import Environment, FileSystemLoader

from kudoskit.domains.recognition.models import Effort, EffortCategory, Recognition
from kudoskit.domains.recognition.recognition_generator_service import extract_effort_description
from kudoskit.domains.recognition.recognition_templates import (
    DIGEST_CATEGORY_INTROS,
    DIGEST_CLOSERS,
    DIGEST_OPENERS,
    RECOGNITION_HIGHLIGHTS_HEADING,
    UNCATEGORIZED_INTRO,
)
from kudoskit.utils.logging.logging_manager import LogManager

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")
NARRATIVE_TEMPLATE = "digest_narrative.j2"

UNCATEGORIZED = "uncategorized"
EXAMPLES_PER_SECTION = 3
MAX_NARRATIVE_RECOGNITIONS = 5
MAX_HIGHLIGHTS = 5
HIGHLIGHT_MIN_SCORE = 8
MAX_TOP_CONTRIBUTORS = 5
MAX_COLLABORATION_SCORE = 10.0
COLLABORATIVE_CATEGORIES = frozenset(
    {
        EffortCategory.COLLABORATION.value,
        EffortCategory.CODE_REVIEW.value,
        EffortCategory.MENTORING.value,
    }
)
DEFAULT_LEARNING_WIN = "Completed learning activity"


def round_half_up(value: float, digits: int = 1) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


@dataclass
class DigestNarration:
    narrative: str
    highlights: list[str] = field(default_factory=list)
    metrics: dict[str, Any] = field(default_factory=dict)
    top_contributors: list[str] = field(default_factory=list)
    collaboration_score: float = 0.0
    learning_wins: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class DigestNarratorService:
    """Writes the narrative, metrics and highlights for a window of efforts and recognitions."""

    def __init__(self, rng: random.Random | None = None):
        self.logger = LogManager.get_instance().get_logger("DigestNarratorService")
        self.rng = rng or random.Random()
        self.jinja_env = Environment(loader=FileSystemLoader(TEMPLATE_DIR), trim_blocks=True, lstrip_blocks=True)

    def generate_digest(self, recognitions: list[Recognition], efforts: list[Effort]) -> DigestNarration | None:
        """Builds the full narration, or returns None if any part of it cannot be produced."""
        try:
            narration = DigestNarration(
                narrative=self._render_narrative(recognitions, efforts),
                highlights=self.extract_highlights(recognitions),
                metrics=self.calculate_metrics(efforts, recognitions),
                top_contributors=self.extract_top_contributors(efforts),
                collaboration_score=self.calculate_collaboration_score(efforts),
                learning_wins=self.extract_learning_wins(efforts),
            )
            self.logger.info(
                f"Generated digest with {len(efforts)} efforts and {len(recognitions)} recognitions"
            )
            return narration
        except Exception as e:
            self.logger.error(f"Error generating digest: {e}", exc_info=True)
            return None

    def _render_narrative(self, recognitions: list[Recognition], efforts: list[Effort]) -> str:
        sections = []
        for category, group in self._group_by_category(efforts).items():
            sections.append(
                {
                    "intro": self._pick_intro(category),
                    "examples": [extract_effort_description(e.payload) for e in group[:EXAMPLES_PER_SECTION]],
                    "remaining": max(0, len(group) - EXAMPLES_PER_SECTION),
                }
            )

        template = self.jinja_env.get_template(NARRATIVE_TEMPLATE)
        return template.render(
            opener=self.rng.choice(DIGEST_OPENERS),
            sections=sections,
            highlights_heading=RECOGNITION_HIGHLIGHTS_HEADING,
            recognition_messages=[r.message for r in recognitions[:MAX_NARRATIVE_RECOGNITIONS]],
            closer=self.rng.choice(DIGEST_CLOSERS),
        )

    @staticmethod
    def _group_by_category(efforts: list[Effort]) -> dict[str, list[Effort]]:
        """Groups efforts by category, keeping first-appearance order."""
        groups: dict[str, list[Effort]] = {}
        for effort in efforts:
            groups.setdefault(effort.category or UNCATEGORIZED, []).append(effort)
        return groups

    def _pick_intro(self, category: str) -> str:
        intros = DIGEST_CATEGORY_INTROS.get(category)
        return self.rng.choice(intros) if intros else UNCATEGORIZED_INTRO

    def calculate_metrics(self, efforts: list[Effort], recognitions: list[Recognition]) -> dict[str, Any]:
        """Effort-type counts, average impact, recognition rate and active contributors."""
        breakdown = Counter(effort.category or UNCATEGORIZED for effort in efforts)
        scores = [e.impact_score for e in efforts if e.impact_score is not None]
        average_impact = round_half_up(sum(scores) / len(scores)) if scores else 0.0
        recognition_rate = round_half_up(len(recognitions) * 100.0 / max(1, len(efforts)))
        contributors = {e.employee_id for e in efforts if e.employee_id is not None}

        return {
            "effort_type_breakdown": dict(breakdown),
            "average_impact_score": average_impact,
            "recognition_rate": recognition_rate,
            "active_contributors": len(contributors),
        }

    def extract_highlights(self, recognitions: list[Recognition]) -> list[str]:
        return [
            r.message
            for r in recognitions
            if r.impact_score is not None and r.impact_score >= HIGHLIGHT_MIN_SCORE
        ][:MAX_HIGHLIGHTS]

    def extract_top_contributors(self, efforts: list[Effort]) -> list[str]:
        """Employees with the most efforts. Equal counts keep the order they first appear in."""
        counts = Counter(e.employee_id for e in efforts if e.employee_id is not None)
        return [employee_id for employee_id, _ in counts.most_common(MAX_TOP_CONTRIBUTORS)]

    def calculate_collaboration_score(self, efforts: list[Effort]) -> float:
        if not efforts:
            return 0.0
        collaborative = sum(1 for e in efforts if e.category in COLLABORATIVE_CATEGORIES)
        return min(MAX_COLLABORATION_SCORE, collaborative / len(efforts) * 20.0)

    def extract_learning_wins(self, efforts: list[Effort]) -> list[str]:
        return [
            str(e.payload.get("description") or DEFAULT_LEARNING_WIN)
            for e in efforts
            if e.category == EffortCategory.LEARNING.value
        ]

    def generate_personalized_intro(self, team_name: str, effort_count: int, recognition_count: int) -> str:
        return (
            f"Hi {team_name} team! 🎉\n\n"
            "Here's a look at the week:\n"
            f"- {effort_count} efforts logged\n"
            f"- {recognition_count} recognitions given\n\n"
            "Let's dive in!\n\n"
        )

    def generate_category_section(self, category: str | None, efforts: list[Effort]) -> str:
        """Markdown section listing every effort of one category with its impact score."""
        lines = [f"**{self._pick_intro(category or UNCATEGORIZED)}**"]
        for effort in efforts:
            line = f"- {extract_effort_description(effort.payload)}"
            if effort.impact_score is not None:
                line += f" (Impact: {effort.impact_score}/10)"
            lines.append(line)
        return "\n".join(lines) + "\n"

    def generate_metrics_summary(self, metrics: dict[str, Any]) -> str:
        lines = ["", "**Weekly Metrics:**"]
        if "average_impact_score" in metrics:
            lines.append(f"- Average Impact Score: {metrics['average_impact_score']}/10")
        if "recognition_rate" in metrics:
            lines.append(f"- Recognition Rate: {metrics['recognition_rate']}%")
        if "active_contributors" in metrics:
            lines.append(f"- Active Contributors: {metrics['active_contributors']}")
        return "\n".join(lines) + "\n"
