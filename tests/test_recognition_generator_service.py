import random

import pytest

from kudoskit.domains.recognition.error import RecognitionGenerationError
from kudoskit.domains.recognition.models import Effort, EffortCategory, Recognition
from kudoskit.domains.recognition.recognition_generator_service import (
    RecognitionGeneratorService,
    extract_effort_description,
)
from kudoskit.domains.recognition.recognition_templates import (
    BADGE_GLYPHS,
    GENERIC_THANK_YOU,
    IMPACT_PHRASES,
    RECOGNITION_TEMPLATES,
)
from kudoskit.domains.recognition.stores import InMemoryRecognitionStore, RecognitionStore


class FailingRecognitionStore(RecognitionStore):
    def create(self, recognition):
        raise RuntimeError("store is down")

    def find_by_effort_id(self, effort_id):
        return None

    def find_by_employee(self, employee_id):
        return []


def _rendered(templates, description):
    return [t.replace("{effort}", description) for t in templates]


@pytest.fixture
def generator(rng):
    return RecognitionGeneratorService(rng=rng)


def test_tables_cover_every_category():
    assert set(RECOGNITION_TEMPLATES) == set(EffortCategory.values())
    assert set(BADGE_GLYPHS) == set(EffortCategory.values())
    assert all("{effort}" in t for templates in RECOGNITION_TEMPLATES.values() for t in templates)


@pytest.mark.parametrize(
    "category, glyph",
    [
        ("feature-work", "🚀"),
        ("bug-fix", "🔧"),
        ("code-review", "👀"),
        ("collaboration", "🤝"),
        ("learning", "📚"),
        ("mentoring", "👨‍🏫"),
        ("unknown", "⭐"),
        (None, "⭐"),
    ],
)
def test_assign_badge(generator, category, glyph):
    assert generator.assign_badge(category) == glyph


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"title": "Title", "summary": "Summary"}, "Title"),
        ({"summary": "Summary", "issue": {"summary": "Issue"}}, "Summary"),
        ({"issue": {"summary": "Issue"}, "pull_request": {"title": "PR"}}, "Issue"),
        ({"pull_request": {"title": "PR"}, "commit": {"message": "Commit"}}, "PR"),
        ({"commit": {"message": "First line\n\nDetails"}}, "First line"),
        ({}, "your contribution"),
        ({"issue": "broken"}, "your contribution"),
    ],
)
def test_extract_effort_description(payload, expected):
    assert extract_effort_description(payload) == expected


def test_moderate_message_uses_category_template_without_phrase(generator):
    effort = Effort(category="bug-fix", impact_score=5, payload={"title": "login crash"})
    message = generator.generate_message(effort)
    assert message in _rendered(RECOGNITION_TEMPLATES["bug-fix"], "login crash")


def test_significant_message_appends_impact_phrase(generator):
    effort = Effort(category="feature-work", impact_score=8, payload={"title": "dark mode"})
    message = generator.generate_message(effort)
    candidates = [
        f"{base} {phrase}"
        for base in _rendered(RECOGNITION_TEMPLATES["feature-work"], "dark mode")
        for phrase in IMPACT_PHRASES["significant"]
    ]
    assert message in candidates


def test_transformational_message_appends_transformational_phrase(generator):
    effort = Effort(category="mentoring", impact_score=10, payload={})
    message = generator.generate_message(effort)
    assert any(message.endswith(phrase) for phrase in IMPACT_PHRASES["transformational"])


def test_unknown_category_uses_collaboration_templates(generator):
    effort = Effort(category="gardening", impact_score=3, payload={"title": "weeding"})
    assert generator.generate_message(effort) in _rendered(RECOGNITION_TEMPLATES["collaboration"], "weeding")


def test_seeded_rng_makes_messages_reproducible():
    effort = Effort(category="learning", impact_score=9, payload={"title": "Rust course"})
    first = RecognitionGeneratorService(rng=random.Random(7)).generate_message(effort)
    second = RecognitionGeneratorService(rng=random.Random(7)).generate_message(effort)
    assert first == second


def test_message_error_falls_back_to_generic_text(generator):
    class BrokenEffort:
        id = "broken"
        category = "bug-fix"
        impact_score = 5
        payload = None

    assert generator.generate_message(BrokenEffort()) == GENERIC_THANK_YOU


def test_generate_recognition_copies_effort_fields_and_persists(rng):
    store = InMemoryRecognitionStore()
    generator = RecognitionGeneratorService(store, rng=rng)
    effort = Effort(id="e1", employee_id="u1", category="code-review", impact_score=6, payload={"title": "PR 42"})

    recognition = generator.generate_recognition(effort)

    assert isinstance(recognition, Recognition)
    assert recognition.effort_id == "e1"
    assert recognition.employee_id == "u1"
    assert recognition.category == "code-review"
    assert recognition.impact_score == 6
    assert recognition.badge == "👀"
    assert recognition.message
    assert store.find_by_effort_id("e1") == recognition


def test_generate_recognition_rejects_non_effort(generator):
    with pytest.raises(RecognitionGenerationError):
        generator.generate_recognition({"id": "not-an-effort"})


def test_generate_recognition_wraps_store_failure(rng):
    generator = RecognitionGeneratorService(FailingRecognitionStore(), rng=rng)
    with pytest.raises(RecognitionGenerationError):
        generator.generate_recognition(Effort(id="e1", category="bug-fix", impact_score=6))


def test_bulk_generation_returns_one_recognition_per_effort(generator):
    efforts = [Effort(id=f"e{i}", category="bug-fix", impact_score=6) for i in range(4)]
    recognitions = generator.generate_bulk_recognitions(efforts)
    assert [r.effort_id for r in recognitions] == ["e0", "e1", "e2", "e3"]


def test_bulk_generation_skips_malformed_entries(generator):
    efforts = [Effort(id="e0", category="bug-fix", impact_score=6), None, Effort(id="e1", category="learning")]
    recognitions = generator.generate_bulk_recognitions(efforts)
    assert [r.effort_id for r in recognitions] == ["e0", "e1"]


def test_personalized_message(generator):
    effort = Effort(category="collaboration", impact_score=4, payload={"title": "pairing session"})
    message = generator.generate_personalized_message(effort, "Sam", ["Team Player", "Problem Solver"])
    assert message.startswith("Hey Sam! ")
    assert message.endswith("\n\nYou've earned: Team Player, Problem Solver")


def test_personalized_message_without_badges(generator):
    message = generator.generate_personalized_message(Effort(category="learning", impact_score=2), "Sam")
    assert message.startswith("Hey Sam! ")
    assert "You've earned" not in message
