from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime, timedelta

import pytest

from kudoskit.domains.recognition.error import StoreError
from kudoskit.domains.recognition.json_store import (
    JsonBadgeAwardStore,
    JsonBadgeStore,
    JsonEffortStore,
    JsonEmployeeDirectory,
    JsonRecognitionStore,
    JsonWeeklyDigestStore,
)
from kudoskit.domains.recognition.models import BadgeAward, Effort, Recognition, WeeklyDigest
from kudoskit.utils.data.json_manager import JSONManager


def test_effort_round_trip(tmp_path):
    store = JsonEffortStore(str(tmp_path))
    created = store.create(Effort(employee_id="u1", source="github", payload={"title": "Add cache"}))

    assert created.id
    reopened = JsonEffortStore(str(tmp_path))
    assert reopened.find_by_id(created.id) == created
    assert reopened.find_by_employee("u1") == [created]
    assert reopened.find_by_employee("u2") == []


def test_effort_update(tmp_path):
    store = JsonEffortStore(str(tmp_path))
    created = store.create(Effort(employee_id="u1"))

    store.update(created.model_copy(update={"category": "bug-fix", "impact_score": 6}))

    stored = store.find_by_id(created.id)
    assert stored.category == "bug-fix"
    assert stored.impact_score == 6
    assert len(store.find_all()) == 1


def test_updating_unknown_effort_fails(tmp_path):
    store = JsonEffortStore(str(tmp_path))
    with pytest.raises(StoreError):
        store.update(Effort(id="missing", employee_id="u1"))
    assert store.find_all() == []


def test_recognition_lookup(tmp_path):
    store = JsonRecognitionStore(str(tmp_path))
    recognition = store.create(Recognition(effort_id="e1", employee_id="u1", message="Nice work", badge="🐛"))

    assert store.find_by_effort_id("e1") == recognition
    assert store.find_by_effort_id("e2") is None
    assert store.find_by_employee("u1") == [recognition]


def test_badges_are_seeded_once(tmp_path):
    store = JsonBadgeStore(str(tmp_path))
    assert {b.badge_id for b in store.find_all()} == {
        "collaboration-hero",
        "problem-solver",
        "knowledge-sharer",
        "consistency-champion",
        "innovation-spark",
        "team-player",
    }

    badges_file = tmp_path / "badges.json"
    JSONManager.write_json([{"badge_id": "custom", "name": "Custom"}], str(badges_file))

    assert [b.badge_id for b in JsonBadgeStore(str(tmp_path)).find_all()] == ["custom"]


def test_concurrent_startup_seeds_badges_once(tmp_path):
    with ThreadPoolExecutor(max_workers=8) as executor:
        stores = list(executor.map(lambda _: JsonBadgeStore(str(tmp_path)), range(8)))

    badge_ids = [b.badge_id for b in stores[0].find_all()]
    assert len(badge_ids) == 6
    assert len(set(badge_ids)) == 6


def test_empty_badge_collection_is_seeded(tmp_path):
    JSONManager.write_json([], str(tmp_path / "badges.json"))
    assert len(JsonBadgeStore(str(tmp_path)).find_all()) == 6


def test_create_if_absent_keeps_first_award(tmp_path):
    store = JsonBadgeAwardStore(str(tmp_path))
    first, created = store.create_if_absent(BadgeAward(employee_id="u1", badge_id="problem-solver"))
    again, created_again = store.create_if_absent(BadgeAward(employee_id="u1", badge_id="problem-solver"))

    assert created is True
    assert created_again is False
    assert again.id == first.id
    assert store.find_by_employee_and_badge("u1", "problem-solver") == first


def test_concurrent_awards_store_a_single_record(tmp_path):
    store = JsonBadgeAwardStore(str(tmp_path))

    with ThreadPoolExecutor(max_workers=8) as executor:
        outcomes = list(
            executor.map(
                lambda _: store.create_if_absent(BadgeAward(employee_id="u1", badge_id="team-player")),
                range(16),
            )
        )

    assert sum(1 for _, created in outcomes if created) == 1
    assert len(store.find_by_employee("u1")) == 1


def test_employee_directory_matches_email_case_insensitively(tmp_path):
    JSONManager.write_json([{"id": "emp-1", "name": "Ada", "email": "Ada@Example.com"}], str(tmp_path / "employees.json"))
    directory = JsonEmployeeDirectory(str(tmp_path))

    assert directory.find_by_email("ada@example.com").id == "emp-1"
    assert directory.find_by_email("nobody@example.com") is None
    assert directory.find_by_email("") is None


def test_latest_digest(tmp_path):
    store = JsonWeeklyDigestStore(str(tmp_path))
    start = datetime(2024, 5, 6, tzinfo=UTC)
    later = store.save(WeeklyDigest(employee_id="u1", week_start=start, week_end=start + timedelta(days=7)))
    store.save(WeeklyDigest(employee_id="u1", week_start=start - timedelta(days=7), week_end=start))
    store.save(WeeklyDigest(employee_id="u2", week_start=start, week_end=start + timedelta(days=14)))

    assert store.find_latest_by_employee("u1").id == later.id
    assert store.find_latest_by_employee("u3") is None


def test_corrupt_collection_raises_store_error(tmp_path):
    (tmp_path / "efforts.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(StoreError):
        JsonEffortStore(str(tmp_path)).find_all()
