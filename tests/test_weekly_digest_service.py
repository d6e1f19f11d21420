from datetime import UTC, datetime, timedelta

import pytest

from kudoskit.domains.recognition.digest_narrator_service import DigestNarratorService
from kudoskit.domains.recognition.error import StoreError
from kudoskit.domains.recognition.models import Effort, Recognition
from kudoskit.domains.recognition.stores import InMemoryEffortStore, InMemoryWeeklyDigestStore
from kudoskit.domains.recognition.weekly_digest_service import QUIET_WEEK_SUMMARY, WeeklyDigestService

WEEK_START = datetime(2024, 5, 6, tzinfo=UTC)
WEEK_END = WEEK_START + timedelta(days=7)


class BrokenNarrator(DigestNarratorService):
    def generate_digest(self, recognitions, efforts):
        return None


@pytest.fixture
def digest_store():
    return InMemoryWeeklyDigestStore()


@pytest.fixture
def service(effort_store, recognition_store, digest_store, rng):
    return WeeklyDigestService(effort_store, recognition_store, digest_store, DigestNarratorService(rng=rng))


def _store_effort(effort_store, category, score, when, employee_id="u1", **payload):
    return effort_store.create(
        Effort(employee_id=employee_id, category=category, impact_score=score, payload=payload, timestamp=when)
    )


def _store_recognition(recognition_store, score, when, employee_id="u1"):
    return recognition_store.create(
        Recognition(employee_id=employee_id, message=f"score {score}", badge="⭐", impact_score=score, timestamp=when)
    )


def test_window_is_start_inclusive_end_exclusive(service, effort_store):
    _store_effort(effort_store, "bug-fix", 6, WEEK_START)
    _store_effort(effort_store, "bug-fix", 6, WEEK_END - timedelta(seconds=1))
    _store_effort(effort_store, "bug-fix", 6, WEEK_END)
    _store_effort(effort_store, "bug-fix", 6, WEEK_START - timedelta(seconds=1))
    _store_effort(effort_store, "bug-fix", 6, WEEK_START + timedelta(days=1), employee_id="u2")

    digest = service.generate_digest("u1", WEEK_START, WEEK_END)

    assert digest.total_efforts == 2


def test_naive_window_is_read_as_utc(service, effort_store):
    _store_effort(effort_store, "bug-fix", 6, WEEK_START + timedelta(hours=1))
    _store_effort(effort_store, "bug-fix", 6, WEEK_END)

    digest = service.generate_digest("u1", datetime(2024, 5, 6), datetime(2024, 5, 13))

    assert digest.total_efforts == 1
    assert digest.week_start == WEEK_START
    assert digest.week_end == WEEK_END


def test_naive_effort_timestamp_is_read_as_utc(service, effort_store):
    _store_effort(effort_store, "bug-fix", 6, datetime(2024, 5, 7, 12))
    _store_effort(effort_store, "bug-fix", 6, datetime(2024, 5, 13))

    assert service.generate_digest("u1", WEEK_START, WEEK_END).total_efforts == 1


def test_unreadable_store_yields_no_digest(recognition_store, digest_store, rng):
    class FailingEffortStore(InMemoryEffortStore):
        def find_by_employee(self, employee_id):
            raise StoreError("efforts unavailable")

    service = WeeklyDigestService(FailingEffortStore(), recognition_store, digest_store, DigestNarratorService(rng=rng))

    assert service.generate_digest("u1", WEEK_START, WEEK_END) is None
    assert digest_store.find_latest_by_employee("u1") is None


def test_quiet_week(service):
    digest = service.generate_digest("u1", WEEK_START, WEEK_END)
    assert digest.summary == QUIET_WEEK_SUMMARY
    assert digest.total_efforts == 0
    assert digest.collaboration_score == 0.0


def test_digest_contents_and_persistence(service, effort_store, recognition_store, digest_store):
    day = WEEK_START + timedelta(days=2)
    _store_effort(effort_store, "collaboration", 8, day)
    _store_effort(effort_store, "collaboration", 5, day)
    _store_effort(effort_store, "learning", 2, day, description="Finished a Go course")
    low = _store_recognition(recognition_store, 5, day)
    high = _store_recognition(recognition_store, 9, day)

    digest = service.generate_digest("u1", WEEK_START, WEEK_END)

    assert digest.employee_id == "u1"
    assert digest.week_start == WEEK_START
    assert digest.week_end == WEEK_END
    assert digest.total_efforts == 3
    assert digest.total_recognitions == 2
    assert "3 contributions with 1 high-impact efforts" in digest.summary
    assert "focus on collaboration" in digest.summary
    assert digest.top_recognitions == [high.id, low.id]
    assert digest.learning_wins == ["Finished a Go course"]
    assert digest.collaboration_score == pytest.approx(10.0)
    assert digest.highlights == ["score 9"]
    assert digest.top_contributors == ["u1"]
    assert digest.narrative
    assert service.get_latest_digest("u1") == digest


def test_top_recognitions_capped_at_five(service, recognition_store):
    day = WEEK_START + timedelta(days=1)
    for score in [3, 9, 5, 7, 10, 6, 4]:
        _store_recognition(recognition_store, score, day)

    digest = service.generate_digest("u1", WEEK_START, WEEK_END)

    stored = {r.id: r.impact_score for r in recognition_store.find_by_employee("u1")}
    assert [stored[i] for i in digest.top_recognitions] == [10, 9, 7, 6, 5]


def test_failed_narration_yields_no_digest(effort_store, recognition_store, digest_store):
    service = WeeklyDigestService(effort_store, recognition_store, digest_store, BrokenNarrator())
    assert service.generate_digest("u1", WEEK_START, WEEK_END) is None
    assert digest_store.find_latest_by_employee("u1") is None


def test_latest_digest_is_the_most_recent_window(service):
    earlier = service.generate_digest("u1", WEEK_START - timedelta(days=7), WEEK_START)
    later = service.generate_digest("u1", WEEK_START, WEEK_END)
    assert earlier.week_end < later.week_end
    assert service.get_latest_digest("u1") == later


def test_scheduled_job_covers_previous_seven_days(service, effort_store):
    now = WEEK_END
    _store_effort(effort_store, "bug-fix", 6, now - timedelta(days=3))
    _store_effort(effort_store, "bug-fix", 6, now - timedelta(days=8))

    digests = service.generate_weekly_digests(["u1", "u2"], now=now)

    assert [d.employee_id for d in digests] == ["u1", "u2"]
    assert digests[0].week_start == now - timedelta(days=7)
    assert digests[0].total_efforts == 1
    assert digests[1].total_efforts == 0


def test_scheduled_job_isolates_failures(effort_store, recognition_store, digest_store, rng):
    class FlakyService(WeeklyDigestService):
        def generate_digest(self, employee_id, week_start, week_end):
            if employee_id == "bad":
                raise RuntimeError("boom")
            return super().generate_digest(employee_id, week_start, week_end)

    service = FlakyService(effort_store, recognition_store, digest_store, DigestNarratorService(rng=rng))
    digests = service.generate_weekly_digests(["bad", "u1"], now=WEEK_END)
    assert [d.employee_id for d in digests] == ["u1"]
