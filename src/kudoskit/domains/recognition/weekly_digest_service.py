from collections import Counter
from datetime import UTC, datetime, timedelta

from kudoskit.domains.recognition.digest_narrator_service import DigestNarratorService
from kudoskit.domains.recognition.models import Effort, Recognition, WeeklyDigest, utc_now
from kudoskit.domains.recognition.stores import EffortStore, RecognitionStore, WeeklyDigestStore
from kudoskit.utils.logging.logging_manager import LogManager

DIGEST_WINDOW = timedelta(days=7)
HIGH_IMPACT_SCORE = 8
MAX_TOP_RECOGNITIONS = 5
QUIET_WEEK_SUMMARY = "This week was quiet. Looking forward to your contributions next week!"


def as_utc(value: datetime) -> datetime:
    """Treats a naive datetime as UTC so it compares with the stored, timezone-aware timestamps."""
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def in_window(timestamp: datetime, week_start: datetime, week_end: datetime) -> bool:
    return as_utc(week_start) <= as_utc(timestamp) < as_utc(week_end)


class WeeklyDigestService:
    """Builds and stores per-employee digests over a ``[week_start, week_end)`` window."""

    def __init__(
        self,
        effort_store: EffortStore,
        recognition_store: RecognitionStore,
        digest_store: WeeklyDigestStore,
        narrator: DigestNarratorService | None = None,
    ):
        self.logger = LogManager.get_instance().get_logger("WeeklyDigestService")
        self.effort_store = effort_store
        self.recognition_store = recognition_store
        self.digest_store = digest_store
        self.narrator = narrator or DigestNarratorService()

    def get_latest_digest(self, employee_id: str) -> WeeklyDigest | None:
        self.logger.info(f"Fetching latest digest for employee: {employee_id}")
        return self.digest_store.find_latest_by_employee(employee_id)

    def generate_digest(self, employee_id: str, week_start: datetime, week_end: datetime) -> WeeklyDigest | None:
        """Generates and stores one employee's digest.

        Args:
            employee_id: Employee whose efforts and recognitions are summarized.
            week_start: Inclusive start of the window. A naive value is read as UTC.
            week_end: Exclusive end of the window. A naive value is read as UTC.

        Returns:
            WeeklyDigest | None: The stored digest, or None if the window's records could not be
            read or the narration could not be produced.
        """
        week_start, week_end = as_utc(week_start), as_utc(week_end)
        self.logger.info(f"Generating weekly digest for employee {employee_id} for {week_start} - {week_end}")

        try:
            efforts = [
                e
                for e in self.effort_store.find_by_employee(employee_id)
                if in_window(e.timestamp, week_start, week_end)
            ]
            recognitions = [
                r
                for r in self.recognition_store.find_by_employee(employee_id)
                if in_window(r.timestamp, week_start, week_end)
            ]
        except Exception as e:
            self.logger.error(f"Failed to collect digest records for employee {employee_id}: {e}", exc_info=True)
            return None

        narration = self.narrator.generate_digest(recognitions, efforts)
        if narration is None:
            self.logger.error(f"No digest produced for employee {employee_id}")
            return None

        digest = WeeklyDigest(
            employee_id=employee_id,
            week_start=week_start,
            week_end=week_end,
            summary=self._summarize(efforts, recognitions),
            narrative=narration.narrative,
            metrics=narration.metrics,
            highlights=narration.highlights,
            top_contributors=narration.top_contributors,
            top_recognitions=self._top_recognition_ids(recognitions),
            learning_wins=narration.learning_wins,
            collaboration_score=narration.collaboration_score,
            total_efforts=len(efforts),
            total_recognitions=len(recognitions),
        )
        return self.digest_store.save(digest)

    @staticmethod
    def _summarize(efforts: list[Effort], recognitions: list[Recognition]) -> str:
        if not efforts:
            return QUIET_WEEK_SUMMARY

        high_impact = sum(1 for e in efforts if e.impact_score is not None and e.impact_score >= HIGH_IMPACT_SCORE)
        categories = Counter(e.category for e in efforts if e.category)
        dominant = categories.most_common(1)[0][0] if categories else "contributions"
        return (
            f"This week you made {len(efforts)} contributions with {high_impact} high-impact efforts! "
            f"Your focus on {dominant} shows real skill and dedication. "
            f"You earned {len(recognitions)} recognitions for your work. Keep the momentum going!"
        )

    @staticmethod
    def _top_recognition_ids(recognitions: list[Recognition]) -> list[str]:
        ranked = sorted(recognitions, key=lambda r: r.impact_score or 0, reverse=True)
        return [r.id for r in ranked[:MAX_TOP_RECOGNITIONS]]

    def generate_weekly_digests(self, employee_ids: list[str], now: datetime | None = None) -> list[WeeklyDigest]:
        """Scheduled job: digests for the seven days before ``now`` for each employee.

        A failure for one employee is logged and does not stop the others.
        """
        week_end = now or utc_now()
        week_start = week_end - DIGEST_WINDOW
        self.logger.info(f"Starting weekly digest generation for {len(employee_ids)} employees")

        digests = []
        for employee_id in employee_ids:
            try:
                digest = self.generate_digest(employee_id, week_start, week_end)
            except Exception as e:
                self.logger.error(f"Failed to generate digest for employee {employee_id}: {e}", exc_info=True)
                continue
            if digest is not None:
                digests.append(digest)

        self.logger.info(f"Weekly digest generation completed: {len(digests)} digests")
        return digests
