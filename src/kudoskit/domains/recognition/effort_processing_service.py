from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Protocol

from kudoskit.config import Config
from kudoskit.domains.recognition.badge_service import BadgeService
from kudoskit.domains.recognition.effort_classifier_service import EffortClassifierService
from kudoskit.domains.recognition.error import EffortNotFoundError
from kudoskit.domains.recognition.impact_scoring_service import (
    ImpactScoringService,
    ScoreBreakdown,
    get_impact_category,
)
from kudoskit.domains.recognition.models import BadgeAward, Effort, Recognition
from kudoskit.domains.recognition.recognition_generator_service import RecognitionGeneratorService
from kudoskit.domains.recognition.stores import EffortStore, RecognitionStore
from kudoskit.utils.logging.logging_manager import LogManager

RECOGNITION_MIN_SCORE = 5
BADGE_MIN_SCORE = 7


class ProcessingStage(str, Enum):
    CLASSIFY = "classify"
    SCORE = "score"
    PERSIST = "persist"
    RECOGNIZE = "recognize"
    BADGE = "badge"
    NOTIFY = "notify"
    PIPELINE = "pipeline"


class RecognitionNotifier(Protocol):
    def notify(self, recognition: Recognition) -> None: ...


@dataclass
class StageError:
    stage: str
    effort_id: str | None
    error_type: str
    message: str


@dataclass
class ProcessingResult:
    """Outcome of one effort's pass through the pipeline."""

    effort_id: str | None
    effort: Effort | None = None
    recognition: Recognition | None = None
    badge_award: BadgeAward | None = None
    skipped: bool = False
    errors: list[StageError] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.errors

    def record_error(self, stage: ProcessingStage, error: Exception) -> None:
        self.errors.append(StageError(stage.value, self.effort_id, type(error).__name__, str(error)))


@dataclass
class EffortSummary:
    effort_id: str
    employee_id: str | None
    category: str | None
    impact_score: int | None
    impact_tier: str
    confidence_score: int
    score_breakdown: ScoreBreakdown | None
    recognition: Recognition | None
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "effort_id": self.effort_id,
            "employee_id": self.employee_id,
            "category": self.category,
            "impact_score": self.impact_score,
            "impact_tier": self.impact_tier,
            "confidence_score": self.confidence_score,
            "score_breakdown": self.score_breakdown.to_dict() if self.score_breakdown else None,
            "recognition": self.recognition.model_dump(mode="json") if self.recognition else None,
            "timestamp": self.timestamp.isoformat(),
        }


class EffortProcessingService:
    """Runs stored efforts through classify, score, persist, recognize, badge and notify.

    Each stage failure is logged and recorded on the ProcessingResult. Stages that need a
    failed stage's output are skipped, but nothing is rolled back and other efforts are not
    affected.
    """

    def __init__(
        self,
        effort_store: EffortStore,
        recognition_store: RecognitionStore,
        classifier: EffortClassifierService,
        scorer: ImpactScoringService,
        generator: RecognitionGeneratorService,
        badge_service: BadgeService,
        max_workers: int | None = None,
        notifier: RecognitionNotifier | None = None,
    ):
        self.logger = LogManager.get_instance().get_logger("EffortProcessingService")
        self.effort_store = effort_store
        self.recognition_store = recognition_store
        self.classifier = classifier
        self.scorer = scorer
        self.generator = generator
        self.badge_service = badge_service
        self.notifier = notifier
        self.max_workers = max_workers or Config.PIPELINE_MAX_WORKERS
        self.executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="effort-pipeline")

    def process_new_effort(self, effort: Effort, reprocess: bool = False) -> ProcessingResult:
        """Processes one stored effort synchronously.

        Args:
            effort: Effort already persisted by the intake.
            reprocess: Run an effort that already has a category and score again. The stored
                category is kept (it is a valid explicit category), so only the score and the
                later stages are recomputed.

        Returns:
            ProcessingResult: Updated effort, recognition, award and any stage errors.
        """
        result = ProcessingResult(effort_id=effort.id, effort=effort)
        if effort.is_processed and not reprocess:
            self.logger.info(f"Effort {effort.id} is already classified and scored, skipping")
            result.skipped = True
            return result

        self.logger.info(f"Starting effort processing pipeline for effort: {effort.id}")

        try:
            category = self.classifier.classify_effort(effort)
        except Exception as e:
            self.logger.error(f"Classification failed for effort {effort.id}: {e}", exc_info=True)
            result.record_error(ProcessingStage.CLASSIFY, e)
            return result

        classified = effort.model_copy(update={"category": category})
        try:
            score = self.scorer.score_impact(classified)
        except Exception as e:
            self.logger.error(f"Scoring failed for effort {effort.id}: {e}", exc_info=True)
            result.record_error(ProcessingStage.SCORE, e)
            return result

        try:
            processed = self.effort_store.update(classified.model_copy(update={"impact_score": score}))
        except Exception as e:
            self.logger.error(f"Failed to persist effort {effort.id}: {e}", exc_info=True)
            result.record_error(ProcessingStage.PERSIST, e)
            return result
        result.effort = processed
        self.logger.debug(f"Effort {effort.id} stored as {category} with impact {score}")

        if score >= RECOGNITION_MIN_SCORE:
            result.recognition = self._recognize(processed, result)
        if score >= BADGE_MIN_SCORE:
            result.badge_award = self._award_badge(processed, result)
        if result.recognition is not None and self.notifier is not None:
            self._notify(result.recognition, result)

        self.logger.info(
            f"Completed effort processing pipeline for effort {effort.id} with {len(result.errors)} stage error(s)"
        )
        return result

    def _recognize(self, effort: Effort, result: ProcessingResult) -> Recognition | None:
        try:
            existing = self.recognition_store.find_by_effort_id(effort.id)
            if existing is not None:
                self.logger.info(f"Effort {effort.id} already has recognition {existing.id}")
                return None
            recognition = self.generator.generate_recognition(effort)
            self.logger.info(f"Generated recognition {recognition.id} for effort {effort.id}")
            return recognition
        except Exception as e:
            self.logger.error(f"Recognition failed for effort {effort.id}: {e}", exc_info=True)
            result.record_error(ProcessingStage.RECOGNIZE, e)
            return None

    def _award_badge(self, effort: Effort, result: ProcessingResult) -> BadgeAward | None:
        try:
            return self.badge_service.award_badge_for_effort(effort)
        except Exception as e:
            self.logger.error(f"Badge award failed for effort {effort.id}: {e}", exc_info=True)
            result.record_error(ProcessingStage.BADGE, e)
            return None

    def _notify(self, recognition: Recognition, result: ProcessingResult) -> None:
        try:
            self.notifier.notify(recognition)
        except Exception as e:
            self.logger.error(f"Failed to publish recognition {recognition.id}: {e}", exc_info=True)
            result.record_error(ProcessingStage.NOTIFY, e)

    def dispatch(self, effort: Effort, reprocess: bool = False) -> Future:
        """Queues an effort on the worker pool and returns immediately."""
        self.logger.debug(f"Dispatching effort {effort.id}")
        future = self.executor.submit(self.process_new_effort, effort, reprocess)
        future.add_done_callback(self._log_unexpected_failure)
        return future

    def _log_unexpected_failure(self, future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            self.logger.error(f"Effort pipeline crashed: {error}", exc_info=error)

    def process_batch(self, efforts: list[Effort], reprocess: bool = False) -> list[ProcessingResult]:
        """Processes efforts concurrently. Results come back in input order."""
        self.logger.info(f"Processing batch of {len(efforts)} efforts with {self.max_workers} workers")
        future_to_index = {
            self.executor.submit(self.process_new_effort, effort, reprocess): index
            for index, effort in enumerate(efforts)
        }

        results: list[ProcessingResult | None] = [None] * len(efforts)
        for future in as_completed(future_to_index):
            index = future_to_index[future]
            try:
                results[index] = future.result()
            except Exception as e:
                effort = efforts[index]
                self.logger.error(f"Effort pipeline crashed for effort {effort.id}: {e}", exc_info=True)
                failed = ProcessingResult(effort_id=effort.id, effort=effort)
                failed.record_error(ProcessingStage.PIPELINE, e)
                results[index] = failed

        failed_count = sum(1 for r in results if r is not None and not r.succeeded)
        self.logger.info(f"Batch completed: {len(efforts) - failed_count} succeeded, {failed_count} with errors")
        return results

    def get_effort_summary(self, effort_id: str) -> EffortSummary:
        """Stored classification, confidence, score breakdown and recognition for one effort.

        Raises:
            EffortNotFoundError: If no effort has that id.
        """
        effort = self.effort_store.find_by_id(effort_id)
        if effort is None:
            raise EffortNotFoundError(effort_id)

        return EffortSummary(
            effort_id=effort.id,
            employee_id=effort.employee_id,
            category=effort.category,
            impact_score=effort.impact_score,
            impact_tier=get_impact_category(effort.impact_score).value,
            confidence_score=self.classifier.get_confidence_score(effort, effort.category),
            score_breakdown=self.scorer.get_score_breakdown(effort),
            recognition=self.recognition_store.find_by_effort_id(effort_id),
            timestamp=effort.timestamp,
        )

    def shutdown(self, wait: bool = True) -> None:
        self.executor.shutdown(wait=wait)
