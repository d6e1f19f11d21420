"""Wires stores and services together for the CLI commands."""

from dataclasses import dataclass

from kudoskit.config import Config
from kudoskit.domains.recognition.badge_service import BadgeService
from kudoskit.domains.recognition.digest_narrator_service import DigestNarratorService
from kudoskit.domains.recognition.effort_classifier_service import EffortClassifierService
from kudoskit.domains.recognition.effort_intake_service import EffortIntakeService
from kudoskit.domains.recognition.effort_processing_service import EffortProcessingService
from kudoskit.domains.recognition.impact_scoring_service import ImpactScoringService
from kudoskit.domains.recognition.json_store import (
    JsonBadgeAwardStore,
    JsonBadgeStore,
    JsonEffortStore,
    JsonEmployeeDirectory,
    JsonRecognitionStore,
    JsonWeeklyDigestStore,
)
from kudoskit.domains.recognition.payload_normalizer import PayloadNormalizer
from kudoskit.domains.recognition.recognition_generator_service import RecognitionGeneratorService
from kudoskit.domains.recognition.slack_recognition_notifier import SlackRecognitionNotifier
from kudoskit.domains.recognition.weekly_digest_service import WeeklyDigestService


@dataclass
class RecognitionPipeline:
    effort_store: JsonEffortStore
    recognition_store: JsonRecognitionStore
    badge_service: BadgeService
    processing_service: EffortProcessingService
    intake_service: EffortIntakeService
    weekly_digest_service: WeeklyDigestService

    def close(self) -> None:
        self.processing_service.shutdown(wait=True)


def build_pipeline(data_dir: str | None = None, notify_slack: bool = False) -> RecognitionPipeline:
    data_dir = data_dir or Config.DATA_DIR

    effort_store = JsonEffortStore(data_dir)
    recognition_store = JsonRecognitionStore(data_dir)
    badge_service = BadgeService(JsonBadgeStore(data_dir), JsonBadgeAwardStore(data_dir), effort_store)
    notifier = SlackRecognitionNotifier.from_config() if notify_slack else None

    processing_service = EffortProcessingService(
        effort_store=effort_store,
        recognition_store=recognition_store,
        classifier=EffortClassifierService(),
        scorer=ImpactScoringService(),
        generator=RecognitionGeneratorService(recognition_store),
        badge_service=badge_service,
        notifier=notifier,
    )
    intake_service = EffortIntakeService(
        effort_store,
        PayloadNormalizer(JsonEmployeeDirectory(data_dir)),
        processing_service,
    )
    weekly_digest_service = WeeklyDigestService(
        effort_store, recognition_store, JsonWeeklyDigestStore(data_dir), DigestNarratorService()
    )

    return RecognitionPipeline(
        effort_store=effort_store,
        recognition_store=recognition_store,
        badge_service=badge_service,
        processing_service=processing_service,
        intake_service=intake_service,
        weekly_digest_service=weekly_digest_service,
    )
