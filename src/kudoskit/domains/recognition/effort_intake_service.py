from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum
from typing import Any

from kudoskit.config import Config
from kudoskit.domains.recognition.effort_processing_service import EffortProcessingService
from kudoskit.domains.recognition.error import NormalizationError
from kudoskit.domains.recognition.models import Effort, EffortSource
from kudoskit.domains.recognition.payload_normalizer import PayloadNormalizer
from kudoskit.domains.recognition.stores import EffortStore
from kudoskit.domains.recognition.webhook_signature import verify_webhook_signature
from kudoskit.utils.logging.logging_manager import LogManager


class WebhookStatus(str, Enum):
    ACCEPTED = "accepted"
    UNAUTHORIZED = "unauthorized"
    REJECTED = "rejected"


@dataclass
class WebhookResult:
    status: WebhookStatus
    effort: Effort | None = None
    reason: str | None = None
    future: Future | None = None

    @property
    def accepted(self) -> bool:
        return self.status is WebhookStatus.ACCEPTED


class EffortIntakeService:
    """Accepts efforts from webhooks or direct calls, stores them and hands them to the pipeline.

    Acceptance is decided before processing starts. Once an effort is accepted, pipeline
    failures only show up in the logs and in the dispatched future's result.
    """

    def __init__(
        self,
        effort_store: EffortStore,
        normalizer: PayloadNormalizer,
        processing_service: EffortProcessingService,
        secrets: dict[str, str | None] | None = None,
    ):
        self.logger = LogManager.get_instance().get_logger("EffortIntakeService")
        self.effort_store = effort_store
        self.normalizer = normalizer
        self.processing_service = processing_service
        self.secrets = secrets

    def _secret_for(self, source: str) -> str | None:
        if self.secrets is not None:
            return self.secrets.get((source or "").lower())
        return Config.webhook_secret(source)

    def receive_webhook(self, payload: dict[str, Any], source: str, signature: str | None = None) -> WebhookResult:
        """Verifies, normalizes, stores and dispatches one webhook event."""
        self.logger.info(f"Processing webhook from source: {source}")

        if not verify_webhook_signature(payload, signature, self._secret_for(source)):
            self.logger.warning(f"Rejected webhook from {source}: invalid signature")
            return WebhookResult(WebhookStatus.UNAUTHORIZED, reason="invalid signature")

        try:
            draft = self.normalizer.normalize(payload, source)
        except NormalizationError as e:
            self.logger.warning(f"Rejected webhook from {source}: {e.message}")
            return WebhookResult(WebhookStatus.REJECTED, reason=e.message)

        effort = self.effort_store.create(draft)
        self.logger.info(f"Saved effort {effort.id} from source: {source}")
        future = self.processing_service.dispatch(effort)
        return WebhookResult(WebhookStatus.ACCEPTED, effort=effort, future=future)

    def record_effort(self, employee_id: str, source: str, payload: dict[str, Any]) -> Effort:
        """Stores an unclassified effort reported directly (not through a webhook) and dispatches it."""
        self.logger.info(f"Processing effort event for employee: {employee_id} from source: {source}")
        effort = self.effort_store.create(
            Effort(employee_id=employee_id, source=EffortSource.from_tag(source), payload=payload)
        )
        self.processing_service.dispatch(effort)
        return effort
