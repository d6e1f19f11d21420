import sys
from argparse import ArgumentParser, Namespace

from kudoskit.domains.recognition.models import EffortSource
from kudoskit.domains.recognition.pipeline_factory import build_pipeline
from kudoskit.utils.command.base_command import BaseCommand
from kudoskit.utils.data.json_manager import JSONManager
from kudoskit.utils.file_manager import FileManager
from kudoskit.utils.logging.logging_manager import LogManager


class IngestWebhookCommand(BaseCommand):
    """Feeds a saved webhook payload through intake and the processing pipeline."""

    @staticmethod
    def get_name() -> str:
        return "ingest-webhook"

    @staticmethod
    def get_description() -> str:
        return "Verify, normalize and process a webhook payload stored in a JSON file."

    @staticmethod
    def get_help() -> str:
        return """
        Reads a webhook body from a JSON file, checks its signature against the source's
        *_WEBHOOK_SECRET, normalizes it into an effort and runs the full pipeline
        (classify, score, recognize, badge).

        Examples:
          kudoskit recognition ingest-webhook --source github --payload samples/pr_closed.json
          kudoskit recognition ingest-webhook --source jira --payload issue.json --signature "$SIG"
          kudoskit recognition ingest-webhook --source slack --payload event.json --notify-slack
        """

    @staticmethod
    def get_arguments(parser: ArgumentParser) -> None:
        parser.add_argument(
            "--source",
            type=str,
            required=True,
            choices=[s.value for s in EffortSource if s is not EffortSource.UNKNOWN],
            help="Integration that sent the webhook",
        )
        parser.add_argument("--payload", type=str, required=True, help="Path to the JSON webhook body")
        parser.add_argument("--signature", type=str, required=False, help="Base64 HMAC-SHA256 signature header")
        parser.add_argument("--notify-slack", action="store_true", help="Publish the recognition to Slack")
        parser.add_argument("--data-dir", type=str, required=False, help="Store directory (default: KUDOSKIT_DATA_DIR)")

    @staticmethod
    def main(args: Namespace) -> None:
        logger = LogManager.get_instance().get_logger("IngestWebhookCommand")

        try:
            FileManager.validate_file(args.payload, [".json"])
            payload = JSONManager.read_json(args.payload)
            pipeline = build_pipeline(args.data_dir, notify_slack=args.notify_slack)
            try:
                result = pipeline.intake_service.receive_webhook(payload, args.source, args.signature)
                if not result.accepted:
                    logger.error(f"Webhook {result.status.value}: {result.reason}")
                    sys.exit(1)

                processing = result.future.result()
            finally:
                pipeline.close()

            print(f"Effort {processing.effort_id} accepted from {args.source}")
            if processing.effort is not None:
                print(f"  Category: {processing.effort.category}")
                print(f"  Impact score: {processing.effort.impact_score}")
            if processing.recognition is not None:
                print(f"  Recognition: {processing.recognition.badge} {processing.recognition.message}")
            if processing.badge_award is not None:
                print(f"  Badge: {processing.badge_award.badge_id}")
            for error in processing.errors:
                print(f"  Stage '{error.stage}' failed: {error.message}")
        except Exception as e:
            logger.error(f"Failed to ingest webhook: {e}", exc_info=True)
            sys.exit(1)
