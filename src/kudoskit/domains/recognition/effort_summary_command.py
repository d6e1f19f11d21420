import json
import sys
from argparse import ArgumentParser, Namespace

from kudoskit.domains.recognition.error import EffortNotFoundError
from kudoskit.domains.recognition.pipeline_factory import build_pipeline
from kudoskit.utils.command.base_command import BaseCommand
from kudoskit.utils.logging.logging_manager import LogManager


class EffortSummaryCommand(BaseCommand):
    @staticmethod
    def get_name() -> str:
        return "effort-summary"

    @staticmethod
    def get_description() -> str:
        return "Show an effort's category, confidence, score breakdown and recognition."

    @staticmethod
    def get_arguments(parser: ArgumentParser) -> None:
        parser.add_argument("--effort-id", type=str, required=True, help="Effort identifier")
        parser.add_argument("--data-dir", type=str, required=False, help="Store directory (default: KUDOSKIT_DATA_DIR)")

    @staticmethod
    def main(args: Namespace) -> None:
        logger = LogManager.get_instance().get_logger("EffortSummaryCommand")

        try:
            pipeline = build_pipeline(args.data_dir)
            try:
                summary = pipeline.processing_service.get_effort_summary(args.effort_id)
            finally:
                pipeline.close()
            print(json.dumps(summary.to_dict(), indent=2, ensure_ascii=False))
        except EffortNotFoundError as e:
            logger.error(str(e))
            sys.exit(1)
        except Exception as e:
            logger.error(f"Failed to summarize effort {args.effort_id}: {e}", exc_info=True)
            sys.exit(1)
