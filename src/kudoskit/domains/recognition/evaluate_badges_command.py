import sys
from argparse import ArgumentParser, Namespace

from kudoskit.domains.recognition.pipeline_factory import build_pipeline
from kudoskit.utils.command.base_command import BaseCommand
from kudoskit.utils.logging.logging_manager import LogManager


class EvaluateBadgesCommand(BaseCommand):
    @staticmethod
    def get_name() -> str:
        return "evaluate-badges"

    @staticmethod
    def get_description() -> str:
        return "Check an employee's effort history against every badge and award the earned ones."

    @staticmethod
    def get_arguments(parser: ArgumentParser) -> None:
        parser.add_argument("--employee-id", type=str, required=True, help="Employee identifier")
        parser.add_argument("--data-dir", type=str, required=False, help="Store directory (default: KUDOSKIT_DATA_DIR)")

    @staticmethod
    def main(args: Namespace) -> None:
        logger = LogManager.get_instance().get_logger("EvaluateBadgesCommand")

        try:
            pipeline = build_pipeline(args.data_dir)
            try:
                awards = pipeline.badge_service.evaluate_badge_criteria(args.employee_id)
            finally:
                pipeline.close()

            if not awards:
                print(f"No badges earned yet by {args.employee_id}")
                return
            print(f"Badges held by {args.employee_id}:")
            for award in awards:
                print(f"  {award.badge_id} (earned {award.earned_date:%Y-%m-%d})")
        except Exception as e:
            logger.error(f"Failed to evaluate badges for {args.employee_id}: {e}", exc_info=True)
            sys.exit(1)
