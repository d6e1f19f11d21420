import sys
from argparse import ArgumentParser, Namespace

from kudoskit.domains.recognition.pipeline_factory import build_pipeline
from kudoskit.utils.command.base_command import BaseCommand
from kudoskit.utils.logging.logging_manager import LogManager


class BadgeProgressCommand(BaseCommand):
    @staticmethod
    def get_name() -> str:
        return "badge-progress"

    @staticmethod
    def get_description() -> str:
        return "Show how close an employee is to each badge."

    @staticmethod
    def get_arguments(parser: ArgumentParser) -> None:
        parser.add_argument("--employee-id", type=str, required=True, help="Employee identifier")
        parser.add_argument("--badge-id", type=str, required=False, help="Only show this badge")
        parser.add_argument("--data-dir", type=str, required=False, help="Store directory (default: KUDOSKIT_DATA_DIR)")

    @staticmethod
    def main(args: Namespace) -> None:
        logger = LogManager.get_instance().get_logger("BadgeProgressCommand")

        try:
            pipeline = build_pipeline(args.data_dir)
            try:
                service = pipeline.badge_service
                badge_ids = [args.badge_id] if args.badge_id else [b.badge_id for b in service.get_all_badges()]
                progress = [(badge_id, service.get_badge_progress(args.employee_id, badge_id)) for badge_id in badge_ids]
            finally:
                pipeline.close()

            for badge_id, item in progress:
                if item is None:
                    logger.error(f"Unknown badge: {badge_id}")
                    sys.exit(1)
                status = "earned" if item.earned else f"{item.progress}%"
                print(f"{badge_id:<22} {status}")
        except Exception as e:
            logger.error(f"Failed to get badge progress for {args.employee_id}: {e}", exc_info=True)
            sys.exit(1)
