import sys
from argparse import ArgumentParser, Namespace
from datetime import UTC, datetime, timedelta

from kudoskit.domains.recognition.pipeline_factory import build_pipeline
from kudoskit.domains.recognition.weekly_digest_service import DIGEST_WINDOW
from kudoskit.utils.command.base_command import BaseCommand
from kudoskit.utils.data.json_manager import JSONManager
from kudoskit.utils.logging.logging_manager import LogManager


def _parse_date(value: str) -> datetime:
    return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=UTC)


class WeeklyDigestCommand(BaseCommand):
    @staticmethod
    def get_name() -> str:
        return "weekly-digest"

    @staticmethod
    def get_description() -> str:
        return "Generate and store an employee's weekly digest."

    @staticmethod
    def get_help() -> str:
        return """
        Summarizes an employee's efforts and recognitions over [week-start, week-end).
        Without dates the window is the seven days ending at the start of tomorrow (UTC).

        Examples:
          kudoskit recognition weekly-digest --employee-id user-001
          kudoskit recognition weekly-digest --employee-id user-001 --week-start 2024-05-06 --week-end 2024-05-13
          kudoskit recognition weekly-digest --employee-id user-001 --output output/digest.json
        """

    @staticmethod
    def get_arguments(parser: ArgumentParser) -> None:
        parser.add_argument("--employee-id", type=str, required=True, help="Employee identifier")
        parser.add_argument("--week-start", type=_parse_date, required=False, help="Window start, YYYY-MM-DD")
        parser.add_argument("--week-end", type=_parse_date, required=False, help="Window end (exclusive), YYYY-MM-DD")
        parser.add_argument("--output", type=str, required=False, help="Also write the digest to this JSON file")
        parser.add_argument("--data-dir", type=str, required=False, help="Store directory (default: KUDOSKIT_DATA_DIR)")

    @staticmethod
    def main(args: Namespace) -> None:
        logger = LogManager.get_instance().get_logger("WeeklyDigestCommand")

        week_end = args.week_end
        if week_end is None:
            today = datetime.now(UTC).replace(hour=0, minute=0, second=0, microsecond=0)
            week_end = today + timedelta(days=1)
        week_start = args.week_start or week_end - DIGEST_WINDOW

        try:
            pipeline = build_pipeline(args.data_dir)
            try:
                digest = pipeline.weekly_digest_service.generate_digest(args.employee_id, week_start, week_end)
            finally:
                pipeline.close()

            if digest is None:
                logger.error(f"Could not generate a digest for {args.employee_id}")
                sys.exit(1)

            if args.output:
                JSONManager.write_json(digest.model_dump(mode="json"), args.output)
                logger.info(f"Digest saved to: {args.output}")

            print(digest.summary)
            print()
            print(digest.narrative)
            print(f"\nCollaboration score: {digest.collaboration_score:.1f}/10")
        except Exception as e:
            logger.error(f"Failed to generate weekly digest for {args.employee_id}: {e}", exc_info=True)
            sys.exit(1)
