import sys
from argparse import ArgumentParser, Namespace

from kudoskit.domains.recognition.pipeline_factory import build_pipeline
from kudoskit.utils.command.base_command import BaseCommand
from kudoskit.utils.logging.logging_manager import LogManager


class ProcessEffortsCommand(BaseCommand):
    """Runs stored efforts that have not been classified and scored through the pipeline."""

    @staticmethod
    def get_name() -> str:
        return "process-efforts"

    @staticmethod
    def get_description() -> str:
        return "Classify, score and recognize pending efforts in the store."

    @staticmethod
    def get_help() -> str:
        return """
        Processes every stored effort that is still missing a category or impact score.
        Use --reprocess to run already processed efforts again. Their stored category is kept,
        so re-processing recomputes the impact score and re-runs the recognition and badge stages.

        Examples:
          kudoskit recognition process-efforts
          kudoskit recognition process-efforts --employee-id user-001 --reprocess
        """

    @staticmethod
    def get_arguments(parser: ArgumentParser) -> None:
        parser.add_argument("--employee-id", type=str, required=False, help="Only process this employee's efforts")
        parser.add_argument("--reprocess", action="store_true", help="Re-score already processed efforts, keeping their category")
        parser.add_argument("--data-dir", type=str, required=False, help="Store directory (default: KUDOSKIT_DATA_DIR)")

    @staticmethod
    def main(args: Namespace) -> None:
        logger = LogManager.get_instance().get_logger("ProcessEffortsCommand")

        try:
            pipeline = build_pipeline(args.data_dir)
            try:
                if args.employee_id:
                    efforts = pipeline.effort_store.find_by_employee(args.employee_id)
                else:
                    efforts = pipeline.effort_store.find_all()
                if not args.reprocess:
                    efforts = [e for e in efforts if not e.is_processed]

                logger.info(f"Found {len(efforts)} efforts to process")
                results = pipeline.processing_service.process_batch(efforts, reprocess=args.reprocess)
            finally:
                pipeline.close()

            recognized = sum(1 for r in results if r.recognition is not None)
            failed = [r for r in results if not r.succeeded]
            print(f"Processed {len(results)} efforts: {recognized} recognized, {len(failed)} with errors")
            for result in failed:
                for error in result.errors:
                    print(f"  {result.effort_id} [{error.stage}] {error.error_type}: {error.message}")
        except Exception as e:
            logger.error(f"Failed to process efforts: {e}", exc_info=True)
            sys.exit(1)
