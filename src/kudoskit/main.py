import os
import sys

from kudoskit.log_config import LogManager
from kudoskit.utils.command.command_manager import CommandManager
from kudoskit.utils.error.error_manager import handle_generic_exception

logger = LogManager.get_instance().get_logger("CLI")


def main():
    """Entry point for the kudoskit CLI. Loads commands dynamically and executes
    the requested command.
    """
    command_manager = CommandManager(os.path.join(os.path.dirname(__file__), "domains"))
    command_manager.load_commands()
    parser = command_manager.build_parser()

    args, unknown = parser.parse_known_args()

    if "help" in unknown:
        parser.print_help()
        return

    if not hasattr(args, "func") or args.func is None:
        parser.print_help()
        return

    try:
        args.func(args)
    except Exception as e:
        sys.exit(handle_generic_exception(e, "An error occurred during execution."))


if __name__ == "__main__":
    main()
