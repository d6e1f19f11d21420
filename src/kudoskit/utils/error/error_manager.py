from kudoskit.utils.logging.logging_manager import LogManager

logger = LogManager.get_instance().get_logger("ErrorManager")


def handle_generic_exception(exception: Exception, context_message: str, metadata: dict | None = None) -> int:
    """Logs an unexpected exception reaching the CLI and returns the process exit code.

    :param exception: The exception raised.
    :param context_message: Custom message providing context for the error.
    :param metadata: Additional metadata (optional) for debugging purposes.
    """
    metadata_info = f" | Metadata: {metadata}" if metadata else ""
    logger.error(f"{context_message}{metadata_info} - {exception}", exc_info=True)
    return 1
