import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    """
    Configuration class for loading environment variables with validation.
    """

    # Logging settings
    LOG_DIR = os.getenv("LOG_DIR", "./logs")
    LOG_FILE = os.getenv("LOG_FILE", "kudoskit.log")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    if LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ValueError(
            f"Invalid LOG_LEVEL: {LOG_LEVEL}. Must be one of 'DEBUG', 'INFO', "
            "'WARNING', 'ERROR', 'CRITICAL'."
        )
    LOG_OUTPUT = os.getenv("LOG_OUTPUT", "both").lower()
    if LOG_OUTPUT not in {"console", "file", "both"}:
        raise ValueError(f"Invalid LOG_OUTPUT: {LOG_OUTPUT}. Must be one of 'console', 'file', or 'both'.")

    LOG_RETENTION_HOURS = int(os.getenv("LOG_RETENTION_HOURS", "24"))

    # Storage settings
    DATA_DIR = os.getenv("KUDOSKIT_DATA_DIR", "./data")

    # Pipeline settings
    PIPELINE_MAX_WORKERS = int(os.getenv("PIPELINE_MAX_WORKERS", "4"))
    if PIPELINE_MAX_WORKERS < 1:
        raise ValueError(f"Invalid PIPELINE_MAX_WORKERS: {PIPELINE_MAX_WORKERS}. Must be at least 1.")

    ALLOW_TEST_SOURCE = os.getenv("ALLOW_TEST_SOURCE", "true").lower()
    if ALLOW_TEST_SOURCE not in {"true", "false"}:
        raise ValueError(f"Invalid ALLOW_TEST_SOURCE: {ALLOW_TEST_SOURCE}. Must be 'true' or 'false'.")

    # Webhook secrets, one per source. Unset means signatures are not checked.
    JIRA_WEBHOOK_SECRET = os.getenv("JIRA_WEBHOOK_SECRET")
    GITHUB_WEBHOOK_SECRET = os.getenv("GITHUB_WEBHOOK_SECRET")
    BITBUCKET_WEBHOOK_SECRET = os.getenv("BITBUCKET_WEBHOOK_SECRET")
    SLACK_WEBHOOK_SECRET = os.getenv("SLACK_WEBHOOK_SECRET")

    # Slack publishing
    SLACK_BOT_TOKEN = os.getenv("SLACK_BOT_TOKEN")
    SLACK_CHANNEL_ID = os.getenv("SLACK_CHANNEL_ID")

    @classmethod
    def webhook_secret(cls, source: str) -> str | None:
        """Returns the shared webhook secret configured for a source, if any."""
        return {
            "jira": cls.JIRA_WEBHOOK_SECRET,
            "github": cls.GITHUB_WEBHOOK_SECRET,
            "bitbucket": cls.BITBUCKET_WEBHOOK_SECRET,
            "slack": cls.SLACK_WEBHOOK_SECRET,
        }.get((source or "").lower())
