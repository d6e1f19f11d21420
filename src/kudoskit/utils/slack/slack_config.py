from kudoskit.config import Config
from kudoskit.utils.slack.error import SlackConfigurationError


class SlackConfig:
    """Slack configuration for publishing recognitions."""

    def __init__(self, bot_token: str | None = None, default_channel: str | None = None):
        """Initialize Slack configuration.

        Args:
            bot_token: Optional Slack bot token. Falls back to SLACK_BOT_TOKEN.
            default_channel: Optional channel ID. Falls back to SLACK_CHANNEL_ID.
        """
        self._bot_token = bot_token or Config.SLACK_BOT_TOKEN
        self._default_channel = default_channel or Config.SLACK_CHANNEL_ID

        if not self._bot_token:
            raise SlackConfigurationError("SLACK_BOT_TOKEN environment variable is missing and no bot_token provided")
        if not self._default_channel:
            raise SlackConfigurationError("SLACK_CHANNEL_ID environment variable is missing and no channel provided")

    @property
    def bot_token(self) -> str:
        """Get the Slack bot token."""
        return self._bot_token  # type: ignore

    @property
    def default_channel(self) -> str:
        """Get the default Slack channel ID."""
        return self._default_channel  # type: ignore
