"""Slack utility package for kudoskit.

Usage:
    >>> from kudoskit.utils.slack import SlackApiClient, SlackConfig
    >>> config = SlackConfig()
    >>> SlackApiClient(config.bot_token).post_message(config.default_channel, "Great work!")
"""

from kudoskit.utils.slack.error import (
    SlackApiRequestError,
    SlackAuthenticationError,
    SlackConfigurationError,
    SlackError,
    SlackRateLimitError,
)
from kudoskit.utils.slack.slack_api_client import SlackApiClient
from kudoskit.utils.slack.slack_config import SlackConfig

__all__ = [
    "SlackApiClient",
    "SlackApiRequestError",
    "SlackAuthenticationError",
    "SlackConfig",
    "SlackConfigurationError",
    "SlackError",
    "SlackRateLimitError",
]
