from typing import Any

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from kudoskit.utils.logging.logging_manager import LogManager
from kudoskit.utils.slack.error import SlackApiRequestError, SlackAuthenticationError, SlackRateLimitError


class SlackApiClient:
    """Low-level Slack API client wrapping slack_sdk.WebClient for decoupling."""

    def __init__(self, bot_token: str, client: WebClient | None = None):
        """Initialize the Slack API client.

        Args:
            bot_token: Slack bot token for authentication.
            client: Optional pre-built WebClient.
        """
        self.logger = LogManager.get_instance().get_logger("SlackApiClient")
        self.client = client or WebClient(token=bot_token)

    def _handle_error(self, e: SlackApiError, endpoint: str):
        """Map slack_sdk errors to kudoskit exceptions.

        Raises:
            SlackRateLimitError: If rate limited (429).
            SlackAuthenticationError: If token is invalid.
            SlackApiRequestError: For other API errors.
        """
        error_type = e.response.get("error", "unknown")
        status_code = e.response.status_code

        if status_code == 429:
            retry_after = int(e.response.headers.get("Retry-After", 5))
            self.logger.warning(f"Slack rate limit hit on {endpoint}. Retry after {retry_after}s")
            raise SlackRateLimitError(retry_after=retry_after, endpoint=endpoint) from e

        if error_type in ["invalid_auth", "not_authed", "account_inactive", "token_revoked"]:
            self.logger.error(f"Slack authentication error on {endpoint}: {error_type}")
            raise SlackAuthenticationError(message=f"Slack auth error: {error_type}", endpoint=endpoint) from e

        self.logger.error(f"Slack API error on {endpoint}: {error_type} (Status: {status_code})")
        raise SlackApiRequestError(
            message=f"Slack API error: {error_type}",
            endpoint=endpoint,
            status_code=status_code,
        ) from e

    def post_message(self, channel: str, text: str, blocks: list[dict] | None = None, **kwargs) -> dict[str, Any]:
        """Post a message to a channel."""
        try:
            response = self.client.chat_postMessage(channel=channel, text=text, blocks=blocks, **kwargs)
            return response.data  # type: ignore
        except SlackApiError as e:
            self._handle_error(e, "chat.postMessage")
            raise  # Should not be reached
