from kudoskit.domains.recognition.models import Recognition
from kudoskit.utils.logging.logging_manager import LogManager
from kudoskit.utils.slack import SlackApiClient, SlackConfig


class SlackRecognitionNotifier:
    """Posts generated recognitions to a Slack channel."""

    def __init__(self, slack_client: SlackApiClient, channel: str):
        self.logger = LogManager.get_instance().get_logger("SlackRecognitionNotifier")
        self.slack_client = slack_client
        self.channel = channel

    @classmethod
    def from_config(cls, config: SlackConfig | None = None) -> "SlackRecognitionNotifier":
        config = config or SlackConfig()
        return cls(SlackApiClient(config.bot_token), config.default_channel)

    @staticmethod
    def format_message(recognition: Recognition) -> str:
        return f"{recognition.badge} {recognition.message}"

    def notify(self, recognition: Recognition) -> None:
        self.slack_client.post_message(self.channel, self.format_message(recognition))
        self.logger.info(f"Published recognition {recognition.id} to Slack channel {self.channel}")
