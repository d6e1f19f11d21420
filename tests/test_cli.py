import json
import os

import pytest

import kudoskit
from kudoskit.config import Config
from kudoskit.domains.recognition.models import Recognition
from kudoskit.domains.recognition.slack_recognition_notifier import SlackRecognitionNotifier
from kudoskit.utils.command.command_manager import CommandManager
from kudoskit.utils.error.base_custom_error import BaseCustomError
from kudoskit.utils.slack import SlackConfig, SlackConfigurationError

DOMAINS_PATH = os.path.join(os.path.dirname(kudoskit.__file__), "domains")


@pytest.fixture(scope="module")
def parser():
    manager = CommandManager(DOMAINS_PATH)
    manager.load_commands()
    return manager.build_parser()


def _run(parser, *argv):
    args = parser.parse_args(list(argv))
    args.func(args)


def test_recognition_commands_are_discovered():
    manager = CommandManager(DOMAINS_PATH)
    manager.load_commands()

    assert set(manager.hierarchy) == {"recognition"}
    assert set(manager.hierarchy["recognition"]) == {
        "ingest-webhook",
        "process-efforts",
        "effort-summary",
        "evaluate-badges",
        "badge-progress",
        "weekly-digest",
    }


def test_ingest_then_summarize(parser, tmp_path, capsys):
    payload_file = tmp_path / "pr.json"
    payload_file.write_text(
        json.dumps({"action": "closed", "pull_request": {"title": "Implement search", "merged": True, "user": {"login": "dev"}}}),
        encoding="utf-8",
    )
    data_dir = str(tmp_path / "data")

    _run(parser, "recognition", "ingest-webhook", "--source", "github", "--payload", str(payload_file), "--data-dir", data_dir)

    output = capsys.readouterr().out
    assert "accepted from github" in output
    assert "Category: feature-work" in output
    effort_id = output.split()[1]

    _run(parser, "recognition", "effort-summary", "--effort-id", effort_id, "--data-dir", data_dir)

    summary = json.loads(capsys.readouterr().out)
    assert summary["effort_id"] == effort_id
    assert summary["category"] == "feature-work"
    assert summary["recognition"] is not None


def test_unknown_effort_exits_with_error(parser, tmp_path):
    with pytest.raises(SystemExit) as exc_info:
        _run(parser, "recognition", "effort-summary", "--effort-id", "missing", "--data-dir", str(tmp_path))
    assert exc_info.value.code == 1


def test_badge_progress_for_new_employee(parser, tmp_path, capsys):
    _run(parser, "recognition", "badge-progress", "--employee-id", "u1", "--badge-id", "team-player", "--data-dir", str(tmp_path))
    assert capsys.readouterr().out.split() == ["team-player", "0%"]


def test_unknown_source_is_refused_by_parser(parser, tmp_path):
    with pytest.raises(SystemExit):
        parser.parse_args(["recognition", "ingest-webhook", "--source", "gitlab", "--payload", str(tmp_path / "x.json")])


def test_webhook_secret_lookup(monkeypatch):
    monkeypatch.setattr(Config, "GITHUB_WEBHOOK_SECRET", "gh")
    monkeypatch.setattr(Config, "SLACK_WEBHOOK_SECRET", None)

    assert Config.webhook_secret("GitHub") == "gh"
    assert Config.webhook_secret("slack") is None
    assert Config.webhook_secret("gitlab") is None


def test_custom_error_formatting():
    assert str(BaseCustomError("boom")) == "boom"
    assert str(BaseCustomError("boom", effort_id="e1", stage="score")) == "boom | Metadata: effort_id=e1, stage=score"


class FakeSlackClient:
    def __init__(self):
        self.posts = []

    def post_message(self, channel, text, blocks=None, **kwargs):
        self.posts.append((channel, text))
        return {"ok": True}


def test_slack_notifier_posts_badge_and_message():
    client = FakeSlackClient()
    notifier = SlackRecognitionNotifier(client, "C123")

    notifier.notify(Recognition(message="Great fix!", badge="🐛"))

    assert client.posts == [("C123", "🐛 Great fix!")]


def test_slack_config_requires_token(monkeypatch):
    monkeypatch.setattr(Config, "SLACK_BOT_TOKEN", None)
    with pytest.raises(SlackConfigurationError):
        SlackConfig(default_channel="C123")
