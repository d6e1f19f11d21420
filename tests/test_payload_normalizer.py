import pytest

from kudoskit.domains.recognition.error import NormalizationError, UnsupportedSourceError
from kudoskit.domains.recognition.models import Employee, EffortSource
from kudoskit.domains.recognition.payload_normalizer import PayloadNormalizer, hashed_identity
from kudoskit.domains.recognition.stores import EmployeeDirectory, InMemoryEmployeeDirectory
from kudoskit.domains.recognition.webhook_signature import compute_webhook_signature, verify_webhook_signature


class FailingDirectory(EmployeeDirectory):
    def find_by_email(self, email):
        raise ConnectionError("directory unavailable")


@pytest.fixture
def normalizer():
    directory = InMemoryEmployeeDirectory([Employee(id="emp-7", name="Ada", email="ada@example.com")])
    return PayloadNormalizer(directory, allow_test_source=True)


def _jira(issue_type="Bug", email="ada@example.com"):
    return {"issue": {"summary": "Login fails", "assignee": {"emailAddress": email}, "issuetype": {"name": issue_type}}}


def _github(action="opened", merged=False, login="octocat"):
    return {"action": action, "pull_request": {"title": "Add feature", "merged": merged, "user": {"login": login}}}


@pytest.mark.parametrize(
    "issue_type, expected",
    [
        ("Bug", "bug-fix"),
        ("Production Bug", "bug-fix"),
        ("Feature", "feature-work"),
        ("Epic", "feature-work"),
        ("Task", "collaboration"),
        ("Sub-task", "collaboration"),
        ("Spike", "collaboration"),
    ],
)
def test_jira_type_hint(normalizer, issue_type, expected):
    assert normalizer.normalize(_jira(issue_type), "jira").category == expected


def test_jira_resolves_employee_by_email(normalizer):
    effort = normalizer.normalize(_jira(email="ADA@example.com"), "jira")
    assert effort.employee_id == "emp-7"
    assert effort.source == "jira"
    assert effort.id is None


def test_jira_unknown_email_leaves_identity_empty(normalizer):
    assert normalizer.normalize(_jira(email="ghost@example.com"), "jira").employee_id is None


def test_jira_directory_failure_leaves_identity_empty():
    normalizer = PayloadNormalizer(FailingDirectory(), allow_test_source=True)
    effort = normalizer.normalize(_jira(), "jira")
    assert effort.employee_id is None
    assert effort.category == "bug-fix"


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"issue": {"issuetype": {"name": "Bug"}}},
        {"issue": {"assignee": {"emailAddress": "ada@example.com"}}},
        {"issue": {"assignee": "ada", "issuetype": {"name": "Bug"}}},
    ],
)
def test_jira_missing_fields_fail(normalizer, payload):
    with pytest.raises(NormalizationError):
        normalizer.normalize(payload, "jira")


@pytest.mark.parametrize(
    "action, merged, expected",
    [
        ("opened", False, "feature-work"),
        ("reopened", False, "feature-work"),
        ("closed", True, "feature-work"),
        ("closed", False, "collaboration"),
        ("synchronize", False, "collaboration"),
        ("labeled", False, "collaboration"),
    ],
)
def test_github_type_hint(normalizer, action, merged, expected):
    assert normalizer.normalize(_github(action, merged), "github").category == expected


def test_github_identity_is_source_scoped_hash(normalizer):
    effort = normalizer.normalize(_github(login="octocat"), "github")
    assert effort.employee_id == hashed_identity("github", "octocat")
    assert effort.employee_id.startswith("user-github-")
    assert len(effort.employee_id) == len("user-github-") + 12
    assert effort.employee_id != hashed_identity("bitbucket", "octocat")


def test_github_requires_action(normalizer):
    payload = _github()
    del payload["action"]
    with pytest.raises(NormalizationError):
        normalizer.normalize(payload, "github")


def test_bitbucket(normalizer):
    payload = {"pullrequest": {"title": "Cache layer", "author": {"user": {"username": "bb-dev"}}}}
    effort = normalizer.normalize(payload, "bitbucket")
    assert effort.category == "feature-work"
    assert effort.employee_id == hashed_identity("bitbucket", "bb-dev")


def test_bitbucket_requires_username(normalizer):
    with pytest.raises(NormalizationError):
        normalizer.normalize({"pullrequest": {"author": {}}}, "bitbucket")


def test_slack(normalizer):
    effort = normalizer.normalize({"event": {"user": "U123", "text": "thanks for the help"}}, "slack")
    assert effort.category == "collaboration"
    assert effort.employee_id == hashed_identity("slack", "U123")


def test_slack_requires_user(normalizer):
    with pytest.raises(NormalizationError):
        normalizer.normalize({"event": {"text": "hi"}}, "slack")


def test_test_source_uses_payload_values(normalizer):
    effort = normalizer.normalize({"employeeId": "emp-9", "effortType": "mentoring"}, "test")
    assert effort.employee_id == "emp-9"
    assert effort.category == "mentoring"
    assert effort.source == EffortSource.TEST.value


def test_test_source_defaults(normalizer):
    effort = normalizer.normalize({"title": "anything"}, "test")
    assert effort.employee_id == "user-001"
    assert effort.category == "collaboration"


def test_test_source_can_be_disabled():
    normalizer = PayloadNormalizer(allow_test_source=False)
    with pytest.raises(NormalizationError):
        normalizer.normalize({}, "test")


def test_source_tag_is_case_insensitive(normalizer):
    assert normalizer.normalize(_github(), "GitHub").source == "github"


@pytest.mark.parametrize("source", ["gitlab", "", "unknown"])
def test_unknown_source_fails(normalizer, source):
    with pytest.raises(UnsupportedSourceError):
        normalizer.normalize({"title": "x"}, source)


def test_payload_is_kept_unchanged(normalizer):
    payload = _github("closed", True)
    snapshot = {"action": "closed", "pull_request": dict(payload["pull_request"])}
    effort = normalizer.normalize(payload, "github")
    assert effort.payload == payload
    assert payload["action"] == snapshot["action"]
    assert payload["pull_request"] == snapshot["pull_request"]


def test_signature_round_trip():
    payload = {"b": 1, "a": {"z": "ü", "y": [1, 2]}}
    signature = compute_webhook_signature(payload, "s3cret")
    assert verify_webhook_signature(payload, signature, "s3cret") is True
    assert verify_webhook_signature({"a": {"y": [1, 2], "z": "ü"}, "b": 1}, signature, "s3cret") is True


def test_signature_mismatch():
    payload = {"action": "opened"}
    signature = compute_webhook_signature(payload, "s3cret")
    assert verify_webhook_signature(payload, signature, "other-secret") is False
    assert verify_webhook_signature({"action": "closed"}, signature, "s3cret") is False


@pytest.mark.parametrize("signature, secret", [(None, "s3cret"), ("", "s3cret"), ("abc", None), (None, None)])
def test_missing_signature_or_secret_passes(signature, secret):
    assert verify_webhook_signature({"action": "opened"}, signature, secret) is True
