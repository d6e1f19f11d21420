"""Turns source-specific webhook payloads into Effort drafts."""

import hashlib
from typing import Any, Callable

from kudoskit.config import Config
from kudoskit.domains.recognition.error import NormalizationError, UnsupportedSourceError
from kudoskit.domains.recognition.models import Effort, EffortCategory, EffortSource
from kudoskit.domains.recognition.stores import EmployeeDirectory
from kudoskit.utils.logging.logging_manager import LogManager

TEST_DEFAULT_EMPLOYEE_ID = "user-001"
TEST_DEFAULT_EFFORT_TYPE = EffortCategory.COLLABORATION.value

# Jira issue type substrings, checked in order.
JIRA_TYPE_HINTS = (
    ("Bug", EffortCategory.BUG_FIX),
    ("Feature", EffortCategory.FEATURE_WORK),
    ("Epic", EffortCategory.FEATURE_WORK),
    ("Task", EffortCategory.COLLABORATION),
)

GITHUB_OPENING_ACTIONS = frozenset({"opened", "reopened"})


def hashed_identity(source: str, username: str) -> str:
    """Deterministic stand-in employee id for sources without a directory lookup.

    The id is stable for a (source, username) pair but is not guaranteed to match any
    employee record.
    """
    digest = hashlib.sha256(username.encode("utf-8")).hexdigest()[:12]
    return f"user-{source}-{digest}"


def _require(payload: dict[str, Any], source: str, *path: str) -> Any:
    """Walks ``path`` through nested mappings and returns the non-empty value at its end."""
    current: Any = payload
    for depth, key in enumerate(path):
        if not isinstance(current, dict):
            parent = ".".join(path[:depth]) or "payload"
            raise NormalizationError(source, f"'{parent}' is not an object")
        current = current.get(key)
        if current is None or current == "":
            raise NormalizationError(source, f"missing required field '{'.'.join(path[: depth + 1])}'")
    return current


class PayloadNormalizer:
    """Maps one webhook payload to one Effort draft, or raises NormalizationError."""

    def __init__(self, employee_directory: EmployeeDirectory | None = None, allow_test_source: bool | None = None):
        self.logger = LogManager.get_instance().get_logger("PayloadNormalizer")
        self.employee_directory = employee_directory
        self.allow_test_source = (
            Config.ALLOW_TEST_SOURCE == "true" if allow_test_source is None else allow_test_source
        )
        self._rules: dict[EffortSource, Callable[[dict[str, Any]], Effort]] = {
            EffortSource.JIRA: self._normalize_jira,
            EffortSource.GITHUB: self._normalize_github,
            EffortSource.BITBUCKET: self._normalize_bitbucket,
            EffortSource.SLACK: self._normalize_slack,
        }

    def normalize(self, payload: dict[str, Any], source: str) -> Effort:
        """Builds the Effort draft for ``payload`` reported by ``source``.

        Args:
            payload: Raw webhook body.
            source: Source tag such as "jira" or "github" (case-insensitive).

        Returns:
            Effort: Draft without an id. Its ``category`` holds the source's effort type hint.

        Raises:
            UnsupportedSourceError: If the source has no normalization rule.
            NormalizationError: If the payload lacks a field the source requires.
        """
        source_tag = EffortSource.from_tag(source)
        if not isinstance(payload, dict):
            raise NormalizationError(str(source), "payload is not an object")

        if source_tag is EffortSource.TEST:
            return self._normalize_test(payload)

        rule = self._rules.get(source_tag)
        if rule is None:
            self.logger.warning(f"Unknown webhook source: {source}")
            raise UnsupportedSourceError(str(source))

        effort = rule(payload)
        self.logger.debug(f"Normalized {source_tag.value} payload into a {effort.category} effort")
        return effort

    def _normalize_jira(self, payload: dict[str, Any]) -> Effort:
        source = EffortSource.JIRA.value
        email = str(_require(payload, source, "issue", "assignee", "emailAddress"))
        issue_type = str(_require(payload, source, "issue", "issuetype", "name"))

        return Effort(
            employee_id=self._find_employee_id_by_email(email),
            source=EffortSource.JIRA,
            category=self._detect_jira_effort_type(issue_type),
            payload=payload,
        )

    @staticmethod
    def _detect_jira_effort_type(issue_type: str) -> str:
        for marker, category in JIRA_TYPE_HINTS:
            if marker in issue_type:
                return category.value
        return EffortCategory.COLLABORATION.value

    def _find_employee_id_by_email(self, email: str) -> str | None:
        if self.employee_directory is None:
            return None
        try:
            employee = self.employee_directory.find_by_email(email)
        except Exception as e:
            self.logger.warning(f"Employee lookup failed for {email}: {e}")
            return None
        if employee is None:
            self.logger.info(f"No employee found for {email}; effort will have no owner")
            return None
        return employee.id

    def _normalize_github(self, payload: dict[str, Any]) -> Effort:
        source = EffortSource.GITHUB.value
        username = str(_require(payload, source, "pull_request", "user", "login"))
        action = str(_require(payload, source, "action"))
        merged = payload["pull_request"].get("merged") is True

        return Effort(
            employee_id=hashed_identity(source, username),
            source=EffortSource.GITHUB,
            category=self._detect_github_effort_type(action, merged),
            payload=payload,
        )

    @staticmethod
    def _detect_github_effort_type(action: str, merged: bool) -> str:
        if action in GITHUB_OPENING_ACTIONS:
            return EffortCategory.FEATURE_WORK.value
        if action == "closed" and merged:
            return EffortCategory.FEATURE_WORK.value
        # closed without merge, synchronize and everything else
        return EffortCategory.COLLABORATION.value

    def _normalize_bitbucket(self, payload: dict[str, Any]) -> Effort:
        source = EffortSource.BITBUCKET.value
        username = str(_require(payload, source, "pullrequest", "author", "user", "username"))
        return Effort(
            employee_id=hashed_identity(source, username),
            source=EffortSource.BITBUCKET,
            category=EffortCategory.FEATURE_WORK.value,
            payload=payload,
        )

    def _normalize_slack(self, payload: dict[str, Any]) -> Effort:
        source = EffortSource.SLACK.value
        user_id = str(_require(payload, source, "event", "user"))
        return Effort(
            employee_id=hashed_identity(source, user_id),
            source=EffortSource.SLACK,
            category=EffortCategory.COLLABORATION.value,
            payload=payload,
        )

    def _normalize_test(self, payload: dict[str, Any]) -> Effort:
        """Harness-only source: the payload names its own employee and effort type."""
        if not self.allow_test_source:
            raise NormalizationError(EffortSource.TEST.value, "test source is disabled (ALLOW_TEST_SOURCE=false)")

        employee_id = payload.get("employeeId") or TEST_DEFAULT_EMPLOYEE_ID
        effort_type = payload.get("effortType") or TEST_DEFAULT_EFFORT_TYPE
        return Effort(
            employee_id=str(employee_id),
            source=EffortSource.TEST,
            category=str(effort_type),
            payload=payload,
        )
