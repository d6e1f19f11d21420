"""Shared fixtures. Logging goes to the console only so tests never write log files."""

import os
import random

os.environ["LOG_OUTPUT"] = "console"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402

import kudoskit  # noqa: E402,F401
from kudoskit.domains.recognition.badge_service import BadgeService  # noqa: E402
from kudoskit.domains.recognition.json_store import DEFAULT_BADGES_PATH  # noqa: E402
from kudoskit.domains.recognition.models import Badge, Effort  # noqa: E402
from kudoskit.domains.recognition.stores import (  # noqa: E402
    InMemoryBadgeAwardStore,
    InMemoryBadgeStore,
    InMemoryEffortStore,
    InMemoryRecognitionStore,
)
from kudoskit.utils.data.json_manager import JSONManager  # noqa: E402


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def default_badges():
    return [Badge.model_validate(record) for record in JSONManager.read_json(DEFAULT_BADGES_PATH)]


@pytest.fixture
def effort_store():
    return InMemoryEffortStore()


@pytest.fixture
def recognition_store():
    return InMemoryRecognitionStore()


@pytest.fixture
def award_store():
    return InMemoryBadgeAwardStore()


@pytest.fixture
def badge_store(default_badges):
    return InMemoryBadgeStore(default_badges)


@pytest.fixture
def badge_service(badge_store, award_store, effort_store):
    return BadgeService(badge_store, award_store, effort_store)


@pytest.fixture
def make_effort():
    def _make(category=None, impact_score=None, employee_id="user-001", payload=None, **kwargs):
        return Effort(
            employee_id=employee_id,
            category=category,
            impact_score=impact_score,
            payload=payload or {},
            **kwargs,
        )

    return _make
