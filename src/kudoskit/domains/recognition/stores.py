"""Storage boundary for efforts, recognitions, badges and digests.

The pipeline only transforms records; the stores own their lifecycle. Each abstract store
lists the capabilities the services rely on, and the in-memory implementations back tests
and embedded use.
"""

import threading
from abc import ABC, abstractmethod

from kudoskit.domains.recognition.error import StoreError
from kudoskit.domains.recognition.models import (
    Badge,
    BadgeAward,
    Effort,
    Employee,
    Recognition,
    WeeklyDigest,
    new_id,
)


class EffortStore(ABC):
    @abstractmethod
    def create(self, effort: Effort) -> Effort:
        """Persists a new effort, assigning an id when it has none."""

    @abstractmethod
    def find_by_id(self, effort_id: str) -> Effort | None:
        pass

    @abstractmethod
    def find_by_employee(self, employee_id: str) -> list[Effort]:
        pass

    @abstractmethod
    def find_all(self) -> list[Effort]:
        pass

    @abstractmethod
    def update(self, effort: Effort) -> Effort:
        """Replaces a stored effort in place. Raises StoreError if it does not exist."""


class RecognitionStore(ABC):
    @abstractmethod
    def create(self, recognition: Recognition) -> Recognition:
        pass

    @abstractmethod
    def find_by_effort_id(self, effort_id: str) -> Recognition | None:
        pass

    @abstractmethod
    def find_by_employee(self, employee_id: str) -> list[Recognition]:
        pass


class BadgeStore(ABC):
    @abstractmethod
    def find_all(self) -> list[Badge]:
        pass

    @abstractmethod
    def find_by_badge_id(self, badge_id: str) -> Badge | None:
        pass


class BadgeAwardStore(ABC):
    @abstractmethod
    def find_by_employee_and_badge(self, employee_id: str, badge_id: str) -> BadgeAward | None:
        pass

    @abstractmethod
    def find_by_employee(self, employee_id: str) -> list[BadgeAward]:
        pass

    @abstractmethod
    def create_if_absent(self, award: BadgeAward) -> tuple[BadgeAward, bool]:
        """Atomically stores ``award`` unless the (employee, badge) pair already has one.

        Returns:
            The stored award and whether it was created by this call.
        """


class EmployeeDirectory(ABC):
    @abstractmethod
    def find_by_email(self, email: str) -> Employee | None:
        pass


class WeeklyDigestStore(ABC):
    @abstractmethod
    def save(self, digest: WeeklyDigest) -> WeeklyDigest:
        pass

    @abstractmethod
    def find_latest_by_employee(self, employee_id: str) -> WeeklyDigest | None:
        pass


class InMemoryEffortStore(EffortStore):
    def __init__(self, efforts: list[Effort] | None = None):
        self._lock = threading.Lock()
        self._efforts: dict[str, Effort] = {}
        for effort in efforts or []:
            self.create(effort)

    def create(self, effort: Effort) -> Effort:
        stored = effort if effort.id else effort.model_copy(update={"id": new_id()})
        with self._lock:
            self._efforts[stored.id] = stored
        return stored

    def find_by_id(self, effort_id: str) -> Effort | None:
        with self._lock:
            return self._efforts.get(effort_id)

    def find_by_employee(self, employee_id: str) -> list[Effort]:
        with self._lock:
            return [e for e in self._efforts.values() if e.employee_id == employee_id]

    def find_all(self) -> list[Effort]:
        with self._lock:
            return list(self._efforts.values())

    def update(self, effort: Effort) -> Effort:
        with self._lock:
            if effort.id not in self._efforts:
                raise StoreError(f"Cannot update unknown effort '{effort.id}'", effort_id=effort.id)
            self._efforts[effort.id] = effort
        return effort


class InMemoryRecognitionStore(RecognitionStore):
    def __init__(self):
        self._lock = threading.Lock()
        self._recognitions: list[Recognition] = []

    def create(self, recognition: Recognition) -> Recognition:
        with self._lock:
            self._recognitions.append(recognition)
        return recognition

    def find_by_effort_id(self, effort_id: str) -> Recognition | None:
        with self._lock:
            return next((r for r in self._recognitions if r.effort_id == effort_id), None)

    def find_by_employee(self, employee_id: str) -> list[Recognition]:
        with self._lock:
            return [r for r in self._recognitions if r.employee_id == employee_id]


class InMemoryBadgeStore(BadgeStore):
    def __init__(self, badges: list[Badge] | None = None):
        self._badges = {badge.badge_id: badge for badge in badges or []}

    def find_all(self) -> list[Badge]:
        return list(self._badges.values())

    def find_by_badge_id(self, badge_id: str) -> Badge | None:
        return self._badges.get(badge_id)


class InMemoryBadgeAwardStore(BadgeAwardStore):
    def __init__(self):
        self._lock = threading.Lock()
        self._awards: dict[tuple[str, str], BadgeAward] = {}

    def find_by_employee_and_badge(self, employee_id: str, badge_id: str) -> BadgeAward | None:
        with self._lock:
            return self._awards.get((employee_id, badge_id))

    def find_by_employee(self, employee_id: str) -> list[BadgeAward]:
        with self._lock:
            return [a for (owner, _), a in self._awards.items() if owner == employee_id]

    def create_if_absent(self, award: BadgeAward) -> tuple[BadgeAward, bool]:
        key = (award.employee_id, award.badge_id)
        with self._lock:
            existing = self._awards.get(key)
            if existing is not None:
                return existing, False
            self._awards[key] = award
            return award, True


class InMemoryEmployeeDirectory(EmployeeDirectory):
    def __init__(self, employees: list[Employee] | None = None):
        self._employees = list(employees or [])

    def find_by_email(self, email: str) -> Employee | None:
        if not email:
            return None
        wanted = email.strip().lower()
        return next((e for e in self._employees if (e.email or "").lower() == wanted), None)


class InMemoryWeeklyDigestStore(WeeklyDigestStore):
    def __init__(self):
        self._lock = threading.Lock()
        self._digests: list[WeeklyDigest] = []

    def save(self, digest: WeeklyDigest) -> WeeklyDigest:
        with self._lock:
            self._digests.append(digest)
        return digest

    def find_latest_by_employee(self, employee_id: str) -> WeeklyDigest | None:
        with self._lock:
            digests = [d for d in self._digests if d.employee_id == employee_id]
        return max(digests, key=lambda d: d.week_end, default=None)
