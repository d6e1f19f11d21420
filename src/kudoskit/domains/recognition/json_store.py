"""JSON-file implementations of the recognition stores.

Each collection is one JSON array under the data directory. Read-modify-write sequences run
inside a ``FileLock`` transaction so concurrent workers (and concurrent CLI runs) never lose
updates or duplicate a badge award.
"""

import os
import threading
from contextlib import contextmanager
from typing import Any, Iterator

from filelock import FileLock

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
from kudoskit.domains.recognition.stores import (
    BadgeAwardStore,
    BadgeStore,
    EffortStore,
    EmployeeDirectory,
    RecognitionStore,
    WeeklyDigestStore,
)
from kudoskit.utils.data.json_manager import JSONManager
from kudoskit.utils.file_manager import FileManager
from kudoskit.utils.logging.logging_manager import LogManager

DEFAULT_BADGES_PATH = os.path.join(os.path.dirname(__file__), "badges.json")


class JsonCollection:
    """A list of JSON records stored in one file."""

    def __init__(self, file_path: str):
        self.file_path = file_path
        FileManager.create_folder(os.path.dirname(file_path))
        self._thread_lock = threading.RLock()
        self._file_lock = FileLock(f"{file_path}.txn.lock")

    def read(self) -> list[dict[str, Any]]:
        try:
            return JSONManager.read_json(self.file_path, default=[])
        except (OSError, ValueError) as e:
            raise StoreError(f"Failed to read collection {self.file_path}", error=str(e)) from e

    @contextmanager
    def transaction(self) -> Iterator[list[dict[str, Any]]]:
        """Yields the records for in-place mutation and writes them back on success."""
        with self._thread_lock, self._file_lock:
            records = self.read()
            yield records
            try:
                JSONManager.write_json(records, self.file_path)
            except OSError as e:
                raise StoreError(f"Failed to write collection {self.file_path}", error=str(e)) from e


class JsonEffortStore(EffortStore):
    def __init__(self, data_dir: str):
        self.collection = JsonCollection(os.path.join(data_dir, "efforts.json"))

    def create(self, effort: Effort) -> Effort:
        stored = effort if effort.id else effort.model_copy(update={"id": new_id()})
        with self.collection.transaction() as records:
            records.append(stored.model_dump(mode="json"))
        return stored

    def find_by_id(self, effort_id: str) -> Effort | None:
        return next((e for e in self.find_all() if e.id == effort_id), None)

    def find_by_employee(self, employee_id: str) -> list[Effort]:
        return [e for e in self.find_all() if e.employee_id == employee_id]

    def find_all(self) -> list[Effort]:
        return [Effort.model_validate(record) for record in self.collection.read()]

    def update(self, effort: Effort) -> Effort:
        with self.collection.transaction() as records:
            for index, record in enumerate(records):
                if record.get("id") == effort.id:
                    records[index] = effort.model_dump(mode="json")
                    break
            else:
                raise StoreError(f"Cannot update unknown effort '{effort.id}'", effort_id=effort.id)
        return effort


class JsonRecognitionStore(RecognitionStore):
    def __init__(self, data_dir: str):
        self.collection = JsonCollection(os.path.join(data_dir, "recognitions.json"))

    def create(self, recognition: Recognition) -> Recognition:
        with self.collection.transaction() as records:
            records.append(recognition.model_dump(mode="json"))
        return recognition

    def _all(self) -> list[Recognition]:
        return [Recognition.model_validate(record) for record in self.collection.read()]

    def find_by_effort_id(self, effort_id: str) -> Recognition | None:
        return next((r for r in self._all() if r.effort_id == effort_id), None)

    def find_by_employee(self, employee_id: str) -> list[Recognition]:
        return [r for r in self._all() if r.employee_id == employee_id]


class JsonBadgeStore(BadgeStore):
    """Badge definitions. The collection is seeded from the packaged ``badges.json`` on first use."""

    def __init__(self, data_dir: str, seed_path: str = DEFAULT_BADGES_PATH):
        self.logger = LogManager.get_instance().get_logger("JsonBadgeStore")
        self.collection = JsonCollection(os.path.join(data_dir, "badges.json"))
        with self.collection.transaction() as records:
            if not records:
                self.logger.info(f"Seeding badge definitions from {seed_path}")
                records.extend(JSONManager.read_json(seed_path, default=[]))

    def find_all(self) -> list[Badge]:
        return [Badge.model_validate(record) for record in self.collection.read()]

    def find_by_badge_id(self, badge_id: str) -> Badge | None:
        return next((b for b in self.find_all() if b.badge_id == badge_id), None)


class JsonBadgeAwardStore(BadgeAwardStore):
    def __init__(self, data_dir: str):
        self.collection = JsonCollection(os.path.join(data_dir, "badge_awards.json"))

    def _all(self) -> list[BadgeAward]:
        return [BadgeAward.model_validate(record) for record in self.collection.read()]

    def find_by_employee_and_badge(self, employee_id: str, badge_id: str) -> BadgeAward | None:
        return next((a for a in self._all() if a.employee_id == employee_id and a.badge_id == badge_id), None)

    def find_by_employee(self, employee_id: str) -> list[BadgeAward]:
        return [a for a in self._all() if a.employee_id == employee_id]

    def create_if_absent(self, award: BadgeAward) -> tuple[BadgeAward, bool]:
        with self.collection.transaction() as records:
            for record in records:
                if record.get("employee_id") == award.employee_id and record.get("badge_id") == award.badge_id:
                    return BadgeAward.model_validate(record), False
            records.append(award.model_dump(mode="json"))
        return award, True


class JsonEmployeeDirectory(EmployeeDirectory):
    def __init__(self, data_dir: str):
        self.collection = JsonCollection(os.path.join(data_dir, "employees.json"))

    def find_by_email(self, email: str) -> Employee | None:
        if not email:
            return None
        wanted = email.strip().lower()
        for record in self.collection.read():
            if (record.get("email") or "").lower() == wanted:
                return Employee.model_validate(record)
        return None


class JsonWeeklyDigestStore(WeeklyDigestStore):
    def __init__(self, data_dir: str):
        self.collection = JsonCollection(os.path.join(data_dir, "weekly_digests.json"))

    def save(self, digest: WeeklyDigest) -> WeeklyDigest:
        with self.collection.transaction() as records:
            records.append(digest.model_dump(mode="json"))
        return digest

    def find_latest_by_employee(self, employee_id: str) -> WeeklyDigest | None:
        digests = [
            WeeklyDigest.model_validate(record)
            for record in self.collection.read()
            if record.get("employee_id") == employee_id
        ]
        return max(digests, key=lambda d: d.week_end, default=None)
