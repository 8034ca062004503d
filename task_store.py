"""Read and write tasks from/to a JSON file."""
import asyncio
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional

from config import config
from models import Task
from utils.time_utils import parse_clock_time, parse_deadline, parse_iso_date

logger = logging.getLogger(__name__)

_VALIDATORS = {
    "start_date": parse_iso_date,
    "end_date": parse_iso_date,
    "start_time": parse_clock_time,
    "deadline": parse_deadline,
}


def _validate_end_time(value: str) -> Optional[str]:
    # End times may also be full timestamps
    if "T" in value:
        return parse_deadline(value)
    return parse_clock_time(value)


def validate_record(data: dict) -> Optional[Task]:
    """
    Build a task from a stored record, rejecting malformed dates and times.

    Args:
        data: Raw record

    Returns:
        Task with normalized fields, or None if the record is invalid
    """
    if not isinstance(data, dict) or not data.get("id"):
        return None

    cleaned = dict(data)
    for name, value in data.items():
        if value is None:
            continue
        validator = _validate_end_time if name == "end_time" else _VALIDATORS.get(name)
        if validator is None:
            continue
        if not isinstance(value, str):
            return None
        normalized = validator(value)
        if normalized is None:
            return None
        cleaned[name] = normalized

    try:
        return Task.from_dict(cleaned)
    except TypeError:
        return None


class TaskStore:
    """Task storage backed by a JSON file.

    Writes to one task are serialized: update() holds a per-id lock so a
    reschedule never interleaves with another edit of the same task.
    """

    def __init__(self, data_file: Optional[Path] = None):
        """
        Initialize TaskStore.

        Args:
            data_file: Path of the JSON file. If None, uses config.data_file.
        """
        if data_file is None:
            self.data_file = config.data_file
        else:
            self.data_file = Path(data_file).expanduser()

        self.data_file.parent.mkdir(parents=True, exist_ok=True)
        self.tasks: Dict[str, Task] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self.last_mtime: Optional[float] = None
        self.load()

    def load(self) -> None:
        """Load tasks from the data file.

        Missing, unreadable or corrupted files give an empty store. Records
        with malformed dates or times are skipped.
        """
        self.tasks = {}
        self.last_mtime = self._current_mtime()
        if not self.data_file.exists():
            return

        try:
            with open(self.data_file, 'r') as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", self.data_file, e)
            return

        records = data.get("tasks", []) if isinstance(data, dict) else []
        for record in records:
            task = validate_record(record)
            if task is None:
                logger.warning("Skipping malformed task record: %r", record)
                continue
            self.tasks[task.id] = task

    def save(self) -> None:
        """Save all tasks to the data file.

        Raises:
            IOError: If the file cannot be written
        """
        payload = {"tasks": [task.to_dict() for task in self.tasks.values()]}
        try:
            with open(self.data_file, 'w') as f:
                json.dump(payload, f, indent=2)
        except (IOError, PermissionError) as e:
            raise IOError(f"Failed to save tasks to {self.data_file}: {e}") from e
        self.last_mtime = self._current_mtime()

    def _current_mtime(self) -> Optional[float]:
        try:
            return self.data_file.stat().st_mtime
        except OSError:
            return None

    def changed_on_disk(self) -> bool:
        """True if the data file was modified by someone else since the last load or save."""
        return self._current_mtime() != self.last_mtime

    def reload_if_changed(self) -> bool:
        """Reload after an external edit. Our own saves refresh last_mtime and do not count.

        Returns:
            True if the store was reloaded
        """
        if not self.changed_on_disk():
            return False
        logger.info("%s changed on disk, reloading", self.data_file)
        self.load()
        return True

    def get(self, task_id: str) -> Optional[Task]:
        return self.tasks.get(task_id)

    def all(self) -> List[Task]:
        return list(self.tasks.values())

    def add(self, task: Task) -> None:
        self.tasks[task.id] = task
        self.save()

    def _lock_for(self, task_id: str) -> asyncio.Lock:
        lock = self._locks.get(task_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[task_id] = lock
        return lock

    async def update(self, task_id: str, fields: Dict[str, Optional[str]]) -> None:
        """
        Replace fields of a task atomically and persist.

        Either every field is applied and saved, or the task is left as it was.

        Args:
            task_id: Task to update
            fields: Field name to new value

        Raises:
            KeyError: If the task or a field name is unknown
            IOError: If saving fails
        """
        async with self._lock_for(task_id):
            current = self.tasks.get(task_id)
            if current is None:
                raise KeyError(f"Unknown task: {task_id}")

            updated = replace(current)
            updated.apply_updates(fields)

            self.tasks[task_id] = updated
            try:
                self.save()
            except IOError:
                self.tasks[task_id] = current
                raise
            logger.debug("Updated task %s: %s", task_id, fields)
