"""Pytest configuration and shared fixtures."""
import pytest
from datetime import datetime
from models import Task
from task_store import TaskStore


@pytest.fixture
def start_hour():
    """Visual day boundary used throughout the tests."""
    return 5


@pytest.fixture
def fixed_now():
    """A fixed 'now': 2024-01-10 14:00, inside visual day 2024-01-10."""
    return datetime(2024, 1, 10, 14, 0)


@pytest.fixture
def timed_task():
    """Task with explicit start and end on one day."""
    return Task.from_dict({
        "id": "standup",
        "content": "Standup",
        "start_date": "2024-01-10",
        "start_time": "09:00",
        "end_date": "2024-01-10",
        "end_time": "10:00",
    })


@pytest.fixture
def overnight_task():
    """Timed task crossing the 05:00 day boundary."""
    return Task.from_dict({
        "id": "deploy",
        "content": "Deploy",
        "start_date": "2024-01-10",
        "start_time": "04:00",
        "end_date": "2024-01-10",
        "end_time": "06:00",
    })


@pytest.fixture
def all_day_task():
    """Task with only a start date."""
    return Task.from_dict({"id": "offsite", "content": "Offsite", "start_date": "2024-01-10"})


@pytest.fixture
def store(tmp_path, timed_task, overnight_task, all_day_task):
    """TaskStore backed by a temporary file holding the sample tasks."""
    task_store = TaskStore(tmp_path / "tasks.json")
    for task in (timed_task, overnight_task, all_day_task):
        task_store.add(task)
    return task_store
