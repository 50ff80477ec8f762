"""Pytest configuration and fixtures for taskgraph-mcp tests."""

from datetime import datetime, timedelta, timezone

import pytest

from taskgraph_mcp import EngineConfig, TaskModel

DAY0 = datetime(2025, 3, 3, 9, 0, tzinfo=timezone.utc)


def make_task(task_id: str, **fields) -> TaskModel:
    """Build a task with sensible defaults for tests."""
    fields.setdefault("title", f"Task {task_id}")
    return TaskModel(id=task_id, **fields)


def days(n: float) -> datetime:
    return DAY0 + timedelta(days=n)


@pytest.fixture
def config():
    """Engine config with the default limits."""
    return EngineConfig()


@pytest.fixture
def flat_tasks():
    """Three root tasks and two children under the first root."""
    return [
        make_task("r1", order=1000),
        make_task("r2", order=2000),
        make_task("r3", order=3000),
        make_task("c1", parent_id="r1", level=1, order=1000),
        make_task("c2", parent_id="r1", level=1, order=2000),
    ]


@pytest.fixture
def chain_tasks():
    """B depends on A, C depends on B; durations 1, 2 and 3 days, all starting day 0."""
    return [
        make_task("A", start_date=days(0), end_date=days(1), blocked_by_ids=["B"]),
        make_task("B", start_date=days(0), end_date=days(2), dependency_ids=["A"], blocked_by_ids=["C"]),
        make_task("C", start_date=days(0), end_date=days(3), dependency_ids=["B"]),
    ]


@pytest.fixture
def store_snapshot():
    """A snapshot as the store would send it, with camelCase keys."""
    return [
        {"id": "1", "title": "Design", "statusId": "done", "order": 1000, "level": 0, "blockedByIds": ["2"]},
        {"id": "2", "title": "Build", "statusId": "todo", "order": 2000, "level": 0, "dependencyIds": ["1"]},
        {"id": "3", "title": "Spec", "parentId": "1", "order": 1000, "level": 1},
    ]
