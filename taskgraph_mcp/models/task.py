"""Core task models for the task graph engine."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from taskgraph_mcp.enums import Priority, TaskStatus


class TaskModel(BaseModel):
    """A task record as handed over by the store.

    Accepts both snake_case field names and the camelCase keys used by
    store snapshots (``parentId``, ``dependencyIds``...). Fields the engine
    does not know about are kept as extras.
    """

    model_config = ConfigDict(extra="allow", alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str = ""
    project_id: str | None = None
    creator_id: str | None = None
    status_id: str = TaskStatus.TODO.value
    priority_id: str = Priority.MEDIUM.value

    # Hierarchy
    parent_id: str | None = None
    order: float = 0
    level: int = Field(default=0, ge=0)
    is_expanded: bool = False
    children: list[TaskModel] = Field(default_factory=list)

    # Dependencies
    dependency_ids: list[str] = Field(default_factory=list)
    blocked_by_ids: list[str] = Field(default_factory=list)

    # Schedule window
    start_date: datetime | None = None
    end_date: datetime | None = None

    @property
    def is_done(self) -> bool:
        return self.status_id == TaskStatus.DONE


class ScheduleTask(TaskModel):
    """A task enriched with a concrete schedule window for Gantt computations."""

    start_date: datetime
    end_date: datetime
    progress: int = Field(default=0, ge=0, le=100)
    dependencies: list[str] = Field(default_factory=list)
    critical: bool = False

    @property
    def duration(self) -> timedelta:
        return self.end_date - self.start_date


class TaskPatch(BaseModel):
    """A proposed partial update for one task.

    ``updates`` is keyed by ``TaskModel`` field names. The engine never
    applies patches itself; the store does.
    """

    id: str
    updates: dict[str, Any] = Field(default_factory=dict)

    def apply_to(self, task: TaskModel) -> TaskModel:
        """Return a copy of ``task`` with the updates applied."""
        return task.model_copy(update=self.updates)
