"""Result models returned by the engine."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from taskgraph_mcp.enums import IssueKind
from taskgraph_mcp.models.task import TaskModel, TaskPatch


class DependencyResult(BaseModel):
    """Outcome of an edge mutation.

    When ``valid`` is true, ``updates`` holds the two patches (one per edge
    end) that must be applied together.
    """

    valid: bool
    updates: list[TaskPatch] = Field(default_factory=list)
    error: str | None = None


class DependencyStatus(BaseModel):
    """Readiness summary for a single task."""

    can_start: bool
    depends_on: list[TaskModel] = Field(default_factory=list)
    blocked_by: list[TaskModel] = Field(default_factory=list)
    blocking: list[TaskModel] = Field(default_factory=list)
    completion_rate: float = 1.0


class GraphNode(BaseModel):
    id: str
    title: str
    status: str


class GraphEdge(BaseModel):
    """Directed edge from a dependency to the task that waits on it."""

    model_config = ConfigDict(populate_by_name=True)

    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")


class DependencyGraph(BaseModel):
    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)


class ValidationIssue(BaseModel):
    """A single finding from a dependency integrity sweep."""

    kind: IssueKind
    task_id: str
    dependency_id: str
    message: str


class ValidationReport(BaseModel):
    valid: bool
    errors: list[ValidationIssue] = Field(default_factory=list)


class TaskTiming(BaseModel):
    """Early/late schedule of a task as computed by the critical path passes."""

    early_start: datetime
    early_finish: datetime
    late_start: datetime
    late_finish: datetime
    slack_days: float
    critical: bool


class CriticalPath(BaseModel):
    """Critical path summary.

    ``total_duration`` is the summed duration of the critical tasks, in days.
    ``end_date`` is the projected finish, ``None`` for an empty schedule.
    """

    task_ids: list[str] = Field(default_factory=list)
    total_duration: float = 0.0
    end_date: datetime | None = None
    timings: dict[str, TaskTiming] = Field(default_factory=dict)


class TimelineRange(BaseModel):
    start: datetime
    end: datetime
