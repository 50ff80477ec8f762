"""Input models for task graph MCP tools."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskgraph_mcp.enums import DropPosition, ResponseFormat, TimelineScale
from taskgraph_mcp.models.task import TaskModel


class SnapshotInput(BaseModel):
    """Common fields: the caller's full task snapshot and the output format."""

    model_config = ConfigDict(str_strip_whitespace=True)

    tasks: list[TaskModel] = Field(
        default_factory=list,
        description="Full current task snapshot (records with id, parentId, order, level, dependencyIds, ...)",
        max_length=5000,
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown', 'concise' or 'json'",
    )

    @field_validator("tasks")
    @classmethod
    def validate_unique_ids(cls, v: list[TaskModel]) -> list[TaskModel]:
        seen: set[str] = set()
        for task in v:
            if task.id in seen:
                raise ValueError(f"Duplicate task id in snapshot: {task.id}")
            seen.add(task.id)
        return v


# ============================================================================
# Hierarchy Input Models
# ============================================================================


class TreeInput(SnapshotInput):
    """Input model for rendering the task hierarchy."""


class IndentInput(SnapshotInput):
    """Input model for indenting a task under its preceding sibling."""

    task_id: str = Field(..., description="Id of the task to indent", min_length=1)


class OutdentInput(SnapshotInput):
    """Input model for promoting a task to its parent's level."""

    task_id: str = Field(..., description="Id of the task to outdent", min_length=1)


class ReorderInput(SnapshotInput):
    """Input model for a drag-and-drop move."""

    dragged_id: str = Field(..., description="Id of the task being moved", min_length=1)
    target_id: str = Field(..., description="Id of the task it is dropped on", min_length=1)
    position: DropPosition = Field(
        default=DropPosition.AFTER,
        description="Drop position relative to the target: 'before', 'after' or 'child'",
    )


class NormalizeInput(SnapshotInput):
    """Input model for renumbering sibling order keys."""


# ============================================================================
# Dependency Input Models
# ============================================================================


class AddDependencyInput(SnapshotInput):
    """Input model for adding a dependency edge."""

    task_id: str = Field(..., description="Id of the task that will wait", min_length=1)
    dependency_id: str = Field(..., description="Id of the task that must finish first", min_length=1)


class RemoveDependencyInput(SnapshotInput):
    """Input model for removing a dependency edge."""

    task_id: str = Field(..., description="Id of the dependent task", min_length=1)
    dependency_id: str = Field(..., description="Id of the dependency to drop", min_length=1)


class DependencyStatusInput(SnapshotInput):
    """Input model for a single task's readiness summary."""

    task_id: str = Field(..., description="Id of the task to inspect", min_length=1)


class ValidateInput(SnapshotInput):
    """Input model for the dependency integrity sweep."""


class GraphInput(SnapshotInput):
    """Input model for exporting the dependency graph."""


# ============================================================================
# Schedule Input Models
# ============================================================================


class CriticalPathInput(SnapshotInput):
    """Input model for critical path analysis."""

    auto_schedule: bool = Field(
        default=False,
        description="Shift tasks after their dependencies before computing the path",
    )
    now: datetime | None = Field(default=None, description="Reference time for tasks without a start date")


class SlackInput(SnapshotInput):
    """Input model for slack computation."""

    auto_schedule: bool = Field(default=True, description="Auto-schedule before measuring slack")
    now: datetime | None = Field(default=None, description="Reference time for tasks without a start date")


class TimelineInput(SnapshotInput):
    """Input model for timeline bounds and axis labels."""

    scale: TimelineScale = Field(default=TimelineScale.DAY, description="Label step: 'day', 'week' or 'month'")
    show_weekends: bool = Field(default=True, description="Include Saturday/Sunday labels on the day scale")
    now: datetime | None = Field(default=None, description="Reference time for tasks without a start date")
