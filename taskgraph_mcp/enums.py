"""Enums for the task graph engine."""

from enum import Enum


class ResponseFormat(str, Enum):
    """Output format for tool responses."""

    CONCISE = "concise"  # Minimal output for chaining
    MARKDOWN = "markdown"  # Human-readable (default)
    JSON = "json"  # Machine-readable with all fields


class TaskStatus(str, Enum):
    """Task status values as stored on task records."""

    TODO = "todo"
    IN_PROGRESS = "inProgress"
    DONE = "done"
    CANCELLED = "cancelled"


class Priority(str, Enum):
    """Task priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class DropPosition(str, Enum):
    """Where a dragged task lands relative to the drop target."""

    BEFORE = "before"
    AFTER = "after"
    CHILD = "child"


class TimelineScale(str, Enum):
    """Calendar unit used to step a Gantt timeline."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class IssueKind(str, Enum):
    """Kinds of findings reported by a dependency integrity sweep."""

    DANGLING_REFERENCE = "dangling_reference"
    CYCLE = "cycle"
