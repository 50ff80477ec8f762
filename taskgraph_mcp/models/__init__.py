"""Pydantic models for the task graph engine."""

from taskgraph_mcp.models.inputs import (
    AddDependencyInput,
    CriticalPathInput,
    DependencyStatusInput,
    GraphInput,
    IndentInput,
    NormalizeInput,
    OutdentInput,
    RemoveDependencyInput,
    ReorderInput,
    SlackInput,
    SnapshotInput,
    TimelineInput,
    TreeInput,
    ValidateInput,
)
from taskgraph_mcp.models.results import (
    CriticalPath,
    DependencyGraph,
    DependencyResult,
    DependencyStatus,
    GraphEdge,
    GraphNode,
    TaskTiming,
    TimelineRange,
    ValidationIssue,
    ValidationReport,
)
from taskgraph_mcp.models.task import ScheduleTask, TaskModel, TaskPatch

__all__ = [
    # Task models
    "TaskModel",
    "ScheduleTask",
    "TaskPatch",
    # Result models
    "DependencyResult",
    "DependencyStatus",
    "DependencyGraph",
    "GraphNode",
    "GraphEdge",
    "ValidationIssue",
    "ValidationReport",
    "CriticalPath",
    "TaskTiming",
    "TimelineRange",
    # Tool input models
    "SnapshotInput",
    "TreeInput",
    "IndentInput",
    "OutdentInput",
    "ReorderInput",
    "NormalizeInput",
    "AddDependencyInput",
    "RemoveDependencyInput",
    "DependencyStatusInput",
    "ValidateInput",
    "GraphInput",
    "CriticalPathInput",
    "SlackInput",
    "TimelineInput",
]
