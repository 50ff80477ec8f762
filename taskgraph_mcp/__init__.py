"""
Task graph engine with an MCP server front end.

The engine organizes tasks into a parent/child hierarchy with fractional
ordering, keeps a cycle-free dependency graph between them and computes
Gantt schedules (critical path, auto-scheduling, slack) over that graph.
It is pure: it reads a task snapshot and proposes patches, never applying
or persisting them.
"""

# Re-export enums
from taskgraph_mcp.enums import DropPosition, IssueKind, Priority, ResponseFormat, TaskStatus, TimelineScale

# Re-export config and errors
from taskgraph_mcp.config import EngineConfig, get_config
from taskgraph_mcp.errors import DependencyCycleError, TaskGraphError, TaskNotFoundError

# Re-export models
from taskgraph_mcp.models import (
    AddDependencyInput,
    CriticalPath,
    CriticalPathInput,
    DependencyGraph,
    DependencyResult,
    DependencyStatus,
    DependencyStatusInput,
    GraphInput,
    IndentInput,
    NormalizeInput,
    OutdentInput,
    RemoveDependencyInput,
    ReorderInput,
    ScheduleTask,
    SlackInput,
    TaskModel,
    TaskPatch,
    TimelineInput,
    TimelineRange,
    TreeInput,
    ValidateInput,
    ValidationIssue,
    ValidationReport,
)

# Re-export the engine
from taskgraph_mcp.engine import (
    TIMELINE_SCALE_OPTIONS,
    GanttSettings,
    add_dependency,
    auto_schedule,
    blocked_tasks_of,
    build_dependency_graph,
    build_tree,
    can_start,
    compute_critical_path,
    compute_slack,
    create_child,
    dependencies_of,
    dependency_status,
    flatten_tree,
    generate_timeline_labels,
    indent,
    newly_ready_tasks,
    next_order,
    normalize,
    outdent,
    remove_dependency,
    reorder,
    timeline_range,
    to_schedule_tasks,
    validate_dependencies,
    would_create_cycle,
)

# Re-export MCP server instance
from taskgraph_mcp.server import mcp

# Re-export tools
from taskgraph_mcp.tools import (
    taskgraph_add_dependency,
    taskgraph_critical_path,
    taskgraph_dependency_status,
    taskgraph_graph,
    taskgraph_indent,
    taskgraph_normalize,
    taskgraph_outdent,
    taskgraph_remove_dependency,
    taskgraph_reorder,
    taskgraph_slack,
    taskgraph_timeline,
    taskgraph_tree,
    taskgraph_validate,
)

# Re-export utilities (including private functions used by tests)
from taskgraph_mcp.utils import (
    _find_task,
    _format_patches_markdown,
    _format_task_concise,
    _format_tasks_concise,
    _format_tree_markdown,
    _parse_task,
    _parse_tasks,
    apply_patches,
)

__all__ = [
    # Enums
    "ResponseFormat",
    "TaskStatus",
    "Priority",
    "DropPosition",
    "TimelineScale",
    "IssueKind",
    # Config and errors
    "EngineConfig",
    "get_config",
    "TaskGraphError",
    "TaskNotFoundError",
    "DependencyCycleError",
    # Models
    "TaskModel",
    "ScheduleTask",
    "TaskPatch",
    "DependencyResult",
    "DependencyStatus",
    "DependencyGraph",
    "ValidationIssue",
    "ValidationReport",
    "CriticalPath",
    "TimelineRange",
    # Tool input models
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
    # Hierarchy
    "build_tree",
    "flatten_tree",
    "create_child",
    "indent",
    "outdent",
    "reorder",
    "next_order",
    "normalize",
    # Dependencies
    "can_start",
    "dependencies_of",
    "blocked_tasks_of",
    "would_create_cycle",
    "add_dependency",
    "remove_dependency",
    "dependency_status",
    "newly_ready_tasks",
    "build_dependency_graph",
    "validate_dependencies",
    # Schedule
    "GanttSettings",
    "TIMELINE_SCALE_OPTIONS",
    "to_schedule_tasks",
    "compute_critical_path",
    "auto_schedule",
    "compute_slack",
    "timeline_range",
    "generate_timeline_labels",
    # Utilities
    "_parse_task",
    "_parse_tasks",
    "_find_task",
    "apply_patches",
    "_format_task_concise",
    "_format_tasks_concise",
    "_format_tree_markdown",
    "_format_patches_markdown",
    # MCP server instance
    "mcp",
    # Tools
    "taskgraph_tree",
    "taskgraph_indent",
    "taskgraph_outdent",
    "taskgraph_reorder",
    "taskgraph_normalize",
    "taskgraph_add_dependency",
    "taskgraph_remove_dependency",
    "taskgraph_dependency_status",
    "taskgraph_validate",
    "taskgraph_graph",
    "taskgraph_critical_path",
    "taskgraph_slack",
    "taskgraph_timeline",
]
