"""Pure task graph engine: hierarchy, dependency graph and schedule."""

from taskgraph_mcp.engine.dependencies import (
    add_dependency,
    blocked_tasks_of,
    build_dependency_graph,
    can_start,
    dependencies_of,
    dependency_status,
    newly_ready_tasks,
    remove_dependency,
    validate_dependencies,
    would_create_cycle,
)
from taskgraph_mcp.engine.hierarchy import (
    build_tree,
    create_child,
    descendant_ids,
    flatten_tree,
    indent,
    next_order,
    normalize,
    outdent,
    reorder,
    siblings,
    toggle_expanded,
)
from taskgraph_mcp.engine.schedule import (
    TIMELINE_SCALE_OPTIONS,
    GanttSettings,
    auto_schedule,
    compute_critical_path,
    compute_slack,
    generate_timeline_labels,
    timeline_range,
    to_schedule_tasks,
)

__all__ = [
    # Hierarchy
    "build_tree",
    "flatten_tree",
    "create_child",
    "indent",
    "outdent",
    "reorder",
    "next_order",
    "normalize",
    "siblings",
    "descendant_ids",
    "toggle_expanded",
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
]
