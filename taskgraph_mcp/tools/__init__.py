"""MCP tool definitions for the task graph engine."""

# Import all tools to register them with the MCP server
from taskgraph_mcp.tools.dependencies import (
    taskgraph_add_dependency,
    taskgraph_dependency_status,
    taskgraph_graph,
    taskgraph_remove_dependency,
    taskgraph_validate,
)
from taskgraph_mcp.tools.hierarchy import (
    taskgraph_indent,
    taskgraph_normalize,
    taskgraph_outdent,
    taskgraph_reorder,
    taskgraph_tree,
)
from taskgraph_mcp.tools.schedule import (
    taskgraph_critical_path,
    taskgraph_slack,
    taskgraph_timeline,
)

__all__ = [
    # Hierarchy tools
    "taskgraph_tree",
    "taskgraph_indent",
    "taskgraph_outdent",
    "taskgraph_reorder",
    "taskgraph_normalize",
    # Dependency tools
    "taskgraph_add_dependency",
    "taskgraph_remove_dependency",
    "taskgraph_dependency_status",
    "taskgraph_validate",
    "taskgraph_graph",
    # Schedule tools
    "taskgraph_critical_path",
    "taskgraph_slack",
    "taskgraph_timeline",
]
