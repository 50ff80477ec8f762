"""Utility functions for the task graph MCP server."""

from taskgraph_mcp.utils.formatters import (
    _format_patches_concise,
    _format_patches_markdown,
    _format_task_concise,
    _format_tasks_concise,
    _format_tree_markdown,
)
from taskgraph_mcp.utils.logs import get_logger, setup_logging
from taskgraph_mcp.utils.parsers import _find_task, _parse_task, _parse_tasks, apply_patches

__all__ = [
    "_parse_task",
    "_parse_tasks",
    "_find_task",
    "apply_patches",
    "_format_task_concise",
    "_format_tasks_concise",
    "_format_tree_markdown",
    "_format_patches_concise",
    "_format_patches_markdown",
    "get_logger",
    "setup_logging",
]
