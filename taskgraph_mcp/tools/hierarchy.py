"""Hierarchy MCP tools: tree view, indent, outdent, reorder, normalize."""

import json

from mcp.types import ToolAnnotations

from taskgraph_mcp.engine import hierarchy
from taskgraph_mcp.enums import ResponseFormat
from taskgraph_mcp.errors import TaskNotFoundError
from taskgraph_mcp.models.inputs import IndentInput, NormalizeInput, OutdentInput, ReorderInput, TreeInput
from taskgraph_mcp.models.task import TaskPatch
from taskgraph_mcp.server import mcp
from taskgraph_mcp.utils.formatters import (
    _format_patches_concise,
    _format_patches_markdown,
    _format_tree_concise,
    _format_tree_markdown,
)
from taskgraph_mcp.utils.parsers import _find_task


def _not_found(e: TaskNotFoundError) -> str:
    return f"Error: Task '{e.task_id}' not found in the snapshot.\nTip: Pass the full current task list in 'tasks'."


def _render_patches(patches: list[TaskPatch], response_format: ResponseFormat, title: str) -> str:
    if response_format == ResponseFormat.JSON:
        return json.dumps(
            {"patches": [p.model_dump(mode="json") for p in patches], "count": len(patches)},
            indent=2,
        )
    if response_format == ResponseFormat.CONCISE:
        return _format_patches_concise(patches)
    return _format_patches_markdown(patches, title)


@mcp.tool(
    name="taskgraph_tree",
    annotations=ToolAnnotations(
        title="Task Tree",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskgraph_tree(params: TreeInput) -> str:
    """
    Show the task hierarchy as a nested, order-sorted tree.

    USE THIS WHEN:
    - You need to see how tasks are nested before moving them
    - Checking which task precedes another among its siblings

    Tasks whose parent is not in the snapshot are shown as top-level tasks.

    Args:
        params: TreeInput with the task snapshot and format

    Returns:
        Nested outline of the forest
    """
    forest = hierarchy.build_tree(params.tasks)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {"roots": [t.model_dump(mode="json") for t in forest], "total": len(params.tasks)},
            indent=2,
        )
    if params.response_format == ResponseFormat.CONCISE:
        return _format_tree_concise(forest)
    return _format_tree_markdown(forest)


@mcp.tool(
    name="taskgraph_indent",
    annotations=ToolAnnotations(
        title="Indent Task",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskgraph_indent(params: IndentInput) -> str:
    """
    Propose making a task the last child of its preceding sibling.

    Returns a patch to apply; nothing is changed by this tool.

    DO NOT USE WHEN:
    - The task is first among its siblings (there is nothing to indent under)
    - The task is already at the maximum nesting level

    Args:
        params: IndentInput with the snapshot and task_id

    Returns:
        The patch for the task, or an error explaining why it cannot move
    """
    try:
        task = _find_task(params.task_id, params.tasks)
    except TaskNotFoundError as e:
        return _not_found(e)

    patch = hierarchy.indent(task, params.tasks)
    if patch is None:
        return (
            f"Error: Cannot indent task '{params.task_id}'.\n"
            f"Tip: The task needs a preceding sibling and must stay within the maximum nesting level."
        )
    return _render_patches([patch], params.response_format, "Indent")


@mcp.tool(
    name="taskgraph_outdent",
    annotations=ToolAnnotations(
        title="Outdent Task",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskgraph_outdent(params: OutdentInput) -> str:
    """
    Propose promoting a task to sit right after its current parent.

    Args:
        params: OutdentInput with the snapshot and task_id

    Returns:
        The patch for the task, or an error if it is already top-level
    """
    try:
        task = _find_task(params.task_id, params.tasks)
    except TaskNotFoundError as e:
        return _not_found(e)

    patch = hierarchy.outdent(task, params.tasks)
    if patch is None:
        return f"Error: Cannot outdent task '{params.task_id}': it is already a top-level task."
    return _render_patches([patch], params.response_format, "Outdent")


@mcp.tool(
    name="taskgraph_reorder",
    annotations=ToolAnnotations(
        title="Reorder Task",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskgraph_reorder(params: ReorderInput) -> str:
    """
    Propose a drag-and-drop move of one task relative to another.

    POSITIONS:
    - "before" / "after": become the target's sibling, just before or after it
    - "child": become the target's last child

    Args:
        params: ReorderInput with dragged_id, target_id and position

    Returns:
        Patches for the dragged task and its re-leveled descendants, or an error if the move is refused
    """
    try:
        dragged = _find_task(params.dragged_id, params.tasks)
        target = _find_task(params.target_id, params.tasks)
    except TaskNotFoundError as e:
        return _not_found(e)

    patches = hierarchy.reorder(dragged, target, params.position, params.tasks)
    if not patches:
        return (
            f"Error: Cannot move task '{params.dragged_id}' {params.position.value} '{params.target_id}'.\n"
            f"Tip: A task cannot be nested under itself or its descendants, or below the maximum level."
        )
    return _render_patches(patches, params.response_format, "Reorder")


@mcp.tool(
    name="taskgraph_normalize",
    annotations=ToolAnnotations(
        title="Normalize Order",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskgraph_normalize(params: NormalizeInput) -> str:
    """
    Propose evenly spaced order keys for every sibling group.

    USE THIS WHEN:
    - Many drag-and-drop moves have left fractional order keys
    - Order keys of neighbouring siblings have become very close

    Args:
        params: NormalizeInput with the snapshot

    Returns:
        Patches for tasks whose order key changes (none if already normalized)
    """
    patches = hierarchy.normalize(params.tasks)
    return _render_patches(patches, params.response_format, "Normalize Order")
