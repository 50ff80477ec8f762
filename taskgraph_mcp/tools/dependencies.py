"""Dependency graph MCP tools."""

import json

from mcp.types import ToolAnnotations

from taskgraph_mcp.engine import dependencies
from taskgraph_mcp.enums import ResponseFormat
from taskgraph_mcp.errors import TaskNotFoundError
from taskgraph_mcp.models.inputs import (
    AddDependencyInput,
    DependencyStatusInput,
    GraphInput,
    RemoveDependencyInput,
    ValidateInput,
)
from taskgraph_mcp.models.results import DependencyResult
from taskgraph_mcp.server import mcp
from taskgraph_mcp.utils.formatters import (
    _format_patches_concise,
    _format_patches_markdown,
    _format_task_concise,
    _format_tasks_concise,
)
from taskgraph_mcp.utils.parsers import _find_task


def _render_result(result: DependencyResult, response_format: ResponseFormat, title: str) -> str:
    if not result.valid:
        if response_format == ResponseFormat.JSON:
            return json.dumps({"valid": False, "error": result.error}, indent=2)
        return f"Error: {result.error}"

    if response_format == ResponseFormat.JSON:
        return json.dumps(result.model_dump(mode="json"), indent=2)
    if response_format == ResponseFormat.CONCISE:
        return _format_patches_concise(result.updates)
    return (
        _format_patches_markdown(result.updates, title)
        + "\n\nApply both patches together to keep dependencyIds and blockedByIds in sync."
    )


@mcp.tool(
    name="taskgraph_add_dependency",
    annotations=ToolAnnotations(
        title="Add Dependency",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskgraph_add_dependency(params: AddDependencyInput) -> str:
    """
    Propose that one task waits for another to finish.

    The edge is rejected if either task is missing, the edge already exists,
    or it would create a circular dependency.

    Args:
        params: AddDependencyInput with task_id (the waiting task) and dependency_id

    Returns:
        Two patches to apply together, or an error explaining the rejection
    """
    result = dependencies.add_dependency(params.task_id, params.dependency_id, params.tasks)
    return _render_result(result, params.response_format, "Add Dependency")


@mcp.tool(
    name="taskgraph_remove_dependency",
    annotations=ToolAnnotations(
        title="Remove Dependency",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskgraph_remove_dependency(params: RemoveDependencyInput) -> str:
    """
    Propose removing a dependency edge between two tasks.

    Args:
        params: RemoveDependencyInput with task_id and dependency_id

    Returns:
        Two patches to apply together, or an error if a task is missing
    """
    result = dependencies.remove_dependency(params.task_id, params.dependency_id, params.tasks)
    return _render_result(result, params.response_format, "Remove Dependency")


@mcp.tool(
    name="taskgraph_dependency_status",
    annotations=ToolAnnotations(
        title="Dependency Status",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskgraph_dependency_status(params: DependencyStatusInput) -> str:
    """
    Show whether a task can start and what it waits on or blocks.

    Dependency ids that do not match any task in the snapshot are ignored.

    Args:
        params: DependencyStatusInput with task_id

    Returns:
        Readiness, completion rate of dependencies, blockers and blocked tasks
    """
    try:
        task = _find_task(params.task_id, params.tasks)
        status = dependencies.dependency_status(task, params.tasks)
    except TaskNotFoundError as e:
        return f"Error: Task '{e.task_id}' not found in the snapshot."

    if params.response_format == ResponseFormat.JSON:
        return json.dumps({"task_id": task.id, **status.model_dump(mode="json")}, indent=2)

    if params.response_format == ResponseFormat.CONCISE:
        state = "ready" if status.can_start else f"blocked by {len(status.blocked_by)}"
        lines = [f"{_format_task_concise(task)} [{state}, {status.completion_rate:.0%} deps done]"]
        if status.blocked_by:
            lines.append(_format_tasks_concise(status.blocked_by, "blocked by"))
        return "\n".join(lines)

    lines = [f"# Dependencies for #{task.id}: {task.title or 'Untitled'}", ""]

    lines.append(f"### Depends On ({len(status.depends_on)} task(s))")
    if status.depends_on:
        for dep in status.depends_on:
            mark = "DONE" if dep.is_done else dep.status_id
            lines.append(f"- #{dep.id}: {dep.title} ({mark})")
    else:
        lines.append("(None)")
    lines.append("")

    lines.append(f"### Blocking ({len(status.blocking)} task(s) waiting)")
    if status.blocking:
        for b in status.blocking:
            lines.append(f"- #{b.id}: {b.title}")
    else:
        lines.append("(None)")
    lines.append("")

    lines.append("### Assessment")
    state = "READY TO START" if status.can_start else f"BLOCKED by {len(status.blocked_by)} task(s)"
    lines.append(f"- Status: {state}")
    lines.append(f"- Dependencies done: {status.completion_rate:.0%}")

    return "\n".join(lines)


@mcp.tool(
    name="taskgraph_validate",
    annotations=ToolAnnotations(
        title="Validate Dependencies",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskgraph_validate(params: ValidateInput) -> str:
    """
    Check a task collection for dangling dependency ids and circular dependencies.

    USE THIS WHEN:
    - Importing tasks or dependencies from an external source
    - Diagnosing why scheduling fails with a cycle error

    Args:
        params: ValidateInput with the snapshot

    Returns:
        Validation verdict and the list of findings
    """
    report = dependencies.validate_dependencies(params.tasks)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(report.model_dump(mode="json"), indent=2)

    if params.response_format == ResponseFormat.CONCISE:
        if report.valid:
            return "valid"
        return "\n".join([f"{len(report.errors)} issue(s)", *(f"{i.kind.value}: {i.message}" for i in report.errors)])

    if report.valid:
        return f"# Dependency Validation\n\nAll dependencies are valid ({len(params.tasks)} task(s) checked)."

    lines = ["# Dependency Validation", f"*{len(report.errors)} issue(s) found*", ""]
    for issue in report.errors:
        lines.append(f"- **{issue.kind.value}**: {issue.message}")
    return "\n".join(lines)


@mcp.tool(
    name="taskgraph_graph",
    annotations=ToolAnnotations(
        title="Dependency Graph",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskgraph_graph(params: GraphInput) -> str:
    """
    Export the dependency graph as nodes and edges.

    Edges point from the dependency to the task that waits on it.

    Args:
        params: GraphInput with the snapshot

    Returns:
        Node and edge lists (JSON) or an edge listing (markdown/concise)
    """
    graph = dependencies.build_dependency_graph(params.tasks)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(graph.model_dump(mode="json", by_alias=True), indent=2)

    edges = [f"{e.from_id} -> {e.to_id}" for e in graph.edges]
    if params.response_format == ResponseFormat.CONCISE:
        return "\n".join([f"{len(graph.nodes)} node(s), {len(edges)} edge(s)", *edges])

    lines = ["# Dependency Graph", f"*{len(graph.nodes)} node(s), {len(edges)} edge(s)*", ""]
    if edges:
        lines.extend(f"- {e}" for e in edges)
    else:
        lines.append("(No dependencies)")
    return "\n".join(lines)
