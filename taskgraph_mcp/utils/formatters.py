"""Formatting utilities for tool output."""

from taskgraph_mcp.enums import TaskStatus
from taskgraph_mcp.models.task import TaskModel, TaskPatch

STATUS_ICONS = {
    TaskStatus.TODO.value: "[ ]",
    TaskStatus.IN_PROGRESS.value: "[~]",
    TaskStatus.DONE.value: "[x]",
    TaskStatus.CANCELLED.value: "[-]",
}


def _format_order(order: float) -> str:
    return f"{order:g}"


def _format_task_concise(task: TaskModel) -> str:
    """
    Format a single task in concise format for token efficiency.

    Output: "#a1: Design schema (inProgress, L1, deps:2)"
    """
    title = task.title[:50] if task.title else "Untitled"

    meta = [task.status_id, f"L{task.level}"]
    if task.dependency_ids:
        meta.append(f"deps:{len(task.dependency_ids)}")
    if task.parent_id:
        meta.append(f"parent:{task.parent_id}")

    return f"#{task.id}: {title} ({', '.join(meta)})"


def _format_tasks_concise(tasks: list[TaskModel], title: str | None = None) -> str:
    """
    Format a list of tasks in concise format.

    Output:
    2 task(s) | blocking
    #a1: Task one (todo, L0)
    #a2: Task two (done, L1, parent:a1)
    """
    if not tasks:
        return "0 tasks"

    header = f"{len(tasks)} task(s)"
    if title:
        header = f"{len(tasks)} task(s) | {title}"

    return "\n".join([header, *(_format_task_concise(t) for t in tasks)])


def _format_task_line(task: TaskModel) -> str:
    icon = STATUS_ICONS.get(task.status_id, "[?]")
    title = task.title or "Untitled"
    return f"{icon} **{title}** (`{task.id}`)"


def _format_tree_markdown(forest: list[TaskModel], title: str = "Task Tree") -> str:
    """Render a forest from ``build_tree`` as a nested Markdown list."""
    if not forest:
        return f"# {title}\n\nNo tasks found."

    lines = [f"# {title}", ""]

    def render(nodes: list[TaskModel], depth: int) -> None:
        for node in nodes:
            lines.append(f"{'  ' * depth}- {_format_task_line(node)} order:{_format_order(node.order)}")
            render(node.children, depth + 1)

    render(forest, 0)
    return "\n".join(lines)


def _format_tree_concise(forest: list[TaskModel]) -> str:
    lines: list[str] = []

    def render(nodes: list[TaskModel], depth: int) -> None:
        for node in nodes:
            lines.append(f"{'  ' * depth}#{node.id}: {node.title or 'Untitled'}")
            render(node.children, depth + 1)

    render(forest, 0)
    return "\n".join(lines) if lines else "0 tasks"


def _format_patch(patch: TaskPatch) -> str:
    changes = []
    for field, value in patch.updates.items():
        if isinstance(value, float):
            value = _format_order(value)
        changes.append(f"{field}={value}")
    return f"#{patch.id}: {', '.join(changes)}"


def _format_patches_concise(patches: list[TaskPatch]) -> str:
    if not patches:
        return "0 patches"
    return "\n".join([f"{len(patches)} patch(es)", *(_format_patch(p) for p in patches)])


def _format_patches_markdown(patches: list[TaskPatch], title: str = "Proposed Updates") -> str:
    """Format patches as markdown; the caller still has to apply them."""
    if not patches:
        return f"# {title}\n\nNothing to change."

    lines = [f"# {title}", f"*{len(patches)} patch(es) to apply*", ""]
    lines.extend(f"- {_format_patch(p)}" for p in patches)
    return "\n".join(lines)
