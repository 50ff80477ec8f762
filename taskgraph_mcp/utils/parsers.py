"""Parser helpers for task snapshots."""

from typing import Any

from taskgraph_mcp.errors import TaskNotFoundError
from taskgraph_mcp.models.task import TaskModel, TaskPatch


def _parse_task(task_dict: dict[str, Any]) -> TaskModel:
    """
    Parse a task dictionary into a TaskModel.

    Args:
        task_dict: Task record from a store snapshot (camelCase or snake_case keys)

    Returns:
        TaskModel instance with validated data
    """
    return TaskModel.model_validate(task_dict)


def _parse_tasks(tasks: list[dict[str, Any]]) -> list[TaskModel]:
    """Parse a list of task dictionaries into TaskModel instances."""
    return [TaskModel.model_validate(t) for t in tasks]


def _find_task(task_id: str, tasks: list[TaskModel]) -> TaskModel:
    """
    Look up a task by id.

    Raises:
        TaskNotFoundError: if no task in ``tasks`` has this id
    """
    for task in tasks:
        if task.id == task_id:
            return task
    raise TaskNotFoundError(task_id)


def apply_patches(tasks: list[TaskModel], patches: list[TaskPatch]) -> list[TaskModel]:
    """
    Apply engine patches to a snapshot, the way a store would.

    Returns new records in the original order; patches for unknown ids
    are ignored.
    """
    by_id = {t.id: t for t in tasks}
    for patch in patches:
        if patch.id in by_id:
            by_id[patch.id] = patch.apply_to(by_id[patch.id])
    return [by_id[t.id] for t in tasks]
