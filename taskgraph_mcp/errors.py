"""Exceptions raised for caller contract violations.

User-triggered conditions (a rejected edge, a refused indent) are never
raised; they come back as ``None``, an empty patch list or an invalid
result model.
"""


class TaskGraphError(Exception):
    """Base class for task graph engine errors."""


class TaskNotFoundError(TaskGraphError, KeyError):
    """A task id expected to be in the snapshot was not found."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task '{task_id}' is not in the task snapshot")

    def __str__(self) -> str:
        return self.args[0]


class DependencyCycleError(TaskGraphError):
    """The dependency relation handed to the scheduler is not acyclic."""

    def __init__(self, task_ids: list[str]):
        self.task_ids = task_ids
        super().__init__(f"Dependency cycle detected: {' -> '.join(task_ids)}")
