"""Dependency graph between tasks.

An edge ``A -> B`` means B depends on A: A is listed in ``B.dependency_ids``
and B in ``A.blocked_by_ids``. The second list is a cache of the first that
only stays consistent if callers apply both patches of an edge mutation.
"""

from taskgraph_mcp.enums import IssueKind, TaskStatus
from taskgraph_mcp.errors import TaskNotFoundError
from taskgraph_mcp.models.results import (
    DependencyGraph,
    DependencyResult,
    DependencyStatus,
    GraphEdge,
    GraphNode,
    ValidationIssue,
    ValidationReport,
)
from taskgraph_mcp.models.task import TaskModel, TaskPatch
from taskgraph_mcp.utils.logs import get_logger

log = get_logger("dependencies")


# ============================================================================
# Helpers
# ============================================================================


def _index(all_tasks: list[TaskModel]) -> dict[str, TaskModel]:
    return {t.id: t for t in all_tasks}


def _require_member(task: TaskModel, by_id: dict[str, TaskModel]) -> None:
    if task.id not in by_id:
        raise TaskNotFoundError(task.id)


# ============================================================================
# Queries
# ============================================================================


def can_start(task: TaskModel, all_tasks: list[TaskModel]) -> bool:
    """
    Check whether every dependency of ``task`` is done.

    Dependency ids that do not resolve to a task in ``all_tasks`` are ignored
    rather than treated as blocking.
    """
    if not task.dependency_ids:
        return True

    by_id = _index(all_tasks)
    resolved = [by_id[dep_id] for dep_id in task.dependency_ids if dep_id in by_id]
    return all(dep.is_done for dep in resolved)


def dependencies_of(task: TaskModel, all_tasks: list[TaskModel]) -> list[TaskModel]:
    """Tasks ``task`` depends on, skipping unresolved ids."""
    by_id = _index(all_tasks)
    _require_member(task, by_id)
    return [by_id[dep_id] for dep_id in task.dependency_ids if dep_id in by_id]


def blocked_tasks_of(task: TaskModel, all_tasks: list[TaskModel]) -> list[TaskModel]:
    """Tasks that list ``task`` as a dependency."""
    by_id = _index(all_tasks)
    _require_member(task, by_id)
    return [t for t in all_tasks if task.id in t.dependency_ids]


def would_create_cycle(from_id: str, to_id: str, all_tasks: list[TaskModel]) -> bool:
    """
    Check whether adding "``from_id`` depends on ``to_id``" would close a cycle.

    Walks existing ``dependency_ids`` edges from ``to_id`` looking for a path
    back to ``from_id``. Each task is visited at most once.
    """
    by_id = _index(all_tasks)
    visited: set[str] = set()
    stack = [to_id]

    while stack:
        current = stack.pop()
        if current == from_id:
            return True
        if current in visited:
            continue
        visited.add(current)

        node = by_id.get(current)
        if node is not None:
            stack.extend(d for d in node.dependency_ids if d not in visited)

    return False


def dependency_status(task: TaskModel, all_tasks: list[TaskModel]) -> DependencyStatus:
    """Summarize what ``task`` waits on and what waits on it."""
    depends_on = dependencies_of(task, all_tasks)
    blocking = blocked_tasks_of(task, all_tasks)
    blocked_by = [dep for dep in depends_on if not dep.is_done]

    if depends_on:
        completion_rate = sum(1 for dep in depends_on if dep.is_done) / len(depends_on)
    else:
        completion_rate = 1.0

    return DependencyStatus(
        can_start=can_start(task, all_tasks),
        depends_on=depends_on,
        blocked_by=blocked_by,
        blocking=blocking,
        completion_rate=completion_rate,
    )


def newly_ready_tasks(completed_task_id: str, all_tasks: list[TaskModel]) -> list[TaskModel]:
    """
    Find successors of a just-completed task that can now start.

    Only tasks still in ``todo`` are reported. No status change is proposed;
    the caller decides whether to notify or transition them.
    """
    by_id = _index(all_tasks)
    completed = by_id.get(completed_task_id)
    if completed is None:
        raise TaskNotFoundError(completed_task_id)

    ready = []
    for successor in blocked_tasks_of(completed, all_tasks):
        if successor.status_id == TaskStatus.TODO and can_start(successor, all_tasks):
            log.info("Task %s is now ready to start", successor.title or successor.id)
            ready.append(successor)
    return ready


# ============================================================================
# Edge mutations
# ============================================================================


def add_dependency(task_id: str, dependency_id: str, all_tasks: list[TaskModel]) -> DependencyResult:
    """
    Propose making ``task_id`` depend on ``dependency_id``.

    Returns:
        An invalid result when either task is missing, the edge already
        exists or it would create a cycle; otherwise the two patches that
        must be applied together.
    """
    by_id = _index(all_tasks)
    task = by_id.get(task_id)
    dependency = by_id.get(dependency_id)

    if task is None or dependency is None:
        missing = task_id if task is None else dependency_id
        return DependencyResult(valid=False, error=f"Task '{missing}' not found")

    if dependency_id in task.dependency_ids:
        return DependencyResult(valid=False, error="Dependency already exists")

    if would_create_cycle(task_id, dependency_id, all_tasks):
        log.debug("Rejected edge %s -> %s: would create a cycle", dependency_id, task_id)
        return DependencyResult(valid=False, error="This dependency would create a circular relationship")

    blocked_by = list(dependency.blocked_by_ids)
    if task_id not in blocked_by:
        blocked_by.append(task_id)

    return DependencyResult(
        valid=True,
        updates=[
            TaskPatch(id=task_id, updates={"dependency_ids": [*task.dependency_ids, dependency_id]}),
            TaskPatch(id=dependency_id, updates={"blocked_by_ids": blocked_by}),
        ],
    )


def remove_dependency(task_id: str, dependency_id: str, all_tasks: list[TaskModel]) -> DependencyResult:
    """Propose removing the edge; valid whenever both tasks exist."""
    by_id = _index(all_tasks)
    task = by_id.get(task_id)
    dependency = by_id.get(dependency_id)

    if task is None or dependency is None:
        missing = task_id if task is None else dependency_id
        return DependencyResult(valid=False, error=f"Task '{missing}' not found")

    return DependencyResult(
        valid=True,
        updates=[
            TaskPatch(
                id=task_id,
                updates={"dependency_ids": [d for d in task.dependency_ids if d != dependency_id]},
            ),
            TaskPatch(
                id=dependency_id,
                updates={"blocked_by_ids": [b for b in dependency.blocked_by_ids if b != task_id]},
            ),
        ],
    )


# ============================================================================
# Whole-graph views
# ============================================================================


def build_dependency_graph(tasks: list[TaskModel]) -> DependencyGraph:
    """Nodes and ``dependency -> task`` edges, for visualization or export."""
    nodes = [GraphNode(id=t.id, title=t.title, status=t.status_id) for t in tasks]
    edges = [GraphEdge(from_id=dep_id, to_id=t.id) for t in tasks for dep_id in t.dependency_ids]
    return DependencyGraph(nodes=nodes, edges=edges)


def validate_dependencies(tasks: list[TaskModel]) -> ValidationReport:
    """
    Sweep the whole collection for dangling references and cyclic edges.

    Never raises; every finding is returned in the report.
    """
    known = {t.id for t in tasks}
    issues: list[ValidationIssue] = []

    for task in tasks:
        label = task.title or task.id
        for dep_id in task.dependency_ids:
            if dep_id not in known:
                issues.append(
                    ValidationIssue(
                        kind=IssueKind.DANGLING_REFERENCE,
                        task_id=task.id,
                        dependency_id=dep_id,
                        message=f"Task {label} depends on non-existent task {dep_id}",
                    )
                )
            elif would_create_cycle(task.id, dep_id, tasks):
                issues.append(
                    ValidationIssue(
                        kind=IssueKind.CYCLE,
                        task_id=task.id,
                        dependency_id=dep_id,
                        message=f"Circular dependency detected between {label} and {dep_id}",
                    )
                )

    if issues:
        log.debug("Dependency sweep found %d issue(s)", len(issues))
    return ValidationReport(valid=not issues, errors=issues)
