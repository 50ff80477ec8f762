"""Parent/child hierarchy of tasks with fractional sibling ordering.

Sibling order keys are spaced ``order_step`` apart so a single move can take
a midpoint key without renumbering its siblings. Precision degrades after
many midpoint insertions between the same pair; ``normalize`` restores
evenly spaced keys.
"""

import uuid
from collections import defaultdict
from collections.abc import Iterable

from taskgraph_mcp.config import EngineConfig, resolve_config
from taskgraph_mcp.enums import DropPosition, Priority, TaskStatus
from taskgraph_mcp.models.task import TaskModel, TaskPatch
from taskgraph_mcp.utils.logs import get_logger

log = get_logger("hierarchy")


# ============================================================================
# Helpers
# ============================================================================


def _sorted_by_order(tasks: Iterable[TaskModel]) -> list[TaskModel]:
    return sorted(tasks, key=lambda t: t.order)


def _children_of(task_id: str, all_tasks: list[TaskModel]) -> list[TaskModel]:
    return [t for t in all_tasks if t.parent_id == task_id]


def _new_task_id() -> str:
    return uuid.uuid4().hex[:12]


def next_order(siblings: Iterable[TaskModel], *, config: EngineConfig | None = None) -> float:
    """Return the order key that places a new task after all ``siblings``."""
    step = resolve_config(config).order_step
    orders = [t.order for t in siblings]
    if not orders:
        return step
    return max(orders) + step


def siblings(task: TaskModel, all_tasks: list[TaskModel]) -> list[TaskModel]:
    """Tasks sharing ``task``'s parent (``task`` included), sorted by order."""
    return _sorted_by_order(t for t in all_tasks if t.parent_id == task.parent_id)


def _descendant_depths(task_id: str, all_tasks: list[TaskModel]) -> dict[str, int]:
    """Map every task below ``task_id`` to its depth relative to it (children are 1)."""
    by_parent: dict[str | None, list[str]] = defaultdict(list)
    for t in all_tasks:
        by_parent[t.parent_id].append(t.id)

    depths: dict[str, int] = {}
    stack = [(child_id, 1) for child_id in by_parent.get(task_id, [])]
    while stack:
        current, depth = stack.pop()
        if current in depths or current == task_id:
            continue
        depths[current] = depth
        stack.extend((child_id, depth + 1) for child_id in by_parent.get(current, []))
    return depths


def descendant_ids(task_id: str, all_tasks: list[TaskModel]) -> set[str]:
    """Ids of every task below ``task_id`` in the hierarchy."""
    return set(_descendant_depths(task_id, all_tasks))


def _subtree_height(task_id: str, all_tasks: list[TaskModel]) -> int:
    return max(_descendant_depths(task_id, all_tasks).values(), default=0)


def _in_parent_cycle(task_id: str, parents: dict[str, str]) -> bool:
    seen: set[str] = set()
    current = parents.get(task_id)
    while current is not None and current not in seen:
        if current == task_id:
            return True
        seen.add(current)
        current = parents.get(current)
    return False


# ============================================================================
# Tree building
# ============================================================================


def build_tree(tasks: list[TaskModel]) -> list[TaskModel]:
    """
    Nest tasks under their parents.

    Works on copies; the input records are left untouched. A task whose
    ``parent_id`` does not match any task in ``tasks`` becomes a root, and so
    does a task whose parent chain leads back to itself.
    Every level of the returned forest is sorted by ``order``.

    Returns:
        The root tasks, each with ``children`` populated recursively.
    """
    nodes = {t.id: t.model_copy(update={"children": []}) for t in tasks}
    parents = {t.id: t.parent_id for t in tasks if t.parent_id in nodes}
    roots: list[TaskModel] = []

    for task in tasks:
        node = nodes[task.id]
        parent = nodes.get(task.parent_id) if task.parent_id else None
        if parent is not None and _in_parent_cycle(task.id, parents):
            log.warning("Task %s is part of a parent cycle; treating it as a root", task.id)
            parent = None
        if parent is None:
            roots.append(node)
        else:
            parent.children.append(node)

    def sort_level(level: list[TaskModel]) -> list[TaskModel]:
        level.sort(key=lambda t: t.order)
        for node in level:
            if node.children:
                sort_level(node.children)
        return level

    return sort_level(roots)


def flatten_tree(forest: list[TaskModel]) -> list[TaskModel]:
    """
    Flatten a forest in pre-order, recomputing ``level`` from actual depth.

    The returned records have empty ``children``.
    """
    flattened: list[TaskModel] = []

    def traverse(nodes: list[TaskModel], level: int) -> None:
        for node in nodes:
            flattened.append(node.model_copy(update={"level": level, "children": []}))
            if node.children:
                traverse(node.children, level + 1)

    traverse(forest, 0)
    return flattened


# ============================================================================
# Structural edits
# ============================================================================


def create_child(
    parent: TaskModel,
    title: str,
    all_tasks: list[TaskModel] | None = None,
    *,
    config: EngineConfig | None = None,
) -> TaskModel | None:
    """
    Propose a new child record under ``parent``.

    Existing children are read from ``all_tasks`` when given, otherwise from
    ``parent.children`` (as produced by ``build_tree``).

    Returns:
        The new record, or None when ``parent`` is already at the maximum level.
    """
    cfg = resolve_config(config)
    if parent.level >= cfg.max_level:
        log.debug("Refusing child of %s: parent is at max level %d", parent.id, cfg.max_level)
        return None

    existing = _children_of(parent.id, all_tasks) if all_tasks is not None else parent.children
    return TaskModel(
        id=_new_task_id(),
        title=title,
        project_id=parent.project_id,
        creator_id=parent.creator_id,
        status_id=TaskStatus.TODO.value,
        priority_id=Priority.MEDIUM.value,
        parent_id=parent.id,
        order=next_order(existing, config=cfg),
        level=parent.level + 1,
        is_expanded=False,
    )


def indent(
    task: TaskModel,
    all_tasks: list[TaskModel],
    *,
    config: EngineConfig | None = None,
) -> TaskPatch | None:
    """
    Make ``task`` the last child of its preceding sibling.

    Returns:
        The patch for ``task``, or None if it has no preceding sibling or
        it or one of its descendants would end up deeper than the maximum
        level.
    """
    cfg = resolve_config(config)
    if task.level >= cfg.max_level:
        log.debug("Cannot indent %s: already at max level %d", task.id, cfg.max_level)
        return None

    group = siblings(task, all_tasks)
    index = next((i for i, t in enumerate(group) if t.id == task.id), -1)
    if index <= 0:
        log.debug("Cannot indent %s: no preceding sibling", task.id)
        return None

    previous = group[index - 1]
    new_level = previous.level + 1
    deepest = new_level + _subtree_height(task.id, all_tasks)
    if deepest > cfg.max_level:
        log.debug("Cannot indent %s: subtree would reach level %d, max %d", task.id, deepest, cfg.max_level)
        return None

    return TaskPatch(
        id=task.id,
        updates={
            "parent_id": previous.id,
            "level": new_level,
            "order": next_order(_children_of(previous.id, all_tasks), config=cfg),
        },
    )


def outdent(
    task: TaskModel,
    all_tasks: list[TaskModel],
    *,
    config: EngineConfig | None = None,
) -> TaskPatch | None:
    """
    Promote ``task`` to a sibling of its parent, right after the parent.

    Returns:
        The patch for ``task``, or None when it is already a root or its
        parent is not in ``all_tasks``.
    """
    cfg = resolve_config(config)
    if task.level <= 0 or not task.parent_id:
        log.debug("Cannot outdent %s: already at root", task.id)
        return None

    parent = next((t for t in all_tasks if t.id == task.parent_id), None)
    if parent is None:
        log.debug("Cannot outdent %s: parent %s not in snapshot", task.id, task.parent_id)
        return None

    parent_group = [t for t in siblings(parent, all_tasks) if t.id != task.id]
    following = next((t for t in parent_group if t.order > parent.order), None)
    if following is None:
        new_order = next_order(parent_group, config=cfg)
    else:
        new_order = (parent.order + following.order) / 2

    return TaskPatch(
        id=task.id,
        updates={
            "parent_id": parent.parent_id,
            "level": parent.level,
            "order": new_order,
        },
    )


def reorder(
    dragged: TaskModel,
    target: TaskModel,
    position: DropPosition | str,
    all_tasks: list[TaskModel],
    *,
    config: EngineConfig | None = None,
) -> list[TaskPatch]:
    """
    Move ``dragged`` before, after or under ``target``.

    ``before``/``after`` give ``dragged`` the order key ``target.order -/+ 0.5``
    in ``target``'s sibling group. ``child`` appends it to ``target``'s children.
    The subtree of ``dragged`` moves with it; the move is refused when any
    of it would end up deeper than the maximum level.

    Returns:
        The patch for ``dragged`` followed by level patches for descendants
        whose level changes; empty when the move is refused.
    """
    cfg = resolve_config(config)
    position = DropPosition(position)

    depths = _descendant_depths(dragged.id, all_tasks)
    if dragged.id == target.id or target.id in depths:
        log.debug("Cannot move %s into its own subtree", dragged.id)
        return []

    if position in (DropPosition.BEFORE, DropPosition.AFTER):
        offset = -0.5 if position == DropPosition.BEFORE else 0.5
        parent_id = target.parent_id
        new_level = target.level
        new_order = target.order + offset
    else:
        parent_id = target.id
        new_level = target.level + 1
        new_order = next_order((t for t in _children_of(target.id, all_tasks) if t.id != dragged.id), config=cfg)

    deepest = new_level + max(depths.values(), default=0)
    if deepest > cfg.max_level:
        log.debug("Cannot move %s: subtree would reach level %d, max %d", dragged.id, deepest, cfg.max_level)
        return []

    patches = [TaskPatch(id=dragged.id, updates={"parent_id": parent_id, "level": new_level, "order": new_order})]
    for task in all_tasks:
        if task.id in depths and task.level != new_level + depths[task.id]:
            patches.append(TaskPatch(id=task.id, updates={"level": new_level + depths[task.id]}))
    return patches


def toggle_expanded(task: TaskModel) -> TaskPatch:
    return TaskPatch(id=task.id, updates={"is_expanded": not task.is_expanded})


def normalize(tasks: list[TaskModel], *, config: EngineConfig | None = None) -> list[TaskPatch]:
    """
    Reassign evenly spaced order keys within every sibling group.

    Relative order is preserved (ties keep their input order). Only tasks
    whose key actually changes get a patch.
    """
    step = resolve_config(config).order_step
    groups: dict[str | None, list[TaskModel]] = defaultdict(list)
    for task in tasks:
        groups[task.parent_id].append(task)

    patches: list[TaskPatch] = []
    for group in groups.values():
        for index, task in enumerate(_sorted_by_order(group)):
            new_order = step * (index + 1)
            if task.order != new_order:
                patches.append(TaskPatch(id=task.id, updates={"order": new_order}))

    if patches:
        log.debug("Normalized order keys for %d task(s)", len(patches))
    return patches
