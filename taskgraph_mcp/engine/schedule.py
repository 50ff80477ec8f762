"""Gantt scheduling over the dependency graph: critical path, auto-scheduling and slack.

All functions work on ``ScheduleTask`` records produced by ``to_schedule_tasks``.
Dependency ids that do not resolve to a schedule task are skipped. The
dependency relation is expected to be acyclic; a cycle raises
``DependencyCycleError`` rather than producing a schedule.
"""

import calendar
import math
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from graphlib import CycleError, TopologicalSorter

from pydantic import BaseModel, Field

from taskgraph_mcp.config import EngineConfig, resolve_config
from taskgraph_mcp.enums import TaskStatus, TimelineScale
from taskgraph_mcp.errors import DependencyCycleError
from taskgraph_mcp.models.results import CriticalPath, TaskTiming, TimelineRange
from taskgraph_mcp.models.task import ScheduleTask, TaskModel
from taskgraph_mcp.utils.logs import get_logger

log = get_logger("schedule")

DAY = timedelta(days=1)

# Fields rebuilt by to_schedule_tasks rather than copied over.
_SCHEDULE_FIELDS = {"start_date", "end_date", "children", "progress", "dependencies", "critical"}

# Coarse progress by status; not a real progress measure.
STATUS_PROGRESS = {
    TaskStatus.DONE.value: 100,
    TaskStatus.IN_PROGRESS.value: 50,
}

TIMELINE_SCALE_OPTIONS = [
    {"label": "Day", "value": TimelineScale.DAY.value},
    {"label": "Week", "value": TimelineScale.WEEK.value},
    {"label": "Month", "value": TimelineScale.MONTH.value},
]


class GanttSettings(BaseModel):
    """Display defaults of a Gantt view."""

    timeline_scale: TimelineScale = TimelineScale.DAY
    show_weekends: bool = True
    show_dependencies: bool = True
    show_critical_path: bool = False
    show_progress: bool = True
    auto_schedule: bool = False
    scale_options: list[dict[str, str]] = Field(default_factory=lambda: [dict(o) for o in TIMELINE_SCALE_OPTIONS])


# ============================================================================
# Helpers
# ============================================================================


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _shift(value: datetime, delta: timedelta) -> datetime:
    """``value + delta``, clamped to the representable datetime range."""
    try:
        return value + delta
    except OverflowError:
        bound = datetime.max if delta > timedelta(0) else datetime.min
        return bound.replace(tzinfo=value.tzinfo)


def _days(delta: timedelta) -> float:
    return delta / DAY


def _topological_order(tasks: dict[str, ScheduleTask]) -> list[str]:
    """Task ids ordered so that every dependency precedes its dependents."""
    sorter: TopologicalSorter = TopologicalSorter()
    for task_id, task in tasks.items():
        sorter.add(task_id, *(d for d in task.dependencies if d in tasks))
    try:
        return list(sorter.static_order())
    except CycleError as e:
        raise DependencyCycleError(list(e.args[1])) from e


def _successors(tasks: dict[str, ScheduleTask]) -> dict[str, list[str]]:
    successors: dict[str, list[str]] = defaultdict(list)
    for task_id, task in tasks.items():
        for dep_id in task.dependencies:
            if dep_id in tasks:
                successors[dep_id].append(task_id)
    return successors


# ============================================================================
# Conversion
# ============================================================================


def to_schedule_tasks(
    tasks: list[TaskModel],
    now: datetime | None = None,
    *,
    config: EngineConfig | None = None,
) -> list[ScheduleTask]:
    """
    Give every task a concrete schedule window.

    Missing start dates default to ``now``; missing end dates to start plus
    the default duration. A window shorter than the minimum duration is
    stretched to it. Naive datetimes are read as UTC.
    """
    cfg = resolve_config(config)
    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    min_duration = timedelta(days=cfg.min_duration_days)

    schedule_tasks: list[ScheduleTask] = []
    for task in tasks:
        start = _as_utc(task.start_date) if task.start_date else now
        if task.end_date:
            end = _as_utc(task.end_date)
        else:
            end = _shift(start, timedelta(days=cfg.default_duration_days))
        if end < _shift(start, min_duration):
            end = _shift(start, min_duration)

        data = task.model_dump(exclude=_SCHEDULE_FIELDS)
        schedule_tasks.append(
            ScheduleTask(
                **data,
                start_date=start,
                end_date=end,
                progress=STATUS_PROGRESS.get(task.status_id, 0),
                dependencies=list(task.dependency_ids),
                critical=False,
            )
        )
    return schedule_tasks


# ============================================================================
# Critical path
# ============================================================================


def compute_critical_path(
    schedule_tasks: list[ScheduleTask],
    *,
    config: EngineConfig | None = None,
) -> CriticalPath:
    """
    Run the forward and backward CPM passes and mark critical tasks.

    Forward pass: a task starts at the later of its own start date and the
    early finish of its dependencies. Backward pass: a task must finish by
    the earliest late start of its successors, or by the project end when it
    has none. A task is critical when its early and late starts are closer
    than the configured tolerance; ``critical`` is set on the given records.

    Returns:
        Critical task ids, their summed duration in days, the project end
        date, and per-task timings.
    """
    cfg = resolve_config(config)
    if not schedule_tasks:
        return CriticalPath()

    tasks = {t.id: t for t in schedule_tasks}
    order = _topological_order(tasks)
    successors = _successors(tasks)

    early_start: dict[str, datetime] = {}
    early_finish: dict[str, datetime] = {}
    for task_id in order:
        task = tasks[task_id]
        start = task.start_date
        for dep_id in task.dependencies:
            if dep_id in early_finish and early_finish[dep_id] > start:
                start = early_finish[dep_id]
        early_start[task_id] = start
        early_finish[task_id] = _shift(start, task.duration)

    project_end = max(early_finish.values())

    late_start: dict[str, datetime] = {}
    late_finish: dict[str, datetime] = {}
    for task_id in reversed(order):
        finish = project_end
        for succ_id in successors.get(task_id, []):
            if late_start[succ_id] < finish:
                finish = late_start[succ_id]
        late_finish[task_id] = finish
        late_start[task_id] = _shift(finish, -tasks[task_id].duration)

    tolerance = timedelta(days=cfg.critical_tolerance_days)
    critical_ids: list[str] = []
    total = timedelta(0)
    timings: dict[str, TaskTiming] = {}

    for task in schedule_tasks:
        gap = late_start[task.id] - early_start[task.id]
        task.critical = abs(gap) < tolerance
        if task.critical:
            critical_ids.append(task.id)
            total += task.duration
        timings[task.id] = TaskTiming(
            early_start=early_start[task.id],
            early_finish=early_finish[task.id],
            late_start=late_start[task.id],
            late_finish=late_finish[task.id],
            slack_days=_days(gap),
            critical=task.critical,
        )

    log.debug("Critical path: %d of %d task(s), ends %s", len(critical_ids), len(tasks), project_end)
    return CriticalPath(
        task_ids=critical_ids,
        total_duration=_days(total),
        end_date=project_end,
        timings=timings,
    )


def auto_schedule(schedule_tasks: list[ScheduleTask]) -> list[ScheduleTask]:
    """
    Shift tasks so none starts before its dependencies end.

    Dependencies are scheduled first; a task that would start before its
    latest dependency finishes is moved forward, keeping its duration.
    Works on copies and returns every task, moved or not, in input order.
    """
    tasks = {t.id: t.model_copy() for t in schedule_tasks}

    for task_id in _topological_order(tasks):
        task = tasks[task_id]
        latest_end = task.start_date
        for dep_id in task.dependencies:
            predecessor = tasks.get(dep_id)
            if predecessor is not None and predecessor.end_date > latest_end:
                latest_end = predecessor.end_date

        if latest_end > task.start_date:
            duration = task.duration
            task.start_date = latest_end
            task.end_date = _shift(latest_end, duration)
            log.debug("Moved %s to start %s", task_id, latest_end)

    return [tasks[t.id] for t in schedule_tasks]


def compute_slack(schedule_tasks: list[ScheduleTask]) -> dict[str, float]:
    """
    Approximate slack per task, in days.

    This is not full CPM total or free float: a task with no successors has
    zero slack, any other task has the gap between its end and the earliest
    successor start, floored at zero. Run on ``auto_schedule`` output so the
    windows match early start/finish.
    """
    tasks = {t.id: t for t in schedule_tasks}
    successors = _successors(tasks)

    slack: dict[str, float] = {}
    for task in schedule_tasks:
        succ_ids = successors.get(task.id)
        if not succ_ids:
            slack[task.id] = 0.0
            continue
        earliest = min(tasks[s].start_date for s in succ_ids)
        slack[task.id] = max(0.0, _days(earliest - task.end_date))
    return slack


# ============================================================================
# Timeline
# ============================================================================


def timeline_range(
    schedule_tasks: list[ScheduleTask],
    now: datetime | None = None,
    *,
    config: EngineConfig | None = None,
) -> TimelineRange:
    """Bounding box of all task windows, padded on both sides."""
    cfg = resolve_config(config)
    if not schedule_tasks:
        start = _as_utc(now) if now is not None else datetime.now(timezone.utc)
        return TimelineRange(start=start, end=_shift(start, timedelta(days=cfg.empty_timeline_days)))

    margin = timedelta(days=cfg.timeline_padding_days)
    return TimelineRange(
        start=_shift(min(t.start_date for t in schedule_tasks), -margin),
        end=_shift(max(t.end_date for t in schedule_tasks), margin),
    )


def _add_month(value: datetime) -> datetime:
    year, month = (value.year + 1, 1) if value.month == 12 else (value.year, value.month + 1)
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def _format_label(value: datetime, scale: TimelineScale) -> str:
    if scale == TimelineScale.DAY:
        return f"{value:%b} {value.day}"
    if scale == TimelineScale.WEEK:
        return f"{value:%b} W{math.ceil(value.day / 7)}"
    return f"{value:%b %Y}"


def generate_timeline_labels(
    start: datetime,
    end: datetime,
    scale: TimelineScale | str,
    show_weekends: bool = True,
) -> list[str]:
    """
    Labels for each calendar step from ``start`` up to and including ``end``.

    Examples:
        day: "Oct 19", week: "Oct W3" (week of the month), month: "Oct 2026"
    """
    scale = TimelineScale(scale)
    labels: list[str] = []
    current = start

    while current <= end:
        if scale != TimelineScale.DAY or show_weekends or current.weekday() < 5:
            labels.append(_format_label(current, scale))
        try:
            if scale == TimelineScale.DAY:
                current += DAY
            elif scale == TimelineScale.WEEK:
                current += timedelta(weeks=1)
            else:
                current = _add_month(current)
        except (OverflowError, ValueError):
            # next step is past the last representable date
            break

    return labels
