"""Schedule MCP tools: critical path, slack and timeline."""

import json

from mcp.types import ToolAnnotations

from taskgraph_mcp.engine import schedule
from taskgraph_mcp.enums import ResponseFormat
from taskgraph_mcp.errors import DependencyCycleError
from taskgraph_mcp.models.inputs import CriticalPathInput, SlackInput, TimelineInput
from taskgraph_mcp.server import mcp


def _cycle_error(e: DependencyCycleError) -> str:
    return f"Error: {e}.\nTip: Use taskgraph_validate to find the circular dependencies."


@mcp.tool(
    name="taskgraph_critical_path",
    annotations=ToolAnnotations(
        title="Critical Path",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskgraph_critical_path(params: CriticalPathInput) -> str:
    """
    Find the chain of tasks that determines the project end date.

    Tasks without dates get a default window (start now, 7 days long).
    With auto_schedule=True, tasks are first pushed after their dependencies.

    USE THIS WHEN:
    - Answering "which tasks can't slip without delaying the project?"
    - Estimating when the project will finish

    DO NOT USE WHEN:
    - You want per-task float only -> use taskgraph_slack

    Args:
        params: CriticalPathInput with the snapshot, auto_schedule flag and reference time

    Returns:
        Critical task ids, their total duration in days and the projected end date
    """
    schedule_tasks = schedule.to_schedule_tasks(params.tasks, params.now)
    try:
        if params.auto_schedule:
            schedule_tasks = schedule.auto_schedule(schedule_tasks)
        path = schedule.compute_critical_path(schedule_tasks)
    except DependencyCycleError as e:
        return _cycle_error(e)

    by_id = {t.id: t for t in schedule_tasks}
    end_text = path.end_date.strftime("%Y-%m-%d %H:%M") if path.end_date else "-"

    if params.response_format == ResponseFormat.JSON:
        return json.dumps(
            {
                **path.model_dump(mode="json"),
                "tasks": [t.model_dump(mode="json") for t in schedule_tasks] if params.auto_schedule else [],
            },
            indent=2,
        )

    if params.response_format == ResponseFormat.CONCISE:
        chain = " > ".join(f"#{task_id}" for task_id in path.task_ids) or "(none)"
        return f"critical: {chain} | {path.total_duration:g} day(s) | end {end_text}"

    if not path.task_ids:
        return "# Critical Path\n\nNo tasks to schedule."

    lines = ["# Critical Path", f"*{len(path.task_ids)} of {len(schedule_tasks)} task(s) critical*", ""]
    lines.append("| ID | Task | Start | End | Days |")
    lines.append("|----|------|-------|-----|------|")
    for task_id in path.task_ids:
        task = by_id[task_id]
        timing = path.timings[task_id]
        lines.append(
            f"| {task_id} | {(task.title or '')[:40]} | {timing.early_start:%Y-%m-%d} "
            f"| {timing.early_finish:%Y-%m-%d} | {task.duration.total_seconds() / 86400:g} |"
        )
    lines.append("")
    lines.append(f"- Total critical duration: {path.total_duration:g} day(s)")
    lines.append(f"- Projected end: {end_text}")
    return "\n".join(lines)


@mcp.tool(
    name="taskgraph_slack",
    annotations=ToolAnnotations(
        title="Task Slack",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskgraph_slack(params: SlackInput) -> str:
    """
    Show how many days each task can slip before its earliest successor is affected.

    This is an approximation: tasks with no successors always report 0.

    Args:
        params: SlackInput with the snapshot and auto_schedule flag

    Returns:
        Slack in days per task, largest first
    """
    schedule_tasks = schedule.to_schedule_tasks(params.tasks, params.now)
    if params.auto_schedule:
        try:
            schedule_tasks = schedule.auto_schedule(schedule_tasks)
        except DependencyCycleError as e:
            return _cycle_error(e)

    slack = schedule.compute_slack(schedule_tasks)
    ranked = sorted(schedule_tasks, key=lambda t: slack[t.id], reverse=True)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps({"slack": slack, "count": len(slack)}, indent=2)

    if params.response_format == ResponseFormat.CONCISE:
        if not ranked:
            return "0 tasks"
        return "\n".join(f"#{t.id}: {slack[t.id]:g}d" for t in ranked)

    if not ranked:
        return "# Task Slack\n\nNo tasks found."

    lines = ["# Task Slack", "", "| ID | Task | Slack (days) |", "|----|------|--------------|"]
    for task in ranked:
        lines.append(f"| {task.id} | {(task.title or '')[:40]} | {slack[task.id]:g} |")
    return "\n".join(lines)


@mcp.tool(
    name="taskgraph_timeline",
    annotations=ToolAnnotations(
        title="Timeline",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    ),
)
async def taskgraph_timeline(params: TimelineInput) -> str:
    """
    Compute the Gantt timeline bounds and axis labels for a task set.

    The range covers every task window plus a 7-day margin on each side,
    or the next 30 days when there are no tasks.

    Args:
        params: TimelineInput with the snapshot, scale and weekend option

    Returns:
        Start/end of the timeline and the axis labels
    """
    schedule_tasks = schedule.to_schedule_tasks(params.tasks, params.now)
    bounds = schedule.timeline_range(schedule_tasks, params.now)
    labels = schedule.generate_timeline_labels(bounds.start, bounds.end, params.scale, params.show_weekends)

    if params.response_format == ResponseFormat.JSON:
        return json.dumps({**bounds.model_dump(mode="json"), "scale": params.scale.value, "labels": labels}, indent=2)

    span = f"{bounds.start:%Y-%m-%d} .. {bounds.end:%Y-%m-%d}"
    if params.response_format == ResponseFormat.CONCISE:
        return f"{span} | {len(labels)} {params.scale.value} label(s)"

    return "\n".join([f"# Timeline ({params.scale.value})", f"*{span}*", "", " | ".join(labels)])
