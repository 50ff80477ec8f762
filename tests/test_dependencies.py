"""Tests for the dependency graph engine."""

import logging

import pytest
from conftest import make_task

from taskgraph_mcp import (
    IssueKind,
    TaskNotFoundError,
    add_dependency,
    apply_patches,
    blocked_tasks_of,
    build_dependency_graph,
    can_start,
    dependencies_of,
    dependency_status,
    newly_ready_tasks,
    remove_dependency,
    validate_dependencies,
    would_create_cycle,
)


@pytest.fixture
def linear_tasks():
    """C depends on B, B depends on A."""
    return [
        make_task("A", status_id="done", blocked_by_ids=["B"]),
        make_task("B", status_id="inProgress", dependency_ids=["A"], blocked_by_ids=["C"]),
        make_task("C", dependency_ids=["B"]),
    ]


# ============================================================================
# Readiness queries
# ============================================================================


class TestCanStart:
    """Tests for can_start."""

    def test_readiness_follows_dependency_status(self):
        tasks = [make_task("1", dependency_ids=[]), make_task("2", dependency_ids=["1"])]
        assert can_start(tasks[1], tasks) is False

        tasks[0] = make_task("1", status_id="done")
        assert can_start(tasks[1], tasks) is True

    def test_no_dependencies(self):
        task = make_task("solo")
        assert can_start(task, [task]) is True

    def test_unresolved_dependency_is_ignored(self):
        tasks = [make_task("1", status_id="done"), make_task("2", dependency_ids=["1", "missing"])]
        assert can_start(tasks[1], tasks) is True

    def test_cancelled_dependency_still_blocks(self):
        tasks = [make_task("1", status_id="cancelled"), make_task("2", dependency_ids=["1"])]
        assert can_start(tasks[1], tasks) is False


class TestLookups:
    """Tests for dependencies_of and blocked_tasks_of."""

    def test_dependencies_of(self, linear_tasks):
        assert [t.id for t in dependencies_of(linear_tasks[1], linear_tasks)] == ["A"]

    def test_dependencies_of_skips_unresolved(self):
        tasks = [make_task("x", dependency_ids=["ghost"])]
        assert dependencies_of(tasks[0], tasks) == []

    def test_blocked_tasks_of(self, linear_tasks):
        assert [t.id for t in blocked_tasks_of(linear_tasks[0], linear_tasks)] == ["B"]
        assert blocked_tasks_of(linear_tasks[2], linear_tasks) == []

    def test_task_outside_snapshot_raises(self, linear_tasks):
        stranger = make_task("Z", dependency_ids=["A"])

        with pytest.raises(TaskNotFoundError) as exc_info:
            dependencies_of(stranger, linear_tasks)
        assert exc_info.value.task_id == "Z"

        with pytest.raises(KeyError):
            blocked_tasks_of(stranger, linear_tasks)


# ============================================================================
# Cycle detection and edge mutations
# ============================================================================


class TestWouldCreateCycle:
    """Tests for would_create_cycle."""

    def test_transitive_cycle(self, linear_tasks):
        # A depending on C closes A -> B -> C -> A
        assert would_create_cycle("A", "C", linear_tasks) is True

    def test_forward_edge_is_safe(self, linear_tasks):
        assert would_create_cycle("C", "A", linear_tasks) is False

    def test_self_dependency(self, linear_tasks):
        assert would_create_cycle("A", "A", linear_tasks) is True

    def test_diamond_without_cycle(self):
        tasks = [
            make_task("top"),
            make_task("left", dependency_ids=["top"]),
            make_task("right", dependency_ids=["top"]),
            make_task("bottom", dependency_ids=["left", "right"]),
        ]
        assert would_create_cycle("bottom", "top", tasks) is False
        assert would_create_cycle("top", "bottom", tasks) is True


class TestAddDependency:
    """Tests for add_dependency."""

    def test_valid_edge_produces_both_patches(self):
        tasks = [make_task("A"), make_task("B")]

        result = add_dependency("A", "B", tasks)

        assert result.valid is True
        assert result.error is None
        assert [(p.id, p.updates) for p in result.updates] == [
            ("A", {"dependency_ids": ["B"]}),
            ("B", {"blocked_by_ids": ["A"]}),
        ]

    def test_reverse_edge_is_rejected(self):
        tasks = [make_task("A"), make_task("B")]

        first = add_dependency("A", "B", tasks)
        tasks = apply_patches(tasks, first.updates)
        second = add_dependency("B", "A", tasks)

        assert first.valid is True
        assert second.valid is False
        assert "circular" in second.error
        assert second.updates == []

    def test_missing_task(self):
        tasks = [make_task("A")]

        result = add_dependency("A", "nope", tasks)

        assert result.valid is False
        assert "nope" in result.error

    def test_existing_edge(self, linear_tasks):
        result = add_dependency("B", "A", linear_tasks)

        assert result.valid is False
        assert "already exists" in result.error

    def test_self_dependency_rejected(self):
        tasks = [make_task("A")]
        assert add_dependency("A", "A", tasks).valid is False

    def test_keeps_existing_edges(self, linear_tasks):
        result = add_dependency("C", "A", linear_tasks)

        assert result.valid is True
        assert result.updates[0].updates == {"dependency_ids": ["B", "A"]}
        assert result.updates[1].updates == {"blocked_by_ids": ["B", "C"]}


class TestRemoveDependency:
    """Tests for remove_dependency."""

    def test_removes_both_sides(self, linear_tasks):
        result = remove_dependency("B", "A", linear_tasks)

        assert result.valid is True
        assert result.updates[0].updates == {"dependency_ids": []}
        assert result.updates[1].updates == {"blocked_by_ids": []}

    def test_missing_task(self, linear_tasks):
        result = remove_dependency("B", "ghost", linear_tasks)

        assert result.valid is False
        assert "ghost" in result.error

    def test_absent_edge_is_still_valid(self, linear_tasks):
        result = remove_dependency("C", "A", linear_tasks)

        assert result.valid is True
        assert result.updates[0].updates == {"dependency_ids": ["B"]}


# ============================================================================
# Status and whole-graph views
# ============================================================================


class TestDependencyStatus:
    """Tests for dependency_status."""

    def test_partial_completion(self):
        tasks = [
            make_task("d1", status_id="done"),
            make_task("d2"),
            make_task("t", dependency_ids=["d1", "d2", "ghost"]),
            make_task("after", dependency_ids=["t"]),
        ]

        status = dependency_status(tasks[2], tasks)

        assert status.can_start is False
        assert [t.id for t in status.depends_on] == ["d1", "d2"]
        assert [t.id for t in status.blocked_by] == ["d2"]
        assert [t.id for t in status.blocking] == ["after"]
        assert status.completion_rate == 0.5

    def test_no_dependencies(self):
        task = make_task("t")

        status = dependency_status(task, [task])

        assert status.can_start is True
        assert status.completion_rate == 1.0


class TestNewlyReadyTasks:
    """Tests for newly_ready_tasks."""

    def test_reports_unblocked_todo_successors(self, caplog):
        tasks = [
            make_task("A", status_id="done"),
            make_task("B", title="Build", dependency_ids=["A"]),
            make_task("C", dependency_ids=["A", "D"]),
            make_task("D"),
            make_task("E", status_id="inProgress", dependency_ids=["A"]),
        ]

        with caplog.at_level(logging.INFO, logger="taskgraph_mcp"):
            ready = newly_ready_tasks("A", tasks)

        assert [t.id for t in ready] == ["B"]
        assert "Build is now ready to start" in caplog.text

    def test_unknown_task(self):
        with pytest.raises(TaskNotFoundError):
            newly_ready_tasks("ghost", [make_task("A")])


class TestBuildDependencyGraph:
    """Tests for build_dependency_graph."""

    def test_nodes_and_edges(self, linear_tasks):
        graph = build_dependency_graph(linear_tasks)

        assert [(n.id, n.status) for n in graph.nodes] == [("A", "done"), ("B", "inProgress"), ("C", "todo")]
        assert [(e.from_id, e.to_id) for e in graph.edges] == [("A", "B"), ("B", "C")]

    def test_edges_serialize_as_from_to(self, linear_tasks):
        dumped = build_dependency_graph(linear_tasks).model_dump(by_alias=True)
        assert dumped["edges"][0] == {"from": "A", "to": "B"}


class TestValidateDependencies:
    """Tests for validate_dependencies."""

    def test_valid_graph(self, linear_tasks):
        report = validate_dependencies(linear_tasks)

        assert report.valid is True
        assert report.errors == []

    def test_dangling_reference(self):
        report = validate_dependencies([make_task("x", title="X", dependency_ids=["ghost"])])

        assert report.valid is False
        assert len(report.errors) == 1
        issue = report.errors[0]
        assert issue.kind == IssueKind.DANGLING_REFERENCE
        assert (issue.task_id, issue.dependency_id) == ("x", "ghost")
        assert "non-existent" in issue.message

    def test_cycle_flags_every_edge_in_it(self):
        tasks = [
            make_task("a", dependency_ids=["b"]),
            make_task("b", dependency_ids=["a"]),
            make_task("c", dependency_ids=["a"]),
        ]

        report = validate_dependencies(tasks)

        cycles = [(i.task_id, i.dependency_id) for i in report.errors if i.kind == IssueKind.CYCLE]
        assert cycles == [("a", "b"), ("b", "a")]
