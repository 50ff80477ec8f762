"""Tests for the hierarchy engine."""

import pytest
from conftest import make_task

from taskgraph_mcp import (
    DropPosition,
    EngineConfig,
    Priority,
    TaskStatus,
    apply_patches,
    build_tree,
    create_child,
    flatten_tree,
    indent,
    next_order,
    normalize,
    outdent,
    reorder,
)
from taskgraph_mcp.engine.hierarchy import descendant_ids, siblings, toggle_expanded


@pytest.fixture
def deep_branch():
    """Root r with children p and a; a has a two-level chain b -> c below it."""
    return [
        make_task("r", order=1000),
        make_task("p", parent_id="r", level=1, order=500),
        make_task("a", parent_id="r", level=1, order=1000),
        make_task("b", parent_id="a", level=2, order=1000),
        make_task("c", parent_id="b", level=3, order=1000),
    ]


@pytest.fixture
def ladder():
    """Chain t0 -> t1 -> t2 and a separate root d with chain d1 -> d2."""
    return [
        make_task("t0", order=1000),
        make_task("t1", parent_id="t0", level=1, order=1000),
        make_task("t2", parent_id="t1", level=2, order=1000),
        make_task("d", order=2000),
        make_task("d1", parent_id="d", level=1, order=1000),
        make_task("d2", parent_id="d1", level=2, order=1000),
    ]

# ============================================================================
# Tree building
# ============================================================================


class TestBuildTree:
    """Tests for build_tree."""

    def test_nests_children_under_parents(self, flat_tasks):
        forest = build_tree(flat_tasks)

        assert [t.id for t in forest] == ["r1", "r2", "r3"]
        assert [c.id for c in forest[0].children] == ["c1", "c2"]
        assert forest[1].children == []

    def test_sorts_every_level_by_order(self):
        tasks = [
            make_task("b", order=2000),
            make_task("a", order=1000),
            make_task("a2", parent_id="a", level=1, order=500),
            make_task("a1", parent_id="a", level=1, order=250),
        ]

        forest = build_tree(tasks)

        assert [t.id for t in forest] == ["a", "b"]
        assert [c.id for c in forest[0].children] == ["a1", "a2"]

    def test_unresolved_parent_becomes_root(self):
        tasks = [make_task("x", order=1000), make_task("orphan", parent_id="ghost", level=1, order=500)]

        forest = build_tree(tasks)

        assert [t.id for t in forest] == ["orphan", "x"]

    def test_parent_cycle_members_become_roots(self):
        tasks = [
            make_task("x", parent_id="y", order=1000),
            make_task("y", parent_id="x", order=2000),
            make_task("z", parent_id="x", order=1000),
            make_task("w", order=3000),
        ]

        flat = flatten_tree(build_tree(tasks))

        assert [t.id for t in flat] == ["x", "z", "y", "w"]

    def test_self_parent_becomes_root(self):
        forest = build_tree([make_task("s", parent_id="s")])

        assert [t.id for t in forest] == ["s"]
        assert forest[0].children == []

    def test_does_not_mutate_input(self, flat_tasks):
        build_tree(flat_tasks)

        assert all(t.children == [] for t in flat_tasks)

    def test_empty_input(self):
        assert build_tree([]) == []


class TestFlattenTree:
    """Tests for flatten_tree."""

    def test_pre_order_traversal(self, flat_tasks):
        flat = flatten_tree(build_tree(flat_tasks))

        assert [t.id for t in flat] == ["r1", "c1", "c2", "r2", "r3"]
        assert all(t.children == [] for t in flat)

    def test_recomputes_level_from_depth(self):
        tasks = [
            make_task("a", order=1000, level=2),
            make_task("b", parent_id="a", order=1000, level=0),
        ]

        flat = flatten_tree(build_tree(tasks))

        assert {t.id: t.level for t in flat} == {"a": 0, "b": 1}

    def test_round_trip_preserves_ids_and_true_depth(self):
        tasks = [
            make_task("e", order=2000),
            make_task("c", parent_id="b", order=1000),
            make_task("a", order=1000),
            make_task("d", parent_id="a", order=2000),
            make_task("b", parent_id="a", order=1000),
        ]
        parents = {t.id: t.parent_id for t in tasks}

        def depth(task_id):
            count = 0
            while parents[task_id]:
                task_id = parents[task_id]
                count += 1
            return count

        flat = flatten_tree(build_tree(tasks))

        assert sorted(t.id for t in flat) == sorted(t.id for t in tasks)
        assert [t.id for t in flat] == ["a", "b", "c", "d", "e"]
        for task in flat:
            assert task.level == depth(task.id)


# ============================================================================
# Ordering helpers
# ============================================================================


class TestNextOrder:
    """Tests for next_order."""

    def test_empty_siblings(self):
        assert next_order([]) == 1000

    def test_after_highest_sibling(self):
        tasks = [make_task("a", order=2500), make_task("b", order=1000)]
        assert next_order(tasks) == 3500

    def test_custom_step(self):
        assert next_order([], config=EngineConfig(order_step=10)) == 10


class TestSiblings:
    """Tests for siblings and descendant_ids."""

    def test_siblings_share_parent_sorted(self, flat_tasks):
        result = siblings(flat_tasks[4], flat_tasks)
        assert [t.id for t in result] == ["c1", "c2"]

    def test_descendants(self, flat_tasks):
        tasks = flat_tasks + [make_task("g1", parent_id="c1", level=2)]
        assert descendant_ids("r1", tasks) == {"c1", "c2", "g1"}
        assert descendant_ids("r2", tasks) == set()


# ============================================================================
# Structural edits
# ============================================================================


class TestCreateChild:
    """Tests for create_child."""

    def test_child_fields(self, flat_tasks):
        parent = make_task("r1", order=1000, project_id="p1", creator_id="u1")

        child = create_child(parent, "Write tests", flat_tasks)

        assert child is not None
        assert child.title == "Write tests"
        assert child.parent_id == "r1"
        assert child.level == 1
        assert child.order == 3000
        assert child.status_id == TaskStatus.TODO
        assert child.priority_id == Priority.MEDIUM
        assert child.project_id == "p1"
        assert child.creator_id == "u1"
        assert len(child.id) == 12

    def test_uses_tree_children_without_snapshot(self, flat_tasks):
        root = build_tree(flat_tasks)[0]

        child = create_child(root, "Another")

        assert child.order == 3000

    def test_first_child_gets_initial_order(self):
        child = create_child(make_task("p"), "First", [])
        assert child.order == 1000

    def test_refused_at_max_level(self):
        assert create_child(make_task("deep", level=3), "Too deep", []) is None

    def test_generates_distinct_ids(self):
        parent = make_task("p")
        assert create_child(parent, "a", []).id != create_child(parent, "b", []).id


class TestIndent:
    """Tests for indent."""

    def test_becomes_last_child_of_previous_sibling(self, flat_tasks):
        patch = indent(flat_tasks[1], flat_tasks)

        assert patch.id == "r2"
        assert patch.updates == {"parent_id": "r1", "level": 1, "order": 3000}

    def test_under_sibling_without_children(self, flat_tasks):
        patch = indent(flat_tasks[4], flat_tasks)

        assert patch.updates == {"parent_id": "c1", "level": 2, "order": 1000}

    def test_first_sibling_cannot_indent(self, flat_tasks):
        assert indent(flat_tasks[0], flat_tasks) is None

    def test_uses_order_not_list_position(self):
        tasks = [make_task("late", order=2000), make_task("early", order=1000)]

        assert indent(tasks[1], tasks) is None
        assert indent(tasks[0], tasks).updates["parent_id"] == "early"

    def test_task_at_max_level_cannot_indent(self):
        tasks = [
            make_task("prev", parent_id="p", level=3, order=1000),
            make_task("t", parent_id="p", level=3, order=2000),
        ]
        assert indent(tasks[1], tasks) is None

    def test_respects_configured_max_level(self, flat_tasks):
        assert indent(flat_tasks[4], flat_tasks, config=EngineConfig(max_level=1)) is None

    def test_refused_when_descendants_would_exceed_max_level(self, deep_branch):
        task = next(t for t in deep_branch if t.id == "a")

        assert indent(task, deep_branch) is None

    def test_descendants_counted_against_configured_max_level(self, deep_branch):
        task = next(t for t in deep_branch if t.id == "a")

        patch = indent(task, deep_branch, config=EngineConfig(max_level=4))

        assert patch.updates["parent_id"] == "p"
        assert patch.updates["level"] == 2


class TestOutdent:
    """Tests for outdent."""

    def test_placed_right_after_parent(self, flat_tasks):
        patch = outdent(flat_tasks[3], flat_tasks)

        assert patch.id == "c1"
        assert patch.updates == {"parent_id": None, "level": 0, "order": 1500}

    def test_after_last_parent_sibling(self, flat_tasks):
        tasks = flat_tasks + [make_task("x", parent_id="r3", level=1, order=1000)]

        patch = outdent(tasks[-1], tasks)

        assert patch.updates["order"] == 4000
        assert patch.updates["parent_id"] is None

    def test_root_cannot_outdent(self, flat_tasks):
        assert outdent(flat_tasks[0], flat_tasks) is None

    def test_missing_parent(self):
        task = make_task("t", parent_id="ghost", level=1)
        assert outdent(task, [task]) is None

    def test_indent_then_outdent_restores_parent(self, flat_tasks):
        original = flat_tasks[4]

        after_indent = apply_patches(flat_tasks, [indent(original, flat_tasks)])
        indented = next(t for t in after_indent if t.id == original.id)
        assert indented.parent_id == "c1"

        after_outdent = apply_patches(after_indent, [outdent(indented, after_indent)])
        restored = next(t for t in after_outdent if t.id == original.id)

        assert restored.parent_id == original.parent_id
        assert restored.level == original.level


class TestReorder:
    """Tests for reorder."""

    def test_before_target(self, flat_tasks):
        patches = reorder(flat_tasks[2], flat_tasks[1], "before", flat_tasks)

        assert len(patches) == 1
        assert patches[0].updates == {"parent_id": None, "level": 0, "order": 1999.5}

    def test_after_target_in_other_group(self, flat_tasks):
        patches = reorder(flat_tasks[2], flat_tasks[3], DropPosition.AFTER, flat_tasks)

        assert patches[0].id == "r3"
        assert patches[0].updates == {"parent_id": "r1", "level": 1, "order": 1000.5}

    def test_as_child(self, flat_tasks):
        patches = reorder(flat_tasks[2], flat_tasks[0], DropPosition.CHILD, flat_tasks)

        assert patches[0].updates == {"parent_id": "r1", "level": 1, "order": 3000}

    def test_child_of_target_at_max_level(self):
        target = make_task("deep", level=3)
        dragged = make_task("d")

        assert reorder(dragged, target, DropPosition.CHILD, [target, dragged]) == []

    def test_cannot_drop_into_own_subtree(self, flat_tasks):
        assert reorder(flat_tasks[0], flat_tasks[3], DropPosition.CHILD, flat_tasks) == []
        assert reorder(flat_tasks[0], flat_tasks[0], DropPosition.AFTER, flat_tasks) == []

    def test_child_refused_when_subtree_too_deep(self, ladder):
        dragged = next(t for t in ladder if t.id == "d")
        target = next(t for t in ladder if t.id == "t2")

        assert reorder(dragged, target, DropPosition.CHILD, ladder) == []

    def test_child_moves_subtree_levels(self, ladder):
        dragged = next(t for t in ladder if t.id == "d")
        target = next(t for t in ladder if t.id == "t1")

        patches = reorder(dragged, target, DropPosition.CHILD, ladder, config=EngineConfig(max_level=4))

        assert [(p.id, p.updates) for p in patches] == [
            ("d", {"parent_id": "t1", "level": 2, "order": 2000}),
            ("d1", {"level": 3}),
            ("d2", {"level": 4}),
        ]

    def test_sibling_drop_refused_when_subtree_too_deep(self, ladder):
        dragged = next(t for t in ladder if t.id == "d")
        target = next(t for t in ladder if t.id == "t2")

        assert reorder(dragged, target, DropPosition.AFTER, ladder) == []
        assert reorder(dragged, target, DropPosition.BEFORE, ladder) == []

    def test_sibling_drop_keeps_subtree_within_max_level(self, ladder):
        dragged = next(t for t in ladder if t.id == "d")
        target = next(t for t in ladder if t.id == "t1")

        patches = reorder(dragged, target, DropPosition.BEFORE, ladder)
        flat = flatten_tree(build_tree(apply_patches(ladder, patches)))

        assert {t.id: t.level for t in flat}["d2"] == 3
        assert max(t.level for t in flat) <= 3
        assert {p.id: p.updates["level"] for p in patches} == {"d": 1, "d1": 2, "d2": 3}

    def test_unchanged_descendant_levels_not_patched(self, ladder):
        dragged = next(t for t in ladder if t.id == "d")
        target = next(t for t in ladder if t.id == "t0")

        patches = reorder(dragged, target, DropPosition.AFTER, ladder)

        assert [p.id for p in patches] == ["d"]

    def test_invalid_position(self, flat_tasks):
        with pytest.raises(ValueError):
            reorder(flat_tasks[0], flat_tasks[1], "sideways", flat_tasks)


class TestNormalize:
    """Tests for normalize."""

    def test_reassigns_evenly_spaced_keys(self):
        tasks = [
            make_task("a", order=5),
            make_task("b", order=2.5),
            make_task("c", order=1000),
            make_task("x", parent_id="a", level=1, order=0.5),
            make_task("y", parent_id="a", level=1, order=0.75),
        ]

        patches = {p.id: p.updates["order"] for p in normalize(tasks)}

        assert patches == {"b": 1000, "a": 2000, "c": 3000, "x": 1000, "y": 2000}

    def test_preserves_relative_order(self):
        orders = [1000, 999.5, 999.75, 999.875, 1000.5, 3000]
        tasks = [make_task(f"t{i}", order=o) for i, o in enumerate(orders)]
        before = [t.id for t in sorted(tasks, key=lambda t: t.order)]

        normalized = apply_patches(tasks, normalize(tasks))
        by_id = {t.id: t.order for t in normalized}

        for earlier, later in zip(before, before[1:]):
            assert by_id[earlier] < by_id[later]

    def test_already_normalized(self, flat_tasks):
        assert normalize(flat_tasks) == []


class TestToggleExpanded:
    """Tests for toggle_expanded."""

    def test_flips_flag(self):
        assert toggle_expanded(make_task("a")).updates == {"is_expanded": True}
        assert toggle_expanded(make_task("a", is_expanded=True)).updates == {"is_expanded": False}
