"""Tests for the flat-to-tree builder and its forest helpers."""

import logging
import random
from dataclasses import dataclass
from typing import Optional

import pytest

from family_tree.modules.tree.builder import (
    build_forest, build_forest_with_report, count_nodes, decorate_forest,
    filter_forest, generation_color, iter_forest,
)

PALETTE = ["#3b82f6", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6", "#06b6d4"]


@dataclass
class Node:
    id: int
    parent_id: Optional[int]
    name: str = ""


def shape(roots):
    """Structure of a forest as nested (id, children_count, children) tuples."""
    return [(root.id, root.children_count, shape(root.children)) for root in roots]


def random_forest(seed, size):
    """A valid forest: every parent precedes or follows its child in shuffled order."""
    rng = random.Random(seed)
    nodes = []
    for node_id in range(1, size + 1):
        parent_id = rng.choice([None] + list(range(1, node_id))) if node_id > 1 else None
        nodes.append(Node(node_id, parent_id, f"n{node_id}"))
    rng.shuffle(nodes)
    return nodes


class TestConcreteScenarios:
    """Known inputs with known forests."""

    def test_small_family(self):
        """A with children B and C in order, B with child D."""
        nodes = [Node(1, None, "A"), Node(2, 1, "B"), Node(3, 1, "C"), Node(4, 2, "D")]
        roots = build_forest(nodes)

        assert [root.name for root in roots] == ["A"]
        a = roots[0]
        assert [child.name for child in a.children] == ["B", "C"]
        b, c = a.children
        assert [child.name for child in b.children] == ["D"]
        d = b.children[0]
        assert a.children_count == 2
        assert b.children_count == 1
        assert c.children_count == 0
        assert d.children_count == 0

    def test_dangling_parent_becomes_root(self):
        """A parent id absent from the batch promotes the node to root."""
        roots = build_forest([Node(1, 99, "Orphan")])
        assert [root.name for root in roots] == ["Orphan"]
        assert roots[0].children == []

    def test_empty_input(self):
        assert build_forest([]) == []


class TestForestProperties:
    """Properties that hold for every input."""

    @pytest.mark.parametrize("size", [0, 1, 5, 40])
    def test_all_null_parents_are_all_roots(self, size):
        nodes = [Node(i, None) for i in range(size)]
        roots = build_forest(nodes)
        assert len(roots) == size
        assert all(root.children == [] for root in roots)

    @pytest.mark.parametrize("seed", range(10))
    def test_valid_forest_reaches_every_node_once(self, seed):
        nodes = random_forest(seed, 60)
        roots = build_forest(nodes)
        reached = [tree_node.id for tree_node in iter_forest(roots)]
        assert len(reached) == len(nodes)
        assert sorted(reached) == sorted(node.id for node in nodes)
        assert count_nodes(roots) == len(nodes)

    @pytest.mark.parametrize("seed", range(5))
    def test_building_twice_gives_same_structure(self, seed):
        nodes = random_forest(seed, 30)
        assert shape(build_forest(nodes)) == shape(build_forest(nodes))

    def test_children_and_roots_keep_input_order(self):
        nodes = [Node(5, None), Node(3, 5), Node(1, None), Node(4, 5), Node(2, 5)]
        roots = build_forest(nodes)
        assert [root.id for root in roots] == [5, 1]
        assert [child.id for child in roots[0].children] == [3, 4, 2]

    def test_child_listed_before_parent(self):
        roots = build_forest([Node(2, 1, "child"), Node(1, None, "parent")])
        assert [root.id for root in roots] == [1]
        assert [child.id for child in roots[0].children] == [2]

    def test_input_nodes_are_kept_untouched(self):
        node = Node(1, None, "A")
        roots = build_forest([node])
        assert roots[0].node is node


class TestMalformedInput:
    """Malformed batches never raise and are reported."""

    def test_self_parented_node_is_unreachable(self):
        roots, report = build_forest_with_report([Node(1, None, "A"), Node(2, 2, "Self")])
        assert [tree_node.id for tree_node in iter_forest(roots)] == [1]
        assert report.self_parented_ids == [2]
        assert report.unreachable_ids == [2]

    def test_cycle_members_are_unreachable(self):
        nodes = [Node(1, 2), Node(2, 3), Node(3, 1), Node(4, None)]
        roots, report = build_forest_with_report(nodes)
        assert [root.id for root in roots] == [4]
        assert sorted(report.unreachable_ids) == [1, 2, 3]
        assert report.orphan_ids == []

    def test_descendants_of_a_cycle_are_unreachable(self):
        nodes = [Node(1, 2), Node(2, 1), Node(3, 1)]
        roots, report = build_forest_with_report(nodes)
        assert roots == []
        assert sorted(report.unreachable_ids) == [1, 2, 3]

    def test_orphans_are_reported(self):
        roots, report = build_forest_with_report([Node(1, 99), Node(2, 1)])
        assert [root.id for root in roots] == [1]
        assert report.orphan_ids == [1]
        assert report.unreachable_ids == []

    def test_duplicate_ids_keep_first_record(self):
        nodes = [Node(1, None, "first"), Node(1, None, "second"), Node(2, 1)]
        roots, report = build_forest_with_report(nodes)
        assert [root.name for root in roots] == ["first"]
        assert roots[0].children_count == 1
        assert report.duplicate_ids == [1]

    def test_clean_batch_has_clean_report(self, caplog):
        with caplog.at_level(logging.WARNING):
            _, report = build_forest_with_report([Node(1, None), Node(2, 1)])
        assert report.is_clean
        assert caplog.records == []

    def test_anomalies_are_logged_as_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="family_tree.modules.tree.builder"):
            build_forest_with_report([Node(1, 99)])
        assert any("anomalies" in record.message for record in caplog.records)


class TestDecorations:
    """Generation, colour and leaf flags derived from the built tree."""

    def test_generation_color_cycles_palette(self):
        assert generation_color(1, PALETTE) == "#3b82f6"
        assert generation_color(6, PALETTE) == "#06b6d4"
        assert generation_color(7, PALETTE) == "#3b82f6"

    def test_generation_color_with_empty_palette(self):
        assert generation_color(3, []) == ""

    def test_decorate_assigns_generations_from_roots(self):
        nodes = [Node(1, None), Node(2, 1), Node(3, 2), Node(4, None)]
        decorated = decorate_forest(build_forest(nodes), PALETTE)

        root, other_root = decorated
        assert (root.generation, root.color, root.is_leaf, root.children_count) == (1, "#3b82f6", False, 1)
        child = root.children[0]
        assert (child.generation, child.color) == (2, "#10b981")
        grandchild = child.children[0]
        assert (grandchild.generation, grandchild.is_leaf) == (3, True)
        assert other_root.is_leaf

    def test_decorate_is_deterministic(self):
        roots = build_forest(random_forest(3, 25))
        first = decorate_forest(roots, PALETTE)
        second = decorate_forest(roots, PALETTE)
        assert [(d.node.id, d.generation, d.color) for d in first] == \
               [(d.node.id, d.generation, d.color) for d in second]


class TestFilterForest:
    """Directory search over roots and their immediate children."""

    @pytest.fixture
    def roots(self):
        return build_forest([
            Node(1, None, "Saleh"),
            Node(2, 1, "Ahmad"),
            Node(3, 1, "Khalid"),
            Node(4, None, "Omar"),
            Node(5, 4, "Salem"),
            Node(6, None, "Yusuf"),
        ])

    def test_empty_term_returns_forest(self, roots):
        assert filter_forest(roots, "") == roots
        assert filter_forest(roots, None) == roots

    def test_matching_root_keeps_only_matching_children(self, roots):
        filtered = filter_forest(roots, "sal")
        assert [root.name for root in filtered] == ["Saleh", "Omar"]
        assert filtered[0].children == []
        assert [child.name for child in filtered[1].children] == ["Salem"]

    def test_match_is_case_insensitive(self, roots):
        assert [root.name for root in filter_forest(roots, "YUSUF")] == ["Yusuf"]

    def test_children_count_is_preserved(self, roots):
        filtered = filter_forest(roots, "ahmad")
        assert filtered[0].children_count == 2
        assert [child.name for child in filtered[0].children] == ["Ahmad"]

    def test_input_forest_is_not_modified(self, roots):
        filter_forest(roots, "ahmad")
        assert len(roots[0].children) == 2
