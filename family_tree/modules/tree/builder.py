"""
Flat-to-tree builder.

Turns a flat list of parent-pointer records into a nested forest. Any object
with ``id`` and ``parent_id`` attributes works as a node (members, branches,
rows of the descendants RPC); the node itself is kept untouched on the
produced TreeNode.

Malformed input never raises:

- a ``parent_id`` that resolves to no node in the batch makes the node a root
- a node whose ``parent_id`` is its own ``id`` becomes its own child and is
  unreachable from the roots
- nodes in a parent cycle are unreachable from the roots
- a repeated ``id`` keeps the first record; later ones are dropped

``build_forest_with_report`` returns these cases alongside the forest so
callers can surface them; they are also logged at WARNING level.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterator, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class TreeNode:
    node: Any
    children: List["TreeNode"] = field(default_factory=list)
    children_count: int = 0

    @property
    def id(self) -> Hashable:
        return self.node.id

    @property
    def name(self) -> str:
        return getattr(self.node, "name", "") or ""

    @property
    def is_leaf(self) -> bool:
        return not self.children


@dataclass
class TreeReport:
    orphan_ids: List[Hashable] = field(default_factory=list)
    self_parented_ids: List[Hashable] = field(default_factory=list)
    unreachable_ids: List[Hashable] = field(default_factory=list)
    duplicate_ids: List[Hashable] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not (self.orphan_ids or self.self_parented_ids
                    or self.unreachable_ids or self.duplicate_ids)


@dataclass
class DecoratedNode:
    """A TreeNode plus display derivations computed from its position."""
    node: Any
    generation: int
    color: str
    is_leaf: bool
    children_count: int
    children: List["DecoratedNode"] = field(default_factory=list)


def _build(nodes: Sequence[Any]) -> Tuple[List[TreeNode], Dict[Hashable, TreeNode], TreeReport]:
    report = TreeReport()
    lookup: Dict[Hashable, TreeNode] = {}
    ordered: List[TreeNode] = []

    for node in nodes:
        if node.id in lookup:
            report.duplicate_ids.append(node.id)
            continue
        tree_node = TreeNode(node=node)
        lookup[node.id] = tree_node
        ordered.append(tree_node)

    roots: List[TreeNode] = []
    for tree_node in ordered:
        parent_id = tree_node.node.parent_id
        if parent_id is None:
            roots.append(tree_node)
            continue
        parent = lookup.get(parent_id)
        if parent is None:
            report.orphan_ids.append(tree_node.id)
            roots.append(tree_node)
            continue
        if parent is tree_node:
            report.self_parented_ids.append(tree_node.id)
        parent.children.append(tree_node)
        parent.children_count += 1

    return roots, lookup, report


def build_forest(nodes: Sequence[Any]) -> List[TreeNode]:
    """Build the forest of root TreeNodes in O(n); children keep input order."""
    roots, _, _ = _build(nodes)
    return roots


def build_forest_with_report(nodes: Sequence[Any]) -> Tuple[List[TreeNode], TreeReport]:
    """Build the forest and report orphan, self-parented, unreachable and duplicate ids."""
    roots, lookup, report = _build(nodes)
    reachable = {id(tree_node) for tree_node in iter_forest(roots)}
    report.unreachable_ids = [
        key for key, tree_node in lookup.items() if id(tree_node) not in reachable
    ]
    if not report.is_clean:
        logger.warning(
            "Tree built with anomalies: %d orphan(s), %d self-parented, %d unreachable, %d duplicate id(s)",
            len(report.orphan_ids), len(report.self_parented_ids),
            len(report.unreachable_ids), len(report.duplicate_ids),
        )
    return roots, report


def iter_forest(roots: Sequence[TreeNode]) -> Iterator[TreeNode]:
    """Depth-first pre-order walk over every node reachable from roots."""
    stack = list(reversed(roots))
    while stack:
        tree_node = stack.pop()
        yield tree_node
        stack.extend(reversed(tree_node.children))


def count_nodes(roots: Sequence[TreeNode]) -> int:
    return sum(1 for _ in iter_forest(roots))


def generation_color(generation: int, palette: Sequence[str]) -> str:
    """Colour for a 1-based generation, cycling through the palette."""
    if not palette:
        return ""
    return palette[(generation - 1) % len(palette)]


def decorate_forest(roots: Sequence[TreeNode], palette: Sequence[str], generation: int = 1) -> List[DecoratedNode]:
    """Attach generation, colour and leaf flags to an already-built forest."""
    decorated = []
    for tree_node in roots:
        decorated.append(DecoratedNode(
            node=tree_node.node,
            generation=generation,
            color=generation_color(generation, palette),
            is_leaf=tree_node.is_leaf,
            children_count=tree_node.children_count,
            children=decorate_forest(tree_node.children, palette, generation + 1),
        ))
    return decorated


def _matches(tree_node: TreeNode, needle: str) -> bool:
    return needle in tree_node.name.lower()


def filter_forest(roots: Sequence[TreeNode], term: Optional[str]) -> List[TreeNode]:
    """Keep roots that match the term or have a matching child; narrow children to matches.

    Returns new TreeNode wrappers; the input forest is left intact.
    """
    if not term:
        return list(roots)
    needle = term.lower()
    filtered = []
    for root in roots:
        matching_children = [child for child in root.children if _matches(child, needle)]
        if _matches(root, needle) or matching_children:
            filtered.append(TreeNode(
                node=root.node,
                children=matching_children,
                children_count=root.children_count,
            ))
    return filtered
