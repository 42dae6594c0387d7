from pydantic import BaseModel
from typing import List, Optional, Any

from family_tree.modules.members.schemas import MemberDetails
from family_tree.modules.tree.builder import DecoratedNode, TreeNode, TreeReport


class TreeNodeResponse(BaseModel):
    member: MemberDetails
    generation: int
    color: str
    is_leaf: bool
    children_count: int
    children: List["TreeNodeResponse"] = []

    @classmethod
    def from_decorated(cls, node: DecoratedNode) -> "TreeNodeResponse":
        return cls(
            member=node.node,
            generation=node.generation,
            color=node.color,
            is_leaf=node.is_leaf,
            children_count=node.children_count,
            children=[cls.from_decorated(child) for child in node.children],
        )


class TreeReportResponse(BaseModel):
    orphan_ids: List[Any] = []
    self_parented_ids: List[Any] = []
    unreachable_ids: List[Any] = []
    duplicate_ids: List[Any] = []

    @classmethod
    def from_report(cls, report: TreeReport) -> "TreeReportResponse":
        return cls(
            orphan_ids=report.orphan_ids,
            self_parented_ids=report.self_parented_ids,
            unreachable_ids=report.unreachable_ids,
            duplicate_ids=report.duplicate_ids,
        )


class FamilyTreeResponse(BaseModel):
    total_members: int
    roots: List[TreeNodeResponse]
    report: TreeReportResponse


class DirectoryEntry(BaseModel):
    member: MemberDetails
    children_count: int
    children: List["DirectoryEntry"] = []

    @classmethod
    def from_tree_node(cls, node: TreeNode) -> "DirectoryEntry":
        return cls(
            member=node.node,
            children_count=node.children_count,
            children=[cls.from_tree_node(child) for child in node.children],
        )


class GenerationGroup(BaseModel):
    generation: int
    title: str
    count: int
    members: List[MemberDetails]


class GenerationsResponse(BaseModel):
    total_members: int
    available_generations: List[int]
    selected_generation: Optional[int] = None
    groups: List[GenerationGroup]
