import logging
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence

from family_tree.modules.members.schemas import MemberDetails
from family_tree.modules.members.service import MemberService
from family_tree.modules.tree.builder import (
    TreeNode, build_forest, build_forest_with_report, decorate_forest, filter_forest,
)
from family_tree.modules.tree.schemas import (
    FamilyTreeResponse, TreeNodeResponse, TreeReportResponse, DirectoryEntry,
    GenerationGroup, GenerationsResponse,
)

logger = logging.getLogger(__name__)

GENERATION_TITLES = [
    "Roots",
    "Fathers",
    "Sons",
    "Grandsons",
    "Great-grandsons",
    "Sixth generation",
]


def generation_title(generation: int) -> str:
    """Title for a 1-based generation"""
    if 1 <= generation <= len(GENERATION_TITLES):
        return GENERATION_TITLES[generation - 1]
    return f"Generation {generation}"


def group_by_generation(members: Sequence[MemberDetails]) -> "OrderedDict[int, List[MemberDetails]]":
    """Members bucketed by generation, ascending; input order kept inside a bucket.

    Members without a stored generation are placed in generation 1.
    """
    buckets: Dict[int, List[MemberDetails]] = {}
    for member in members:
        buckets.setdefault(member.generation or 1, []).append(member)
    return OrderedDict(sorted(buckets.items()))


class TreeService:
    def __init__(self, member_service: MemberService):
        self.member_service = member_service

    def get_family_tree(self, palette: List[str]) -> FamilyTreeResponse:
        members = self.member_service.list_member_details()
        roots, report = build_forest_with_report(members)
        return FamilyTreeResponse(
            total_members=len(members),
            roots=[TreeNodeResponse.from_decorated(node) for node in decorate_forest(roots, palette)],
            report=TreeReportResponse.from_report(report),
        )

    def get_directory(self, search: Optional[str] = None) -> List[DirectoryEntry]:
        roots = build_forest(self.member_service.list_member_details())
        return [DirectoryEntry.from_tree_node(node) for node in filter_forest(roots, search)]

    def get_generations(self, search: Optional[str] = None, generation: Optional[int] = None) -> GenerationsResponse:
        members = self.member_service.list_member_details()
        available = sorted({member.generation or 1 for member in members})

        needle = search.lower() if search else None
        selected = [
            member for member in members
            if (needle is None or needle in member.name.lower())
            and (generation is None or (member.generation or 1) == generation)
        ]
        groups = [
            GenerationGroup(
                generation=level,
                title=generation_title(level),
                count=len(level_members),
                members=level_members,
            )
            for level, level_members in group_by_generation(selected).items()
        ]
        return GenerationsResponse(
            total_members=len(members),
            available_generations=available,
            selected_generation=generation,
            groups=groups,
        )

    def decorate(self, roots: List[TreeNode], palette: List[str]) -> List[TreeNodeResponse]:
        return [TreeNodeResponse.from_decorated(node) for node in decorate_forest(roots, palette)]
