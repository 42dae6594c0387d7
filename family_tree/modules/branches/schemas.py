from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime

from family_tree.modules.tree.builder import TreeNode


class BranchCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    parent_id: Optional[int] = None
    location_id: Optional[int] = None
    founded_on: Optional[date] = None
    notes: Optional[str] = None


class BranchResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    parent_id: Optional[int] = None
    location_id: Optional[int] = None
    founded_on: Optional[date] = None
    path: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BranchTreeNode(BaseModel):
    branch: BranchResponse
    children_count: int
    children: List["BranchTreeNode"] = []

    @classmethod
    def from_tree_node(cls, node: TreeNode) -> "BranchTreeNode":
        return cls(
            branch=node.node,
            children_count=node.children_count,
            children=[cls.from_tree_node(child) for child in node.children],
        )


class LocationCreate(BaseModel):
    country: str = Field(min_length=1)
    region: Optional[str] = None
    city: Optional[str] = None
    details: Optional[str] = None


class LocationResponse(BaseModel):
    id: int
    country: str
    region: Optional[str] = None
    city: Optional[str] = None
    details: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def label(self) -> str:
        return ", ".join(part for part in (self.country, self.region, self.city) if part)
