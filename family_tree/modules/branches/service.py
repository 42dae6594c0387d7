import logging
from fastapi import HTTPException
from typing import List, Optional

from family_tree.database.backend import Backend
from family_tree.modules.branches.schemas import (
    BranchCreate, BranchResponse, BranchTreeNode, LocationCreate, LocationResponse
)
from family_tree.modules.members.mapping import Tables, BRANCH_FIELDS, LOCATION_FIELDS
from family_tree.modules.tree.builder import build_forest_with_report

logger = logging.getLogger(__name__)


class BranchService:
    def __init__(self, backend: Backend):
        self.backend = backend

    def list_branches(self) -> List[BranchResponse]:
        rows = self.backend.fetch_table(Tables.BRANCHES, order=BRANCH_FIELDS.column("name"))
        return [BranchResponse(**BRANCH_FIELDS.to_record(row)) for row in rows]

    def get_branch(self, branch_id: int) -> Optional[BranchResponse]:
        row = self.backend.fetch_one(Tables.BRANCHES, {BRANCH_FIELDS.column("id"): branch_id})
        if not row:
            return None
        return BranchResponse(**BRANCH_FIELDS.to_record(row))

    def create_branch(self, branch_data: BranchCreate) -> BranchResponse:
        if branch_data.parent_id is not None and self.get_branch(branch_data.parent_id) is None:
            raise HTTPException(status_code=400, detail="Parent branch not found")
        row = BRANCH_FIELDS.to_row(branch_data.model_dump(mode="json", exclude_none=True))
        created = self.backend.insert(Tables.BRANCHES, row)
        branch = BranchResponse(**BRANCH_FIELDS.to_record(created))
        logger.info(f"Branch {branch.id} created")
        return branch

    def get_branch_tree(self) -> List[BranchTreeNode]:
        """Branches nested under their parent branch"""
        roots, _ = build_forest_with_report(self.list_branches())
        return [BranchTreeNode.from_tree_node(node) for node in roots]

    def list_locations(self) -> List[LocationResponse]:
        rows = self.backend.fetch_table(
            Tables.LOCATIONS,
            order=[LOCATION_FIELDS.column(f) for f in ("country", "region", "city")],
        )
        return [LocationResponse(**LOCATION_FIELDS.to_record(row)) for row in rows]

    def get_location(self, location_id: int) -> Optional[LocationResponse]:
        row = self.backend.fetch_one(Tables.LOCATIONS, {LOCATION_FIELDS.column("id"): location_id})
        if not row:
            return None
        return LocationResponse(**LOCATION_FIELDS.to_record(row))

    def create_location(self, location_data: LocationCreate) -> LocationResponse:
        row = LOCATION_FIELDS.to_row(location_data.model_dump(mode="json", exclude_none=True))
        created = self.backend.insert(Tables.LOCATIONS, row)
        return LocationResponse(**LOCATION_FIELDS.to_record(created))
