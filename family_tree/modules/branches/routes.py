from fastapi import APIRouter, Depends, HTTPException
from family_tree.core.dependencies import require_permission
from family_tree.database.backend import Backend
from family_tree.database.supabase_client import get_backend
from family_tree.modules.auth.schemas import UserProfile
from family_tree.modules.branches.schemas import (
    BranchCreate, BranchResponse, BranchTreeNode, LocationCreate, LocationResponse
)
from family_tree.modules.branches.service import BranchService
from typing import List

router = APIRouter(prefix="/branches", tags=["branches"])
locations_router = APIRouter(prefix="/locations", tags=["locations"])


def get_branch_service(backend: Backend = Depends(get_backend)) -> BranchService:
    return BranchService(backend)


@router.get("", response_model=List[BranchResponse])
async def list_branches(
    profile: UserProfile = Depends(require_permission("read")),
    service: BranchService = Depends(get_branch_service)
):
    return service.list_branches()


@router.get("/tree", response_model=List[BranchTreeNode])
async def get_branch_tree(
    profile: UserProfile = Depends(require_permission("read")),
    service: BranchService = Depends(get_branch_service)
):
    """Branches nested under their parent branch"""
    return service.get_branch_tree()


@router.post("", response_model=BranchResponse, status_code=201)
async def create_branch(
    branch_data: BranchCreate,
    profile: UserProfile = Depends(require_permission("manage_branch")),
    service: BranchService = Depends(get_branch_service)
):
    return service.create_branch(branch_data)


@router.get("/{branch_id}", response_model=BranchResponse)
async def get_branch(
    branch_id: int,
    profile: UserProfile = Depends(require_permission("read")),
    service: BranchService = Depends(get_branch_service)
):
    branch = service.get_branch(branch_id)
    if branch is None:
        raise HTTPException(status_code=404, detail="Branch not found")
    return branch


@locations_router.get("", response_model=List[LocationResponse])
async def list_locations(
    profile: UserProfile = Depends(require_permission("read")),
    service: BranchService = Depends(get_branch_service)
):
    return service.list_locations()


@locations_router.post("", response_model=LocationResponse, status_code=201)
async def create_location(
    location_data: LocationCreate,
    profile: UserProfile = Depends(require_permission("write")),
    service: BranchService = Depends(get_branch_service)
):
    return service.create_location(location_data)
