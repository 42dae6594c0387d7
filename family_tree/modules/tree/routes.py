from fastapi import APIRouter, Depends, Query
from family_tree.config.settings import settings
from family_tree.core.dependencies import require_permission
from family_tree.database.backend import Backend
from family_tree.database.supabase_client import get_backend
from family_tree.modules.auth.schemas import UserProfile
from family_tree.modules.members.service import MemberService
from family_tree.modules.tree.schemas import FamilyTreeResponse, DirectoryEntry, GenerationsResponse
from family_tree.modules.tree.service import TreeService
from typing import List, Optional

router = APIRouter(tags=["tree"])


def get_tree_service(backend: Backend = Depends(get_backend)) -> TreeService:
    return TreeService(MemberService(backend))


@router.get("/tree", response_model=FamilyTreeResponse)
async def get_family_tree(
    profile: UserProfile = Depends(require_permission("read")),
    service: TreeService = Depends(get_tree_service)
):
    """Whole family as a nested forest with generation colours and an anomaly report"""
    return service.get_family_tree(settings.get_generation_palette())


@router.get("/tree/generations", response_model=GenerationsResponse)
async def get_generations(
    search: Optional[str] = None,
    generation: Optional[int] = Query(default=None, ge=1),
    profile: UserProfile = Depends(require_permission("read")),
    service: TreeService = Depends(get_tree_service)
):
    """Members grouped by generation, optionally filtered by name and generation"""
    return service.get_generations(search=search, generation=generation)


@router.get("/directory", response_model=List[DirectoryEntry])
async def get_directory(
    search: Optional[str] = None,
    profile: UserProfile = Depends(require_permission("read")),
    service: TreeService = Depends(get_tree_service)
):
    """Family directory: roots with their children, filtered by name"""
    return service.get_directory(search)
