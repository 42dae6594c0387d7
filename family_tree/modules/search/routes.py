from fastapi import APIRouter, Depends, Query
from family_tree.core.dependencies import require_permission
from family_tree.database.backend import Backend
from family_tree.database.supabase_client import get_backend
from family_tree.modules.auth.schemas import UserProfile
from family_tree.modules.search.schemas import SearchResponse
from family_tree.modules.search.service import SearchService

router = APIRouter(prefix="/search", tags=["search"])


def get_search_service(backend: Backend = Depends(get_backend)) -> SearchService:
    return SearchService(backend)


@router.get("", response_model=SearchResponse)
async def search_general(
    q: str = Query(min_length=1),
    profile: UserProfile = Depends(require_permission("read")),
    service: SearchService = Depends(get_search_service)
):
    """Search persons by first name, full name or national ID"""
    return service.search_general(q)


@router.get("/national-id/{national_id}", response_model=SearchResponse)
async def search_national_id(
    national_id: str,
    profile: UserProfile = Depends(require_permission("read")),
    service: SearchService = Depends(get_search_service)
):
    return service.search_national_id(national_id)


@router.get("/branch/{branch_id}", response_model=SearchResponse)
async def search_branch(
    branch_id: int,
    profile: UserProfile = Depends(require_permission("read")),
    service: SearchService = Depends(get_search_service)
):
    return service.search_branch(branch_id)


@router.get("/generation/{generation}", response_model=SearchResponse)
async def search_generation(
    generation: int,
    profile: UserProfile = Depends(require_permission("read")),
    service: SearchService = Depends(get_search_service)
):
    return service.search_generation(generation)


@router.get("/location/{location_id}", response_model=SearchResponse)
async def search_location(
    location_id: int,
    profile: UserProfile = Depends(require_permission("read")),
    service: SearchService = Depends(get_search_service)
):
    return service.search_location(location_id)
