from fastapi import APIRouter, Depends
from family_tree.core.dependencies import require_permission
from family_tree.database.backend import Backend
from family_tree.database.supabase_client import get_backend
from family_tree.modules.auth.schemas import UserProfile
from family_tree.modules.notables.schemas import (
    NotableCreate, NotableUpdate, NotableResponse, NotablesListResponse
)
from family_tree.modules.notables.service import NotableService
from typing import Optional

router = APIRouter(prefix="/notables", tags=["notables"])


def get_notable_service(backend: Backend = Depends(get_backend)) -> NotableService:
    return NotableService(backend)


@router.get("", response_model=NotablesListResponse)
async def list_notables(
    category: Optional[str] = None,
    search: Optional[str] = None,
    profile: UserProfile = Depends(require_permission("read")),
    service: NotableService = Depends(get_notable_service)
):
    return service.list_notables(category=category, search=search)


@router.post("", response_model=NotableResponse, status_code=201)
async def create_notable(
    notable_data: NotableCreate,
    profile: UserProfile = Depends(require_permission("edit")),
    service: NotableService = Depends(get_notable_service)
):
    return service.create_notable(notable_data)


@router.get("/{notable_id}", response_model=NotableResponse)
async def get_notable(
    notable_id: int,
    profile: UserProfile = Depends(require_permission("read")),
    service: NotableService = Depends(get_notable_service)
):
    return service.get_notable(notable_id)


@router.put("/{notable_id}", response_model=NotableResponse)
async def update_notable(
    notable_id: int,
    notable_data: NotableUpdate,
    profile: UserProfile = Depends(require_permission("edit")),
    service: NotableService = Depends(get_notable_service)
):
    return service.update_notable(notable_id, notable_data)


@router.delete("/{notable_id}")
async def delete_notable(
    notable_id: int,
    profile: UserProfile = Depends(require_permission("edit")),
    service: NotableService = Depends(get_notable_service)
):
    service.delete_notable(notable_id)
    return {"message": "Notable deleted successfully"}
