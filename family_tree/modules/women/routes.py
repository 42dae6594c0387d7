from fastapi import APIRouter, Depends
from family_tree.core.dependencies import require_permission
from family_tree.database.backend import Backend
from family_tree.database.supabase_client import get_backend
from family_tree.modules.auth.schemas import UserProfile
from family_tree.modules.notifications.service import NotificationCenter, get_notification_center
from family_tree.modules.women.schemas import WomanCreate, WomanUpdate, WomanResponse
from family_tree.modules.women.service import WomanService
from typing import List

router = APIRouter(prefix="/women", tags=["women"])


def get_woman_service(backend: Backend = Depends(get_backend)) -> WomanService:
    return WomanService(backend)


@router.get("", response_model=List[WomanResponse])
async def list_women(
    profile: UserProfile = Depends(require_permission("read")),
    service: WomanService = Depends(get_woman_service)
):
    return service.list_women()


@router.post("", response_model=WomanResponse, status_code=201)
async def create_woman(
    woman_data: WomanCreate,
    profile: UserProfile = Depends(require_permission("write")),
    service: WomanService = Depends(get_woman_service),
    notifications: NotificationCenter = Depends(get_notification_center)
):
    woman = service.create_woman(woman_data)
    notifications.push(profile.id, f"{woman.full_name} added")
    return woman


@router.get("/{woman_id}", response_model=WomanResponse)
async def get_woman(
    woman_id: int,
    profile: UserProfile = Depends(require_permission("read")),
    service: WomanService = Depends(get_woman_service)
):
    return service.get_woman(woman_id)


@router.put("/{woman_id}", response_model=WomanResponse)
async def update_woman(
    woman_id: int,
    woman_data: WomanUpdate,
    profile: UserProfile = Depends(require_permission("write")),
    service: WomanService = Depends(get_woman_service)
):
    return service.update_woman(woman_id, woman_data)
