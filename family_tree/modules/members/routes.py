from fastapi import APIRouter, Depends, Query
from family_tree.config.settings import settings
from family_tree.core.dependencies import require_permission
from family_tree.database.backend import Backend
from family_tree.database.supabase_client import get_backend
from family_tree.modules.auth.schemas import UserProfile
from family_tree.modules.members.schemas import (
    Member, MemberCreate, MemberUpdate, MemberDetails, MemberWriteResult,
    NationalIdAvailability, ChildCard, RelativesResponse,
)
from family_tree.modules.members.service import MemberService
from family_tree.modules.notifications.service import NotificationCenter, get_notification_center
from family_tree.modules.tree.schemas import TreeNodeResponse
from family_tree.modules.tree.service import TreeService
from typing import List, Literal, Optional

router = APIRouter(prefix="/members", tags=["members"])


def get_member_service(backend: Backend = Depends(get_backend)) -> MemberService:
    return MemberService(backend)


@router.get("", response_model=List[Member])
async def list_members(
    profile: UserProfile = Depends(require_permission("read")),
    service: MemberService = Depends(get_member_service)
):
    """Flat list of all persons ordered by tree path"""
    return service.list_members()


@router.get("/national-id/availability", response_model=NationalIdAvailability)
async def check_national_id(
    national_id: str,
    exclude_id: Optional[int] = None,
    profile: UserProfile = Depends(require_permission("write")),
    service: MemberService = Depends(get_member_service)
):
    """Check a national ID is not already registered (optionally ignoring one member)"""
    return NationalIdAvailability(
        national_id=national_id,
        available=service.is_national_id_unique(national_id, exclude_member_id=exclude_id)
    )


@router.post("", response_model=MemberWriteResult, status_code=201)
async def create_member(
    member_data: MemberCreate,
    profile: UserProfile = Depends(require_permission("write")),
    service: MemberService = Depends(get_member_service),
    notifications: NotificationCenter = Depends(get_notification_center)
):
    """Add a person (applied directly for the family secretary, otherwise queued for approval)"""
    result = service.create_member(member_data, profile)
    notifications.push(profile.id, result.message)
    return result


@router.get("/{member_id}", response_model=MemberDetails)
async def get_member(
    member_id: int,
    profile: UserProfile = Depends(require_permission("read")),
    service: MemberService = Depends(get_member_service)
):
    return service.get_member(member_id)


@router.put("/{member_id}", response_model=MemberWriteResult)
async def update_member(
    member_id: int,
    member_data: MemberUpdate,
    profile: UserProfile = Depends(require_permission("write")),
    service: MemberService = Depends(get_member_service),
    notifications: NotificationCenter = Depends(get_notification_center)
):
    """Update a person (applied directly for the family secretary, otherwise queued for approval)"""
    result = service.update_member(member_id, member_data, profile)
    notifications.push(profile.id, result.message)
    return result


@router.delete("/{member_id}", status_code=204)
async def delete_member(
    member_id: int,
    profile: UserProfile = Depends(require_permission("edit")),
    service: MemberService = Depends(get_member_service),
    notifications: NotificationCenter = Depends(get_notification_center)
):
    """Delete a person who is nobody's father or mother"""
    service.delete_member(member_id)
    notifications.push(profile.id, "Member deleted")
    return None


@router.get("/{member_id}/children", response_model=List[ChildCard])
async def get_children(
    member_id: int,
    profile: UserProfile = Depends(require_permission("read")),
    service: MemberService = Depends(get_member_service)
):
    """Immediate children with grandchildren count, achievements and spouse"""
    return service.get_children_cards(member_id, settings.get_generation_palette())


@router.get("/{member_id}/children/count")
async def get_children_count(
    member_id: int,
    profile: UserProfile = Depends(require_permission("read")),
    service: MemberService = Depends(get_member_service)
):
    return {"member_id": member_id, "children_count": service.get_children_count(member_id)}


@router.get("/{member_id}/descendants/tree", response_model=List[TreeNodeResponse])
async def get_descendants_tree(
    member_id: int,
    max_depth: int = Query(default=3, ge=1, le=20),
    profile: UserProfile = Depends(require_permission("read")),
    service: MemberService = Depends(get_member_service)
):
    """Descendants down to max_depth generations as a nested tree"""
    roots = service.get_descendants_tree(member_id, max_depth)
    return TreeService(service).decorate(roots, settings.get_generation_palette())


@router.get("/{member_id}/{relation}", response_model=RelativesResponse)
async def get_relatives(
    member_id: int,
    relation: Literal["descendants", "ancestors", "siblings"],
    profile: UserProfile = Depends(require_permission("read")),
    service: MemberService = Depends(get_member_service)
):
    return RelativesResponse(
        person_id=member_id,
        relation=relation,
        members=service.get_relatives(member_id, relation)
    )
