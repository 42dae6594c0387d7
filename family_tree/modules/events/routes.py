from fastapi import APIRouter, Depends
from family_tree.core.dependencies import require_permission
from family_tree.database.backend import Backend
from family_tree.database.supabase_client import get_backend
from family_tree.modules.auth.schemas import UserProfile
from family_tree.modules.events.schemas import EventCreate, EventUpdate, EventResponse, EventType
from family_tree.modules.events.service import EventService
from family_tree.modules.notifications.service import NotificationCenter, get_notification_center
from typing import List, Optional

router = APIRouter(prefix="/events", tags=["events"])


def get_event_service(backend: Backend = Depends(get_backend)) -> EventService:
    return EventService(backend)


@router.get("", response_model=List[EventResponse])
async def list_events(
    person_id: Optional[int] = None,
    woman_id: Optional[int] = None,
    event_type: Optional[EventType] = None,
    profile: UserProfile = Depends(require_permission("read")),
    service: EventService = Depends(get_event_service)
):
    return service.list_events(person_id=person_id, woman_id=woman_id, event_type=event_type)


@router.post("", response_model=EventResponse, status_code=201)
async def create_event(
    event_data: EventCreate,
    profile: UserProfile = Depends(require_permission("write")),
    service: EventService = Depends(get_event_service),
    notifications: NotificationCenter = Depends(get_notification_center)
):
    event = service.create_event(event_data)
    notifications.push(profile.id, f"Event '{event.title}' added")
    return event


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: int,
    profile: UserProfile = Depends(require_permission("read")),
    service: EventService = Depends(get_event_service)
):
    return service.get_event(event_id)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: int,
    event_data: EventUpdate,
    profile: UserProfile = Depends(require_permission("write")),
    service: EventService = Depends(get_event_service)
):
    return service.update_event(event_id, event_data)


@router.delete("/{event_id}")
async def delete_event(
    event_id: int,
    profile: UserProfile = Depends(require_permission("edit")),
    service: EventService = Depends(get_event_service)
):
    service.delete_event(event_id)
    return {"message": "Event deleted successfully"}
