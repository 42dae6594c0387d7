from fastapi import APIRouter, Depends, HTTPException
from family_tree.core.dependencies import get_current_profile
from family_tree.modules.auth.schemas import UserProfile
from family_tree.modules.notifications.schemas import Notification
from family_tree.modules.notifications.service import NotificationCenter, get_notification_center
from typing import List

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=List[Notification])
async def list_notifications(
    profile: UserProfile = Depends(get_current_profile),
    center: NotificationCenter = Depends(get_notification_center)
):
    """Live (not yet expired) messages for the current user"""
    return center.list(profile.id)


@router.delete("/{notification_id}", status_code=204)
async def dismiss_notification(
    notification_id: int,
    profile: UserProfile = Depends(get_current_profile),
    center: NotificationCenter = Depends(get_notification_center)
):
    if not center.dismiss(profile.id, notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return None
