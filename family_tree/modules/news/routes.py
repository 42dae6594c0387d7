from fastapi import APIRouter, Depends
from family_tree.core.dependencies import require_permission
from family_tree.database.backend import Backend
from family_tree.database.supabase_client import get_backend
from family_tree.modules.auth.schemas import UserProfile
from family_tree.modules.news.schemas import (
    NewsStatus, NewsPostCreate, NewsPostUpdate, NewsPostResponse, NewsListResponse
)
from family_tree.modules.news.service import NewsService
from family_tree.modules.notifications.schemas import NotificationLevel
from family_tree.modules.notifications.service import NotificationCenter, get_notification_center
from typing import Optional

router = APIRouter(prefix="/news", tags=["news"])


def get_news_service(backend: Backend = Depends(get_backend)) -> NewsService:
    return NewsService(backend)


@router.get("", response_model=NewsListResponse)
async def list_news(
    tag: Optional[str] = None,
    search: Optional[str] = None,
    profile: UserProfile = Depends(require_permission("read")),
    service: NewsService = Depends(get_news_service)
):
    return service.list_posts(profile, tag=tag, search=search)


@router.post("", response_model=NewsPostResponse, status_code=201)
async def create_news_post(
    post_data: NewsPostCreate,
    profile: UserProfile = Depends(require_permission("write")),
    service: NewsService = Depends(get_news_service),
    notifications: NotificationCenter = Depends(get_notification_center)
):
    post = service.create_post(post_data, profile)
    if post.status == NewsStatus.pending_approval:
        notifications.push(profile.id, f"'{post.title}' was sent for approval", level=NotificationLevel.info)
    else:
        notifications.push(profile.id, f"'{post.title}' saved")
    return post


@router.get("/{post_id}", response_model=NewsPostResponse)
async def get_news_post(
    post_id: int,
    profile: UserProfile = Depends(require_permission("read")),
    service: NewsService = Depends(get_news_service)
):
    return service.get_post(post_id, profile)


@router.put("/{post_id}", response_model=NewsPostResponse)
async def update_news_post(
    post_id: int,
    post_data: NewsPostUpdate,
    profile: UserProfile = Depends(require_permission("write")),
    service: NewsService = Depends(get_news_service)
):
    return service.update_post(post_id, post_data, profile)


@router.delete("/{post_id}")
async def delete_news_post(
    post_id: int,
    profile: UserProfile = Depends(require_permission("write")),
    service: NewsService = Depends(get_news_service)
):
    service.delete_post(post_id, profile)
    return {"message": "News post deleted successfully"}
