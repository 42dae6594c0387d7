"""
News posts written by family members.

Readers without the write permission only ever see published public posts.
Publishing needs the edit permission; a writer who publishes submits the post
for approval instead.
"""
import logging
from datetime import datetime, timezone
from fastapi import HTTPException
from typing import Any, Dict, Optional

from family_tree.config.permissions_config import has_permission
from family_tree.database.backend import Backend
from family_tree.modules.auth.schemas import UserProfile
from family_tree.modules.members.mapping import Tables
from family_tree.modules.news.schemas import (
    NewsStatus, NewsPostCreate, NewsPostUpdate, NewsPostResponse, NewsListResponse
)

logger = logging.getLogger(__name__)


def merge_summary(summary: Optional[str], content: str) -> str:
    """Prefix the content with a summary block when a summary is given"""
    if not summary or not summary.strip():
        return content
    return f"**ملخص:**\n{summary.strip()}\n\n**المحتوى الكامل:**\n{content}"


def can_see_drafts(profile: UserProfile) -> bool:
    return has_permission(profile.role_name, "write")


class NewsService:
    def __init__(self, backend: Backend):
        self.backend = backend

    def list_posts(self, profile: UserProfile, tag: Optional[str] = None,
                   search: Optional[str] = None) -> NewsListResponse:
        """Visible posts, newest first; tags are collected before filtering"""
        filters = {}
        if not can_see_drafts(profile):
            filters = {"status": NewsStatus.published.value, "is_public": True}
        rows = self.backend.fetch_table(Tables.NEWS_POSTS, filters, order="published_at", desc=True)
        posts = [NewsPostResponse(**row) for row in rows]

        tags = []
        for post in posts:
            for post_tag in post.tags or []:
                if post_tag not in tags:
                    tags.append(post_tag)

        if tag:
            posts = [post for post in posts if tag in (post.tags or [])]
        if search:
            term = search.lower()
            posts = [post for post in posts if term in post.title.lower() or term in post.content.lower()]
        return NewsListResponse(total=len(posts), tags=tags, posts=posts)

    def get_post(self, post_id: int, profile: UserProfile) -> NewsPostResponse:
        row = self.backend.fetch_one(Tables.NEWS_POSTS, {"id": post_id})
        if not row:
            raise HTTPException(status_code=404, detail="News post not found")
        post = NewsPostResponse(**row)
        if not can_see_drafts(profile) and not (post.status == NewsStatus.published and post.is_public):
            raise HTTPException(status_code=404, detail="News post not found")
        return post

    def create_post(self, post_data: NewsPostCreate, profile: UserProfile) -> NewsPostResponse:
        values = post_data.model_dump(mode="json", exclude={"summary"})
        values["content"] = merge_summary(post_data.summary, post_data.content)
        values["author_id"] = profile.id
        values["tags"] = values["tags"] or None
        values.update(self._status_values(post_data.status, post_data.published_at, profile))

        created = NewsPostResponse(**self.backend.insert(Tables.NEWS_POSTS, values))
        logger.info(f"News post {created.id} created by {profile.id} as {created.status.value}")
        return created

    def update_post(self, post_id: int, post_data: NewsPostUpdate, profile: UserProfile) -> NewsPostResponse:
        current = self._editable_post(post_id, profile)
        values = post_data.model_dump(mode="json", exclude_unset=True)
        if not values:
            return current
        if "tags" in values:
            values["tags"] = values["tags"] or None
        if "status" in values:
            published_at = post_data.published_at or current.published_at
            values.update(self._status_values(post_data.status, published_at, profile))

        rows = self.backend.update(Tables.NEWS_POSTS, {"id": post_id}, values)
        if not rows:
            raise HTTPException(status_code=404, detail="News post not found")
        return NewsPostResponse(**rows[0])

    def delete_post(self, post_id: int, profile: UserProfile) -> bool:
        self._editable_post(post_id, profile)
        self.backend.delete(Tables.NEWS_POSTS, {"id": post_id})
        logger.info(f"News post {post_id} deleted by {profile.id}")
        return True

    def _editable_post(self, post_id: int, profile: UserProfile) -> NewsPostResponse:
        row = self.backend.fetch_one(Tables.NEWS_POSTS, {"id": post_id})
        if not row:
            raise HTTPException(status_code=404, detail="News post not found")
        post = NewsPostResponse(**row)
        if post.author_id != profile.id and not has_permission(profile.role_name, "edit"):
            raise HTTPException(status_code=403, detail="Only the author or an editor can change this post")
        return post

    @staticmethod
    def _status_values(status: Optional[NewsStatus], published_at: Optional[datetime],
                       profile: UserProfile) -> Dict[str, Any]:
        status = status or NewsStatus.draft
        if status == NewsStatus.published and not has_permission(profile.role_name, "edit"):
            status = NewsStatus.pending_approval
        now = datetime.now(timezone.utc)
        return {
            "status": status.value,
            "published_at": (published_at or now).isoformat() if status == NewsStatus.published else None,
            "submitted_for_approval_at": now.isoformat() if status == NewsStatus.pending_approval else None,
        }
