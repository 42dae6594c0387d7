from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum


class NewsStatus(str, Enum):
    draft = "draft"
    published = "published"
    archived = "archived"
    pending_approval = "pending_approval"


def clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    return [tag.strip() for tag in tags if tag and tag.strip()]


class NewsPostCreate(BaseModel):
    title: str = Field(min_length=1)
    summary: Optional[str] = None
    content: str = Field(min_length=1)
    status: NewsStatus = NewsStatus.draft
    is_public: bool = True
    tags: List[str] = []
    featured_image_url: Optional[str] = None
    published_at: Optional[datetime] = None

    @field_validator("tags")
    @classmethod
    def strip_tags(cls, tags):
        return clean_tags(tags)


class NewsPostUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = Field(default=None, min_length=1)
    status: Optional[NewsStatus] = None
    is_public: Optional[bool] = None
    tags: Optional[List[str]] = None
    featured_image_url: Optional[str] = None
    published_at: Optional[datetime] = None

    @field_validator("tags")
    @classmethod
    def strip_tags(cls, tags):
        return clean_tags(tags)


class NewsPostResponse(BaseModel):
    id: int
    title: str
    content: str
    author_id: Optional[str] = None
    status: NewsStatus
    is_public: Optional[bool] = True
    tags: Optional[List[str]] = None
    featured_image_url: Optional[str] = None
    published_at: Optional[datetime] = None
    submitted_for_approval_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NewsListResponse(BaseModel):
    total: int
    tags: List[str]
    posts: List[NewsPostResponse]
