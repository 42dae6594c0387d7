from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime

from family_tree.modules.events.schemas import Importance


class ArchiveLinks(BaseModel):
    """Fields shared by audio recordings and text documents"""
    file_path: Optional[str] = None
    file_type: Optional[str] = None
    person_id: Optional[int] = None
    woman_id: Optional[int] = None
    event_id: Optional[int] = None
    location_id: Optional[int] = None
    occasion: Optional[str] = None
    language: Optional[str] = None
    dialect: Optional[str] = None
    keywords: Optional[List[str]] = None
    people_mentioned: Optional[List[str]] = None
    places_mentioned: Optional[List[str]] = None
    clarity: Optional[str] = None
    preservation: Optional[str] = None
    source: Optional[str] = None


class AudioFileCreate(ArchiveLinks):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    recording_type: str = Field(min_length=1)
    file_path: str = Field(min_length=1)
    file_size: Optional[int] = Field(default=None, ge=0)
    duration_seconds: Optional[int] = Field(default=None, ge=0)
    quality: Optional[str] = None
    recorded_on: Optional[date] = None
    recording_place: Optional[str] = None
    attendees: Optional[List[str]] = None
    transcript: Optional[str] = None
    summary: Optional[str] = None
    importance: Importance = Importance.normal
    is_public: bool = False


class AudioFileUpdate(ArchiveLinks):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    recording_type: Optional[str] = Field(default=None, min_length=1)
    file_size: Optional[int] = Field(default=None, ge=0)
    duration_seconds: Optional[int] = Field(default=None, ge=0)
    quality: Optional[str] = None
    recorded_on: Optional[date] = None
    recording_place: Optional[str] = None
    attendees: Optional[List[str]] = None
    transcript: Optional[str] = None
    summary: Optional[str] = None
    importance: Optional[Importance] = None
    is_public: Optional[bool] = None


class AudioFileResponse(ArchiveLinks):
    id: int
    title: Optional[str] = None
    description: Optional[str] = None
    recording_type: Optional[str] = None
    file_size: Optional[int] = None
    duration: Optional[str] = None
    duration_seconds: Optional[int] = None
    quality: Optional[str] = None
    recorded_on: Optional[date] = None
    recording_place: Optional[str] = None
    attendees: Optional[List[str]] = None
    transcript: Optional[str] = None
    summary: Optional[str] = None
    importance: Optional[Importance] = None
    is_public: Optional[bool] = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DocumentCreate(ArchiveLinks):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    document_type: str = Field(min_length=1)
    full_text: str = Field(min_length=1)
    summary: Optional[str] = None
    opening_words: Optional[str] = None
    closing_words: Optional[str] = None
    page_count: Optional[int] = Field(default=None, ge=0)
    written_on: Optional[date] = None
    writing_place: Optional[str] = None
    original_author: Optional[str] = None
    recipient: Optional[str] = None
    dates_mentioned: Optional[List[str]] = None
    importance: Importance = Importance.normal
    notes: Optional[str] = None
    is_public: bool = False


class DocumentUpdate(ArchiveLinks):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    document_type: Optional[str] = Field(default=None, min_length=1)
    full_text: Optional[str] = Field(default=None, min_length=1)
    summary: Optional[str] = None
    opening_words: Optional[str] = None
    closing_words: Optional[str] = None
    page_count: Optional[int] = Field(default=None, ge=0)
    written_on: Optional[date] = None
    writing_place: Optional[str] = None
    original_author: Optional[str] = None
    recipient: Optional[str] = None
    dates_mentioned: Optional[List[str]] = None
    importance: Optional[Importance] = None
    notes: Optional[str] = None
    is_public: Optional[bool] = None


class DocumentResponse(ArchiveLinks):
    id: int
    title: Optional[str] = None
    description: Optional[str] = None
    document_type: Optional[str] = None
    full_text: Optional[str] = None
    summary: Optional[str] = None
    opening_words: Optional[str] = None
    closing_words: Optional[str] = None
    page_count: Optional[int] = None
    word_count: Optional[int] = None
    written_on: Optional[date] = None
    writing_place: Optional[str] = None
    original_author: Optional[str] = None
    recipient: Optional[str] = None
    dates_mentioned: Optional[List[str]] = None
    importance: Optional[Importance] = None
    notes: Optional[str] = None
    is_public: Optional[bool] = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
