from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from enum import Enum


class EventType(str, Enum):
    birth = "birth"
    death = "death"
    marriage = "marriage"
    divorce = "divorce"
    graduation = "graduation"
    promotion = "promotion"
    relocation = "relocation"
    achievement = "achievement"
    hajj = "hajj"
    umrah = "umrah"
    travel = "travel"
    illness = "illness"
    recovery = "recovery"
    other = "other"


class Importance(str, Enum):
    high = "high"
    medium = "medium"
    normal = "normal"


class EventCreate(BaseModel):
    person_id: Optional[int] = None
    woman_id: Optional[int] = None
    event_type: EventType
    title: str = Field(min_length=1)
    description: Optional[str] = None
    event_date: date
    location_id: Optional[int] = None
    importance: Importance = Importance.normal
    is_public: bool = False


class EventUpdate(BaseModel):
    person_id: Optional[int] = None
    woman_id: Optional[int] = None
    event_type: Optional[EventType] = None
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    event_date: Optional[date] = None
    location_id: Optional[int] = None
    importance: Optional[Importance] = None
    is_public: Optional[bool] = None


class EventResponse(BaseModel):
    id: int
    person_id: Optional[int] = None
    woman_id: Optional[int] = None
    event_type: Optional[EventType] = None
    title: Optional[str] = None
    description: Optional[str] = None
    event_date: Optional[date] = None
    location_id: Optional[int] = None
    importance: Optional[Importance] = None
    is_public: Optional[bool] = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
