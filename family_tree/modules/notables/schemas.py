from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


# Known categories with their display titles; other categories are shown as stored
CATEGORY_TITLES = {
    "Current Tribal Leaders": "القيادات القبلية الحالية",
    "Judges and Legal Experts": "القضاة والخبراء القانونيون",
    "Business Leaders": "قادة الأعمال",
    "Scholars and Academics": "العلماء والأكاديميون",
    "Poets and Artists": "الشعراء والفنانون",
    "Historical Figures": "الشخصيات التاريخية",
}


class NotableCreate(BaseModel):
    person_id: int
    category: str = Field(min_length=1)
    biography: Optional[str] = None
    education: Optional[str] = None
    positions: Optional[str] = None
    publications: Optional[str] = None
    contact_info: Optional[str] = None
    legacy: Optional[str] = None
    profile_picture_url: Optional[str] = None


class NotableUpdate(BaseModel):
    category: Optional[str] = Field(default=None, min_length=1)
    biography: Optional[str] = None
    education: Optional[str] = None
    positions: Optional[str] = None
    publications: Optional[str] = None
    contact_info: Optional[str] = None
    legacy: Optional[str] = None
    profile_picture_url: Optional[str] = None


class NotableResponse(BaseModel):
    id: int
    person_id: Optional[int] = None
    woman_id: Optional[int] = None
    full_name: Optional[str] = None
    category: str
    biography: Optional[str] = None
    education: Optional[str] = None
    positions: Optional[str] = None
    publications: Optional[str] = None
    contact_info: Optional[str] = None
    legacy: Optional[str] = None
    profile_picture_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NotableCategory(BaseModel):
    category: str
    title: str
    count: int


class NotablesListResponse(BaseModel):
    total: int
    categories: List[NotableCategory]
    notables: List[NotableResponse]
