from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import date, datetime
from enum import Enum


class Gender(str, Enum):
    male = "male"
    female = "female"


class MaritalStatus(str, Enum):
    single = "single"
    married = "married"
    divorced = "divorced"
    widowed = "widowed"


class MemberCreate(BaseModel):
    first_name: str = Field(min_length=1)
    father_id: Optional[int] = None
    mother_id: Optional[int] = None
    gender: Optional[Gender] = None
    birth_date: Optional[date] = None
    death_date: Optional[date] = None
    birth_place_id: Optional[int] = None
    death_place_id: Optional[int] = None
    national_id: Optional[str] = None
    marital_status: Optional[MaritalStatus] = None
    position: Optional[str] = None
    education_level: Optional[str] = None
    branch_id: Optional[int] = None
    is_root: bool = False
    photo_url: Optional[str] = None
    notes: Optional[str] = None


class MemberUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1)
    father_id: Optional[int] = None
    mother_id: Optional[int] = None
    gender: Optional[Gender] = None
    birth_date: Optional[date] = None
    death_date: Optional[date] = None
    birth_place_id: Optional[int] = None
    death_place_id: Optional[int] = None
    national_id: Optional[str] = None
    marital_status: Optional[MaritalStatus] = None
    position: Optional[str] = None
    education_level: Optional[str] = None
    branch_id: Optional[int] = None
    is_root: Optional[bool] = None
    photo_url: Optional[str] = None
    notes: Optional[str] = None


class NotableSummary(BaseModel):
    id: int
    category: Optional[str] = None
    biography: Optional[str] = None
    education: Optional[str] = None
    positions: Optional[str] = None
    publications: Optional[str] = None
    contact_info: Optional[str] = None
    legacy: Optional[str] = None
    profile_picture_url: Optional[str] = None


class Member(BaseModel):
    id: int
    first_name: Optional[str] = None
    father_id: Optional[int] = None
    mother_id: Optional[int] = None
    gender: Optional[Gender] = None
    birth_date: Optional[date] = None
    death_date: Optional[date] = None
    birth_place_id: Optional[int] = None
    death_place_id: Optional[int] = None
    national_id: Optional[str] = None
    marital_status: Optional[MaritalStatus] = None
    position: Optional[str] = None
    education_level: Optional[str] = None
    branch_id: Optional[int] = None
    is_root: Optional[bool] = False
    path: Optional[str] = None
    photo_url: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    # Tree builder interface: the father is the tree parent
    @property
    def parent_id(self) -> Optional[int]:
        return self.father_id

    @property
    def name(self) -> str:
        return self.first_name or ""

    @property
    def is_alive(self) -> bool:
        return self.death_date is None


class MemberDetails(Member):
    full_name: Optional[str] = None
    generation: Optional[int] = None
    father_name: Optional[str] = None
    grandfather_name: Optional[str] = None
    family_name: Optional[str] = None
    branch_name: Optional[str] = None
    birth_place: Optional[str] = None
    death_place: Optional[str] = None
    notable: Optional[NotableSummary] = None

    @property
    def name(self) -> str:
        return self.full_name or self.first_name or ""

    @property
    def is_notable(self) -> bool:
        return self.notable is not None


class MemberWriteResult(BaseModel):
    status: Literal["applied", "pending"]
    member: Optional[Member] = None
    change_id: Optional[int] = None
    message: str


class NationalIdAvailability(BaseModel):
    national_id: str
    available: bool


class ChildDisplayData(BaseModel):
    name: str
    birth_year: Optional[int] = None
    current_age: Optional[int] = None
    status: Literal["alive", "deceased"]
    primary_title: Optional[str] = None


class ChildQuickStats(BaseModel):
    has_children: bool
    children_count: int
    achievements_count: int
    is_married: bool
    spouse: Optional[str] = None


class ChildVisualTheme(BaseModel):
    inherited_color: str
    generation_level: Optional[int] = None
    branch_indicator: Optional[str] = None


class ChildFullData(BaseModel):
    birth_date: Optional[date] = None
    death_date: Optional[date] = None
    location: Optional[str] = None
    national_id: Optional[str] = None
    position: Optional[str] = None
    education: Optional[str] = None
    notes: Optional[str] = None


class ChildCard(BaseModel):
    id: int
    parent_id: int
    display_data: ChildDisplayData
    quick_stats: ChildQuickStats
    visual_theme: ChildVisualTheme
    full_data: ChildFullData


class RelativesResponse(BaseModel):
    person_id: int
    relation: Literal["descendants", "ancestors", "siblings"]
    members: List[MemberDetails]
