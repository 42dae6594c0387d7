from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime

from family_tree.modules.members.schemas import MaritalStatus


class WomanCreate(BaseModel):
    first_name: str = Field(min_length=1)
    father_name: Optional[str] = None
    family_name: Optional[str] = None
    birth_date: Optional[date] = None
    death_date: Optional[date] = None
    birth_place_id: Optional[int] = None
    death_place_id: Optional[int] = None
    national_id: Optional[str] = None
    marital_status: Optional[MaritalStatus] = None
    position: Optional[str] = None
    education_level: Optional[str] = None
    branch_id: Optional[int] = None
    photo_url: Optional[str] = None
    notes: Optional[str] = None
    # When married, the person she is linked to as a wife
    linked_person_id: Optional[int] = None


class WomanUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1)
    father_name: Optional[str] = None
    family_name: Optional[str] = None
    birth_date: Optional[date] = None
    death_date: Optional[date] = None
    birth_place_id: Optional[int] = None
    death_place_id: Optional[int] = None
    national_id: Optional[str] = None
    marital_status: Optional[MaritalStatus] = None
    position: Optional[str] = None
    education_level: Optional[str] = None
    branch_id: Optional[int] = None
    photo_url: Optional[str] = None
    notes: Optional[str] = None


class WomanResponse(BaseModel):
    id: int
    first_name: Optional[str] = None
    father_name: Optional[str] = None
    family_name: Optional[str] = None
    birth_date: Optional[date] = None
    death_date: Optional[date] = None
    birth_place_id: Optional[int] = None
    death_place_id: Optional[int] = None
    national_id: Optional[str] = None
    marital_status: Optional[MaritalStatus] = None
    position: Optional[str] = None
    education_level: Optional[str] = None
    branch_id: Optional[int] = None
    photo_url: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def full_name(self) -> str:
        parts = (self.first_name, self.father_name, self.family_name)
        return " ".join(part for part in parts if part)
