from pydantic import BaseModel, field_validator
from typing import Optional, List, Dict, Any, Literal
from datetime import datetime

from family_tree.config.permissions_config import ROLES


class RoleAssignment(BaseModel):
    role_name: str = "viewer"
    branch_id: Optional[int] = None

    @field_validator("role_name")
    @classmethod
    def role_must_exist(cls, value: str) -> str:
        if value not in ROLES:
            raise ValueError(f"Unknown role: {value}")
        return value


class RejectUserRequest(BaseModel):
    reason: Optional[str] = None


class RejectChangeRequest(BaseModel):
    reason: Optional[str] = None


class PendingChangeResponse(BaseModel):
    id: int
    change_type: Literal["insert", "update"]
    original_person_id: Optional[int] = None
    # Submitted values keyed by English field names
    person_data: Dict[str, Any] = {}
    submitted_by: Optional[str] = None
    status: Literal["pending", "approved", "rejected"] = "pending"
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RoleResponse(BaseModel):
    id: Optional[str] = None
    name: str
    level: int
    display_name: str
    description: Optional[str] = None
    permissions: List[str]


class AdminActionResponse(BaseModel):
    message: str
