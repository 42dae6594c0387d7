from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum


class ApprovalStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str
    role_name: Optional[str] = None
    approval_status: Optional[ApprovalStatus] = None


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=1)


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    approval_status: ApprovalStatus = ApprovalStatus.pending
    message: str


class UserProfile(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    role_id: Optional[str] = None
    role_name: str = "viewer"
    approval_status: ApprovalStatus = ApprovalStatus.pending
    assigned_branch_id: Optional[int] = None
    branch_name: Optional[str] = None
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def is_approved(self) -> bool:
        return self.approval_status == ApprovalStatus.approved


class CurrentUserResponse(UserProfile):
    role_display_name: str
    permissions: List[str]
