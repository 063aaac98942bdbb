from pydantic import BaseModel
from typing import Optional, List, Dict, Any
from datetime import datetime
from gsv_backend.core.types import RowId


class GroupMember(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    highschool: Optional[str] = None


class VolunteerApplication(BaseModel):
    """Fields are checked by validate_application so every problem is reported at once"""
    team_name: Optional[str] = None
    email: Optional[str] = None
    group_city: Optional[str] = None
    group_size: Optional[int] = None
    group_members: Optional[List[GroupMember]] = None
    primary_contact_phone: Optional[str] = None
    why_volunteer: Optional[str] = None
    chapter_id: Optional[str] = None


class ValidationErrorItem(BaseModel):
    field: str
    message: str


class VolunteerUpdate(BaseModel):
    presentation_status: Optional[str] = None
    onboarding_step: Optional[str] = None
    notes: Optional[str] = None


class VolunteerRejection(BaseModel):
    reason: Optional[str] = None


class VolunteerResponse(BaseModel):
    id: RowId
    team_name: Optional[str] = None
    email: Optional[str] = None
    group_city: Optional[str] = None
    group_size: Optional[int] = None
    group_members: Optional[List[Dict[str, Any]]] = None
    primary_contact_phone: Optional[str] = None
    why_volunteer: Optional[str] = None
    application_status: Optional[str] = None
    status: Optional[str] = None
    presentation_status: Optional[str] = None
    onboarding_step: Optional[str] = None
    hours_total: Optional[float] = None
    chapter_id: Optional[str] = None
    rejection_reason: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LinkedMember(BaseModel):
    user_id: str
    email: str
    name: str
    temporary_password: Optional[str] = None


class ApprovalResponse(BaseModel):
    ok: bool = True
    message: str
    linked_users: List[LinkedMember]
    errors: List[Dict[str, str]] = []
