from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import date as date_type, datetime
from gsv_backend.core.types import RowId

VerificationMethod = Literal["signature", "digital", "email", "in_person"]


class HoursCreate(BaseModel):
    date: date_type
    hours_logged: float = Field(gt=0, le=24)
    activity: str = Field(min_length=1, max_length=500)
    presentation_id: Optional[str] = None
    feedback: Optional[str] = None


class HoursApproval(BaseModel):
    hours_id: Optional[RowId] = None
    approved: bool = True
    adjusted_hours: Optional[float] = Field(default=None, ge=0, le=24)
    rejection_reason: Optional[str] = None
    approval_notes: Optional[str] = None


class HoursVerification(BaseModel):
    hours_id: Optional[RowId] = None
    verification_method: Optional[VerificationMethod] = None
    teacher_signature: Optional[str] = None
    teacher_name: Optional[str] = None
    notes: Optional[str] = None


class HoursResponse(BaseModel):
    id: RowId
    volunteer_id: Optional[RowId] = None
    submitted_by: Optional[str] = None
    presentation_id: Optional[str] = None
    date: Optional[date_type] = None
    hours_logged: float
    activity: Optional[str] = None
    feedback: Optional[str] = None
    status: str
    adjusted_hours: Optional[float] = None
    approval_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    verification_method: Optional[str] = None
    verified_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class HoursActionResponse(BaseModel):
    ok: bool = True
    message: str
    hours: Optional[HoursResponse] = None
