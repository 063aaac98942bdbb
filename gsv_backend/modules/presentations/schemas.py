from pydantic import BaseModel, EmailStr, Field
from typing import Optional, Literal, List
from datetime import datetime
from gsv_backend.core.types import RowId

PresentationStatus = Literal["pending", "scheduled", "completed", "cancelled"]
Priority = Literal["low", "medium", "high", "urgent"]


class PresentationCreate(BaseModel):
    school_name: str = Field(min_length=1)
    volunteer_team_id: Optional[RowId] = None
    chapter_id: Optional[str] = None
    teacher_name: Optional[str] = None
    teacher_email: Optional[EmailStr] = None
    topic: Optional[str] = None
    grade_level: Optional[str] = None
    student_count: Optional[int] = Field(default=None, ge=0)
    scheduled_date: Optional[datetime] = None
    notes: Optional[str] = None


class PresentationUpdate(BaseModel):
    school_name: Optional[str] = Field(default=None, min_length=1)
    volunteer_team_id: Optional[RowId] = None
    teacher_name: Optional[str] = None
    teacher_email: Optional[EmailStr] = None
    topic: Optional[str] = None
    grade_level: Optional[str] = None
    student_count: Optional[int] = Field(default=None, ge=0)
    scheduled_date: Optional[datetime] = None
    status: Optional[PresentationStatus] = None
    notes: Optional[str] = None


class PresentationResponse(BaseModel):
    id: str
    volunteer_team_id: Optional[RowId] = None
    chapter_id: Optional[str] = None
    school_name: Optional[str] = None
    teacher_name: Optional[str] = None
    teacher_email: Optional[str] = None
    topic: Optional[str] = None
    grade_level: Optional[str] = None
    student_count: Optional[int] = None
    scheduled_date: Optional[datetime] = None
    status: str = "pending"
    hours: Optional[float] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ChecklistItemCreate(BaseModel):
    item_name: str = Field(min_length=1)
    item_description: Optional[str] = None
    item_category: str = "general"
    is_required: bool = True
    priority: Priority = "medium"
    due_date: Optional[datetime] = None


class ChecklistItemUpdate(BaseModel):
    completed: Optional[bool] = None


class ChecklistItemResponse(BaseModel):
    id: RowId
    volunteer_team_id: RowId
    item_name: str
    item_description: Optional[str] = None
    item_category: Optional[str] = None
    is_required: bool = True
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    completed_by: Optional[str] = None
    priority: Optional[str] = None
    due_date: Optional[datetime] = None
    order_index: Optional[int] = None

    class Config:
        from_attributes = True


class ChecklistEnvelope(BaseModel):
    ok: bool = True
    items: List[ChecklistItemResponse]


class ChecklistItemEnvelope(BaseModel):
    ok: bool = True
    item: ChecklistItemResponse


class GroupProgress(BaseModel):
    team_id: RowId
    team_name: Optional[str] = None
    status: Optional[str] = None
    required_items: int
    completed_items: int
    progress_percentage: int


class GroupProgressEnvelope(BaseModel):
    ok: bool = True
    groups: List[GroupProgress]
