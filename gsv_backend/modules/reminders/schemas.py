from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from datetime import datetime


class ReminderResponse(BaseModel):
    id: str
    title: str
    message: str
    recipient_id: str
    recipient_type: str
    reminder_type: str
    scheduled_for: datetime
    status: str
    related_entity_id: Optional[str] = None
    related_entity_type: Optional[str] = None
    priority: str = "medium"
    metadata: Dict[str, Any] = {}
    sent_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ScheduleResult(BaseModel):
    ok: bool = True
    scheduled: int
    reminders: List[ReminderResponse] = []


class ProcessResult(BaseModel):
    ok: bool = True
    sent: int


class CancelResult(BaseModel):
    ok: bool = True
    cancelled: int
