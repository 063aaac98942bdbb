from pydantic import BaseModel
from typing import Optional
from gsv_backend.core.types import RowId
from datetime import datetime


class NotificationResponse(BaseModel):
    id: RowId
    user_id: Optional[str] = None
    notification_type: str
    title: str
    message: str
    action_url: Optional[str] = None
    priority: Optional[str] = "medium"
    related_id: Optional[RowId] = None
    related_type: Optional[str] = None
    is_read: bool = False
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UnreadCountResponse(BaseModel):
    unread: int
