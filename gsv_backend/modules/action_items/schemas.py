from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional
from datetime import datetime
from gsv_backend.core.types import RowId

Priority = Literal["low", "medium", "high", "urgent"]
ItemStatus = Literal["pending", "in_progress", "completed", "cancelled"]


class ActionItemPermissions(BaseModel):
    can_view: bool = False
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False
    can_assign: bool = False
    can_comment: bool = False
    can_view_all: bool = False
    viewable_types: List[str] = []
    assignable_roles: List[str] = []

    def allows_type(self, item_type: Optional[str]) -> bool:
        return "all" in self.viewable_types or item_type in self.viewable_types


class ActionItemCreate(BaseModel):
    # title and type are checked in the service so the error names both
    title: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    priority: Priority = "medium"
    assigned_to: List[str] = []
    due_date: Optional[datetime] = None
    metadata: Dict[str, Any] = {}
    related_entity_type: Optional[str] = None
    related_entity_id: Optional[str] = None
    action_required: Dict[str, Any] = {}
    tags: List[str] = []


class ActionItemUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Priority] = None
    assigned_to: Optional[List[str]] = None
    due_date: Optional[datetime] = None
    status: Optional[ItemStatus] = None
    metadata: Optional[Dict[str, Any]] = None
    action_required: Optional[Dict[str, Any]] = None
    tags: Optional[List[str]] = None


class CommentCreate(BaseModel):
    comment: Optional[str] = None
    is_internal: bool = False


class CommentResponse(BaseModel):
    id: RowId
    action_item_id: RowId
    user_id: Optional[str] = None
    comment: str
    is_internal: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ActionItemResponse(BaseModel):
    id: RowId
    title: str
    description: Optional[str] = None
    type: str
    priority: str = "medium"
    status: str = "pending"
    assigned_to: List[str] = []
    assigned_by: Optional[str] = None
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    completed_by: Optional[str] = None
    related_entity_type: Optional[str] = None
    related_entity_id: Optional[str] = None
    metadata: Dict[str, Any] = {}
    action_required: Dict[str, Any] = {}
    tags: List[str] = []
    created_at: Optional[datetime] = None
    comments: Optional[List[CommentResponse]] = None

    class Config:
        from_attributes = True


class ActionItemStats(BaseModel):
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    overdue: int = 0
    urgent: int = 0


class ActionItemList(BaseModel):
    ok: bool = True
    items: List[ActionItemResponse]
    stats: ActionItemStats


class ActionItemEnvelope(BaseModel):
    ok: bool = True
    item: ActionItemResponse


class BulkActionRequest(BaseModel):
    action: Optional[Literal["status_update", "assign", "priority_update", "delete"]] = None
    item_ids: Optional[List[RowId]] = Field(default=None, alias="itemIds")
    data: Dict[str, Any] = {}

    class Config:
        populate_by_name = True


class BulkActionResponse(BaseModel):
    ok: bool = True
    message: str
