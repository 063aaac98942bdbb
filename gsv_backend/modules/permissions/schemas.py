from pydantic import BaseModel, Field
from typing import Optional, Dict, List, Any
from datetime import datetime


class InternPermissionsUpdate(BaseModel):
    intern_id: Optional[str] = Field(default=None, alias="internId")
    permissions: Dict[str, bool] = {}

    class Config:
        populate_by_name = True


class InternPermissionsResponse(BaseModel):
    id: Optional[str] = None
    intern_id: str
    permissions: Dict[str, bool]
    granted_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InternPermissionsEnvelope(BaseModel):
    ok: bool = True
    permissions: InternPermissionsResponse
    changes: List[Dict[str, Any]] = []
    message: str


class PermissionCategory(BaseModel):
    category: str
    description: str
    permissions: List[Dict[str, str]]


class CustomPermissionCreate(BaseModel):
    user_id: str
    permission_type: str
    resource_id: Optional[str] = None
    permissions: Dict[str, bool]
    expires_at: Optional[datetime] = None


class PermissionCheckResponse(BaseModel):
    user_id: str
    permission_key: str
    resource_id: Optional[str] = None
    granted: bool
