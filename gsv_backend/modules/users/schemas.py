from pydantic import BaseModel, EmailStr
from typing import Optional, Literal
from datetime import datetime

UserRole = Literal["founder", "intern", "volunteer", "teacher", "chapter_leader", "partner"]
UserStatus = Literal["active", "inactive", "pending", "suspended"]


class UserCreate(BaseModel):
    email: EmailStr
    name: str
    role: UserRole = "volunteer"
    password: Optional[str] = None  # generated when omitted
    phone: Optional[str] = None
    school_affiliation: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    school_affiliation: Optional[str] = None
    notes: Optional[str] = None


class UserRoleUpdate(BaseModel):
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None


class UserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None
    status: Optional[str] = None
    user_category: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    school_affiliation: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserCreateResponse(BaseModel):
    ok: bool = True
    user: UserResponse
    temporary_password: Optional[str] = None
