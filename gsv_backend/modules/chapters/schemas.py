from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, Dict, Literal
from datetime import datetime
from gsv_backend.modules.localization.schemas import validate_timezone

ChapterStatus = Literal["forming", "active", "inactive"]


class ChapterCreate(BaseModel):
    name: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None
    language: str = "en"
    timezone: str = "UTC"
    currency: str = Field(default="USD", min_length=3, max_length=3)
    contact_email: Optional[EmailStr] = None
    website_url: Optional[str] = None
    social_media: Dict[str, str] = {}

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, value: str) -> str:
        return validate_timezone(value)


class ChapterUpdate(BaseModel):
    name: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None
    language: Optional[str] = None
    timezone: Optional[str] = None
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    contact_email: Optional[EmailStr] = None
    website_url: Optional[str] = None
    social_media: Optional[Dict[str, str]] = None
    status: Optional[ChapterStatus] = None

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, value: Optional[str]) -> Optional[str]:
        return validate_timezone(value) if value is not None else value


class ChapterResponse(BaseModel):
    id: str
    name: str
    country: str
    region: Optional[str] = None
    language: Optional[str] = None
    timezone: Optional[str] = None
    currency: Optional[str] = None
    contact_email: Optional[str] = None
    website_url: Optional[str] = None
    social_media: Optional[Dict[str, str]] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None
    volunteer_count: Optional[int] = None
    presentation_count: Optional[int] = None
    leadership_count: Optional[int] = None

    class Config:
        from_attributes = True
