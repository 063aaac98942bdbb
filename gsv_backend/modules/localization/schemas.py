from pydantic import BaseModel, Field, field_validator
from typing import Optional, Dict, Literal
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def validate_timezone(value: str) -> str:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {value}")
    return value


class LanguageCreate(BaseModel):
    code: str = Field(min_length=2, max_length=10)
    name: str = Field(min_length=1)
    native_name: str = Field(min_length=1)
    is_active: bool = True
    is_default: bool = False

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        return value.strip().lower()


class LanguageUpdate(BaseModel):
    name: Optional[str] = None
    native_name: Optional[str] = None
    is_active: Optional[bool] = None
    is_default: Optional[bool] = None


class LanguageResponse(BaseModel):
    code: str
    name: str
    native_name: Optional[str] = None
    is_active: bool = True
    is_default: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ContentUpsert(BaseModel):
    content_key: str = Field(min_length=1, max_length=200)
    language: str = Field(min_length=2, max_length=10)
    value: str = ""
    context: Optional[str] = None
    is_active: bool = True


class ContentUpdate(BaseModel):
    value: Optional[str] = None
    context: Optional[str] = None
    is_active: Optional[bool] = None


class ContentResponse(BaseModel):
    id: Optional[str] = None
    content_key: str
    language: str
    value: str = ""
    context: Optional[str] = None
    is_active: bool = True
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TranslationBundle(BaseModel):
    language: str
    fallback_language: Optional[str] = None
    translations: Dict[str, str]


class RegionalSettingCreate(BaseModel):
    region: str = Field(min_length=1)
    calendar_format: str = "gregorian"
    date_format: str = "MM/DD/YYYY"
    time_format: Literal["12h", "24h"] = "12h"
    currency: str = Field(default="USD", min_length=3, max_length=3)
    timezone: str = "UTC"

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, value: str) -> str:
        return validate_timezone(value)

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, value: str) -> str:
        return value.upper()


class RegionalSettingUpdate(BaseModel):
    region: Optional[str] = None
    calendar_format: Optional[str] = None
    date_format: Optional[str] = None
    time_format: Optional[Literal["12h", "24h"]] = None
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    timezone: Optional[str] = None

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, value: Optional[str]) -> Optional[str]:
        return validate_timezone(value) if value is not None else value


class RegionalSettingResponse(BaseModel):
    id: str
    region: str
    calendar_format: str
    date_format: str
    time_format: str
    currency: str
    timezone: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
