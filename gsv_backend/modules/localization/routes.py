from fastapi import APIRouter, Depends
from gsv_backend.database.supabase_client import get_supabase
from gsv_backend.modules.localization.schemas import (
    LanguageCreate, LanguageUpdate, LanguageResponse, ContentUpsert, ContentUpdate,
    ContentResponse, TranslationBundle, RegionalSettingCreate, RegionalSettingUpdate,
    RegionalSettingResponse
)
from gsv_backend.modules.localization.service import LocalizationService
from gsv_backend.core.dependencies import get_optional_user, require_role, is_founder
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/localization", tags=["localization"])

staff_only = require_role("founder", "intern", detail="Unauthorized")


def get_localization_service(supabase: Client = Depends(get_supabase)) -> LocalizationService:
    return LocalizationService(supabase)


@router.get("/languages", response_model=List[LanguageResponse])
async def list_languages(
    user_data: Optional[Dict] = Depends(get_optional_user),
    service: LocalizationService = Depends(get_localization_service)
):
    """Active languages; founders also see inactive ones"""
    return service.list_languages(include_inactive=is_founder(user_data))


@router.post("/languages", response_model=LanguageResponse, status_code=201)
async def create_language(
    body: LanguageCreate,
    user_data: Dict = Depends(staff_only),
    service: LocalizationService = Depends(get_localization_service)
):
    return service.create_language(body)


@router.put("/languages/{code}", response_model=LanguageResponse)
async def update_language(
    code: str,
    body: LanguageUpdate,
    user_data: Dict = Depends(staff_only),
    service: LocalizationService = Depends(get_localization_service)
):
    return service.update_language(code, body)


@router.post("/languages/{code}/default", response_model=LanguageResponse)
async def set_default_language(
    code: str,
    user_data: Dict = Depends(staff_only),
    service: LocalizationService = Depends(get_localization_service)
):
    return service.set_default_language(code)


@router.delete("/languages/{code}", status_code=204)
async def delete_language(
    code: str,
    user_data: Dict = Depends(staff_only),
    service: LocalizationService = Depends(get_localization_service)
):
    service.delete_language(code)
    return None


@router.get("/content", response_model=List[ContentResponse])
async def list_content(
    language: Optional[str] = None,
    key: Optional[str] = None,
    user_data: Dict = Depends(staff_only),
    service: LocalizationService = Depends(get_localization_service)
):
    return service.list_content(language, key)


@router.post("/content", response_model=ContentResponse)
async def upsert_content(
    body: ContentUpsert,
    user_data: Dict = Depends(staff_only),
    service: LocalizationService = Depends(get_localization_service)
):
    """Create or replace the translation for (content_key, language)"""
    return service.upsert_content(body)


@router.put("/content/{content_id}", response_model=ContentResponse)
async def update_content(
    content_id: str,
    body: ContentUpdate,
    user_data: Dict = Depends(staff_only),
    service: LocalizationService = Depends(get_localization_service)
):
    return service.update_content(content_id, body)


@router.delete("/content/{content_id}", status_code=204)
async def delete_content(
    content_id: str,
    user_data: Dict = Depends(staff_only),
    service: LocalizationService = Depends(get_localization_service)
):
    service.delete_content(content_id)
    return None


@router.get("/translations/{language}", response_model=TranslationBundle)
async def get_translations(
    language: str,
    service: LocalizationService = Depends(get_localization_service)
):
    return service.get_translations(language)


@router.get("/regional", response_model=List[RegionalSettingResponse])
async def list_regional_settings(
    service: LocalizationService = Depends(get_localization_service)
):
    return service.list_regional_settings()


@router.post("/regional", response_model=RegionalSettingResponse, status_code=201)
async def create_regional_setting(
    body: RegionalSettingCreate,
    user_data: Dict = Depends(staff_only),
    service: LocalizationService = Depends(get_localization_service)
):
    return service.create_regional_setting(body)


@router.put("/regional/{setting_id}", response_model=RegionalSettingResponse)
async def update_regional_setting(
    setting_id: str,
    body: RegionalSettingUpdate,
    user_data: Dict = Depends(staff_only),
    service: LocalizationService = Depends(get_localization_service)
):
    return service.update_regional_setting(setting_id, body)


@router.delete("/regional/{setting_id}", status_code=204)
async def delete_regional_setting(
    setting_id: str,
    user_data: Dict = Depends(staff_only),
    service: LocalizationService = Depends(get_localization_service)
):
    service.delete_regional_setting(setting_id)
    return None
