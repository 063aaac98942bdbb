from supabase import Client
from gsv_backend.modules.localization.schemas import (
    LanguageCreate, LanguageUpdate, LanguageResponse, ContentUpsert, ContentUpdate,
    ContentResponse, TranslationBundle, RegionalSettingCreate, RegionalSettingUpdate,
    RegionalSettingResponse
)
from typing import Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


class LocalizationService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    # Languages

    def _get_language(self, code: str) -> Optional[dict]:
        result = self.supabase.table("supported_languages")\
            .select("*")\
            .eq("code", code)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            return None
        return result.data

    def _clear_default(self, except_code: str) -> None:
        self.supabase.table("supported_languages")\
            .update({"is_default": False})\
            .eq("is_default", True)\
            .neq("code", except_code)\
            .execute()

    def get_default_language(self) -> Optional[str]:
        result = self.supabase.table("supported_languages")\
            .select("code")\
            .eq("is_default", True)\
            .limit(1)\
            .execute()
        return result.data[0]["code"] if result.data else None

    def list_languages(self, include_inactive: bool = False) -> List[LanguageResponse]:
        try:
            query = self.supabase.table("supported_languages").select("*")
            if not include_inactive:
                query = query.eq("is_active", True)
            result = query.order("name").execute()
            return [LanguageResponse(**row) for row in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_language(self, data: LanguageCreate) -> LanguageResponse:
        try:
            if self._get_language(data.code):
                raise HTTPException(status_code=400, detail="Language already exists")
            payload = data.model_dump()
            # the first language becomes the default
            if not payload["is_default"] and not self.get_default_language():
                payload["is_default"] = True
            if payload["is_default"]:
                payload["is_active"] = True
                self._clear_default(data.code)
            result = self.supabase.table("supported_languages").insert(payload).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create language")
            return LanguageResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_language(self, code: str, data: LanguageUpdate) -> LanguageResponse:
        try:
            existing = self._get_language(code)
            if not existing:
                raise HTTPException(status_code=404, detail="Language not found")
            update_data = data.model_dump(exclude_none=True)
            if existing.get("is_default"):
                if update_data.get("is_default") is False:
                    raise HTTPException(status_code=400, detail="Set another language as default first")
                if update_data.get("is_active") is False:
                    raise HTTPException(status_code=400, detail="The default language cannot be deactivated")
            if update_data.get("is_default"):
                update_data["is_active"] = True
                self._clear_default(code)
            if not update_data:
                return LanguageResponse(**existing)
            result = self.supabase.table("supported_languages")\
                .update(update_data)\
                .eq("code", code)\
                .execute()
            return LanguageResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def set_default_language(self, code: str) -> LanguageResponse:
        return self.update_language(code, LanguageUpdate(is_default=True))

    def delete_language(self, code: str) -> bool:
        """Delete a language and all of its translations"""
        try:
            existing = self._get_language(code)
            if not existing:
                raise HTTPException(status_code=404, detail="Language not found")
            if existing.get("is_default"):
                raise HTTPException(status_code=400, detail="The default language cannot be deleted")
            self.supabase.table("localization_content")\
                .delete()\
                .eq("language", code)\
                .execute()
            self.supabase.table("supported_languages")\
                .delete()\
                .eq("code", code)\
                .execute()
            logger.info("Deleted language %s", code)
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    # Content

    def list_content(self, language: Optional[str] = None, content_key: Optional[str] = None) -> List[ContentResponse]:
        try:
            query = self.supabase.table("localization_content").select("*")
            if language:
                query = query.eq("language", language)
            if content_key:
                query = query.eq("content_key", content_key)
            result = query.order("content_key").execute()
            return [ContentResponse(**row) for row in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def upsert_content(self, data: ContentUpsert) -> ContentResponse:
        try:
            if not self._get_language(data.language):
                raise HTTPException(status_code=400, detail=f"Unsupported language: {data.language}")
            payload = data.model_dump()
            payload["value"] = payload["value"].strip()
            payload["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("localization_content")\
                .upsert(payload, on_conflict="content_key,language")\
                .execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save translation")
            return ContentResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_content(self, content_id: str, data: ContentUpdate) -> ContentResponse:
        try:
            update_data = data.model_dump(exclude_none=True)
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("localization_content")\
                .update(update_data)\
                .eq("id", content_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Translation not found")
            return ContentResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_content(self, content_id: str) -> bool:
        try:
            result = self.supabase.table("localization_content")\
                .delete()\
                .eq("id", content_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Translation not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _active_values(self, language: str) -> Dict[str, str]:
        result = self.supabase.table("localization_content")\
            .select("content_key, value")\
            .eq("language", language)\
            .eq("is_active", True)\
            .execute()
        return {row["content_key"]: row["value"] for row in (result.data or []) if row.get("value")}

    def get_translations(self, language: str) -> TranslationBundle:
        """Key/value bundle for a language; missing or empty keys fall back to the default language"""
        try:
            language = language.lower()
            default_language = self.get_default_language()
            translations: Dict[str, str] = {}
            if default_language and default_language != language:
                translations.update(self._active_values(default_language))
            translations.update(self._active_values(language))
            return TranslationBundle(
                language=language,
                fallback_language=default_language if default_language != language else None,
                translations=translations
            )
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    # Regional settings

    def list_regional_settings(self) -> List[RegionalSettingResponse]:
        try:
            result = self.supabase.table("regional_settings")\
                .select("*")\
                .order("region")\
                .execute()
            return [RegionalSettingResponse(**row) for row in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_regional_setting(self, data: RegionalSettingCreate) -> RegionalSettingResponse:
        try:
            result = self.supabase.table("regional_settings").insert(data.model_dump()).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create regional setting")
            return RegionalSettingResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_regional_setting(self, setting_id: str, data: RegionalSettingUpdate) -> RegionalSettingResponse:
        update_data = data.model_dump(exclude_none=True)
        if "currency" in update_data:
            update_data["currency"] = update_data["currency"].upper()
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")
        try:
            result = self.supabase.table("regional_settings")\
                .update(update_data)\
                .eq("id", setting_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Regional setting not found")
            return RegionalSettingResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_regional_setting(self, setting_id: str) -> bool:
        try:
            result = self.supabase.table("regional_settings")\
                .delete()\
                .eq("id", setting_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Regional setting not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
