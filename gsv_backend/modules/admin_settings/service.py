from supabase import Client
from gsv_backend.modules.admin_settings.schemas import (
    ProcurementSettingsUpdate, InternationalSettingsUpdate,
    DEFAULT_PROCUREMENT_SETTINGS, DEFAULT_PROCUREMENT_INSTRUCTIONS
)
from typing import Any, Dict, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

DEFAULT_INTERNATIONAL_SETTINGS = {
    "international_enabled": False,
    "coming_soon_message": "International chapters are coming soon!",
    "supported_countries": [],
    "language_options": ["en"],
    "timezone_support": False,
    "compliance_requirements": {
        "gdpr_enabled": False,
        "ccpa_enabled": False,
        "pipeda_enabled": False,
    },
    "localized_content": {},
}


class AdminSettingsService:
    """Single-row settings tables, updated in place"""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _get_row(self, table: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table(table)\
            .select("*")\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def _save_row(self, table: str, data: Dict[str, Any], updated_by: str) -> Dict[str, Any]:
        data = {**data, "updated_by": updated_by, "updated_at": datetime.now(timezone.utc).isoformat()}
        existing = self._get_row(table)
        if existing:
            result = self.supabase.table(table)\
                .update(data)\
                .eq("id", existing["id"])\
                .execute()
        else:
            result = self.supabase.table(table).insert(data).execute()
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to save settings")
        return result.data[0]

    def get_procurement_settings(self) -> Dict[str, Any]:
        """Stored procurement settings, or the defaults when none were saved yet"""
        try:
            row = self._get_row("procurement_settings")
        except Exception as e:
            logger.error(f"Error loading procurement settings: {e}")
            raise HTTPException(status_code=500, detail="Unable to load procurement settings")
        if not row:
            return dict(DEFAULT_PROCUREMENT_SETTINGS)
        return {**DEFAULT_PROCUREMENT_SETTINGS, **row}

    def update_procurement_settings(self, data: ProcurementSettingsUpdate, updated_by: str) -> Dict[str, Any]:
        try:
            payload = data.model_dump()
            instructions = (payload.get("procurement_instructions") or "").strip()
            payload["procurement_instructions"] = instructions or DEFAULT_PROCUREMENT_INSTRUCTIONS
            row = self._save_row("procurement_settings", payload, updated_by)
            logger.info("Procurement settings updated by %s", updated_by)
            return row
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error saving procurement settings: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_international_settings(self) -> Dict[str, Any]:
        try:
            row = self._get_row("international_settings")
        except Exception as e:
            logger.error(f"Error loading international settings: {e}")
            raise HTTPException(status_code=500, detail="Unable to load international settings")
        if not row:
            return dict(DEFAULT_INTERNATIONAL_SETTINGS)
        return {**DEFAULT_INTERNATIONAL_SETTINGS, **row}

    def update_international_settings(self, data: InternationalSettingsUpdate, updated_by: str) -> Dict[str, Any]:
        try:
            payload = data.model_dump()
            if not payload.get("language_options"):
                payload["language_options"] = ["en"]
            row = self._save_row("international_settings", payload, updated_by)
            logger.info("International settings updated by %s", updated_by)
            return row
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error saving international settings: {e}")
            raise HTTPException(status_code=500, detail=str(e))
