from supabase import Client
from gsv_backend.config.permissions_config import INTERN_PERMISSION_KEYS, empty_intern_permissions
from gsv_backend.modules.permissions.schemas import (
    InternPermissionsResponse, InternPermissionsEnvelope, CustomPermissionCreate
)
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


def diff_permissions(old: Optional[Dict[str, bool]], new: Dict[str, bool]) -> List[Dict[str, Any]]:
    """Changes between two permission maps; a missing key counts as False."""
    old = old or {}
    changes = []
    for key in sorted(set(old) | set(new)):
        old_value = bool(old.get(key, False))
        new_value = bool(new.get(key, False))
        if old_value != new_value:
            changes.append({
                "permission_key": key,
                "action": "granted" if new_value else "revoked",
                "old_value": old_value,
                "new_value": new_value,
            })
    return changes


class InternPermissionService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _get_existing(self, intern_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("intern_permissions")\
            .select("*")\
            .eq("intern_id", intern_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            return None
        return result.data

    def _log_changes(self, intern_id: str, changes: List[Dict[str, Any]], changed_by: str) -> None:
        if not changes:
            return
        try:
            self.supabase.table("permission_change_log").insert([
                {**change, "intern_id": intern_id, "changed_by": changed_by}
                for change in changes
            ]).execute()
        except Exception as e:
            logger.error(f"Failed to log permission changes for intern {intern_id}: {e}")

    def list_permissions(self, intern_id: Optional[str] = None) -> List[InternPermissionsResponse]:
        try:
            query = self.supabase.table("intern_permissions").select("*")
            if intern_id:
                query = query.eq("intern_id", intern_id)
            result = query.execute()
            return [InternPermissionsResponse(**row) for row in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def set_permissions(self, intern_id: Optional[str], permissions: Dict[str, bool], granted_by: str) -> InternPermissionsEnvelope:
        """Replace an intern's permission map and log every changed key"""
        if not intern_id:
            raise HTTPException(status_code=400, detail="Intern ID is required")
        unknown = sorted(set(permissions) - set(INTERN_PERMISSION_KEYS))
        if unknown:
            raise HTTPException(status_code=400, detail=f"Unknown permission keys: {', '.join(unknown)}")

        try:
            intern = self.supabase.table("users")\
                .select("id, name, email, role")\
                .eq("id", intern_id)\
                .eq("role", "intern")\
                .maybe_single()\
                .execute()
            if not intern or not intern.data:
                raise HTTPException(status_code=400, detail="Invalid intern ID or user is not an intern")

            existing = self._get_existing(intern_id)
            new_permissions = {**empty_intern_permissions(), **permissions}
            now = datetime.now(timezone.utc).isoformat()

            if existing:
                result = self.supabase.table("intern_permissions")\
                    .update({"permissions": new_permissions, "granted_by": granted_by, "updated_at": now})\
                    .eq("intern_id", intern_id)\
                    .execute()
            else:
                result = self.supabase.table("intern_permissions").insert({
                    "intern_id": intern_id,
                    "permissions": new_permissions,
                    "granted_by": granted_by,
                }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save intern permissions")

            changes = diff_permissions(existing["permissions"] if existing else None, new_permissions)
            self._log_changes(intern_id, changes, granted_by)
            logger.info("Intern %s permissions updated by %s (%d changes)", intern_id, granted_by, len(changes))

            return InternPermissionsEnvelope(
                permissions=InternPermissionsResponse(**result.data[0]),
                changes=changes,
                message="Intern permissions updated successfully"
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating intern permissions: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def remove_permissions(self, intern_id: Optional[str], removed_by: str) -> int:
        """Delete the permission row; every key that was on is logged as revoked"""
        if not intern_id:
            raise HTTPException(status_code=400, detail="Intern ID is required")
        try:
            existing = self._get_existing(intern_id)
            self.supabase.table("intern_permissions")\
                .delete()\
                .eq("intern_id", intern_id)\
                .execute()
            changes = diff_permissions(existing["permissions"] if existing else None, {})
            self._log_changes(intern_id, changes, removed_by)
            return len(changes)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def grant_custom_permission(self, data: CustomPermissionCreate) -> Dict[str, Any]:
        try:
            payload = data.model_dump()
            if payload.get("expires_at"):
                payload["expires_at"] = payload["expires_at"].isoformat()
            result = self.supabase.table("user_custom_permissions").insert(payload).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to grant custom permission")
            return result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
