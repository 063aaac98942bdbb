"""
Permission evaluation for dotted keys such as ``forms.edit``.

Custom per-user grants (user_custom_permissions) win over role defaults.
A grant only applies to the permission type it was made for and, when it
has a resource_id, only to that resource.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from supabase import Client

from gsv_backend.config.permissions_config import (
    CUSTOM_PERMISSION_FLAGS,
    CUSTOM_PERMISSION_MAPPINGS,
    INTERN_KEY_GRANTS,
    ROLE_DEFAULT_PERMISSIONS,
)
from gsv_backend.core.dependencies import get_intern_permissions
from gsv_backend.core.types import parse_timestamp

logger = logging.getLogger(__name__)


def check_custom_permissions(
    custom_permissions: List[Dict[str, Any]],
    permission_key: str,
    resource_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Optional[bool]:
    """Return the custom grant for permission_key, or None to fall back to the role."""
    now = now or datetime.now(timezone.utc)
    flag = CUSTOM_PERMISSION_FLAGS.get(permission_key.rsplit(".", 1)[-1])
    if flag is None:
        return None
    for custom in custom_permissions:
        if permission_key not in CUSTOM_PERMISSION_MAPPINGS.get(custom.get("permission_type"), []):
            continue
        scope = custom.get("resource_id")
        if scope is not None and str(scope) != str(resource_id):
            continue
        flags = custom.get("permissions") or {}
        if flag not in flags:
            continue
        expires_at = parse_timestamp(custom.get("expires_at"))
        if expires_at is not None and expires_at < now:
            return False
        return bool(flags[flag])
    return None


def check_role_permissions(role: Optional[str], permission_key: str, intern_permissions: Optional[Dict[str, bool]] = None) -> bool:
    defaults = ROLE_DEFAULT_PERMISSIONS.get(role or "", [])
    if "*" in defaults or permission_key in defaults:
        return True
    if role == "intern" and intern_permissions:
        for intern_key, granted_keys in INTERN_KEY_GRANTS.items():
            if intern_permissions.get(intern_key) and permission_key in granted_keys:
                return True
    return False


class PermissionEvaluator:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_user_permissions(self, user_id: str) -> Dict[str, Any]:
        user = self.supabase.table("users")\
            .select("role")\
            .eq("id", user_id)\
            .maybe_single()\
            .execute()
        if not user or not user.data:
            raise LookupError("User not found")

        now = datetime.now(timezone.utc)
        custom = self.supabase.table("user_custom_permissions")\
            .select("*")\
            .eq("user_id", user_id)\
            .execute()
        active = [
            row for row in (custom.data or [])
            if row.get("expires_at") is None or parse_timestamp(row["expires_at"]) > now
        ]
        return {"role": user.data.get("role"), "custom_permissions": active}

    def has_permission(self, user_id: str, permission_key: str, resource_id: Optional[str] = None) -> bool:
        try:
            user_permissions = self.get_user_permissions(user_id)
        except LookupError:
            return False
        except Exception as e:
            logger.error(f"Error checking permission {permission_key} for {user_id}: {e}")
            return False

        custom = check_custom_permissions(user_permissions["custom_permissions"], permission_key, resource_id)
        if custom is not None:
            return custom

        role = user_permissions["role"]
        intern_permissions = get_intern_permissions(user_id, self.supabase) if role == "intern" else None
        return check_role_permissions(role, permission_key, intern_permissions)

    def can_view(self, user_id: str, resource_type: str, resource_id: str) -> bool:
        return self.has_permission(user_id, f"{resource_type}.view", resource_id)

    def can_edit(self, user_id: str, resource_type: str, resource_id: str) -> bool:
        return self.has_permission(user_id, f"{resource_type}.edit", resource_id)

    def can_delete(self, user_id: str, resource_type: str, resource_id: str) -> bool:
        return self.has_permission(user_id, f"{resource_type}.delete", resource_id)

    def can_publish(self, user_id: str, resource_type: str) -> bool:
        return self.has_permission(user_id, f"{resource_type}.publish")
