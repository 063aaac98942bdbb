"""
Per-role action item permissions.

Founders can do everything. Interns work on items assigned to them and may
create items for themselves; department directors may also assign to other
interns. Volunteers can only view and update their own task/reminder items.
"""

from supabase import Client
from gsv_backend.modules.action_items.schemas import ActionItemPermissions
import logging

logger = logging.getLogger(__name__)

INTERN_TYPES = ["task", "review", "followup", "reminder"]
VOLUNTEER_TYPES = ["task", "reminder"]


def _intern_profile(user_id: str, supabase: Client) -> dict:
    try:
        result = supabase.table("users")\
            .select("department, subrole")\
            .eq("id", user_id)\
            .maybe_single()\
            .execute()
        return (result.data or {}) if result else {}
    except Exception as e:
        logger.error(f"Error loading intern profile {user_id}: {e}")
        return {}


def get_action_item_permissions(user_data: dict, supabase: Client) -> ActionItemPermissions:
    role = user_data.get("role")
    if role == "founder":
        return ActionItemPermissions(
            can_view=True, can_create=True, can_edit=True, can_delete=True,
            can_assign=True, can_comment=True, can_view_all=True,
            viewable_types=["all"],
            assignable_roles=["founder", "intern", "volunteer"],
        )
    if role == "intern":
        profile = _intern_profile(user_data["id"], supabase)
        types = list(INTERN_TYPES)
        if profile.get("department") == "operations":
            types.append("deadline")
        director = profile.get("subrole") == "department_director"
        return ActionItemPermissions(
            can_view=True, can_create=True, can_edit=True, can_comment=True,
            can_assign=director,
            viewable_types=types,
            assignable_roles=["intern"] if director else [],
        )
    if role == "volunteer":
        return ActionItemPermissions(
            can_view=True, can_edit=True, can_comment=True,
            viewable_types=list(VOLUNTEER_TYPES),
        )
    return ActionItemPermissions()
