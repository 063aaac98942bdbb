"""
Core dependencies for route protection, role checks and intern permissions
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from gsv_backend.config.permissions_config import INTERN_PERMISSION_KEYS, STAFF_ROLES
from gsv_backend.database.supabase_client import get_supabase
from gsv_backend.modules.auth.service import AuthService
from supabase import Client
from typing import List, Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is a 401 rather than FastAPI's default
security = HTTPBearer(auto_error=False)


def _get_request_cache(request: Request) -> Dict[str, Any]:
    """Return request-scoped cache for access data (intern permission map, team id)."""
    if not hasattr(request.state, "access_cache"):
        request.state.access_cache = {}
    return request.state.access_cache


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Resolve the bearer token to the user dict (id, email, name, role, status)"""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )
    return auth_service.get_current_user(credentials.credentials)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[dict]:
    """Like get_current_user but returns None for anonymous callers (public pages)."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return auth_service.get_current_user(credentials.credentials)
    except HTTPException:
        return None


def is_founder(user_data: Optional[dict]) -> bool:
    return bool(user_data) and user_data.get("role") == "founder"


def is_staff(user_data: Optional[dict]) -> bool:
    """Founders and interns run the staff dashboards"""
    return bool(user_data) and user_data.get("role") in STAFF_ROLES


def get_intern_permissions(user_id: str, supabase: Client, cache: Optional[Dict[str, Any]] = None) -> Dict[str, bool]:
    """Return the intern's permission map from intern_permissions. Uses request-scoped cache when provided."""
    if cache is not None and "intern_permissions" in cache:
        return cache["intern_permissions"]
    try:
        result = supabase.table("intern_permissions")\
            .select("permissions")\
            .eq("intern_id", user_id)\
            .maybe_single()\
            .execute()
        permissions = (result.data or {}).get("permissions") if result else None
        permissions = permissions or {}
    except Exception as e:
        logger.error(f"Error getting intern permissions: {e}")
        permissions = {}
    if cache is not None:
        cache["intern_permissions"] = permissions
    return permissions


def has_staff_permission(
    user_data: dict,
    permission_key: str,
    supabase: Client,
    cache: Optional[Dict[str, Any]] = None
) -> bool:
    """Founders hold every key; interns hold the keys toggled on for them."""
    if is_founder(user_data):
        return True
    if user_data.get("role") != "intern":
        return False
    return bool(get_intern_permissions(user_data["id"], supabase, cache).get(permission_key))


def get_effective_permissions(user_data: dict, supabase: Client) -> List[str]:
    if is_founder(user_data):
        return list(INTERN_PERMISSION_KEYS)
    if user_data.get("role") == "intern":
        permissions = get_intern_permissions(user_data["id"], supabase)
        return [key for key in INTERN_PERMISSION_KEYS if permissions.get(key)]
    return []


def require_role(*roles: str, detail: str = "Forbidden"):
    """Factory function to create a role check dependency"""
    def check_role(user_data: dict = Depends(get_current_user)) -> dict:
        if user_data.get("role") not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
        return user_data
    return check_role


def require_staff_permission(permission_key: str, detail: Optional[str] = None):
    """Factory: founder, or intern holding permission_key"""
    def check_permission(
        request: Request,
        user_data: dict = Depends(get_current_user),
        supabase: Client = Depends(get_supabase)
    ) -> dict:
        if not is_staff(user_data):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unauthorized")
        cache = _get_request_cache(request)
        if not has_staff_permission(user_data, permission_key, supabase, cache):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=detail or f"Insufficient permissions. Required: {permission_key}"
            )
        return user_data
    return check_permission


def get_access_cache(request: Request) -> Dict[str, Any]:
    """Dependency that returns request-scoped access cache."""
    return _get_request_cache(request)


def get_user_team_id(user_id: str, supabase: Client, cache: Optional[Dict[str, Any]] = None) -> Optional[Any]:
    """Return the volunteer team id for a user from team_members, or None."""
    if cache is not None and "team_id" in cache:
        return cache["team_id"]
    result = supabase.table("team_members")\
        .select("volunteer_team_id")\
        .eq("user_id", user_id)\
        .limit(1)\
        .execute()
    team_id = result.data[0]["volunteer_team_id"] if result.data else None
    if cache is not None:
        cache["team_id"] = team_id
    return team_id


def is_team_member(user_id: str, team_id: Any, supabase: Client) -> bool:
    result = supabase.table("team_members")\
        .select("user_id")\
        .eq("user_id", user_id)\
        .eq("volunteer_team_id", team_id)\
        .limit(1)\
        .execute()
    return bool(result.data)


def check_team_access(team_id: Any, user_data: dict, supabase: Client) -> dict:
    """Allow staff, or a member of the volunteer team"""
    if is_staff(user_data):
        return user_data
    if is_team_member(user_data["id"], team_id, supabase):
        return user_data
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
