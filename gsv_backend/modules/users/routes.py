from fastapi import APIRouter, Depends, Query, HTTPException, status
from gsv_backend.database.supabase_client import get_supabase, get_service_supabase
from gsv_backend.modules.users.schemas import (
    UserCreate, UserUpdate, UserRoleUpdate, UserResponse, UserCreateResponse
)
from gsv_backend.modules.users.service import UserService
from gsv_backend.core.dependencies import get_current_user, require_role, is_founder
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(
    supabase: Client = Depends(get_supabase),
    admin_client: Client = Depends(get_service_supabase)
) -> UserService:
    return UserService(supabase, admin_client=admin_client)


@router.get("", response_model=List[UserResponse])
async def list_users(
    role: Optional[str] = None,
    status: Optional[str] = None,
    limit: int = Query(default=50, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    user_data: Dict = Depends(require_role("founder", detail="Unauthorized")),
    service: UserService = Depends(get_user_service)
):
    """List users, filtered by role/status (founder only)"""
    return service.list_users(role=role, status=status, limit=limit, offset=offset)


@router.post("", response_model=UserCreateResponse, status_code=201)
async def create_user(
    user_body: UserCreate,
    user_data: Dict = Depends(require_role("founder", detail="Unauthorized")),
    service: UserService = Depends(get_user_service)
):
    """Create an account directly (founder only)"""
    return service.create_user(user_body)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    user_data: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Get a user (self or founder)"""
    if user_data["id"] != user_id and not is_founder(user_data):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User not accessible")
    return service.get_user_by_id(user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    user_body: UserUpdate,
    user_data: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Update profile (self or founder)"""
    if user_data["id"] != user_id and not is_founder(user_data):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User not accessible")
    return service.update_user(user_id, user_body)


@router.patch("/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: str,
    role_body: UserRoleUpdate,
    user_data: Dict = Depends(require_role("founder", detail="Unauthorized")),
    service: UserService = Depends(get_user_service)
):
    """Change role or approve/suspend an account (founder only)"""
    if user_id == user_data["id"] and role_body.role and role_body.role != "founder":
        raise HTTPException(status_code=400, detail="Founders cannot demote themselves")
    return service.update_role(user_id, role_body)


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    user_data: Dict = Depends(require_role("founder", detail="Unauthorized")),
    service: UserService = Depends(get_user_service)
):
    """Delete user (founder only)"""
    service.delete_user(user_id)
    return None
