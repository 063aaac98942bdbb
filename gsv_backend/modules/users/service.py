import logging
import secrets
from datetime import datetime, timezone
from supabase import Client
from gsv_backend.modules.users.schemas import (
    UserCreate, UserUpdate, UserRoleUpdate, UserResponse, UserCreateResponse
)
from typing import List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


def generate_temp_password() -> str:
    return secrets.token_urlsafe(12)


class UserService:
    def __init__(self, supabase: Client, admin_client: Optional[Client] = None):
        self.supabase = supabase
        self.admin_client = admin_client or supabase

    def get_user_by_id(self, user_id: str) -> UserResponse:
        """Get user row by ID"""
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .eq("id", user_id)\
                .maybe_single()\
                .execute()

            if not result or not result.data:
                raise HTTPException(status_code=404, detail="User not found")

            return UserResponse(**result.data)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_user_by_email(self, email: str) -> Optional[UserResponse]:
        """Get user row by email"""
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .eq("email", email)\
                .maybe_single()\
                .execute()

            if not result or not result.data:
                return None

            return UserResponse(**result.data)
        except Exception as e:
            logger.warning(f"Lookup by email failed: {e}")
            return None

    def list_users(
        self,
        role: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[UserResponse]:
        try:
            query = self.supabase.table("users").select("*")
            if role:
                query = query.eq("role", role)
            if status:
                query = query.eq("status", status)
            result = query.order("created_at", desc=True)\
                .range(offset, offset + limit - 1)\
                .execute()
            return [UserResponse(**user) for user in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_user(self, user_data: UserCreate) -> UserCreateResponse:
        """Create an auth user (email pre-confirmed) and its users row"""
        if self.get_user_by_email(user_data.email):
            raise HTTPException(status_code=400, detail="User already exists")
        password = user_data.password or generate_temp_password()
        try:
            auth_response = self.admin_client.auth.admin.create_user({
                "email": user_data.email,
                "password": password,
                "email_confirm": True,
                "user_metadata": {"full_name": user_data.name},
            })
            if not auth_response or not auth_response.user:
                raise HTTPException(status_code=500, detail="Failed to create user")

            result = self.supabase.table("users").insert({
                "id": auth_response.user.id,
                "email": user_data.email,
                "name": user_data.name,
                "role": user_data.role,
                "status": "active",
                "user_category": user_data.role,
                "phone": user_data.phone,
                "school_affiliation": user_data.school_affiliation,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create user")

            logger.info("Created %s account %s", user_data.role, auth_response.user.id)
            return UserCreateResponse(
                user=UserResponse(**result.data[0]),
                temporary_password=None if user_data.password else password
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating user {user_data.email}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_user(self, user_id: str, user_data: UserUpdate) -> UserResponse:
        """Update profile fields that were provided"""
        try:
            update_data = user_data.model_dump(exclude_none=True)
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

            result = self.supabase.table("users")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="User not found")

            return UserResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_role(self, user_id: str, role_data: UserRoleUpdate) -> UserResponse:
        """Change role and/or status (user approvals)"""
        update_data = role_data.model_dump(exclude_none=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="Role or status is required")
        try:
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("users")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="User not found")
            logger.info("User %s updated to %s", user_id, update_data)
            return UserResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_user(self, user_id: str) -> bool:
        """Delete user row and memberships"""
        try:
            self.supabase.table("team_members")\
                .delete()\
                .eq("user_id", user_id)\
                .execute()

            result = self.supabase.table("users")\
                .delete()\
                .eq("id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="User not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
