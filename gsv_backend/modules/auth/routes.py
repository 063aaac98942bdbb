from fastapi import APIRouter, Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials
from gsv_backend.config import settings
from gsv_backend.database.supabase_client import get_supabase
from gsv_backend.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse, CurrentUserResponse
)
from gsv_backend.modules.auth.service import AuthService
from gsv_backend.core.dependencies import get_current_user, get_effective_permissions, security
from gsv_backend.core.rate_limit import limiter
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


@router.post("/register", response_model=RegisterResponse, status_code=201)
@limiter.limit(settings.auth_rate_limit)
async def register(
    request: Request,
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user (starts as a pending volunteer)"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.auth_rate_limit)
async def login(
    request: Request,
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    user_data: Dict = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and drop the cached token"""
    service.logout(credentials.credentials)
    return {"ok": True, "message": "Logged out successfully"}


@router.get("/me", response_model=CurrentUserResponse)
async def get_me(
    current_user: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    """Get current authenticated user, role and permission keys (for frontend UI)."""
    return {**current_user, "permissions": get_effective_permissions(current_user, supabase)}
