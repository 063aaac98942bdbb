from fastapi import APIRouter, Depends, HTTPException, Query
from gsv_backend.config.permissions_config import get_intern_permission_catalog
from gsv_backend.database.supabase_client import get_supabase
from gsv_backend.modules.permissions.schemas import (
    InternPermissionsUpdate, InternPermissionsResponse, InternPermissionsEnvelope,
    PermissionCategory, CustomPermissionCreate, PermissionCheckResponse
)
from gsv_backend.modules.permissions.service import InternPermissionService
from gsv_backend.modules.permissions.evaluator import PermissionEvaluator
from gsv_backend.core.dependencies import get_current_user, require_role, is_founder
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(tags=["permissions"])


def get_intern_permission_service(supabase: Client = Depends(get_supabase)) -> InternPermissionService:
    return InternPermissionService(supabase)


def get_permission_evaluator(supabase: Client = Depends(get_supabase)) -> PermissionEvaluator:
    return PermissionEvaluator(supabase)


@router.get("/permissions/intern/keys", response_model=List[PermissionCategory])
async def list_intern_permission_keys(
    user_data: Dict = Depends(require_role("founder", "intern"))
):
    """The static permission key catalog for the permission editor"""
    return get_intern_permission_catalog()


@router.get("/admin/intern-permissions", response_model=List[InternPermissionsResponse])
async def list_intern_permissions(
    intern_id: Optional[str] = Query(default=None, alias="internId"),
    user_data: Dict = Depends(require_role("founder", detail="Unauthorized")),
    service: InternPermissionService = Depends(get_intern_permission_service)
):
    return service.list_permissions(intern_id)


@router.post("/admin/intern-permissions", response_model=InternPermissionsEnvelope)
async def set_intern_permissions(
    body: InternPermissionsUpdate,
    user_data: Dict = Depends(require_role("founder", detail="Unauthorized")),
    service: InternPermissionService = Depends(get_intern_permission_service)
):
    """Replace an intern's permission map; changes are logged"""
    return service.set_permissions(body.intern_id, body.permissions, user_data["id"])


@router.delete("/admin/intern-permissions")
async def remove_intern_permissions(
    intern_id: Optional[str] = Query(default=None, alias="internId"),
    user_data: Dict = Depends(require_role("founder", detail="Unauthorized")),
    service: InternPermissionService = Depends(get_intern_permission_service)
):
    revoked = service.remove_permissions(intern_id, user_data["id"])
    return {"ok": True, "revoked": revoked, "message": "Intern permissions removed successfully"}


@router.post("/permissions/custom", status_code=201)
async def grant_custom_permission(
    body: CustomPermissionCreate,
    user_data: Dict = Depends(require_role("founder", detail="Unauthorized")),
    service: InternPermissionService = Depends(get_intern_permission_service)
):
    return {"ok": True, "permission": service.grant_custom_permission(body)}


@router.get("/permissions/check", response_model=PermissionCheckResponse)
async def check_permission(
    permission_key: str,
    resource_id: Optional[str] = None,
    user_id: Optional[str] = None,
    user_data: Dict = Depends(get_current_user),
    evaluator: PermissionEvaluator = Depends(get_permission_evaluator)
):
    """Evaluate a dotted permission key for the caller (founders may check anyone)"""
    target = user_id or user_data["id"]
    if target != user_data["id"] and not is_founder(user_data):
        raise HTTPException(status_code=403, detail="Forbidden")
    return PermissionCheckResponse(
        user_id=target,
        permission_key=permission_key,
        resource_id=resource_id,
        granted=evaluator.has_permission(target, permission_key, resource_id)
    )
