from fastapi import APIRouter, Depends
from gsv_backend.database.supabase_client import get_supabase
from gsv_backend.modules.admin_settings.schemas import (
    ProcurementSettingsUpdate, InternationalSettingsUpdate, SettingsEnvelope
)
from gsv_backend.modules.admin_settings.service import AdminSettingsService
from gsv_backend.core.dependencies import require_role
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/admin", tags=["admin-settings"])


def get_admin_settings_service(supabase: Client = Depends(get_supabase)) -> AdminSettingsService:
    return AdminSettingsService(supabase)


@router.get("/procurement-settings", response_model=SettingsEnvelope)
async def get_procurement_settings(
    user_data: Dict = Depends(require_role("founder", detail="Unauthorized")),
    service: AdminSettingsService = Depends(get_admin_settings_service)
):
    return SettingsEnvelope(settings=service.get_procurement_settings())


@router.post("/procurement-settings", response_model=SettingsEnvelope)
async def update_procurement_settings(
    body: ProcurementSettingsUpdate,
    user_data: Dict = Depends(require_role("founder", detail="Unauthorized")),
    service: AdminSettingsService = Depends(get_admin_settings_service)
):
    """Save procurement flags and the per-group budget cap"""
    return SettingsEnvelope(
        settings=service.update_procurement_settings(body, user_data["id"]),
        message="Procurement settings updated successfully"
    )


@router.get("/international-settings", response_model=SettingsEnvelope)
async def get_international_settings(
    user_data: Dict = Depends(require_role("founder", detail="Unauthorized")),
    service: AdminSettingsService = Depends(get_admin_settings_service)
):
    return SettingsEnvelope(settings=service.get_international_settings())


@router.post("/international-settings", response_model=SettingsEnvelope)
async def update_international_settings(
    body: InternationalSettingsUpdate,
    user_data: Dict = Depends(require_role("founder", detail="Unauthorized")),
    service: AdminSettingsService = Depends(get_admin_settings_service)
):
    return SettingsEnvelope(
        settings=service.update_international_settings(body, user_data["id"]),
        message="International settings updated successfully"
    )
