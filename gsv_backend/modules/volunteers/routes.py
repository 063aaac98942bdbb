from fastapi import APIRouter, Depends, Query
from gsv_backend.database.supabase_client import get_supabase, get_service_supabase
from gsv_backend.modules.volunteers.schemas import (
    VolunteerApplication, VolunteerUpdate, VolunteerRejection, VolunteerResponse, ApprovalResponse
)
from gsv_backend.modules.volunteers.service import VolunteerService
from gsv_backend.core.dependencies import get_current_user, require_role, check_team_access
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/volunteers", tags=["volunteers"])

staff_only = require_role("founder", "intern", detail="Forbidden: Only founders and interns can manage volunteers")


def get_volunteer_service(
    supabase: Client = Depends(get_supabase),
    admin_client: Client = Depends(get_service_supabase)
) -> VolunteerService:
    return VolunteerService(supabase, admin_client=admin_client)


@router.post("/applications", response_model=VolunteerResponse, status_code=201)
async def submit_application(
    body: VolunteerApplication,
    service: VolunteerService = Depends(get_volunteer_service)
):
    """Public volunteer team application"""
    return service.submit_application(body)


@router.get("", response_model=List[VolunteerResponse])
async def list_volunteer_teams(
    application_status: Optional[str] = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    user_data: Dict = Depends(staff_only),
    service: VolunteerService = Depends(get_volunteer_service)
):
    return service.list_teams(application_status, limit, offset)


@router.get("/{volunteer_id}", response_model=VolunteerResponse)
async def get_volunteer_team(
    volunteer_id: str,
    user_data: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
    service: VolunteerService = Depends(get_volunteer_service)
):
    check_team_access(volunteer_id, user_data, supabase)
    return service.get_team(volunteer_id)


@router.patch("/{volunteer_id}", response_model=VolunteerResponse)
async def update_volunteer_team(
    volunteer_id: str,
    body: VolunteerUpdate,
    user_data: Dict = Depends(staff_only),
    service: VolunteerService = Depends(get_volunteer_service)
):
    return service.update_team(volunteer_id, body, user_data["id"])


@router.post("/{volunteer_id}/approve", response_model=ApprovalResponse)
async def approve_volunteer_team(
    volunteer_id: str,
    user_data: Dict = Depends(staff_only),
    service: VolunteerService = Depends(get_volunteer_service)
):
    return service.approve(volunteer_id, user_data["id"])


@router.post("/{volunteer_id}/reject", response_model=VolunteerResponse)
async def reject_volunteer_team(
    volunteer_id: str,
    body: VolunteerRejection,
    user_data: Dict = Depends(staff_only),
    service: VolunteerService = Depends(get_volunteer_service)
):
    return service.reject(volunteer_id, body.reason, user_data["id"])
