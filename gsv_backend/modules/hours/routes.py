from fastapi import APIRouter, Depends, Query
from gsv_backend.database.supabase_client import get_supabase
from gsv_backend.modules.hours.schemas import (
    HoursCreate, HoursApproval, HoursVerification, HoursResponse, HoursActionResponse
)
from gsv_backend.modules.hours.service import HoursService
from gsv_backend.core.dependencies import get_current_user, require_role
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/hours", tags=["hours"])


def get_hours_service(supabase: Client = Depends(get_supabase)) -> HoursService:
    return HoursService(supabase)


@router.post("", response_model=HoursResponse, status_code=201)
async def log_hours(
    body: HoursCreate,
    user_data: Dict = Depends(require_role("volunteer", detail="Only volunteers can log hours")),
    service: HoursService = Depends(get_hours_service)
):
    return service.log_hours(user_data, body)


@router.get("", response_model=List[HoursResponse])
async def list_hours(
    status: Optional[str] = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    user_data: Dict = Depends(get_current_user),
    service: HoursService = Depends(get_hours_service)
):
    """Own submissions, or all submissions for staff"""
    return service.list_hours(user_data, status, limit, offset)


@router.post("/approve", response_model=HoursActionResponse)
async def approve_hours(
    body: HoursApproval,
    user_data: Dict = Depends(require_role("founder", "intern")),
    service: HoursService = Depends(get_hours_service)
):
    return HoursActionResponse(message=service.approve(body, user_data["id"]))


@router.post("/verify", response_model=HoursActionResponse)
async def verify_hours(
    body: HoursVerification,
    user_data: Dict = Depends(get_current_user),
    service: HoursService = Depends(get_hours_service)
):
    hours = service.verify(body, user_data["id"])
    return HoursActionResponse(message="Hours verified successfully", hours=hours)
