from fastapi import APIRouter, Depends
from gsv_backend.database.supabase_client import get_supabase
from gsv_backend.modules.presentations.schemas import (
    PresentationCreate, PresentationUpdate, PresentationResponse,
    ChecklistItemCreate, ChecklistItemUpdate, ChecklistEnvelope,
    ChecklistItemEnvelope, GroupProgressEnvelope
)
from gsv_backend.modules.presentations.service import PresentationService, ChecklistService
from gsv_backend.core.dependencies import get_current_user, require_role, check_team_access
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(tags=["presentations"])

staff_only = require_role("founder", "intern")


def get_presentation_service(supabase: Client = Depends(get_supabase)) -> PresentationService:
    return PresentationService(supabase)


def get_checklist_service(supabase: Client = Depends(get_supabase)) -> ChecklistService:
    return ChecklistService(supabase)


@router.get("/presentations", response_model=List[PresentationResponse])
async def list_presentations(
    status: Optional[str] = None,
    user_data: Dict = Depends(get_current_user),
    service: PresentationService = Depends(get_presentation_service)
):
    """All presentations for staff, the caller's team presentations otherwise"""
    return service.list_presentations(user_data, status)


@router.post("/presentations", response_model=PresentationResponse, status_code=201)
async def create_presentation(
    body: PresentationCreate,
    user_data: Dict = Depends(staff_only),
    service: PresentationService = Depends(get_presentation_service)
):
    return service.create_presentation(body, user_data["id"])


@router.get("/presentations/{presentation_id}", response_model=PresentationResponse)
async def get_presentation(
    presentation_id: str,
    user_data: Dict = Depends(get_current_user),
    service: PresentationService = Depends(get_presentation_service)
):
    return service.get_presentation(presentation_id, user_data)


@router.patch("/presentations/{presentation_id}", response_model=PresentationResponse)
async def update_presentation(
    presentation_id: str,
    body: PresentationUpdate,
    user_data: Dict = Depends(staff_only),
    service: PresentationService = Depends(get_presentation_service)
):
    """Scheduling or rescheduling a date (re)schedules the team's reminders"""
    return service.update_presentation(presentation_id, body)


@router.get("/groups/progress", response_model=GroupProgressEnvelope)
async def group_progress(
    status: Optional[str] = None,
    user_data: Dict = Depends(staff_only),
    service: ChecklistService = Depends(get_checklist_service)
):
    return GroupProgressEnvelope(groups=service.group_progress(status))


@router.get("/groups/{team_id}/checklist", response_model=ChecklistEnvelope)
async def get_checklist(
    team_id: int,
    user_data: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
    service: ChecklistService = Depends(get_checklist_service)
):
    check_team_access(team_id, user_data, supabase)
    return ChecklistEnvelope(items=service.get_checklist(team_id))


@router.post("/groups/{team_id}/checklist", response_model=ChecklistItemEnvelope, status_code=201)
async def add_checklist_item(
    team_id: int,
    body: ChecklistItemCreate,
    user_data: Dict = Depends(staff_only),
    service: ChecklistService = Depends(get_checklist_service)
):
    return ChecklistItemEnvelope(item=service.add_item(team_id, body))


@router.put("/groups/{team_id}/checklist/{item_id}", response_model=ChecklistItemEnvelope)
async def update_checklist_item(
    team_id: int,
    item_id: str,
    body: ChecklistItemUpdate,
    user_data: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
    service: ChecklistService = Depends(get_checklist_service)
):
    check_team_access(team_id, user_data, supabase)
    return ChecklistItemEnvelope(item=service.set_completed(team_id, item_id, body.completed, user_data["id"]))
