from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from gsv_backend.config import settings
from gsv_backend.database.supabase_client import get_supabase
from gsv_backend.modules.reminders.schemas import (
    ReminderResponse, ScheduleResult, ProcessResult, CancelResult
)
from gsv_backend.modules.reminders.service import RemindersService
from gsv_backend.core.dependencies import get_current_user, get_optional_user, require_role, is_founder
from supabase import Client
from typing import List, Dict, Literal, Optional
import secrets

router = APIRouter(prefix="/reminders", tags=["reminders"])

staff_only = require_role("founder", "intern")


def get_reminders_service(supabase: Client = Depends(get_supabase)) -> RemindersService:
    return RemindersService(supabase)


def _schedule_result(reminders: List[ReminderResponse]) -> ScheduleResult:
    return ScheduleResult(scheduled=len(reminders), reminders=reminders)


@router.post("/presentations/{presentation_id}", response_model=ScheduleResult)
async def schedule_presentation(
    presentation_id: str,
    user_data: Dict = Depends(staff_only),
    service: RemindersService = Depends(get_reminders_service)
):
    return _schedule_result(service.schedule_presentation_reminders(presentation_id))


@router.post("/meetings/{meeting_id}", response_model=ScheduleResult)
async def schedule_meeting(
    meeting_id: str,
    user_data: Dict = Depends(staff_only),
    service: RemindersService = Depends(get_reminders_service)
):
    return _schedule_result(service.schedule_meeting_reminders(meeting_id))


@router.post("/tasks/{task_id}", response_model=ScheduleResult)
async def schedule_deadline(
    task_id: str,
    user_data: Dict = Depends(staff_only),
    service: RemindersService = Depends(get_reminders_service)
):
    return _schedule_result(service.schedule_deadline_reminders(task_id))


@router.get("", response_model=List[ReminderResponse])
async def list_reminders(
    status: Optional[str] = None,
    all_users: bool = Query(default=False, alias="all"),
    user_data: Dict = Depends(get_current_user),
    service: RemindersService = Depends(get_reminders_service)
):
    """Own reminders; founders may pass ?all=true"""
    return service.list_reminders(user_data, status, include_all=all_users and is_founder(user_data))


@router.post("/process", response_model=ProcessResult)
async def process_reminders(
    x_cron_secret: Optional[str] = Header(default=None),
    user_data: Optional[Dict] = Depends(get_optional_user),
    service: RemindersService = Depends(get_reminders_service)
):
    """Deliver due reminders. Callable by founders or by a cron job holding the shared secret."""
    cron_ok = bool(settings.cron_secret and x_cron_secret) and secrets.compare_digest(
        x_cron_secret, settings.cron_secret
    )
    if not cron_ok and not is_founder(user_data):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unauthorized")
    return ProcessResult(sent=service.process_scheduled_reminders())


@router.delete("/{entity_type}/{entity_id}", response_model=CancelResult)
async def cancel_reminders(
    entity_type: Literal["presentation", "meeting", "task"],
    entity_id: str,
    user_data: Dict = Depends(staff_only),
    service: RemindersService = Depends(get_reminders_service)
):
    return CancelResult(cancelled=service.cancel_reminders(entity_type, entity_id))
