from fastapi import APIRouter, Depends, Query
from gsv_backend.database.supabase_client import get_supabase
from gsv_backend.modules.notifications.schemas import NotificationResponse, UnreadCountResponse
from gsv_backend.modules.notifications.service import NotificationService
from gsv_backend.core.dependencies import get_current_user, is_founder
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/notifications", tags=["notifications"])


def get_notification_service(supabase: Client = Depends(get_supabase)) -> NotificationService:
    return NotificationService(supabase)


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(
    unread_only: bool = False,
    limit: int = Query(default=50, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    user_data: Dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    """List the caller's notifications. Founders also see broadcasts."""
    return service.list_notifications(
        user_data["id"],
        unread_only=unread_only,
        limit=limit,
        offset=offset,
        include_broadcasts=is_founder(user_data)
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    user_data: Dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    return {"unread": service.unread_count(user_data["id"])}


@router.post("/read-all")
async def mark_all_read(
    user_data: Dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    updated = service.mark_all_read(user_data["id"])
    return {"ok": True, "updated": updated}


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: str,
    user_data: Dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    return service.mark_read(notification_id, user_data["id"])
