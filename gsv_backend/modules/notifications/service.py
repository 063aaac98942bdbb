from supabase import Client
from gsv_backend.modules.notifications.schemas import NotificationResponse
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def notify(
        self,
        user_id: Optional[str],
        notification_type: str,
        title: str,
        message: str,
        action_url: Optional[str] = None,
        priority: str = "medium",
        related_id: Any = None,
        related_type: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """Insert a notification. user_id None is a broadcast to founders. Failures are logged, not raised."""
        data = {
            "user_id": user_id,
            "notification_type": notification_type,
            "title": title,
            "message": message,
            "action_url": action_url,
            "priority": priority,
            "related_id": str(related_id) if related_id is not None else None,
            "related_type": related_type,
        }
        try:
            result = self.supabase.table("notifications").insert(data).execute()
            return result.data[0] if result.data else None
        except Exception as e:
            logger.error(f"Failed to create {notification_type} notification for {user_id}: {e}")
            return None

    def list_notifications(
        self,
        user_id: str,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0,
        include_broadcasts: bool = False
    ) -> List[NotificationResponse]:
        try:
            query = self.supabase.table("notifications").select("*")
            if include_broadcasts:
                query = query.or_(f"user_id.eq.{user_id},user_id.is.null")
            else:
                query = query.eq("user_id", user_id)
            if unread_only:
                query = query.eq("is_read", False)
            result = query.order("created_at", desc=True)\
                .range(offset, offset + limit - 1)\
                .execute()
            return [NotificationResponse(**row) for row in (result.data or [])]
        except Exception as e:
            logger.error(f"Error listing notifications: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def unread_count(self, user_id: str) -> int:
        try:
            result = self.supabase.table("notifications")\
                .select("id")\
                .eq("user_id", user_id)\
                .eq("is_read", False)\
                .execute()
            return len(result.data or [])
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def mark_read(self, notification_id: str, user_id: str) -> NotificationResponse:
        try:
            result = self.supabase.table("notifications")\
                .update({"is_read": True, "read_at": datetime.now(timezone.utc).isoformat()})\
                .eq("id", notification_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Notification not found")
            return NotificationResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def mark_all_read(self, user_id: str) -> int:
        try:
            result = self.supabase.table("notifications")\
                .update({"is_read": True, "read_at": datetime.now(timezone.utc).isoformat()})\
                .eq("user_id", user_id)\
                .eq("is_read", False)\
                .execute()
            return len(result.data or [])
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
