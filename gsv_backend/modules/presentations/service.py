from supabase import Client
from gsv_backend.modules.presentations.checklist import default_checklist, completion_percentage
from gsv_backend.modules.presentations.schemas import (
    PresentationCreate, PresentationUpdate, PresentationResponse,
    ChecklistItemCreate, ChecklistItemResponse, GroupProgress
)
from gsv_backend.modules.notifications.service import NotificationService
from gsv_backend.modules.reminders.service import RemindersService
from gsv_backend.core.dependencies import get_user_team_id, is_staff, check_team_access
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


class PresentationService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.reminders = RemindersService(supabase)

    def _schedule_reminders(self, presentation: PresentationResponse) -> None:
        if not presentation.scheduled_date or not presentation.volunteer_team_id:
            return
        try:
            self.reminders.schedule_presentation_reminders(presentation.id)
        except HTTPException as e:
            logger.error(f"Failed to schedule reminders for presentation {presentation.id}: {e.detail}")

    def list_presentations(self, user_data: dict, status: Optional[str] = None) -> List[PresentationResponse]:
        try:
            query = self.supabase.table("presentations").select("*")
            if not is_staff(user_data):
                team_id = get_user_team_id(user_data["id"], self.supabase)
                if not team_id:
                    return []
                query = query.eq("volunteer_team_id", team_id)
            if status:
                query = query.eq("status", status)
            result = query.order("scheduled_date").execute()
            return [PresentationResponse(**row) for row in (result.data or [])]
        except Exception as e:
            logger.error(f"Error listing presentations: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_presentation(self, presentation_id: str, user_data: dict) -> PresentationResponse:
        try:
            result = self.supabase.table("presentations")\
                .select("*")\
                .eq("id", presentation_id)\
                .maybe_single()\
                .execute()
            if not result or not result.data:
                raise HTTPException(status_code=404, detail="Presentation not found")
            if not is_staff(user_data):
                team_id = result.data.get("volunteer_team_id")
                if not team_id:
                    raise HTTPException(status_code=403, detail="Forbidden")
                check_team_access(team_id, user_data, self.supabase)
            return PresentationResponse(**result.data)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_presentation(self, data: PresentationCreate, created_by: str) -> PresentationResponse:
        try:
            payload = data.model_dump(mode="json", exclude_none=True)
            payload["status"] = "scheduled" if data.scheduled_date else "pending"
            payload["created_by"] = created_by
            result = self.supabase.table("presentations").insert(payload).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create presentation")
            presentation = PresentationResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating presentation: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        self._schedule_reminders(presentation)
        return presentation

    def update_presentation(self, presentation_id: str, data: PresentationUpdate) -> PresentationResponse:
        update_data = data.model_dump(mode="json", exclude_none=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")
        try:
            if data.scheduled_date and not data.status:
                update_data["status"] = "scheduled"
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("presentations")\
                .update(update_data)\
                .eq("id", presentation_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Presentation not found")
            presentation = PresentationResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        if presentation.status == "cancelled":
            try:
                self.reminders.cancel_reminders("presentation", presentation.id)
            except HTTPException as e:
                logger.error(f"Failed to cancel reminders for presentation {presentation.id}: {e.detail}")
        elif data.scheduled_date or data.volunteer_team_id or data.teacher_email:
            self._schedule_reminders(presentation)
        return presentation


class ChecklistService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.notifications = NotificationService(supabase)

    def get_checklist(self, team_id: int) -> List[ChecklistItemResponse]:
        """Checklist for a team; the default items are created on first access"""
        try:
            result = self.supabase.table("group_checklist_items")\
                .select("*")\
                .eq("volunteer_team_id", team_id)\
                .order("order_index")\
                .execute()
            items = result.data or []
            if not items:
                inserted = self.supabase.table("group_checklist_items")\
                    .insert(default_checklist(team_id))\
                    .execute()
                items = inserted.data or []
            return [ChecklistItemResponse(**item) for item in items]
        except Exception as e:
            logger.error(f"Error fetching checklist for team {team_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def add_item(self, team_id: int, data: ChecklistItemCreate) -> ChecklistItemResponse:
        try:
            payload = data.model_dump(mode="json")
            payload["volunteer_team_id"] = team_id
            payload["is_completed"] = False
            result = self.supabase.table("group_checklist_items").insert(payload).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create checklist item")
            return ChecklistItemResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def set_completed(self, team_id: int, item_id: str, completed: Optional[bool], user_id: str) -> ChecklistItemResponse:
        now = datetime.now(timezone.utc).isoformat()
        update_data: Dict[str, Any] = {"updated_at": now}
        if completed is not None:
            update_data["is_completed"] = completed
            update_data["completed_at"] = now if completed else None
            update_data["completed_by"] = user_id if completed else None
        try:
            result = self.supabase.table("group_checklist_items")\
                .update(update_data)\
                .eq("id", item_id)\
                .eq("volunteer_team_id", team_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Checklist item not found")
            item = result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        if completed and item.get("is_required"):
            self._notify_completion(item)
        return ChecklistItemResponse(**item)

    def _notify_completion(self, item: Dict[str, Any]) -> None:
        team = self.supabase.table("volunteers")\
            .select("team_name")\
            .eq("id", item["volunteer_team_id"])\
            .maybe_single()\
            .execute()
        team_name = (team.data or {}).get("team_name") if team else None
        self.notifications.notify(
            None,
            "milestone_completed",
            "Checklist Item Completed",
            f"{team_name or 'A volunteer team'} completed: {item['item_name']}",
            priority="high" if item.get("priority") == "urgent" else "medium",
            related_id=item["volunteer_team_id"],
            related_type="volunteer_team",
        )

    def group_progress(self, status: Optional[str] = None) -> List[GroupProgress]:
        """Completion of required checklist items per team"""
        try:
            query = self.supabase.table("volunteers").select("id, team_name, status")
            if status and status != "all":
                query = query.eq("status", status)
            teams = query.order("team_name").execute().data or []

            items = self.supabase.table("group_checklist_items")\
                .select("volunteer_team_id, is_required, is_completed")\
                .eq("is_required", True)\
                .execute().data or []
            by_team: Dict[str, List[Dict[str, Any]]] = {}
            for item in items:
                by_team.setdefault(str(item["volunteer_team_id"]), []).append(item)

            progress = []
            for team in teams:
                team_items = by_team.get(str(team["id"]), [])
                progress.append(GroupProgress(
                    team_id=team["id"],
                    team_name=team.get("team_name"),
                    status=team.get("status"),
                    required_items=len(team_items),
                    completed_items=sum(1 for item in team_items if item.get("is_completed")),
                    progress_percentage=completion_percentage(team_items),
                ))
            return progress
        except Exception as e:
            logger.error(f"Error computing group progress: {e}")
            raise HTTPException(status_code=500, detail=str(e))
