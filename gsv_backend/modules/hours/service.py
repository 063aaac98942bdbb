from supabase import Client
from gsv_backend.modules.hours.schemas import (
    HoursCreate, HoursApproval, HoursVerification, HoursResponse
)
from gsv_backend.modules.notifications.service import NotificationService
from gsv_backend.core.dependencies import get_user_team_id, is_staff
from gsv_backend.core.audit import log_system_event
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


def format_hours(value: float) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else f"{value:g}"


def approval_message(hours_logged: float, final_hours: float, adjusted: bool) -> str:
    if adjusted:
        return f"Your {format_hours(hours_logged)} hours were approved and adjusted to {format_hours(final_hours)} hours."
    if float(final_hours) == 1:
        return f"Your {format_hours(final_hours)} hour has been approved!"
    return f"Your {format_hours(final_hours)} hours have been approved!"


class HoursService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.notifications = NotificationService(supabase)

    def _get_hours(self, hours_id: Any) -> Dict[str, Any]:
        result = self.supabase.table("volunteer_hours")\
            .select("*")\
            .eq("id", hours_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Hours submission not found")
        return result.data

    def log_hours(self, user_data: dict, data: HoursCreate) -> HoursResponse:
        try:
            team_id = get_user_team_id(user_data["id"], self.supabase)
            if not team_id:
                raise HTTPException(status_code=400, detail="You are not currently assigned to a volunteer team")
            result = self.supabase.table("volunteer_hours").insert({
                "volunteer_id": team_id,
                "submitted_by": user_data["id"],
                "presentation_id": data.presentation_id,
                "date": data.date.isoformat(),
                "hours_logged": data.hours_logged,
                "activity": data.activity.strip(),
                "feedback": data.feedback,
                "status": "pending",
                "submitted_at": datetime.now(timezone.utc).isoformat(),
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to log hours")
            logger.info("User %s logged %s hours for team %s", user_data["id"], data.hours_logged, team_id)
            return HoursResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error logging hours: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def list_hours(self, user_data: dict, status: Optional[str] = None, limit: int = 100, offset: int = 0) -> List[HoursResponse]:
        try:
            query = self.supabase.table("volunteer_hours").select("*")
            if not is_staff(user_data):
                query = query.eq("submitted_by", user_data["id"])
            if status:
                query = query.eq("status", status)
            result = query.order("submitted_at", desc=True)\
                .range(offset, offset + limit - 1)\
                .execute()
            return [HoursResponse(**row) for row in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _credit_team(self, volunteer_id: Any, hours: float) -> None:
        team = self.supabase.table("volunteers")\
            .select("hours_total")\
            .eq("id", volunteer_id)\
            .maybe_single()\
            .execute()
        if not team or not team.data:
            logger.warning("Volunteer team %s not found, hours not credited", volunteer_id)
            return
        total = float(team.data.get("hours_total") or 0) + float(hours)
        self.supabase.table("volunteers")\
            .update({"hours_total": total})\
            .eq("id", volunteer_id)\
            .execute()

    def approve(self, data: HoursApproval, approver_id: str) -> str:
        """Approve or reject a pending submission; returns the result message"""
        if not data.hours_id:
            raise HTTPException(status_code=400, detail="Missing hours_id")
        now = datetime.now(timezone.utc).isoformat()
        try:
            row = self._get_hours(data.hours_id)
            if row.get("status") not in ("pending", "verified"):
                raise HTTPException(status_code=400, detail=f"Hours submission is already {row.get('status')}")

            if not data.approved:
                self.supabase.table("volunteer_hours").update({
                    "status": "rejected",
                    "approved_by": approver_id,
                    "approved_at": now,
                    "rejection_reason": data.rejection_reason or None,
                }).eq("id", data.hours_id).execute()
            else:
                adjusted = data.adjusted_hours is not None
                final_hours = data.adjusted_hours if adjusted else float(row["hours_logged"])
                self.supabase.table("volunteer_hours").update({
                    "status": "approved",
                    "approved_by": approver_id,
                    "approved_at": now,
                    "adjusted_hours": data.adjusted_hours,
                    "approval_notes": data.approval_notes or None,
                }).eq("id", data.hours_id).execute()
                if row.get("presentation_id"):
                    self.supabase.table("presentations")\
                        .update({"hours": final_hours, "feedback": row.get("feedback")})\
                        .eq("id", row["presentation_id"])\
                        .execute()
                self._credit_team(row.get("volunteer_id"), final_hours)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error approving hours {data.hours_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        if not data.approved:
            message = "Your hours submission was rejected."
            if data.rejection_reason:
                message = f"Your hours submission was rejected. Reason: {data.rejection_reason}"
            log_system_event(self.supabase, approver_id, "hours_rejected", "volunteer_hours", data.hours_id,
                             details={"reason": data.rejection_reason})
            if row.get("submitted_by"):
                self.notifications.notify(
                    row["submitted_by"], "hours_rejected", "Hours Rejected", message,
                    action_url="/dashboard/volunteer/hours",
                    related_id=data.hours_id, related_type="volunteer_hours",
                )
            logger.info("Hours %s rejected by %s", data.hours_id, approver_id)
            return "Hours rejected"

        log_system_event(self.supabase, approver_id, "hours_approved", "volunteer_hours", data.hours_id, details={
            "presentation_id": row.get("presentation_id"),
            "hours": final_hours,
            "adjusted": adjusted,
            "comment": data.approval_notes,
        })
        if row.get("submitted_by"):
            self.notifications.notify(
                row["submitted_by"], "hours_approved", "Hours Approved",
                approval_message(row["hours_logged"], final_hours, adjusted),
                action_url="/dashboard/volunteer/hours",
                related_id=data.hours_id, related_type="volunteer_hours",
            )
        logger.info("Hours %s approved by %s (%s hours)", data.hours_id, approver_id, final_hours)
        return "Hours approved"

    def verify(self, data: HoursVerification, verifier_id: str) -> HoursResponse:
        """Teacher verification of a submission"""
        if not data.hours_id or not data.verification_method:
            raise HTTPException(status_code=400, detail="Missing required fields")
        update_data = {
            "verification_method": data.verification_method,
            "status": "verified",
            "verified_at": datetime.now(timezone.utc).isoformat(),
            "verified_by": verifier_id,
        }
        if data.verification_method in ("signature", "digital"):
            update_data["teacher_signature_url"] = data.teacher_signature
        try:
            row = self._get_hours(data.hours_id)
            if row.get("status") != "pending":
                raise HTTPException(status_code=400, detail=f"Hours submission is already {row.get('status')}")
            result = self.supabase.table("volunteer_hours")\
                .update(update_data)\
                .eq("id", data.hours_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Hours submission not found")
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        try:
            self.supabase.table("hours_verification_log").insert({
                "hours_id": data.hours_id,
                "verified_by": verifier_id,
                "verification_method": data.verification_method,
                "verification_data": {"teacher_name": data.teacher_name, "notes": data.notes},
                "notes": data.notes,
            }).execute()
        except Exception as e:
            logger.error(f"Error logging verification for hours {data.hours_id}: {e}")
        return HoursResponse(**result.data[0])
