from supabase import Client
from gsv_backend.modules.volunteers.schemas import (
    VolunteerApplication, VolunteerUpdate, VolunteerResponse, ApprovalResponse, LinkedMember
)
from gsv_backend.modules.users.schemas import UserCreate
from gsv_backend.modules.users.service import UserService
from gsv_backend.modules.notifications.service import NotificationService
from gsv_backend.core.audit import log_system_event
from gsv_backend.core.validation import (
    is_valid_email, is_valid_phone, is_blank, length_error, validation_failed
)
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

MIN_GROUP_SIZE = 3
MAX_GROUP_SIZE = 7


def validate_application(data: VolunteerApplication) -> List[Dict[str, str]]:
    """Return a list of {field, message}; empty when the application is valid"""
    errors = []

    if is_blank(data.email):
        errors.append({"field": "email", "message": "Email is required"})
    elif not is_valid_email(data.email):
        errors.append({"field": "email", "message": "Please enter a valid email address"})

    if is_blank(data.group_city):
        errors.append({"field": "group_city", "message": "City is required"})

    if not data.group_size or data.group_size < MIN_GROUP_SIZE or data.group_size > MAX_GROUP_SIZE:
        errors.append({"field": "group_size", "message": "Group size must be between 3 and 7 members"})

    members = data.group_members or []
    complete = [m for m in members if m.name and m.email and m.phone and m.highschool]
    if len(complete) < MIN_GROUP_SIZE:
        errors.append({"field": "group_members", "message": "Please provide information for at least 3 group members"})
    else:
        for index, member in enumerate(members[:data.group_size or len(members)]):
            number = index + 1
            if is_blank(member.name):
                errors.append({"field": f"member_{index}_name", "message": f"Member {number} name is required"})
            if not is_valid_email(member.email):
                errors.append({"field": f"member_{index}_email", "message": f"Member {number} email is invalid"})
            if not is_valid_phone(member.phone):
                errors.append({"field": f"member_{index}_phone", "message": f"Member {number} phone is invalid"})
            if is_blank(member.highschool):
                errors.append({"field": f"member_{index}_highschool", "message": f"Member {number} high school is required"})

    if data.primary_contact_phone and not is_valid_phone(data.primary_contact_phone):
        errors.append({"field": "primary_contact_phone", "message": "Please enter a valid phone number"})

    if data.why_volunteer:
        why_error = length_error(data.why_volunteer, 10, 1000, "Why volunteer")
        if why_error:
            errors.append({"field": "why_volunteer", "message": why_error})

    return errors


class VolunteerService:
    def __init__(self, supabase: Client, admin_client: Optional[Client] = None):
        self.supabase = supabase
        self.users = UserService(supabase, admin_client=admin_client)
        self.notifications = NotificationService(supabase)

    def _get_team(self, volunteer_id: Any) -> Dict[str, Any]:
        result = self.supabase.table("volunteers")\
            .select("*")\
            .eq("id", volunteer_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Volunteer not found")
        return result.data

    def _member_ids(self, volunteer_id: Any) -> List[str]:
        result = self.supabase.table("team_members")\
            .select("user_id")\
            .eq("volunteer_team_id", volunteer_id)\
            .execute()
        return [row["user_id"] for row in (result.data or []) if row.get("user_id")]

    def submit_application(self, data: VolunteerApplication) -> VolunteerResponse:
        errors = validate_application(data)
        if errors:
            raise HTTPException(status_code=400, detail=validation_failed(errors))
        try:
            members = [m.model_dump() for m in (data.group_members or [])][:data.group_size]
            result = self.supabase.table("volunteers").insert({
                "team_name": (data.team_name or "").strip() or None,
                "email": data.email.strip().lower(),
                "group_city": data.group_city.strip(),
                "group_size": data.group_size,
                "group_members": members,
                "primary_contact_phone": data.primary_contact_phone,
                "why_volunteer": data.why_volunteer,
                "chapter_id": data.chapter_id,
                "application_status": "pending",
                "status": "inactive",
                "hours_total": 0,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to submit application")
            team = result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error submitting volunteer application: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        self.notifications.notify(
            None,
            "volunteer_application",
            "New Volunteer Application",
            f"{team.get('team_name') or 'A new team'} from {team.get('group_city')} applied to volunteer",
            action_url="/dashboard/founder/volunteers",
            related_id=team.get("id"),
            related_type="volunteer",
        )
        logger.info("Volunteer application %s submitted", team.get("id"))
        return VolunteerResponse(**team)

    def list_teams(self, application_status: Optional[str] = None, limit: int = 100, offset: int = 0) -> List[VolunteerResponse]:
        try:
            query = self.supabase.table("volunteers").select("*")
            if application_status:
                query = query.eq("application_status", application_status)
            result = query.order("created_at", desc=True)\
                .range(offset, offset + limit - 1)\
                .execute()
            return [VolunteerResponse(**row) for row in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_team(self, volunteer_id: Any) -> VolunteerResponse:
        try:
            return VolunteerResponse(**self._get_team(volunteer_id))
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_team(self, volunteer_id: Any, data: VolunteerUpdate, changed_by: str) -> VolunteerResponse:
        """Update onboarding/presentation status; a status change is recorded and announced to the team"""
        update_data = data.model_dump(exclude_none=True, exclude={"notes"})
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")
        try:
            current = self._get_team(volunteer_id)
            new_status = update_data.get("presentation_status")
            if new_status and new_status != current.get("presentation_status"):
                self.supabase.table("volunteer_status_history").insert({
                    "volunteer_id": volunteer_id,
                    "old_status": current.get("presentation_status"),
                    "new_status": new_status,
                    "changed_by": changed_by,
                    "notes": data.notes,
                }).execute()
                if new_status == "approved":
                    notification_type, title = "presentation_approved", "Presentation Approved"
                elif new_status == "needs_changes":
                    notification_type, title = "presentation_rejected", "Changes Requested"
                else:
                    notification_type, title = "presentation_updated", "Presentation Status Updated"
                for user_id in self._member_ids(volunteer_id):
                    self.notifications.notify(
                        user_id, notification_type, title,
                        f"Your presentation status has been updated to: {new_status}",
                        action_url="/dashboard/volunteer/onboarding",
                        related_id=volunteer_id,
                        related_type="volunteer",
                    )

            result = self.supabase.table("volunteers")\
                .update(update_data)\
                .eq("id", volunteer_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Volunteer not found")
            return VolunteerResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @staticmethod
    def _is_primary_contact(member: Dict[str, Any], team: Dict[str, Any]) -> bool:
        if member.get("email") and member["email"] == team.get("email"):
            return True
        return bool(member.get("phone")) and member.get("phone") == team.get("primary_contact_phone")

    def _account_for(self, member: Dict[str, Any]) -> LinkedMember:
        """Existing account for the member email, or a new volunteer account"""
        existing = self.users.get_user_by_email(member["email"])
        if existing:
            return LinkedMember(user_id=existing.id, email=member["email"], name=member["name"])
        created = self.users.create_user(UserCreate(
            email=member["email"],
            name=member["name"],
            role="volunteer",
            phone=member.get("phone"),
            school_affiliation=member.get("highschool"),
        ))
        return LinkedMember(
            user_id=created.user.id,
            email=member["email"],
            name=member["name"],
            temporary_password=created.temporary_password,
        )

    def approve(self, volunteer_id: Any, approved_by: str) -> ApprovalResponse:
        """Approve a team: link (or create) member accounts, activate, notify members"""
        try:
            team = self._get_team(volunteer_id)
            if team.get("application_status") == "approved":
                raise HTTPException(status_code=400, detail="Volunteer team already approved")
            members = team.get("group_members") or []
            if not isinstance(members, list) or len(members) < MIN_GROUP_SIZE:
                raise HTTPException(status_code=400, detail="Invalid group members data")

            linked: List[LinkedMember] = []
            errors: List[Dict[str, str]] = []
            for member in members:
                if not member.get("email") or not member.get("name"):
                    continue
                try:
                    account = self._account_for(member)
                    self.supabase.table("team_members").upsert({
                        "volunteer_team_id": volunteer_id,
                        "user_id": account.user_id,
                        "member_name": member["name"],
                        "member_email": member["email"],
                        "member_phone": member.get("phone"),
                        "member_highschool": member.get("highschool"),
                        "is_primary_contact": self._is_primary_contact(member, team),
                    }, on_conflict="volunteer_team_id,user_id").execute()
                    linked.append(account)
                except HTTPException as e:
                    errors.append({"email": member["email"], "error": str(e.detail)})
                except Exception as e:
                    errors.append({"email": member["email"], "error": str(e)})

            if not linked:
                raise HTTPException(status_code=500, detail="Failed to create any user accounts")

            self.supabase.table("volunteers").update({
                "application_status": "approved",
                "status": "active",
                "approved_at": datetime.now(timezone.utc).isoformat(),
                "onboarding_step": "activity_selected",
            }).eq("id", volunteer_id).execute()
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error approving volunteer team {volunteer_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        team_label = f"Your team {team['team_name']}" if team.get("team_name") else "Your team"
        for account in linked:
            self.notifications.notify(
                account.user_id,
                "volunteer_approved",
                "Volunteer Application Approved",
                f"{team_label} has been approved. Welcome to Green Silicon Valley!",
                action_url="/dashboard/volunteer/onboarding",
                priority="high",
                related_id=volunteer_id,
                related_type="volunteer",
            )
        log_system_event(
            self.supabase, approved_by, "volunteer_approved", "volunteer", volunteer_id,
            details={"team_name": team.get("team_name"), "members_linked": len(linked), "errors": errors},
        )
        logger.info("Volunteer team %s approved by %s (%d members)", volunteer_id, approved_by, len(linked))
        return ApprovalResponse(
            message=f"Successfully approved team and linked {len(linked)} user account(s)",
            linked_users=linked,
            errors=errors,
        )

    def reject(self, volunteer_id: Any, reason: Optional[str], rejected_by: str) -> VolunteerResponse:
        if is_blank(reason):
            raise HTTPException(status_code=400, detail="Rejection reason is required")
        try:
            team = self._get_team(volunteer_id)
            result = self.supabase.table("volunteers")\
                .update({"application_status": "rejected", "rejection_reason": reason.strip()})\
                .eq("id", volunteer_id)\
                .execute()
            self.supabase.table("application_status_history").insert({
                "application_type": "volunteer",
                "application_id": str(volunteer_id),
                "old_status": team.get("application_status"),
                "new_status": "rejected",
                "changed_by": rejected_by,
                "notes": reason,
            }).execute()
            updated = result.data[0] if result.data else {**team, "application_status": "rejected"}
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        for user_id in self._member_ids(volunteer_id):
            self.notifications.notify(
                user_id, "volunteer_rejected", "Volunteer Application Update",
                f"Your volunteer application was not approved. Reason: {reason.strip()}",
                related_id=volunteer_id, related_type="volunteer",
            )
        log_system_event(self.supabase, rejected_by, "volunteer_rejected", "volunteer", volunteer_id,
                         details={"reason": reason})
        return VolunteerResponse(**updated)
