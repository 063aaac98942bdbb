"""
Reminder scheduling for presentations, team meetings and task deadlines.

Reminder ids are deterministic so scheduling the same entity twice upserts
the same rows instead of duplicating them. Delivery is a polled query over
scheduled_reminders; each due row becomes a notification.
"""

from supabase import Client
from gsv_backend.config import settings
from gsv_backend.core.types import parse_timestamp
from gsv_backend.modules.notifications.service import NotificationService
from gsv_backend.modules.reminders.schemas import ReminderResponse
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timedelta, timezone
import logging

logger = logging.getLogger(__name__)

# (suffix, offset before the event, priority)
PRESENTATION_OFFSETS = [
    ("1week", timedelta(days=7), "medium"),
    ("3days", timedelta(days=3), "high"),
    ("1day", timedelta(days=1), "urgent"),
]
MEETING_OFFSETS = [
    ("24h", timedelta(hours=24), "medium"),
    ("1h", timedelta(hours=1), "high"),
]


def format_date(value: datetime) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def format_time(value: datetime) -> str:
    return value.strftime("%I:%M %p").lstrip("0")


def presentation_reminder_text(suffix: str, school: str, team_name: str, when: datetime) -> Dict[str, str]:
    day = format_date(when)
    if suffix == "1week":
        return {
            "title": "Presentation Reminder: 1 Week Until Presentation",
            "message": f"Your team {team_name} has a presentation at {school} in one week ({day}). "
                       "Make sure your slides are finalized and shared with GSV.",
        }
    if suffix == "3days":
        return {
            "title": "Presentation Reminder: 3 Days Until Presentation",
            "message": f"Your presentation at {school} is in 3 days ({day}). "
                       "Confirm materials and practice your presentation with your team.",
        }
    return {
        "title": "Presentation Reminder: Tomorrow!",
        "message": f"Your presentation at {school} is tomorrow ({day}) at {format_time(when)}. Good luck!",
    }


class RemindersService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.notifications = NotificationService(supabase)

    def _fetch_one(self, table: str, entity_id: Any, not_found: str) -> Dict[str, Any]:
        result = self.supabase.table(table)\
            .select("*")\
            .eq("id", entity_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail=not_found)
        return result.data

    def _team_member_ids(self, team_id: Any) -> List[str]:
        result = self.supabase.table("team_members")\
            .select("user_id")\
            .eq("volunteer_team_id", team_id)\
            .execute()
        return [row["user_id"] for row in (result.data or []) if row.get("user_id")]

    def _team_name(self, team_id: Any) -> str:
        result = self.supabase.table("volunteers")\
            .select("team_name")\
            .eq("id", team_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            return "Your team"
        return result.data.get("team_name") or "Your team"

    def _save(self, reminders: List[Dict[str, Any]]) -> List[ReminderResponse]:
        if not reminders:
            return []
        result = self.supabase.table("scheduled_reminders")\
            .upsert(reminders, on_conflict="id")\
            .execute()
        return [ReminderResponse(**row) for row in (result.data or [])]

    @staticmethod
    def _reminder(
        reminder_id: str,
        title: str,
        message: str,
        recipient_id: str,
        recipient_type: str,
        reminder_type: str,
        scheduled_for: datetime,
        entity_id: Any,
        entity_type: str,
        priority: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        return {
            "id": reminder_id,
            "title": title,
            "message": message,
            "recipient_id": str(recipient_id),
            "recipient_type": recipient_type,
            "reminder_type": reminder_type,
            "scheduled_for": scheduled_for.isoformat(),
            "status": "scheduled",
            "related_entity_id": str(entity_id),
            "related_entity_type": entity_type,
            "priority": priority,
            "metadata": metadata or {},
        }

    def schedule_presentation_reminders(self, presentation_id: Any) -> List[ReminderResponse]:
        """7, 3 and 1 days before for every team member, plus a teacher reminder a week out"""
        try:
            presentation = self._fetch_one("presentations", presentation_id, "Presentation not found")
            when = parse_timestamp(presentation.get("scheduled_date"))
            if when is None:
                raise HTTPException(status_code=400, detail="Presentation has no scheduled date")
            team_id = presentation.get("volunteer_team_id")
            if not team_id:
                raise HTTPException(status_code=400, detail="Presentation has no volunteer team")

            school = presentation.get("school_name") or "the school"
            team_name = self._team_name(team_id)
            metadata = {"school_name": school, "presentation_date": when.isoformat()}

            reminders = []
            for member_id in self._team_member_ids(team_id):
                for suffix, offset, priority in PRESENTATION_OFFSETS:
                    text = presentation_reminder_text(suffix, school, team_name, when)
                    reminders.append(self._reminder(
                        f"reminder-{presentation_id}-{member_id}-{suffix}",
                        text["title"], text["message"],
                        member_id, "volunteer", "presentation",
                        when - offset, presentation_id, "presentation", priority, metadata,
                    ))

            teacher_email = presentation.get("teacher_email")
            if teacher_email:
                reminders.append(self._reminder(
                    f"reminder-{presentation_id}-teacher-1week",
                    "Upcoming GSV Presentation",
                    f"Green Silicon Valley volunteers ({team_name}) will present to your class on "
                    f"{format_date(when)} at {format_time(when)}.",
                    teacher_email, "teacher", "presentation",
                    when - timedelta(days=7), presentation_id, "presentation", "medium", metadata,
                ))

            saved = self._save(reminders)
            logger.info("Scheduled %d reminders for presentation %s", len(saved), presentation_id)
            return saved
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error scheduling presentation reminders for {presentation_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def schedule_meeting_reminders(self, meeting_id: Any) -> List[ReminderResponse]:
        """24 hours and 1 hour before for every team member"""
        try:
            meeting = self._fetch_one("team_meetings", meeting_id, "Meeting not found")
            when = parse_timestamp(meeting.get("meeting_date"))
            if when is None:
                raise HTTPException(status_code=400, detail="Meeting has no date")

            title = meeting.get("title") or "Team meeting"
            location = meeting.get("location")
            reminders = []
            for member_id in self._team_member_ids(meeting.get("volunteer_team_id")):
                for suffix, offset, priority in MEETING_OFFSETS:
                    lead = "tomorrow" if suffix == "24h" else "in 1 hour"
                    message = f"{title} starts {lead} ({format_date(when)} at {format_time(when)})."
                    if location:
                        message += f" Location: {location}"
                    reminders.append(self._reminder(
                        f"meeting-reminder-{meeting_id}-{member_id}-{suffix}",
                        f"Meeting Reminder: {title}", message,
                        member_id, "volunteer", "meeting",
                        when - offset, meeting_id, "meeting", priority,
                    ))
            return self._save(reminders)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error scheduling meeting reminders for {meeting_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def schedule_deadline_reminders(self, task_id: Any, now: Optional[datetime] = None) -> List[ReminderResponse]:
        """A week and a day before the due date; reminders already in the past are skipped"""
        now = now or datetime.now(timezone.utc)
        try:
            task = self._fetch_one("generated_tasks", task_id, "Task not found")
            due = parse_timestamp(task.get("due_date"))
            assignee = task.get("assigned_to")
            if due is None or not assignee:
                return []

            title = task.get("title") or "Task"
            week_priority = "high" if task.get("priority") == "urgent" else "medium"
            candidates = [
                ("1week", due - timedelta(days=7), week_priority, f"Task Due in 1 Week: {title}",
                 f"\"{title}\" is due on {format_date(due)}."),
                ("1day", due - timedelta(days=1), "urgent", f"Task Due Tomorrow: {title}",
                 f"\"{title}\" is due tomorrow ({format_date(due)})."),
            ]
            reminders = [
                self._reminder(
                    f"deadline-reminder-{task_id}-{suffix}", reminder_title, message,
                    assignee, "user", "deadline", scheduled_for, task_id, "task", priority,
                )
                for suffix, scheduled_for, priority, reminder_title, message in candidates
                if scheduled_for > now
            ]
            return self._save(reminders)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error scheduling deadline reminders for {task_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def _resolve_recipient(self, reminder: Dict[str, Any]) -> Optional[str]:
        """Teacher reminders are addressed by email; deliver them to the matching account"""
        if reminder.get("recipient_type") != "teacher":
            return reminder["recipient_id"]
        result = self.supabase.table("users")\
            .select("id")\
            .eq("email", reminder["recipient_id"])\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            return None
        return result.data["id"]

    def process_scheduled_reminders(self, now: Optional[datetime] = None) -> int:
        """Turn every due reminder into a notification; returns how many were sent"""
        now = now or datetime.now(timezone.utc)
        cutoff = now + timedelta(minutes=settings.reminder_lookahead_minutes)
        result = self.supabase.table("scheduled_reminders")\
            .select("*")\
            .eq("status", "scheduled")\
            .lte("scheduled_for", cutoff.isoformat())\
            .order("scheduled_for")\
            .execute()

        sent = 0
        for reminder in result.data or []:
            try:
                recipient = self._resolve_recipient(reminder)
                if recipient is None:
                    logger.warning(f"No account for reminder recipient {reminder['recipient_id']}, cancelling {reminder['id']}")
                    self.supabase.table("scheduled_reminders")\
                        .update({"status": "cancelled"})\
                        .eq("id", reminder["id"])\
                        .execute()
                    continue

                notification = self.notifications.notify(
                    recipient,
                    "reminder",
                    reminder["title"],
                    reminder["message"],
                    priority=reminder.get("priority") or "medium",
                    related_id=reminder.get("related_entity_id"),
                    related_type=reminder.get("related_entity_type"),
                )
                if notification is None:
                    raise RuntimeError("notification insert failed")

                self.supabase.table("scheduled_reminders")\
                    .update({"status": "sent", "sent_at": datetime.now(timezone.utc).isoformat()})\
                    .eq("id", reminder["id"])\
                    .execute()
                sent += 1
            except Exception as e:
                logger.error(f"Error processing reminder {reminder.get('id')}: {e}")

        if sent:
            logger.info("Sent %d scheduled reminders", sent)
        return sent

    def cancel_reminders(self, entity_type: str, entity_id: Any) -> int:
        try:
            result = self.supabase.table("scheduled_reminders")\
                .update({"status": "cancelled"})\
                .eq("related_entity_type", entity_type)\
                .eq("related_entity_id", str(entity_id))\
                .eq("status", "scheduled")\
                .execute()
            return len(result.data or [])
        except Exception as e:
            logger.error(f"Error cancelling reminders for {entity_type} {entity_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def list_reminders(self, user_data: dict, status: Optional[str] = None, include_all: bool = False) -> List[ReminderResponse]:
        try:
            query = self.supabase.table("scheduled_reminders").select("*")
            if not include_all:
                query = query.eq("recipient_id", user_data["id"])
            if status:
                query = query.eq("status", status)
            result = query.order("scheduled_for").execute()
            return [ReminderResponse(**row) for row in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
