"""
Tests for reminder scheduling and delivery.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from fastapi import HTTPException

from gsv_backend.config import settings
from gsv_backend.modules.reminders import scheduler
from gsv_backend.modules.reminders.service import RemindersService
from tests.conftest import FOUNDER, VOLUNTEER

NOW = datetime(2026, 10, 1, 15, 0, tzinfo=timezone.utc)


@pytest.fixture
def team(db):
    db.seed("volunteers", {"id": 7, "team_name": "Eco Eagles"})
    db.seed(
        "team_members",
        {"user_id": "member-a", "volunteer_team_id": 7},
        {"user_id": "member-b", "volunteer_team_id": 7},
    )
    return 7


@pytest.fixture
def presentation(db, team):
    db.seed("presentations", {
        "id": "pres-1",
        "volunteer_team_id": team,
        "school_name": "Lincoln Elementary",
        "teacher_email": "teacher@school.org",
        "scheduled_date": "2026-10-20T17:00:00Z",
    })
    return "pres-1"


class TestPresentationReminders:

    def test_three_reminders_per_member_plus_teacher(self, db, presentation):
        saved = RemindersService(db).schedule_presentation_reminders(presentation)
        assert len(saved) == 7

        by_id = {row["id"]: row for row in db.rows("scheduled_reminders")}
        week = by_id["reminder-pres-1-member-a-1week"]
        assert week["priority"] == "medium"
        assert week["scheduled_for"].startswith("2026-10-13T17:00")
        assert by_id["reminder-pres-1-member-a-3days"]["priority"] == "high"
        day = by_id["reminder-pres-1-member-b-1day"]
        assert day["priority"] == "urgent"
        assert day["title"] == "Presentation Reminder: Tomorrow!"
        assert day["scheduled_for"].startswith("2026-10-19T17:00")

        teacher = by_id["reminder-pres-1-teacher-1week"]
        assert teacher["recipient_type"] == "teacher"
        assert teacher["recipient_id"] == "teacher@school.org"

    def test_rescheduling_is_idempotent(self, db, presentation):
        service = RemindersService(db)
        service.schedule_presentation_reminders(presentation)
        db.rows("presentations")[0]["scheduled_date"] = "2026-10-27T17:00:00Z"
        service.schedule_presentation_reminders(presentation)

        rows = db.rows("scheduled_reminders")
        assert len(rows) == 7
        week = next(r for r in rows if r["id"] == "reminder-pres-1-member-a-1week")
        assert week["scheduled_for"].startswith("2026-10-20T17:00")

    def test_no_teacher_reminder_without_email(self, db, presentation):
        db.rows("presentations")[0]["teacher_email"] = None
        saved = RemindersService(db).schedule_presentation_reminders(presentation)
        assert len(saved) == 6

    def test_unscheduled_presentation(self, db, presentation):
        db.rows("presentations")[0]["scheduled_date"] = None
        with pytest.raises(HTTPException) as exc:
            RemindersService(db).schedule_presentation_reminders(presentation)
        assert exc.value.status_code == 400


class TestMeetingAndDeadlineReminders:

    def test_meeting_reminders(self, db, team):
        db.seed("team_meetings", {
            "id": "meet-1", "volunteer_team_id": team, "title": "Slide review",
            "meeting_date": "2026-10-05T18:00:00+00:00", "location": "Library",
        })
        saved = RemindersService(db).schedule_meeting_reminders("meet-1")
        assert len(saved) == 4
        ids = {row["id"] for row in db.rows("scheduled_reminders")}
        assert "meeting-reminder-meet-1-member-a-24h" in ids
        assert "meeting-reminder-meet-1-member-b-1h" in ids
        one_hour = next(r for r in db.rows("scheduled_reminders") if r["id"].endswith("member-a-1h"))
        assert one_hour["priority"] == "high"
        assert "Library" in one_hour["message"]

    def test_deadline_reminders_only_in_future(self, db):
        db.seed("generated_tasks", {
            "id": "task-1", "title": "Book bus", "assigned_to": "intern-1",
            "due_date": (NOW + timedelta(days=3)).isoformat(), "priority": "urgent",
        })
        saved = RemindersService(db).schedule_deadline_reminders("task-1", now=NOW)
        assert [r.id for r in saved] == ["deadline-reminder-task-1-1day"]
        assert saved[0].priority == "urgent"

    def test_deadline_week_priority_follows_task(self, db):
        db.seed("generated_tasks", {
            "id": "task-2", "title": "Order kits", "assigned_to": "intern-1",
            "due_date": (NOW + timedelta(days=10)).isoformat(), "priority": "urgent",
        })
        saved = RemindersService(db).schedule_deadline_reminders("task-2", now=NOW)
        week = next(r for r in saved if r.id.endswith("1week"))
        assert week.priority == "high"

    @pytest.mark.parametrize("task", [
        {"id": "task-3", "title": "No date", "assigned_to": "intern-1", "due_date": None},
        {"id": "task-3", "title": "Nobody", "assigned_to": None, "due_date": "2026-12-01T00:00:00Z"},
    ])
    def test_deadline_without_date_or_assignee(self, db, task):
        db.seed("generated_tasks", task)
        assert RemindersService(db).schedule_deadline_reminders("task-3", now=NOW) == []
        assert db.rows("scheduled_reminders") == []


class TestProcessing:

    def _reminder(self, reminder_id, scheduled_for, **extra):
        row = {
            "id": reminder_id, "title": "Reminder", "message": "Soon",
            "recipient_id": "member-a", "recipient_type": "volunteer",
            "reminder_type": "presentation", "scheduled_for": scheduled_for.isoformat(),
            "status": "scheduled", "priority": "high",
            "related_entity_id": "pres-1", "related_entity_type": "presentation",
        }
        row.update(extra)
        return row

    def test_sends_due_reminders_within_lookahead(self, db):
        db.seed(
            "scheduled_reminders",
            self._reminder("due", NOW - timedelta(minutes=10)),
            self._reminder("window", NOW + timedelta(minutes=settings.reminder_lookahead_minutes - 1)),
            self._reminder("later", NOW + timedelta(hours=2)),
            self._reminder("done", NOW - timedelta(hours=1), status="sent"),
        )
        sent = RemindersService(db).process_scheduled_reminders(now=NOW)
        assert sent == 2

        statuses = {row["id"]: row["status"] for row in db.rows("scheduled_reminders")}
        assert statuses == {"due": "sent", "window": "sent", "later": "scheduled", "done": "sent"}
        notifications = db.rows("notifications")
        assert len(notifications) == 2
        assert all(n["notification_type"] == "reminder" and n["user_id"] == "member-a" for n in notifications)

    def test_failed_notification_is_skipped_and_retried_later(self, db):
        db.seed("scheduled_reminders", self._reminder("due", NOW - timedelta(minutes=1)))
        db.fail_tables["notifications"] = "insert"
        assert RemindersService(db).process_scheduled_reminders(now=NOW) == 0
        assert db.rows("scheduled_reminders")[0]["status"] == "scheduled"

    def test_teacher_reminder_goes_to_matching_account(self, db):
        db.seed("users", {"id": "teacher-9", "email": "teacher@school.org", "role": "teacher"})
        db.seed(
            "scheduled_reminders",
            self._reminder("t", NOW, recipient_id="teacher@school.org", recipient_type="teacher"),
            self._reminder("u", NOW, recipient_id="nobody@school.org", recipient_type="teacher"),
        )
        assert RemindersService(db).process_scheduled_reminders(now=NOW) == 1
        assert db.rows("notifications")[0]["user_id"] == "teacher-9"
        statuses = {row["id"]: row["status"] for row in db.rows("scheduled_reminders")}
        assert statuses == {"t": "sent", "u": "cancelled"}

    def test_cancel_reminders(self, db, presentation):
        service = RemindersService(db)
        service.schedule_presentation_reminders(presentation)
        assert service.cancel_reminders("presentation", presentation) == 7
        assert {row["status"] for row in db.rows("scheduled_reminders")} == {"cancelled"}

    def test_scheduler_uses_service_client(self, db):
        db.seed("scheduled_reminders", self._reminder("due", datetime.now(timezone.utc) - timedelta(minutes=1)))
        with patch.object(scheduler, "get_service_supabase", return_value=db):
            sent = asyncio.run(scheduler.send_due_reminders())
        assert sent == 1


class TestReminderRoutes:

    def test_process_requires_founder_or_cron_secret(self, client, login):
        login(None)
        assert client.post("/api/v1/reminders/process").status_code == 403
        with patch.object(settings, "cron_secret", "s3cret"):
            response = client.post("/api/v1/reminders/process", headers={"X-Cron-Secret": "s3cret"})
            assert response.status_code == 200
            assert response.json() == {"ok": True, "sent": 0}
            wrong = client.post("/api/v1/reminders/process", headers={"X-Cron-Secret": "guess"})
            assert wrong.status_code == 403

    def test_founder_can_process(self, client, login):
        login(FOUNDER)
        assert client.post("/api/v1/reminders/process").status_code == 200

    def test_schedule_endpoint_is_staff_only(self, client, login, presentation):
        login(VOLUNTEER)
        assert client.post("/api/v1/reminders/presentations/pres-1").status_code == 403
        login(FOUNDER)
        response = client.post("/api/v1/reminders/presentations/pres-1")
        assert response.status_code == 200
        assert response.json()["scheduled"] == 7

    def test_list_own_reminders(self, client, login, db, presentation):
        login(FOUNDER)
        client.post("/api/v1/reminders/presentations/pres-1")
        login({**VOLUNTEER, "id": "member-a"})
        reminders = client.get("/api/v1/reminders").json()
        assert len(reminders) == 3
        assert {r["recipient_id"] for r in reminders} == {"member-a"}
