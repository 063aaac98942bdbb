"""
Tests for volunteer hours logging, approval and verification.
"""

import pytest

from gsv_backend.modules.hours.service import approval_message
from tests.conftest import FOUNDER, INTERN, TEACHER, VOLUNTEER


@pytest.fixture
def team(db):
    db.seed("volunteers", {"id": 7, "team_name": "Eco Eagles", "hours_total": 4})
    db.seed("team_members", {"user_id": VOLUNTEER["id"], "volunteer_team_id": 7})
    return 7


@pytest.fixture
def pending_hours(db, team):
    db.seed("volunteer_hours", {
        "id": "h1",
        "volunteer_id": team,
        "submitted_by": VOLUNTEER["id"],
        "presentation_id": "p1",
        "date": "2026-10-01",
        "hours_logged": 3,
        "activity": "Watershed presentation",
        "feedback": "Great class",
        "status": "pending",
    })
    db.seed("presentations", {"id": "p1", "school_name": "Lincoln", "volunteer_team_id": team})
    return "h1"


class TestApprovalMessage:

    def test_plain(self):
        assert approval_message(3, 3, False) == "Your 3 hours have been approved!"

    def test_singular(self):
        assert approval_message(1, 1.0, False) == "Your 1 hour has been approved!"

    def test_adjusted(self):
        assert approval_message(3, 2.5, True) == "Your 3 hours were approved and adjusted to 2.5 hours."


class TestLogHours:

    def test_volunteer_logs_hours(self, client, login, db, team):
        login(VOLUNTEER)
        response = client.post("/api/v1/hours", json={
            "date": "2026-10-01", "hours_logged": 2.5, "activity": "  Tabling at the farmers market ",
        })
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["activity"] == "Tabling at the farmers market"
        assert str(body["volunteer_id"]) == "7"

    def test_volunteer_without_team(self, client, login):
        login(VOLUNTEER)
        response = client.post("/api/v1/hours", json={"date": "2026-10-01", "hours_logged": 2, "activity": "Event"})
        assert response.status_code == 400
        assert response.json()["error"] == "You are not currently assigned to a volunteer team"

    def test_hours_must_be_positive(self, client, login, team):
        login(VOLUNTEER)
        response = client.post("/api/v1/hours", json={"date": "2026-10-01", "hours_logged": 0, "activity": "Event"})
        assert response.status_code == 400
        assert response.json()["error"].startswith("hours_logged:")

    def test_only_volunteers_log_hours(self, client, login):
        login(INTERN)
        response = client.post("/api/v1/hours", json={"date": "2026-10-01", "hours_logged": 2, "activity": "Event"})
        assert response.status_code == 403
        assert response.json()["error"] == "Only volunteers can log hours"

    def test_volunteers_see_only_their_hours(self, client, login, db, pending_hours):
        db.seed("volunteer_hours", {"id": "h2", "submitted_by": "someone-else", "hours_logged": 1, "status": "pending"})
        login(VOLUNTEER)
        assert [row["id"] for row in client.get("/api/v1/hours").json()] == ["h1"]
        login(INTERN)
        assert len(client.get("/api/v1/hours").json()) == 2


class TestApproveHours:

    def test_approve_credits_team_and_presentation(self, client, login, db, pending_hours):
        login(INTERN)
        response = client.post("/api/v1/hours/approve", json={"hours_id": pending_hours, "approved": True})
        assert response.status_code == 200
        assert response.json()["message"] == "Hours approved"

        row = db.rows("volunteer_hours")[0]
        assert row["status"] == "approved"
        assert row["approved_by"] == INTERN["id"]
        assert db.rows("volunteers")[0]["hours_total"] == 7
        assert db.rows("presentations")[0]["hours"] == 3
        notification = db.rows("notifications")[0]
        assert notification["user_id"] == VOLUNTEER["id"]
        assert notification["message"] == "Your 3 hours have been approved!"
        assert db.rows("system_logs")[0]["action_type"] == "hours_approved"

    def test_adjusted_hours(self, client, login, db, pending_hours):
        login(FOUNDER)
        client.post("/api/v1/hours/approve", json={"hours_id": pending_hours, "adjusted_hours": 2})
        assert db.rows("volunteers")[0]["hours_total"] == 6
        assert db.rows("notifications")[0]["message"] == "Your 3 hours were approved and adjusted to 2 hours."

    def test_reject_with_reason(self, client, login, db, pending_hours):
        login(FOUNDER)
        response = client.post("/api/v1/hours/approve", json={
            "hours_id": pending_hours, "approved": False, "rejection_reason": "Wrong date",
        })
        assert response.json()["message"] == "Hours rejected"
        assert db.rows("volunteer_hours")[0]["status"] == "rejected"
        assert db.rows("volunteers")[0]["hours_total"] == 4
        assert db.rows("notifications")[0]["message"] == "Your hours submission was rejected. Reason: Wrong date"

    def test_cannot_approve_twice(self, client, login, db, pending_hours):
        login(FOUNDER)
        client.post("/api/v1/hours/approve", json={"hours_id": pending_hours})
        response = client.post("/api/v1/hours/approve", json={"hours_id": pending_hours})
        assert response.status_code == 400
        assert response.json()["error"] == "Hours submission is already approved"
        assert db.rows("volunteers")[0]["hours_total"] == 7

    def test_missing_hours_id(self, client, login):
        login(FOUNDER)
        response = client.post("/api/v1/hours/approve", json={"approved": True})
        assert response.status_code == 400
        assert response.json()["error"] == "Missing hours_id"

    def test_unknown_submission(self, client, login):
        login(FOUNDER)
        response = client.post("/api/v1/hours/approve", json={"hours_id": "missing"})
        assert response.status_code == 404

    def test_volunteers_cannot_approve(self, client, login, pending_hours):
        login(VOLUNTEER)
        response = client.post("/api/v1/hours/approve", json={"hours_id": pending_hours})
        assert response.status_code == 403


class TestVerifyHours:

    def test_teacher_verifies_with_signature(self, client, login, db, pending_hours):
        login(TEACHER)
        response = client.post("/api/v1/hours/verify", json={
            "hours_id": pending_hours,
            "verification_method": "signature",
            "teacher_signature": "https://storage.test/signatures/h1.png",
            "teacher_name": "Ms. Park",
        })
        assert response.status_code == 200
        assert response.json()["hours"]["status"] == "verified"
        row = db.rows("volunteer_hours")[0]
        assert row["verified_by"] == TEACHER["id"]
        assert row["teacher_signature_url"] == "https://storage.test/signatures/h1.png"
        log = db.rows("hours_verification_log")[0]
        assert log["verification_data"]["teacher_name"] == "Ms. Park"

    def test_verified_hours_can_still_be_approved(self, client, login, db, pending_hours):
        login(TEACHER)
        client.post("/api/v1/hours/verify", json={"hours_id": pending_hours, "verification_method": "email"})
        login(FOUNDER)
        response = client.post("/api/v1/hours/approve", json={"hours_id": pending_hours})
        assert response.status_code == 200
        assert "teacher_signature_url" not in db.rows("volunteer_hours")[0]

    def test_missing_method(self, client, login, pending_hours):
        login(TEACHER)
        response = client.post("/api/v1/hours/verify", json={"hours_id": pending_hours})
        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields"

    def test_approved_hours_cannot_be_verified_or_recredited(self, client, login, db, pending_hours):
        login(FOUNDER)
        client.post("/api/v1/hours/approve", json={"hours_id": pending_hours})
        assert db.rows("volunteers")[0]["hours_total"] == 7

        login(VOLUNTEER)
        response = client.post("/api/v1/hours/verify", json={"hours_id": pending_hours, "verification_method": "email"})
        assert response.status_code == 400
        assert response.json()["error"] == "Hours submission is already approved"

        login(FOUNDER)
        response = client.post("/api/v1/hours/approve", json={"hours_id": pending_hours})
        assert response.status_code == 400
        assert db.rows("volunteers")[0]["hours_total"] == 7
        assert db.rows("volunteer_hours")[0]["status"] == "approved"
        assert db.rows("hours_verification_log") == []

    def test_rejected_hours_stay_rejected(self, client, login, db, pending_hours):
        login(FOUNDER)
        client.post("/api/v1/hours/approve", json={"hours_id": pending_hours, "approved": False})
        login(TEACHER)
        response = client.post("/api/v1/hours/verify", json={"hours_id": pending_hours, "verification_method": "in_person"})
        assert response.status_code == 400
        assert db.rows("volunteer_hours")[0]["status"] == "rejected"

    def test_verify_only_once(self, client, login, pending_hours):
        login(TEACHER)
        client.post("/api/v1/hours/verify", json={"hours_id": pending_hours, "verification_method": "email"})
        response = client.post("/api/v1/hours/verify", json={"hours_id": pending_hours, "verification_method": "email"})
        assert response.status_code == 400
        assert response.json()["error"] == "Hours submission is already verified"

    def test_verify_unknown_submission(self, client, login):
        login(TEACHER)
        response = client.post("/api/v1/hours/verify", json={"hours_id": "missing", "verification_method": "email"})
        assert response.status_code == 404


class TestListPaging:

    @pytest.mark.parametrize("params", [{"limit": 0}, {"limit": 5000}, {"offset": -1}])
    def test_out_of_range_paging(self, client, login, params):
        login(INTERN)
        response = client.get("/api/v1/hours", params=params)
        assert response.status_code == 400
        assert response.json()["error"].startswith("query.")

    def test_page(self, client, login, db, pending_hours):
        db.seed("volunteer_hours", {"id": "h2", "submitted_by": VOLUNTEER["id"], "hours_logged": 1, "status": "pending"})
        login(INTERN)
        assert len(client.get("/api/v1/hours", params={"limit": 1}).json()) == 1
