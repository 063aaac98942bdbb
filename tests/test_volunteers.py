"""
Tests for volunteer team applications and approval.
"""

import pytest

from gsv_backend.modules.volunteers.schemas import VolunteerApplication
from gsv_backend.modules.volunteers.service import validate_application
from tests.conftest import FOUNDER, INTERN, VOLUNTEER

MEMBERS = [
    {"name": "Ana Ruiz", "email": "ana@school.org", "phone": "408-555-0101", "highschool": "Lincoln High"},
    {"name": "Ben Cho", "email": "ben@school.org", "phone": "(408) 555-0102", "highschool": "Lincoln High"},
    {"name": "Cai Wen", "email": "cai@school.org", "phone": "+1 408 555 0103", "highschool": "Lincoln High"},
]


def _application(**overrides):
    data = {
        "team_name": "Eco Eagles",
        "email": "ana@school.org",
        "group_city": "San Jose",
        "group_size": 3,
        "group_members": MEMBERS,
        "primary_contact_phone": "408-555-0101",
        "why_volunteer": "We care about our local watershed.",
    }
    data.update(overrides)
    return data


def _messages(errors):
    return {error["field"]: error["message"] for error in errors}


class TestValidateApplication:

    def test_valid_application(self):
        assert validate_application(VolunteerApplication(**_application())) == []

    def test_required_fields(self):
        errors = _messages(validate_application(VolunteerApplication()))
        assert errors["email"] == "Email is required"
        assert errors["group_city"] == "City is required"
        assert errors["group_size"] == "Group size must be between 3 and 7 members"
        assert errors["group_members"] == "Please provide information for at least 3 group members"

    def test_invalid_email(self):
        errors = _messages(validate_application(VolunteerApplication(**_application(email="not-an-email"))))
        assert errors == {"email": "Please enter a valid email address"}

    def test_group_size_bounds(self):
        errors = _messages(validate_application(VolunteerApplication(**_application(group_size=8))))
        assert errors["group_size"] == "Group size must be between 3 and 7 members"

    def test_member_details_are_checked(self):
        members = [dict(member) for member in MEMBERS]
        members.append({"name": "Dee", "email": "dee@", "phone": "123", "highschool": "Lincoln High"})
        errors = _messages(validate_application(VolunteerApplication(**_application(group_size=4, group_members=members))))
        assert errors == {
            "member_3_email": "Member 4 email is invalid",
            "member_3_phone": "Member 4 phone is invalid",
        }

    def test_reason_length(self):
        errors = _messages(validate_application(VolunteerApplication(**_application(why_volunteer="trees"))))
        assert errors == {"why_volunteer": "Why volunteer must be at least 10 characters"}


@pytest.fixture
def pending_team(db):
    db.seed("volunteers", {
        "id": 5,
        "team_name": "Eco Eagles",
        "email": "ana@school.org",
        "group_city": "San Jose",
        "group_size": 3,
        "group_members": MEMBERS,
        "primary_contact_phone": "408-555-0101",
        "application_status": "pending",
        "status": "inactive",
    })
    return 5


class TestApplications:

    def test_submit_application(self, client, db):
        response = client.post("/api/v1/volunteers/applications", json=_application(email="ANA@School.org"))
        assert response.status_code == 201
        body = response.json()
        assert body["application_status"] == "pending"
        assert body["email"] == "ana@school.org"
        broadcast = db.rows("notifications")[0]
        assert broadcast["user_id"] is None
        assert broadcast["notification_type"] == "volunteer_application"

    def test_invalid_application_reports_every_error(self, client, db):
        response = client.post("/api/v1/volunteers/applications", json=_application(group_city="", group_size=2))
        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["errors"]}
        assert fields == {"group_city", "group_size"}
        assert db.rows("volunteers") == []


class TestApproval:

    def test_approve_links_and_creates_accounts(self, client, login, db, pending_team):
        db.seed("users", {"id": "user-ana", "email": "ana@school.org", "name": "Ana Ruiz", "role": "volunteer"})
        login(INTERN)
        response = client.post(f"/api/v1/volunteers/{pending_team}/approve")
        assert response.status_code == 200
        body = response.json()
        assert len(body["linked_users"]) == 3
        assert body["message"] == "Successfully approved team and linked 3 user account(s)"

        # only the two new members get auth accounts
        assert [created["email"] for created in db.auth.admin.created] == ["ben@school.org", "cai@school.org"]
        assert body["linked_users"][0]["temporary_password"] is None
        assert body["linked_users"][1]["temporary_password"]

        members = db.rows("team_members")
        assert len(members) == 3
        primary = [member["member_email"] for member in members if member["is_primary_contact"]]
        assert primary == ["ana@school.org"]

        team = db.rows("volunteers")[0]
        assert team["application_status"] == "approved"
        assert team["status"] == "active"
        assert len([n for n in db.rows("notifications") if n["notification_type"] == "volunteer_approved"]) == 3
        assert db.rows("system_logs")[0]["action_type"] == "volunteer_approved"

    def test_approve_twice(self, client, login, db, pending_team):
        login(FOUNDER)
        client.post(f"/api/v1/volunteers/{pending_team}/approve")
        response = client.post(f"/api/v1/volunteers/{pending_team}/approve")
        assert response.status_code == 400
        assert response.json()["error"] == "Volunteer team already approved"

    def test_approve_requires_staff(self, client, login, pending_team):
        login(VOLUNTEER)
        response = client.post(f"/api/v1/volunteers/{pending_team}/approve")
        assert response.status_code == 403

    def test_approve_unknown_team(self, client, login):
        login(FOUNDER)
        response = client.post("/api/v1/volunteers/404/approve")
        assert response.status_code == 404

    def test_reject_requires_reason(self, client, login, pending_team):
        login(FOUNDER)
        response = client.post(f"/api/v1/volunteers/{pending_team}/reject", json={"reason": "  "})
        assert response.status_code == 400
        assert response.json()["error"] == "Rejection reason is required"

    def test_reject_records_history(self, client, login, db, pending_team):
        login(FOUNDER)
        response = client.post(f"/api/v1/volunteers/{pending_team}/reject", json={"reason": "Incomplete roster"})
        assert response.status_code == 200
        assert response.json()["rejection_reason"] == "Incomplete roster"
        history = db.rows("application_status_history")[0]
        assert history["old_status"] == "pending"
        assert history["new_status"] == "rejected"


class TestStatusUpdates:

    def test_status_change_notifies_members(self, client, login, db, pending_team):
        db.seed("team_members", {"user_id": VOLUNTEER["id"], "volunteer_team_id": pending_team})
        login(INTERN)
        response = client.patch(f"/api/v1/volunteers/{pending_team}", json={
            "presentation_status": "needs_changes", "notes": "Add sources",
        })
        assert response.status_code == 200
        history = db.rows("volunteer_status_history")[0]
        assert history["new_status"] == "needs_changes"
        assert history["notes"] == "Add sources"
        notification = db.rows("notifications")[0]
        assert notification["user_id"] == VOLUNTEER["id"]
        assert notification["notification_type"] == "presentation_rejected"

    def test_members_can_view_their_team(self, client, login, db, pending_team):
        db.seed("team_members", {"user_id": VOLUNTEER["id"], "volunteer_team_id": pending_team})
        login(VOLUNTEER)
        assert client.get(f"/api/v1/volunteers/{pending_team}").status_code == 200

    def test_other_volunteers_cannot_view(self, client, login, pending_team):
        login(VOLUNTEER)
        assert client.get(f"/api/v1/volunteers/{pending_team}").status_code == 403
