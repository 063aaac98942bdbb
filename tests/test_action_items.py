"""
Tests for action items: role permissions, stats and bulk updates.
"""

from datetime import datetime, timedelta, timezone

import pytest

from gsv_backend.modules.action_items.permissions import get_action_item_permissions
from gsv_backend.modules.action_items.service import compute_stats
from tests.conftest import FOUNDER, INTERN, VOLUNTEER

URL = "/api/v1/action-items"


@pytest.fixture
def items(db):
    db.seed(
        "action_items",
        {"id": "i1", "title": "Review slides", "type": "review", "priority": "urgent", "status": "pending",
         "assigned_to": [INTERN["id"]], "assigned_by": FOUNDER["id"], "created_at": "2026-10-01T00:00:00Z"},
        {"id": "i2", "title": "Board prep", "type": "approval", "priority": "high", "status": "in_progress",
         "assigned_to": [FOUNDER["id"]], "assigned_by": FOUNDER["id"], "created_at": "2026-10-02T00:00:00Z"},
        {"id": "i3", "title": "Send photos", "type": "task", "priority": "low", "status": "completed",
         "assigned_to": [VOLUNTEER["id"]], "assigned_by": INTERN["id"], "created_at": "2026-10-03T00:00:00Z"},
    )


class TestPermissions:

    def test_founder_has_everything(self, db):
        permissions = get_action_item_permissions(FOUNDER, db)
        assert permissions.can_view_all and permissions.can_delete and permissions.can_assign
        assert permissions.allows_type("approval")

    def test_intern_defaults(self, db):
        permissions = get_action_item_permissions(INTERN, db)
        assert permissions.can_create and not permissions.can_assign
        assert permissions.viewable_types == ["task", "review", "followup", "reminder"]

    def test_department_director_can_assign_interns(self, db):
        db.seed("users", {"id": INTERN["id"], "department": "operations", "subrole": "department_director"})
        permissions = get_action_item_permissions(INTERN, db)
        assert permissions.can_assign
        assert permissions.assignable_roles == ["intern"]
        assert "deadline" in permissions.viewable_types

    def test_volunteer_cannot_create(self, db):
        permissions = get_action_item_permissions(VOLUNTEER, db)
        assert permissions.can_view and permissions.can_edit and not permissions.can_create
        assert permissions.viewable_types == ["task", "reminder"]


class TestStats:

    def test_counts(self):
        now = datetime(2026, 10, 10, tzinfo=timezone.utc)
        rows = [
            {"status": "pending", "priority": "urgent", "due_date": (now - timedelta(days=1)).isoformat()},
            {"status": "completed", "priority": "urgent", "due_date": (now - timedelta(days=1)).isoformat()},
            {"status": "in_progress", "priority": "low", "due_date": None},
        ]
        stats = compute_stats(rows, now)
        assert stats.total == 3
        assert stats.pending == 1
        assert stats.in_progress == 1
        assert stats.completed == 1
        assert stats.overdue == 1
        assert stats.urgent == 2


class TestListAndCreate:

    def test_founder_sees_all(self, client, login, items):
        login(FOUNDER)
        body = client.get(URL).json()
        assert [item["id"] for item in body["items"]] == ["i3", "i2", "i1"]
        assert body["stats"]["total"] == 3

    def test_intern_sees_own_items_of_allowed_types(self, client, login, items):
        login(INTERN)
        body = client.get(URL).json()
        assert {item["id"] for item in body["items"]} == {"i1", "i3"}

    def test_assigned_to_me_filter(self, client, login, items):
        login(FOUNDER)
        body = client.get(URL, params={"assigned_to": "me"}).json()
        assert [item["id"] for item in body["items"]] == ["i2"]

    def test_title_and_type_required(self, client, login):
        login(FOUNDER)
        response = client.post(URL, json={"title": "Only a title"})
        assert response.status_code == 400
        assert response.json()["error"] == "Title and type are required"

    def test_intern_creates_for_self(self, client, login, db):
        login(INTERN)
        response = client.post(URL, json={"title": "Follow up with school", "type": "followup"})
        assert response.status_code == 201
        item = response.json()["item"]
        assert item["assigned_to"] == [INTERN["id"]]
        assert item["assigned_by"] == INTERN["id"]
        assert db.rows("action_item_history")[0]["action"] == "created"

    def test_intern_cannot_assign_others(self, client, login):
        login(INTERN)
        response = client.post(URL, json={"title": "X", "type": "task", "assigned_to": [VOLUNTEER["id"]]})
        assert response.status_code == 403
        assert response.json()["error"] == "You can only assign items to yourself"

    def test_volunteer_cannot_create(self, client, login):
        login(VOLUNTEER)
        assert client.post(URL, json={"title": "X", "type": "task"}).status_code == 403

    def test_founder_assignment_notifies_assignee(self, client, login, db):
        db.seed("users", {"id": VOLUNTEER["id"], "role": "volunteer"})
        login(FOUNDER)
        response = client.post(URL, json={"title": "Upload forms", "type": "task", "assigned_to": [VOLUNTEER["id"]]})
        assert response.status_code == 201
        assert db.rows("notifications")[0]["user_id"] == VOLUNTEER["id"]


class TestUpdateDeleteComments:

    def test_complete_records_who(self, client, login, db, items):
        login(INTERN)
        response = client.patch(f"{URL}/i1", json={"status": "completed"})
        assert response.status_code == 200
        item = response.json()["item"]
        assert item["status"] == "completed"
        assert item["completed_by"] == INTERN["id"]

    def test_cannot_update_unrelated_item(self, client, login, items):
        login(VOLUNTEER)
        assert client.patch(f"{URL}/i1", json={"status": "completed"}).status_code == 403

    def test_delete_is_founder_only(self, client, login, db, items):
        login(INTERN)
        assert client.delete(f"{URL}/i1").status_code == 403
        login(FOUNDER)
        assert client.delete(f"{URL}/i1").status_code == 200
        assert {row["id"] for row in db.rows("action_items")} == {"i2", "i3"}

    def test_comment(self, client, login, db, items):
        login(VOLUNTEER)
        assert client.post(f"{URL}/i3/comments", json={"comment": "  "}).status_code == 400
        response = client.post(f"{URL}/i3/comments", json={"comment": "Uploaded!"})
        assert response.status_code == 201
        assert client.get(f"{URL}/i3/comments").json()[0]["comment"] == "Uploaded!"
        assert client.post(f"{URL}/i2/comments", json={"comment": "hi"}).status_code == 403


class TestBulk:

    def test_bulk_status_update(self, client, login, db, items):
        login(FOUNDER)
        response = client.post(f"{URL}/bulk", json={
            "action": "status_update", "itemIds": ["i1", "i2"], "data": {"status": "completed"},
        })
        assert response.status_code == 200
        assert response.json()["message"] == "Updated 2 items to completed"
        statuses = {row["id"]: row["status"] for row in db.rows("action_items")}
        assert statuses == {"i1": "completed", "i2": "completed", "i3": "completed"}
        assert len(db.rows("action_item_history")) == 2

    def test_bulk_requires_access_to_every_item(self, client, login, items):
        login(INTERN)
        response = client.post(f"{URL}/bulk", json={
            "action": "status_update", "itemIds": ["i1", "i2"], "data": {"status": "completed"},
        })
        assert response.status_code == 403

    def test_bulk_missing_items(self, client, login, items):
        login(FOUNDER)
        response = client.post(f"{URL}/bulk", json={
            "action": "status_update", "itemIds": ["i1", "zzz"], "data": {"status": "completed"},
        })
        assert response.status_code == 404

    def test_bulk_repeated_ids(self, client, login, db, items):
        login(FOUNDER)
        response = client.post(f"{URL}/bulk", json={
            "action": "status_update", "itemIds": ["i1", "i1", "i2"], "data": {"status": "completed"},
        })
        assert response.status_code == 200
        assert response.json()["message"] == "Updated 2 items to completed"
        assert len(db.rows("action_item_history")) == 2

    def test_bulk_requires_action(self, client, login):
        login(FOUNDER)
        response = client.post(f"{URL}/bulk", json={"itemIds": ["i1"]})
        assert response.status_code == 400
        assert response.json()["error"] == "Action and itemIds are required"
