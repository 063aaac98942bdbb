"""
Tests for volunteer document upload, review and signing.
"""

import pytest

from tests.conftest import FOUNDER, INTERN, VOLUNTEER

PDF = ("consent.pdf", b"%PDF-1.4 test", "application/pdf")


@pytest.fixture
def team(db):
    db.seed("volunteers", {"id": 7, "team_name": "Eco Eagles"})
    db.seed("team_members", {"user_id": VOLUNTEER["id"], "volunteer_team_id": 7})
    return 7


@pytest.fixture
def uploaded(db, team):
    db.seed("volunteer_documents", {
        "id": "doc-1", "volunteer_id": team, "document_type": "consent_form",
        "file_name": "consent.pdf", "status": "pending", "uploaded_by": VOLUNTEER["id"],
    })
    return "doc-1"


class TestUpload:

    def test_volunteer_uploads_for_their_team(self, client, login, db, team):
        login(VOLUNTEER)
        response = client.post("/api/v1/documents", files={"file": PDF}, data={"document_type": "consent_form"})
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["file_size"] == len(PDF[1])
        assert body["file_url"].startswith("https://storage.test/documents/volunteer-documents/7_general_")

        [(bucket, key)] = list(db.storage.files)
        assert bucket == "documents"
        assert key.endswith(".pdf")
        assert db.rows("notifications")[0]["notification_type"] == "document_uploaded"

    def test_volunteer_without_team(self, client, login):
        login(VOLUNTEER)
        response = client.post("/api/v1/documents", files={"file": PDF}, data={"document_type": "consent_form"})
        assert response.status_code == 400
        assert response.json()["error"] == "Not part of a team"

    def test_staff_must_name_the_team(self, client, login, db, team):
        login(INTERN)
        response = client.post("/api/v1/documents", files={"file": PDF}, data={"document_type": "consent_form"})
        assert response.status_code == 400

        response = client.post("/api/v1/documents", files={"file": PDF},
                               data={"document_type": "consent_form", "volunteer_id": str(team)})
        assert response.status_code == 201

    def test_disallowed_type(self, client, login, db, team):
        login(VOLUNTEER)
        response = client.post("/api/v1/documents", files={"file": ("run.sh", b"echo", "text/x-shellscript")},
                               data={"document_type": "other"})
        assert response.status_code == 400
        assert response.json()["error"] == "File type text/x-shellscript is not allowed"
        assert db.storage.files == {}

    def test_failed_insert_removes_stored_file(self, client, login, db, team):
        db.fail_tables["volunteer_documents"] = "insert"
        login(VOLUNTEER)
        response = client.post("/api/v1/documents", files={"file": PDF}, data={"document_type": "consent_form"})
        assert response.status_code == 500
        assert db.storage.files == {}


class TestReview:

    def test_reject_notifies_uploader(self, client, login, db, uploaded):
        login(FOUNDER)
        response = client.post(f"/api/v1/documents/{uploaded}/review", json={
            "status": "rejected", "rejection_reason": "Missing signature",
        })
        assert response.status_code == 200
        assert response.json()["rejection_reason"] == "Missing signature"
        notification = db.rows("notifications")[0]
        assert notification["user_id"] == VOLUNTEER["id"]
        assert notification["notification_type"] == "document_rejected"
        assert notification["message"] == "Your document was rejected. Reason: Missing signature"

    def test_approve(self, client, login, db, uploaded):
        login(INTERN)
        response = client.post(f"/api/v1/documents/{uploaded}/review", json={"status": "approved"})
        assert response.json()["status"] == "approved"
        assert db.rows("notifications")[0]["message"] == "Your document has been approved."

    def test_volunteers_cannot_review(self, client, login, uploaded):
        login(VOLUNTEER)
        response = client.post(f"/api/v1/documents/{uploaded}/review", json={"status": "approved"})
        assert response.status_code == 403

    def test_unknown_document(self, client, login):
        login(FOUNDER)
        response = client.post("/api/v1/documents/missing/review", json={"status": "approved"})
        assert response.status_code == 404

    def test_sign(self, client, login, db, uploaded):
        login(FOUNDER)
        response = client.post(f"/api/v1/documents/{uploaded}/sign", files={"file": ("signed.pdf", b"%PDF", "application/pdf")})
        assert response.status_code == 200
        body = response.json()
        assert body["document"]["status"] == "signed_by_founder"
        assert "signed-documents/signed_doc-1_" in body["signed_url"]
        assert db.rows("notifications")[0]["notification_type"] == "document_signed"


class TestListDocuments:

    def test_volunteers_see_their_uploads(self, client, login, db, uploaded):
        db.seed("volunteer_documents", {"id": "doc-2", "document_type": "other", "status": "pending", "uploaded_by": "x"})
        login(VOLUNTEER)
        assert [doc["id"] for doc in client.get("/api/v1/documents").json()] == ["doc-1"]
        login(FOUNDER)
        assert len(client.get("/api/v1/documents").json()) == 2
