"""
Tests for dynamic forms: response validation and the form routes.
"""

import pytest

from gsv_backend.modules.forms.schemas import FormField
from gsv_backend.modules.forms.validator import assign_keys, validate_submission
from tests.conftest import FOUNDER, INTERN, VOLUNTEER


def _fields(*definitions):
    return assign_keys([FormField(**definition) for definition in definitions])


class TestAssignKeys:

    def test_keys_derive_from_titles(self):
        fields = _fields({"title": "Full Name"}, {"title": "How did you hear about us?"})
        assert [field.key for field in fields] == ["full_name", "how_did_you_hear_about_us"]

    def test_duplicate_titles_get_suffixes(self):
        fields = _fields({"title": "Email"}, {"title": "Email"}, {"title": "Email"})
        assert [field.key for field in fields] == ["email", "email_2", "email_3"]


class TestValidateSubmission:

    def test_missing_required_field(self):
        fields = _fields({"title": "Full Name", "required": True}, {"title": "Message"})
        clean, errors = validate_submission(fields, {"message": "hi"})
        assert clean == {}
        assert errors == [{"field": "full_name", "message": "Full Name is required"}]

    def test_blank_required_text_is_missing(self):
        fields = _fields({"title": "Full Name", "required": True})
        _, errors = validate_submission(fields, {"full_name": "   "})
        assert errors[0]["message"] == "Full Name is required"

    def test_select_must_use_an_option(self):
        fields = _fields({"title": "Grade", "field_type": "select", "options": ["9th", "10th"]})
        _, errors = validate_submission(fields, {"grade": "5th"})
        assert errors == [{"field": "grade", "message": "Grade must be one of: 9th, 10th"}]

    def test_rating_range(self):
        fields = _fields({"title": "Overall Rating", "field_type": "rating", "required": True})
        _, errors = validate_submission(fields, {"overall_rating": 6})
        assert errors[0]["field"] == "overall_rating"

        clean, errors = validate_submission(fields, {"overall_rating": 4})
        assert errors == []
        assert clean == {"overall_rating": 4}

    def test_invalid_email(self):
        fields = _fields({"title": "Email", "field_type": "email", "required": True})
        _, errors = validate_submission(fields, {"email": "not-an-email"})
        assert errors[0]["field"] == "email"

    def test_pattern_uses_custom_message(self):
        fields = _fields({
            "title": "Zip",
            "validation": {"pattern": r"^\d{5}$", "customMessage": "Zip must be 5 digits"},
        })
        _, errors = validate_submission(fields, {"zip": "abc"})
        assert errors == [{"field": "zip", "message": "Zip must be 5 digits"}]

    def test_hidden_conditional_field_is_dropped(self):
        fields = _fields(
            {"title": "Attending", "field_type": "radio", "required": True, "options": ["yes", "no"]},
            {
                "title": "Dietary Needs",
                "required": True,
                "conditional_logic": {"dependsOn": "attending", "condition": "equals", "value": "yes"},
            },
        )
        clean, errors = validate_submission(fields, {"attending": "no", "dietary_needs": "none"})
        assert errors == []
        assert clean == {"attending": "no"}

    def test_visible_conditional_field_is_required(self):
        fields = _fields(
            {"title": "Attending", "field_type": "radio", "options": ["yes", "no"]},
            {
                "title": "Dietary Needs",
                "required": True,
                "conditional_logic": {"dependsOn": "attending", "condition": "equals", "value": "yes"},
            },
        )
        _, errors = validate_submission(fields, {"attending": "yes"})
        assert errors == [{"field": "dietary_needs", "message": "Dietary Needs is required"}]

    def test_keys_named_like_model_members(self):
        fields = _fields(
            {"title": "Model Config", "required": True},
            {"title": "Schema"},
            {"title": "Copy"},
        )
        clean, errors = validate_submission(fields, {"model_config": "x", "schema": "y"})
        assert errors == []
        assert clean == {"model_config": "x", "schema": "y"}

    def test_missing_member_named_key_is_reported(self):
        fields = _fields({"title": "Model Config", "required": True})
        clean, errors = validate_submission(fields, {})
        assert clean == {}
        assert errors == [{"field": "model_config", "message": "Model Config is required"}]

    def test_keys_that_are_not_identifiers(self):
        fields = _fields({"title": "First name", "key": "first-name", "required": True}, {"title": "2nd choice"})
        assert fields[1].key == "2nd_choice"
        clean, errors = validate_submission(fields, {"first-name": "Ana", "2nd_choice": "Robotics"})
        assert errors == []
        assert clean == {"first-name": "Ana", "2nd_choice": "Robotics"}


@pytest.fixture
def published_form(client, login):
    login(INTERN)
    created = client.post("/api/v1/forms", json={"title": "Contact", "template": "basic"}).json()
    client.put(f"/api/v1/forms/{created['id']}", json={"status": "published"})
    return created["id"]


class TestFormRoutes:

    def test_create_from_template(self, client, login, db):
        login(INTERN)
        response = client.post("/api/v1/forms", json={"title": "Feedback", "template": "event_feedback"})
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "draft"
        assert len(body["fields"]) == 8
        assert len(db.rows("form_columns")) == 8

    def test_volunteers_cannot_create_forms(self, client, login):
        login(VOLUNTEER)
        response = client.post("/api/v1/forms", json={"title": "Feedback"})
        assert response.status_code == 403

    def test_draft_form_rejects_responses(self, client, login):
        login(FOUNDER)
        form_id = client.post("/api/v1/forms", json={"title": "Contact"}).json()["id"]
        login(None)
        response = client.post(f"/api/v1/forms/{form_id}/responses", json={"responses": {}})
        assert response.status_code == 400
        assert response.json()["error"] == "Form is not accepting responses"

    def test_invalid_response_lists_errors(self, client, login, published_form):
        login(None)
        response = client.post(f"/api/v1/forms/{published_form}/responses", json={"responses": {"message": "hello"}})
        assert response.status_code == 400
        body = response.json()
        assert body["ok"] is False
        assert body["error"] == "Validation failed"
        assert {"field": "full_name", "message": "Full Name is required"} in body["errors"]

    def test_valid_response_is_stored(self, client, login, db, published_form):
        login(None)
        response = client.post(f"/api/v1/forms/{published_form}/responses", json={
            "responses": {"full_name": "Ana Ruiz", "email": "ana@school.org", "unknown": "dropped"},
        })
        assert response.status_code == 201
        stored = db.rows("form_responses")
        assert len(stored) == 1
        assert stored[0]["responses"] == {"full_name": "Ana Ruiz", "email": "ana@school.org"}
        assert stored[0]["submitted_by"] is None

    def test_other_interns_cannot_read_responses(self, client, login, published_form):
        login({**INTERN, "id": "intern-2"})
        response = client.get(f"/api/v1/forms/{published_form}/responses")
        assert response.status_code == 403

    def test_only_founders_delete(self, client, login, db, published_form):
        response = client.delete(f"/api/v1/forms/{published_form}")
        assert response.status_code == 403
        login(FOUNDER)
        response = client.delete(f"/api/v1/forms/{published_form}")
        assert response.status_code == 204
        assert db.rows("forms") == []
