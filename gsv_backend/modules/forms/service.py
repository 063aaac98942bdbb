from supabase import Client
from gsv_backend.modules.forms.schemas import (
    FormCreate, FormUpdate, FormField, FormResponse, SubmissionResponse, SubmissionPage
)
from gsv_backend.modules.forms.templates import template_columns
from gsv_backend.modules.forms.validator import assign_keys, validate_submission
from gsv_backend.core.dependencies import is_founder
from gsv_backend.core.validation import validation_failed
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

MAX_RESPONSE_PAGE = 1000


def column_to_field(row: Dict[str, Any]) -> FormField:
    formatting = row.get("formatting") or {}
    return FormField(
        key=row.get("field_key"),
        title=row["title"],
        field_type=row.get("field_type") or "text",
        required=bool(row.get("required")),
        options=formatting.get("options"),
        validation=row.get("validation_rules") or None,
        conditional_logic=row.get("conditional_logic") or None,
        column_index=row.get("column_index"),
    )


def field_to_column(form_id: str, field: FormField, index: int) -> Dict[str, Any]:
    return {
        "form_id": form_id,
        "field_key": field.key,
        "title": field.title,
        "field_type": field.field_type,
        "required": field.required,
        "column_index": index,
        "validation_rules": field.validation.model_dump(by_alias=True, exclude_none=True) if field.validation else {},
        "formatting": {"options": field.options} if field.options else {},
        "conditional_logic": field.conditional_logic.model_dump(by_alias=True) if field.conditional_logic else None,
    }


class FormService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _get_form_row(self, form_id: str) -> Dict[str, Any]:
        result = self.supabase.table("forms")\
            .select("*")\
            .eq("id", form_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Form not found")
        return result.data

    def _check_access(self, form: Dict[str, Any], user_data: dict) -> None:
        if form.get("created_by") != user_data["id"] and not is_founder(user_data):
            raise HTTPException(status_code=403, detail="Access denied")

    def get_fields(self, form_id: str) -> List[FormField]:
        result = self.supabase.table("form_columns")\
            .select("*")\
            .eq("form_id", form_id)\
            .order("column_index")\
            .execute()
        return [column_to_field(row) for row in (result.data or [])]

    def _response_count(self, form_id: str) -> int:
        result = self.supabase.table("form_responses")\
            .select("id", count="exact")\
            .eq("form_id", form_id)\
            .execute()
        if getattr(result, "count", None) is not None:
            return result.count
        return len(result.data or [])

    def _replace_fields(self, form_id: str, fields: List[FormField]) -> List[FormField]:
        keyed = assign_keys(fields)
        self.supabase.table("form_columns")\
            .delete()\
            .eq("form_id", form_id)\
            .execute()
        if keyed:
            self.supabase.table("form_columns")\
                .insert([field_to_column(form_id, field, index) for index, field in enumerate(keyed)])\
                .execute()
        return [field.model_copy(update={"column_index": index}) for index, field in enumerate(keyed)]

    def list_forms(self, user_data: dict, status: Optional[str] = None) -> List[FormResponse]:
        """Founders see every form; interns see the forms they created"""
        try:
            query = self.supabase.table("forms").select("*")
            if not is_founder(user_data):
                query = query.eq("created_by", user_data["id"])
            if status and status != "all":
                query = query.eq("status", status)
            result = query.order("updated_at", desc=True).execute()
            return [FormResponse(**row) for row in (result.data or [])]
        except Exception as e:
            logger.error(f"Forms fetch error: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch forms")

    def create_form(self, data: FormCreate, user_id: str) -> FormResponse:
        """Create a draft form seeded with the template's columns"""
        try:
            result = self.supabase.table("forms").insert({
                "title": data.title.strip(),
                "description": data.description or "",
                "status": "draft",
                "settings": {},
                "created_by": user_id,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create form")
            form = result.data[0]
            fields = self._replace_fields(form["id"], [FormField(**column) for column in template_columns(data.template)])
            logger.info("Form %s created by %s from template %s", form["id"], user_id, data.template)
            return FormResponse(**form, fields=fields)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Form creation error: {e}")
            raise HTTPException(status_code=500, detail="Failed to create form")

    def get_form(self, form_id: str, user_data: dict) -> FormResponse:
        try:
            form = self._get_form_row(form_id)
            self._check_access(form, user_data)
            return FormResponse(**form, fields=self.get_fields(form_id), response_count=self._response_count(form_id))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Form fetch error: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch form")

    def update_form(self, form_id: str, data: FormUpdate, user_data: dict) -> FormResponse:
        try:
            form = self._get_form_row(form_id)
            self._check_access(form, user_data)
            update_data = data.model_dump(exclude_none=True, exclude={"fields"})
            if "title" in update_data:
                update_data["title"] = update_data["title"].strip()
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("forms")\
                .update(update_data)\
                .eq("id", form_id)\
                .execute()
            updated = result.data[0] if result.data else {**form, **update_data}
            if data.fields is not None:
                fields = self._replace_fields(form_id, data.fields)
            else:
                fields = self.get_fields(form_id)
            return FormResponse(**updated, fields=fields)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Form update error: {e}")
            raise HTTPException(status_code=500, detail="Failed to update form")

    def delete_form(self, form_id: str) -> bool:
        try:
            self._get_form_row(form_id)
            self.supabase.table("form_responses").delete().eq("form_id", form_id).execute()
            self.supabase.table("form_columns").delete().eq("form_id", form_id).execute()
            self.supabase.table("forms").delete().eq("id", form_id).execute()
            logger.info("Form %s deleted", form_id)
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_responses(self, form_id: str, user_data: dict, limit: int = 100, offset: int = 0) -> SubmissionPage:
        limit = max(1, min(limit, MAX_RESPONSE_PAGE))
        offset = max(0, offset)
        try:
            form = self._get_form_row(form_id)
            self._check_access(form, user_data)
            result = self.supabase.table("form_responses")\
                .select("*")\
                .eq("form_id", form_id)\
                .order("submitted_at", desc=True)\
                .range(offset, offset + limit - 1)\
                .execute()
            return SubmissionPage(
                responses=[SubmissionResponse(**row) for row in (result.data or [])],
                total=self._response_count(form_id),
                offset=offset,
                limit=limit
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Form responses fetch error: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch responses")

    def submit_response(self, form_id: str, values: Dict[str, Any], submitted_by: Optional[str] = None) -> Dict[str, Any]:
        """Validate against the form's fields and store only visible values"""
        form = self._get_form_row(form_id)
        if form.get("status") != "published":
            raise HTTPException(status_code=400, detail="Form is not accepting responses")

        fields = self.get_fields(form_id)
        clean, errors = validate_submission(fields, values)
        if errors:
            raise HTTPException(status_code=400, detail=validation_failed(errors))

        try:
            result = self.supabase.table("form_responses").insert({
                "form_id": form_id,
                "responses": clean,
                "submitted_by": submitted_by,
                "submitted_at": datetime.now(timezone.utc).isoformat(),
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save response")
            logger.info("Response %s submitted to form %s", result.data[0]["id"], form_id)
            return result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Form submission error: {e}")
            raise HTTPException(status_code=500, detail=str(e))
