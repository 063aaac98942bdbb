from fastapi import APIRouter, Depends
from gsv_backend.database.supabase_client import get_supabase
from gsv_backend.modules.forms.schemas import (
    FormCreate, FormUpdate, FormResponse, SubmissionCreate, SubmissionPage, SubmissionResult
)
from gsv_backend.modules.forms.service import FormService
from gsv_backend.core.dependencies import require_role, get_optional_user
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/forms", tags=["forms"])

staff_only = require_role("founder", "intern")


def get_form_service(supabase: Client = Depends(get_supabase)) -> FormService:
    return FormService(supabase)


@router.get("", response_model=List[FormResponse])
async def list_forms(
    status: Optional[str] = None,
    user_data: Dict = Depends(staff_only),
    service: FormService = Depends(get_form_service)
):
    return service.list_forms(user_data, status)


@router.post("", response_model=FormResponse, status_code=201)
async def create_form(
    body: FormCreate,
    user_data: Dict = Depends(staff_only),
    service: FormService = Depends(get_form_service)
):
    """Create a draft form from a template (basic, volunteer_registration, event_feedback)"""
    return service.create_form(body, user_data["id"])


@router.get("/{form_id}", response_model=FormResponse)
async def get_form(
    form_id: str,
    user_data: Dict = Depends(staff_only),
    service: FormService = Depends(get_form_service)
):
    return service.get_form(form_id, user_data)


@router.put("/{form_id}", response_model=FormResponse)
async def update_form(
    form_id: str,
    body: FormUpdate,
    user_data: Dict = Depends(staff_only),
    service: FormService = Depends(get_form_service)
):
    return service.update_form(form_id, body, user_data)


@router.delete("/{form_id}", status_code=204)
async def delete_form(
    form_id: str,
    user_data: Dict = Depends(require_role("founder", detail="Only founders can delete forms")),
    service: FormService = Depends(get_form_service)
):
    service.delete_form(form_id)
    return None


@router.get("/{form_id}/responses", response_model=SubmissionPage)
async def list_form_responses(
    form_id: str,
    limit: int = 100,
    offset: int = 0,
    user_data: Dict = Depends(staff_only),
    service: FormService = Depends(get_form_service)
):
    return service.list_responses(form_id, user_data, limit, offset)


@router.post("/{form_id}/responses", response_model=SubmissionResult, status_code=201)
async def submit_form_response(
    form_id: str,
    body: SubmissionCreate,
    user_data: Optional[Dict] = Depends(get_optional_user),
    service: FormService = Depends(get_form_service)
):
    """Public submission to a published form"""
    record = service.submit_response(form_id, body.responses, user_data["id"] if user_data else None)
    return SubmissionResult(message="Response submitted successfully", response_id=record["id"])
