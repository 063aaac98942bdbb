from fastapi import APIRouter, Depends, UploadFile, File, Form
from gsv_backend.database.supabase_client import get_supabase
from gsv_backend.modules.documents.schemas import DocumentReview, DocumentResponse, DocumentSignResponse
from gsv_backend.modules.documents.service import DocumentService
from gsv_backend.core.dependencies import get_current_user, require_role
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/documents", tags=["documents"])


def get_document_service(supabase: Client = Depends(get_supabase)) -> DocumentService:
    return DocumentService(supabase)


@router.post("", response_model=DocumentResponse, status_code=201)
async def upload_document(
    file: UploadFile = File(...),
    document_type: str = Form(...),
    presentation_id: Optional[str] = Form(None),
    volunteer_id: Optional[str] = Form(None),
    notes: Optional[str] = Form(None),
    user_data: Dict = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service)
):
    """Upload a document for review. Volunteers upload for their own team; staff pass volunteer_id."""
    return await service.upload_document(user_data, file, document_type, presentation_id, volunteer_id, notes)


@router.get("", response_model=List[DocumentResponse])
async def list_documents(
    status: Optional[str] = None,
    user_data: Dict = Depends(get_current_user),
    service: DocumentService = Depends(get_document_service)
):
    return service.list_documents(user_data, status)


@router.post("/{document_id}/review", response_model=DocumentResponse)
async def review_document(
    document_id: str,
    body: DocumentReview,
    user_data: Dict = Depends(require_role("founder", "intern")),
    service: DocumentService = Depends(get_document_service)
):
    return service.review_document(document_id, body, user_data["id"])


@router.post("/{document_id}/sign", response_model=DocumentSignResponse)
async def sign_document(
    document_id: str,
    file: UploadFile = File(...),
    user_data: Dict = Depends(require_role("founder", "intern")),
    service: DocumentService = Depends(get_document_service)
):
    document = await service.sign_document(document_id, file, user_data["id"])
    return DocumentSignResponse(document=document, signed_url=document.signed_document_url)
