from pydantic import BaseModel
from typing import Optional, Literal
from datetime import datetime
from gsv_backend.core.types import RowId


class DocumentReview(BaseModel):
    status: Literal["approved", "rejected"]
    notes: Optional[str] = None
    rejection_reason: Optional[str] = None


class DocumentResponse(BaseModel):
    id: RowId
    volunteer_id: Optional[RowId] = None
    presentation_id: Optional[str] = None
    document_type: str
    file_name: Optional[str] = None
    file_url: Optional[str] = None
    file_size: Optional[int] = None
    file_type: Optional[str] = None
    status: str
    uploaded_by: Optional[str] = None
    uploaded_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    notes: Optional[str] = None
    signed_at: Optional[datetime] = None
    signed_document_url: Optional[str] = None

    class Config:
        from_attributes = True


class DocumentSignResponse(BaseModel):
    ok: bool = True
    document: DocumentResponse
    signed_url: str
