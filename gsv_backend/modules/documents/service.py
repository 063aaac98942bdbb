import os
import time
import logging
from supabase import Client
from gsv_backend.config import settings
from gsv_backend.core.storage import get_document_storage
from gsv_backend.core.dependencies import get_user_team_id, is_staff
from gsv_backend.modules.documents.schemas import DocumentReview, DocumentResponse
from gsv_backend.modules.notifications.service import NotificationService
from typing import Any, Dict, List, Optional
from fastapi import HTTPException, UploadFile
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


class DocumentService:
    def __init__(self, supabase: Client, storage=None):
        self.supabase = supabase
        self.storage = storage or get_document_storage(supabase)
        self.notifications = NotificationService(supabase)

    def _get_document(self, document_id: Any) -> Dict[str, Any]:
        result = self.supabase.table("volunteer_documents")\
            .select("*")\
            .eq("id", document_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Document not found")
        return result.data

    async def _read_upload(self, file: UploadFile) -> bytes:
        """Read an upload after checking content type and size"""
        if not file or not file.filename:
            raise HTTPException(status_code=400, detail="File is required")
        if file.content_type not in settings.get_allowed_upload_types():
            raise HTTPException(status_code=400, detail=f"File type {file.content_type} is not allowed")
        content = await file.read()
        if len(content) > settings.max_upload_size_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"File exceeds the maximum size of {settings.max_upload_size_mb} MB"
            )
        return content

    def _store(self, content: bytes, key: str, content_type: str) -> str:
        try:
            return self.storage.upload_file(content, key, content_type=content_type)
        except Exception as e:
            logger.error(f"Document upload failed ({key}): {e}")
            raise HTTPException(status_code=500, detail=f"Failed to upload to storage: {str(e)}")

    async def upload_document(
        self,
        user_data: dict,
        file: UploadFile,
        document_type: str,
        presentation_id: Optional[str] = None,
        volunteer_id: Optional[str] = None,
        notes: Optional[str] = None
    ) -> DocumentResponse:
        if is_staff(user_data):
            team_id = volunteer_id
        else:
            team_id = get_user_team_id(user_data["id"], self.supabase)
        if not team_id:
            raise HTTPException(status_code=400, detail="Not part of a team")

        content = await self._read_upload(file)
        extension = os.path.splitext(file.filename)[1]
        key = f"volunteer-documents/{team_id}_{presentation_id or 'general'}_{int(time.time() * 1000)}{extension}"
        file_url = self._store(content, key, file.content_type)

        try:
            result = self.supabase.table("volunteer_documents").insert({
                "volunteer_id": team_id,
                "presentation_id": presentation_id,
                "document_type": document_type,
                "file_url": file_url,
                "file_name": file.filename,
                "file_size": len(content),
                "file_type": file.content_type,
                "storage_key": key,
                "uploaded_by": user_data["id"],
                "notes": notes,
                "status": "pending",
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save document")
        except HTTPException:
            self.storage.delete_file(key)
            raise
        except Exception as e:
            self.storage.delete_file(key)
            raise HTTPException(status_code=500, detail=str(e))

        document = result.data[0]
        self.notifications.notify(
            None, "document_uploaded", "New Document Uploaded",
            f"A volunteer team uploaded a {document_type.replace('_', ' ')} for review",
            action_url="/dashboard/founder/documents",
            related_id=document.get("id"), related_type="volunteer_document",
        )
        logger.info("Document %s uploaded by %s", document.get("id"), user_data["id"])
        return DocumentResponse(**document)

    def list_documents(self, user_data: dict, status: Optional[str] = None) -> List[DocumentResponse]:
        try:
            query = self.supabase.table("volunteer_documents").select("*")
            if not is_staff(user_data):
                query = query.eq("uploaded_by", user_data["id"])
            if status:
                query = query.eq("status", status)
            result = query.order("uploaded_at", desc=True).execute()
            return [DocumentResponse(**row) for row in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def review_document(self, document_id: Any, review: DocumentReview, reviewer_id: str) -> DocumentResponse:
        try:
            document = self._get_document(document_id)
            update_data = {
                "status": review.status,
                "reviewed_by": reviewer_id,
                "reviewed_at": datetime.now(timezone.utc).isoformat(),
                "notes": review.notes,
            }
            if review.status == "rejected":
                update_data["rejection_reason"] = review.rejection_reason or review.notes
            result = self.supabase.table("volunteer_documents")\
                .update(update_data)\
                .eq("id", document_id)\
                .execute()
            updated = result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        if document.get("uploaded_by"):
            if review.status == "approved":
                message = "Your document has been approved."
            else:
                reason = update_data.get("rejection_reason")
                message = f"Your document was rejected. Reason: {reason}" if reason else "Your document was rejected."
            self.notifications.notify(
                document["uploaded_by"],
                f"document_{review.status}",
                "Document Approved" if review.status == "approved" else "Document Rejected",
                message,
                action_url="/dashboard/volunteer/documents",
                related_id=document_id, related_type="volunteer_document",
            )
        return DocumentResponse(**updated)

    async def sign_document(self, document_id: Any, file: UploadFile, signer_id: str) -> DocumentResponse:
        """Store the founder-signed copy and mark the document signed"""
        document = self._get_document(document_id)
        content = await self._read_upload(file)
        extension = os.path.splitext(file.filename)[1]
        key = f"signed-documents/signed_{document_id}_{int(time.time() * 1000)}{extension}"
        signed_url = self._store(content, key, file.content_type)

        now = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table("volunteer_documents").update({
                "status": "signed_by_founder",
                "signed_by": signer_id,
                "signed_at": now,
                "signed_document_url": signed_url,
                "reviewed_by": signer_id,
                "reviewed_at": now,
            }).eq("id", document_id).execute()
            updated = result.data[0]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        if document.get("uploaded_by"):
            self.notifications.notify(
                document["uploaded_by"], "document_signed", "Document Signed",
                "Your document has been signed and is ready for download.",
                action_url="/dashboard/volunteer/documents",
                related_id=document_id, related_type="volunteer_document",
            )
        logger.info("Document %s signed by %s", document_id, signer_id)
        return DocumentResponse(**updated)
