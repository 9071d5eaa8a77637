import uuid
import logging
from supabase import Client
from app.config import settings
from app.core.access_policy import CallerContext, Operation, DOCUMENTS, is_allowed, document_owner
from app.modules.documents.schemas import DocumentResponse, DocumentUrlResponse
from app.modules.profiles.service import ProfileService
from typing import Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "application/pdf": "pdf",
}


class DocumentService:
    def __init__(self, supabase: Client, service_supabase: Optional[Client] = None):
        self.supabase = supabase
        self.service_supabase = service_supabase
        self.bucket = settings.document_bucket

    def validate(self, content_type: Optional[str], size: int) -> None:
        """Reject disallowed types and oversized files before anything reaches storage"""
        if content_type not in settings.get_document_allowed_types():
            raise HTTPException(
                status_code=415,
                detail="Only JPEG, PNG and PDF documents are accepted"
            )
        if size > settings.document_max_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"Document exceeds the {settings.document_max_bytes // (1024 * 1024)} MiB limit"
            )
        if size == 0:
            raise HTTPException(status_code=400, detail="Document is empty")

    def upload(self, ctx: CallerContext, content_type: Optional[str], content: bytes) -> DocumentResponse:
        """Store an ID document under the caller's own prefix and link it to their profile"""
        self.validate(content_type, len(content))
        path = f"{ctx.user_id}/{uuid.uuid4()}.{EXTENSIONS.get(content_type, 'bin')}"

        if not is_allowed(ctx, DOCUMENTS, Operation.INSERT, document_owner(path)):
            raise HTTPException(status_code=403, detail="Access denied")

        try:
            self.supabase.storage.from_(self.bucket).upload(
                path,
                content,
                {"content-type": content_type, "upsert": "true"}
            )
            logger.info(f"Uploaded document {path} ({len(content)} bytes)")
        except Exception as e:
            logger.error(f"Document upload failed for {ctx.user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to upload document")

        linked = ProfileService(self.supabase).set_document_path(ctx, path)
        if not linked:
            logger.info(f"No profile yet for {ctx.user_id}; document {path} not linked")

        return DocumentResponse(
            path=path,
            content_type=content_type,
            size=len(content),
            linked_to_profile=linked
        )

    def get_download_url(self, ctx: CallerContext, path: str) -> DocumentUrlResponse:
        """Signed URL for a document the caller may read"""
        owner = document_owner(path)
        if owner is None:
            raise HTTPException(status_code=404, detail="Document not found")
        if not is_allowed(ctx, DOCUMENTS, Operation.SELECT, owner):
            raise HTTPException(status_code=403, detail="Access denied")

        client = self.supabase
        if owner != ctx.user_id:
            # Admin override: the only read that runs with the service role
            if self.service_supabase is None:
                raise HTTPException(status_code=403, detail="Access denied")
            logger.info(f"Admin {ctx.user_id} reading document {path}")
            client = self.service_supabase

        try:
            result = client.storage.from_(self.bucket).create_signed_url(
                path, settings.document_url_ttl_seconds
            )
        except Exception as e:
            error_message = str(e)
            if "not found" in error_message.lower():
                raise HTTPException(status_code=404, detail="Document not found")
            logger.error(f"Failed to sign document URL for {path}: {error_message}")
            raise HTTPException(status_code=500, detail="Failed to load document")

        url = result.get("signedURL") or result.get("signedUrl")
        if not url:
            raise HTTPException(status_code=404, detail="Document not found")
        return DocumentUrlResponse(path=path, url=url, expires_in=settings.document_url_ttl_seconds)
