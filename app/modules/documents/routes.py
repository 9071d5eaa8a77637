from fastapi import APIRouter, Depends, File, Query, UploadFile
from app.config import settings
from app.core.access_policy import CallerContext
from app.core.dependencies import get_caller_client, get_caller_context
from app.database.supabase_client import get_service_supabase
from app.modules.documents.schemas import DocumentResponse, DocumentUrlResponse
from app.modules.documents.service import DocumentService
from supabase import Client

router = APIRouter(prefix="/documents", tags=["documents"])


def get_document_service(supabase: Client = Depends(get_caller_client)) -> DocumentService:
    service_supabase = None
    if settings.admin_document_access and settings.supabase_service_role_key:
        service_supabase = get_service_supabase()
    return DocumentService(supabase, service_supabase)


@router.post("", response_model=DocumentResponse, status_code=201)
async def upload_document(
    file: UploadFile = File(...),
    ctx: CallerContext = Depends(get_caller_context),
    service: DocumentService = Depends(get_document_service)
):
    """
    Upload the caller's ID document (JPEG, PNG or PDF, at most 5 MiB).
    Stored under the caller's own prefix and linked to their profile.
    """
    # One byte past the limit is enough to know the file is too large
    content = await file.read(settings.document_max_bytes + 1)
    return service.upload(ctx, file.content_type, content)


@router.get("/url", response_model=DocumentUrlResponse)
async def get_document_url(
    path: str = Query(..., min_length=1),
    ctx: CallerContext = Depends(get_caller_context),
    service: DocumentService = Depends(get_document_service)
):
    """Signed download URL for a document the caller may read"""
    return service.get_download_url(ctx, path)
