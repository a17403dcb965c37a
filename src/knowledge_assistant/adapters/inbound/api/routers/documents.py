"""Knowledge base management endpoints."""

import logging

from fastapi import APIRouter, Depends

from .....core.domain import DocumentUpload
from .....core.services import IngestionService
from ..deps import get_ingestion_service
from ..models import (
    BulkUploadRequest,
    BulkUploadResponse,
    DocumentInfo,
    DocumentListResponse,
    DocumentUploadRequest,
    DocumentUploadResponse,
    ErrorResponse,
    StatsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["documents"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid document"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
    503: {"model": ErrorResponse, "description": "Vector store unavailable"},
}


def _to_upload(request: DocumentUploadRequest) -> DocumentUpload:
    return DocumentUpload(
        title=request.title,
        content=request.content,
        category=request.category,
        tags=list(request.tags),
        author=request.author,
        source=request.source,
    )


@router.get("/documents", response_model=DocumentListResponse, responses=ERROR_RESPONSES)
async def list_documents(
    service: IngestionService = Depends(get_ingestion_service),
) -> DocumentListResponse:
    """List indexed documents."""
    summaries = await service.list_documents()
    return DocumentListResponse(
        documents=[
            DocumentInfo(
                id=s.doc_id,
                title=s.title,
                category=s.category,
                uploaded_at=s.uploaded_at,
                author=s.author,
            )
            for s in summaries
        ],
        total=len(summaries),
    )


@router.post("/documents", response_model=DocumentUploadResponse, responses=ERROR_RESPONSES)
async def upload_document(
    request: DocumentUploadRequest,
    service: IngestionService = Depends(get_ingestion_service),
) -> DocumentUploadResponse:
    """Add a document to the knowledge base."""
    doc_id = await service.index_document(_to_upload(request))
    return DocumentUploadResponse(
        success=True,
        message=f'Document "{request.title}" added to knowledge base with ID: {doc_id}',
        document_id=doc_id,
    )


@router.post("/documents/bulk", response_model=BulkUploadResponse, responses=ERROR_RESPONSES)
async def upload_documents(
    request: BulkUploadRequest,
    service: IngestionService = Depends(get_ingestion_service),
) -> BulkUploadResponse:
    """Add several documents; each one succeeds or fails on its own."""
    outcomes = await service.index_documents([_to_upload(doc) for doc in request.documents])
    results = [
        DocumentUploadResponse(
            success=o.success,
            message=(
                f'Document "{o.title}" added to knowledge base with ID: {o.doc_id}'
                if o.success
                else f"Failed to upload document: {o.error}"
            ),
            document_id=o.doc_id,
        )
        for o in outcomes
    ]
    uploaded = sum(1 for o in outcomes if o.success)
    return BulkUploadResponse(results=results, uploaded=uploaded, failed=len(outcomes) - uploaded)


@router.delete(
    "/documents/{doc_id}", response_model=DocumentUploadResponse, responses=ERROR_RESPONSES
)
async def delete_document(
    doc_id: str,
    service: IngestionService = Depends(get_ingestion_service),
) -> DocumentUploadResponse:
    """Delete a document and all of its chunks."""
    await service.delete_document(doc_id)
    return DocumentUploadResponse(
        success=True, message=f"Document with ID {doc_id} deleted.", document_id=doc_id
    )


@router.get("/stats", response_model=StatsResponse, responses=ERROR_RESPONSES)
async def get_stats(service: IngestionService = Depends(get_ingestion_service)) -> StatsResponse:
    """Knowledge base statistics."""
    return StatsResponse(**await service.stats())
