"""Health check endpoints."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..... import __version__
from .....composition import Container
from .....core.domain.exceptions import KnowledgeAssistantError
from ..deps import get_container
from ..models import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic liveness check; does not touch the backends."""
    return HealthResponse(status="healthy", version=__version__, vector_store="not_checked")


@router.get("/ready", response_model=HealthResponse, responses={503: {"model": HealthResponse}})
async def readiness_check(container: Container = Depends(get_container)):
    """Readiness probe: the knowledge base collection must be reachable."""
    collection = container.settings.qdrant_collection
    try:
        stats = await container.vector_store.get_collection_stats(collection)
    except KnowledgeAssistantError as e:
        logger.warning("Readiness check failed: %s", e.message)
        body = HealthResponse(
            status="unavailable", version=__version__, vector_store=f"error: {e.message}"
        )
        return JSONResponse(status_code=503, content=body.model_dump())

    return HealthResponse(
        status="ready",
        version=__version__,
        vector_store=f"connected ({stats.get('count', 0)} points in {collection})",
    )
