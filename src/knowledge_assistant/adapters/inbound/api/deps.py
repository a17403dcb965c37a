"""FastAPI dependencies resolving services from the application container."""

from fastapi import Depends, Request

from ....composition import Container
from ....core.services import IngestionService, QueryService


def get_container(request: Request) -> Container:
    """The container built for this application in its lifespan."""
    return request.app.state.container


def get_query_service(container: Container = Depends(get_container)) -> QueryService:
    return container.query_service


def get_ingestion_service(container: Container = Depends(get_container)) -> IngestionService:
    return container.ingestion_service


def enforce_rate_limit(request: Request, container: Container = Depends(get_container)) -> None:
    """Count the request against the caller's window.

    Raises:
        RateLimitExceededError: Mapped to 429 by the global exception handler.
    """
    caller = request.client.host if request.client else "anonymous"
    container.rate_limiter.acquire(caller)
