"""Vector Store Port Interface."""

from abc import ABC, abstractmethod
from typing import Any

from ..domain import PointId, ScoredPoint, StoredPoint, VectorPoint


class VectorStorePort(ABC):
    """Abstract interface for vector stores.

    All operations raise ``VectorStoreError`` (or a subclass) on failure.
    """

    @abstractmethod
    async def ensure_collection(self, collection_name: str, vector_size: int) -> None:
        """Create the collection if it does not exist."""
        ...

    @abstractmethod
    async def search(
        self,
        collection_name: str,
        vector: list[float],
        top_k: int = 5,
        score_threshold: float | None = None,
    ) -> list[ScoredPoint]:
        """Nearest-neighbour search, best match first."""
        ...

    @abstractmethod
    async def upsert(self, collection_name: str, points: list[VectorPoint]) -> int:
        """Insert or replace points, returning how many were written."""
        ...

    @abstractmethod
    async def delete(self, collection_name: str, filter_payload: dict[str, Any]) -> None:
        """Delete every point whose payload matches all key/value pairs."""
        ...

    @abstractmethod
    async def scroll(
        self,
        collection_name: str,
        limit: int = 100,
        offset: PointId | None = None,
    ) -> tuple[list[StoredPoint], PointId | None]:
        """Page through stored points, returning the next page offset."""
        ...

    @abstractmethod
    async def get_collection_stats(self, collection_name: str) -> dict[str, Any]:
        """Get statistics for a collection."""
        ...

    async def aclose(self) -> None:
        """Release network resources held by the store."""
