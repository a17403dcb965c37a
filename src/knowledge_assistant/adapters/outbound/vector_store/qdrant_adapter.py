"""Qdrant vector store backend.

Wraps ``AsyncQdrantClient`` behind ``VectorStorePort``. The client is created
lazily and shared by all concurrent requests; every call is bounded by the
request timeout.
"""

import asyncio
import logging
from collections.abc import Awaitable
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from qdrant_client import AsyncQdrantClient

from ....core.domain import PointId, ScoredPoint, StoredPoint, VectorPoint
from ....core.domain.exceptions import (
    CollectionNotFoundError,
    QdrantConnectionError,
    QdrantQueryError,
    VectorStoreTimeoutError,
)
from ....core.ports.vector_store_port import VectorStorePort

logger = logging.getLogger(__name__)

T = TypeVar("T")

UPSERT_BATCH_SIZE = 100


class QdrantAdapter(VectorStorePort):
    """Qdrant-backed knowledge base storage using cosine similarity."""

    def __init__(
        self,
        url: str,
        api_key: str | None = None,
        timeout_seconds: float = 30.0,
        client: "AsyncQdrantClient | None" = None,
    ) -> None:
        """Initialize the Qdrant vector store.

        Args:
            url: Qdrant server or cloud cluster URL.
            api_key: Qdrant API key (None for an unsecured local server).
            timeout_seconds: Per-call timeout.
            client: Optional preconfigured client.
        """
        self.url = url
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self._client = client

    def _get_client(self) -> "AsyncQdrantClient":
        """Get or create the Qdrant client connection."""
        if self._client is None:
            try:
                from qdrant_client import AsyncQdrantClient

                self._client = AsyncQdrantClient(url=self.url, api_key=self.api_key)
                logger.info("Connected to Qdrant at: %s", self.url)
            except Exception as e:
                raise QdrantConnectionError(
                    f"Failed to connect to Qdrant at {self.url}",
                    cause=e,
                    context={"url": self.url},
                ) from e
        return self._client

    async def _call(self, operation: str, collection_name: str, call: Awaitable[T]) -> T:
        """Await a client call, translating failures into store errors."""
        context = {"operation": operation, "collection": collection_name, "url": self.url}
        try:
            return await asyncio.wait_for(call, timeout=self.timeout_seconds)
        except TimeoutError as e:
            raise VectorStoreTimeoutError(
                f"Qdrant {operation} timed out after {self.timeout_seconds}s",
                cause=e,
                context=context,
            ) from e
        except Exception as e:
            from qdrant_client.http.exceptions import ResponseHandlingException

            if isinstance(e, ResponseHandlingException):
                raise QdrantConnectionError(
                    f"Failed to connect to Qdrant at {self.url}", cause=e, context=context
                ) from e
            if getattr(e, "status_code", None) == 404:
                raise CollectionNotFoundError(
                    f"Collection {collection_name} does not exist", cause=e, context=context
                ) from e
            raise QdrantQueryError(
                f"Qdrant {operation} failed", cause=e, context=context
            ) from e

    async def ensure_collection(self, collection_name: str, vector_size: int) -> None:
        from qdrant_client.models import Distance, PayloadSchemaType, VectorParams

        client = self._get_client()
        exists = await self._call(
            "collection_exists", collection_name, client.collection_exists(collection_name)
        )
        if exists:
            return

        logger.info("Creating collection %s (size=%d, cosine)", collection_name, vector_size)
        await self._call(
            "create_collection",
            collection_name,
            client.create_collection(
                collection_name=collection_name,
                vectors_config=VectorParams(size=vector_size, distance=Distance.COSINE),
            ),
        )
        # doc_id is used for document listing and deletion
        await self._call(
            "create_payload_index",
            collection_name,
            client.create_payload_index(
                collection_name=collection_name,
                field_name="doc_id",
                field_schema=PayloadSchemaType.KEYWORD,
            ),
        )

    async def search(
        self,
        collection_name: str,
        vector: list[float],
        top_k: int = 5,
        score_threshold: float | None = None,
    ) -> list[ScoredPoint]:
        client = self._get_client()
        response = await self._call(
            "search",
            collection_name,
            client.query_points(
                collection_name=collection_name,
                query=vector,
                limit=top_k,
                score_threshold=score_threshold,
                with_payload=True,
            ),
        )
        return [
            ScoredPoint(id=hit.id, score=hit.score, payload=dict(hit.payload or {}))
            for hit in response.points
        ]

    async def upsert(self, collection_name: str, points: list[VectorPoint]) -> int:
        if not points:
            return 0

        from qdrant_client.models import PointStruct

        client = self._get_client()
        structs = [PointStruct(id=p.id, vector=p.vector, payload=p.payload) for p in points]

        for i in range(0, len(structs), UPSERT_BATCH_SIZE):
            await self._call(
                "upsert",
                collection_name,
                client.upsert(
                    collection_name=collection_name,
                    points=structs[i : i + UPSERT_BATCH_SIZE],
                    wait=True,
                ),
            )

        logger.info("Upserted %d points to %s", len(structs), collection_name)
        return len(structs)

    async def delete(self, collection_name: str, filter_payload: dict[str, Any]) -> None:
        from qdrant_client.models import FieldCondition, Filter, FilterSelector, MatchValue

        client = self._get_client()
        selector = FilterSelector(
            filter=Filter(
                must=[
                    FieldCondition(key=key, match=MatchValue(value=value))
                    for key, value in filter_payload.items()
                ]
            )
        )
        await self._call(
            "delete",
            collection_name,
            client.delete(collection_name=collection_name, points_selector=selector, wait=True),
        )

    async def scroll(
        self,
        collection_name: str,
        limit: int = 100,
        offset: PointId | None = None,
    ) -> tuple[list[StoredPoint], PointId | None]:
        client = self._get_client()
        records, next_offset = await self._call(
            "scroll",
            collection_name,
            client.scroll(
                collection_name=collection_name,
                limit=limit,
                offset=offset,
                with_payload=True,
                with_vectors=False,
            ),
        )
        points = [StoredPoint(id=r.id, payload=dict(r.payload or {})) for r in records]
        return points, next_offset

    async def get_collection_stats(self, collection_name: str) -> dict[str, Any]:
        """Get statistics for a collection.

        A missing collection reports zero points rather than failing, so a
        fresh deployment can answer stats before the first upload.
        """
        client = self._get_client()
        exists = await self._call(
            "collection_exists", collection_name, client.collection_exists(collection_name)
        )
        if not exists:
            return {"count": 0, "status": "missing"}

        info = await self._call(
            "get_collection", collection_name, client.get_collection(collection_name)
        )
        status = getattr(info.status, "value", info.status)
        return {"count": info.points_count or 0, "status": str(status)}

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
