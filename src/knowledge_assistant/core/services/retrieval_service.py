"""Knowledge base retrieval strategies.

Both retrievers satisfy ``RetrievalPort``: ``VectorRetriever`` is the default,
``KeywordRetriever`` is the degraded mode for deployments that index
documents without a real embedding backend.
"""

import logging
import time
from typing import Any

from ..domain import Document, SearchResult
from ..domain.exceptions import RetrievalError
from ..ports.embedding_port import EmbeddingPort
from ..ports.vector_store_port import VectorStorePort

logger = logging.getLogger(__name__)


def payload_to_document(point_id: Any, payload: dict[str, Any] | None) -> Document:
    """Build a Document from a stored payload.

    Points written by the ingestion service carry ``doc_id``; foreign points
    fall back to the point id.
    """
    payload = dict(payload or {})
    metadata = payload.get("metadata")
    return Document(
        doc_id=str(payload.get("doc_id") or point_id),
        title=str(payload.get("title") or "Untitled"),
        content=str(payload.get("content") or ""),
        metadata=dict(metadata) if isinstance(metadata, dict) else {},
    )


class VectorRetriever:
    """Embeds the question and runs a thresholded nearest-neighbour search."""

    def __init__(
        self,
        embeddings: EmbeddingPort,
        vector_store: VectorStorePort,
        collection_name: str,
        top_k: int = 5,
        min_relevance_score: float = 0.7,
    ) -> None:
        """Initialize the retriever.

        Args:
            embeddings: Embedding backend used for the question.
            vector_store: Store holding the knowledge base collection.
            collection_name: Collection to search.
            top_k: Maximum number of results returned.
            min_relevance_score: Hits scoring below this are discarded.
        """
        self.embeddings = embeddings
        self.vector_store = vector_store
        self.collection_name = collection_name
        self.top_k = top_k
        self.min_relevance_score = min_relevance_score

    async def retrieve(self, question: str) -> list[SearchResult]:
        """Return up to ``top_k`` results scoring at least ``min_relevance_score``.

        Raises:
            RetrievalError: If the embedding backend or the vector store fails.
        """
        started = time.perf_counter()

        try:
            vector = await self.embeddings.embed(question)
            hits = await self.vector_store.search(
                self.collection_name,
                vector,
                top_k=self.top_k,
                score_threshold=self.min_relevance_score,
            )
        except Exception as e:
            duration_ms = (time.perf_counter() - started) * 1000
            logger.error(
                "Search failed after %.0fms: %s: %s", duration_ms, type(e).__name__, e
            )
            raise RetrievalError(
                "Failed to search knowledge base",
                cause=e,
                context={
                    "collection": self.collection_name,
                    "dependency": type(e).__name__,
                    "duration_ms": round(duration_ms, 1),
                },
            ) from e

        # The store may ignore score_threshold, so filter here as well
        results = [
            SearchResult(document=payload_to_document(hit.id, hit.payload), score=hit.score)
            for hit in hits
            if hit.score >= self.min_relevance_score
        ]
        # Stable sort: equal scores keep the store's order
        results.sort(key=lambda r: r.score, reverse=True)
        results = results[: self.top_k]

        logger.info(
            "Search completed: %d results in %.0fms for %r",
            len(results),
            (time.perf_counter() - started) * 1000,
            question[:100],
        )
        return results


class KeywordRetriever:
    """Scores stored documents by question-word overlap.

    Used when documents are indexed with placeholder vectors. The score of a
    document is the number of question words longer than three characters
    found in its content, divided by the total number of question words.
    """

    def __init__(
        self,
        vector_store: VectorStorePort,
        collection_name: str,
        top_k: int = 3,
        min_score: float = 0.1,
        scan_limit: int = 100,
    ) -> None:
        self.vector_store = vector_store
        self.collection_name = collection_name
        self.top_k = top_k
        self.min_score = min_score
        self.scan_limit = scan_limit

    @staticmethod
    def keyword_score(question: str, content: str) -> float:
        """Fraction of question words that appear in the content."""
        words = question.lower().split()
        if not words:
            return 0.0
        content_lower = content.lower()
        matches = sum(1 for word in words if len(word) > 3 and word in content_lower)
        return matches / len(words)

    async def retrieve(self, question: str) -> list[SearchResult]:
        """Return up to ``top_k`` documents scoring above ``min_score``.

        Raises:
            RetrievalError: If the vector store cannot be scrolled.
        """
        started = time.perf_counter()

        try:
            points, _ = await self.vector_store.scroll(
                self.collection_name, limit=self.scan_limit
            )
        except Exception as e:
            logger.error("Keyword scan failed: %s: %s", type(e).__name__, e)
            raise RetrievalError(
                "Failed to search knowledge base",
                cause=e,
                context={
                    "collection": self.collection_name,
                    "dependency": type(e).__name__,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 1),
                },
            ) from e

        results = []
        for point in points:
            document = payload_to_document(point.id, point.payload)
            score = self.keyword_score(question, document.content)
            if score > self.min_score:
                results.append(SearchResult(document=document, score=score))

        results.sort(key=lambda r: r.score, reverse=True)
        results = results[: self.top_k]

        logger.info(
            "Keyword search scanned %d documents, kept %d in %.0fms",
            len(points),
            len(results),
            (time.perf_counter() - started) * 1000,
        )
        return results
