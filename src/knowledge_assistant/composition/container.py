"""Composition root wiring adapters to the core services."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..adapters.common.rate_limiter import RateLimiter
from ..adapters.outbound.embeddings import (
    GeminiEmbeddingProvider,
    OllamaEmbeddingProvider,
    ZeroEmbeddingProvider,
)
from ..adapters.outbound.llm import GeminiCompletionProvider, OllamaCompletionProvider
from ..adapters.outbound.vector_store import QdrantAdapter
from ..config import Settings
from ..core.domain.exceptions import InvalidConfigurationError
from ..core.ports import CompletionPort, EmbeddingPort, RetrievalPort, VectorStorePort
from ..core.services import (
    AnswerGenerator,
    ConfidenceEstimator,
    ContextAssembler,
    IngestionService,
    KeywordRetriever,
    QueryService,
    VectorRetriever,
)

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Everything a process needs to answer and index, built once at startup."""

    settings: Settings
    embeddings: EmbeddingPort
    vector_store: VectorStorePort
    completion: CompletionPort
    retriever: RetrievalPort
    query_service: QueryService
    ingestion_service: IngestionService
    rate_limiter: RateLimiter

    async def aclose(self) -> None:
        """Close the network clients held by the backends."""
        await self.embeddings.aclose()
        await self.completion.aclose()
        await self.vector_store.aclose()


def validate_settings(settings: Settings) -> None:
    """Reject backend combinations that cannot work.

    Raises:
        InvalidConfigurationError: On an unusable combination.
    """
    if settings.retrieval_strategy == "vector" and settings.embedding_backend == "none":
        raise InvalidConfigurationError(
            "Vector retrieval requires an embedding backend; "
            "set EMBEDDING_BACKEND or use RETRIEVAL_STRATEGY=keyword",
            context={"retrieval_strategy": "vector", "embedding_backend": "none"},
        )
    if settings.chunk_overlap >= settings.chunk_size:
        raise InvalidConfigurationError(
            "CHUNK_OVERLAP must be smaller than CHUNK_SIZE",
            context={"chunk_size": settings.chunk_size, "chunk_overlap": settings.chunk_overlap},
        )


def build_embeddings(settings: Settings) -> EmbeddingPort:
    if settings.embedding_backend == "gemini":
        return GeminiEmbeddingProvider(
            api_key=settings.google_api_key,
            model_name=settings.gemini_embedding_model,
            dimension=settings.embedding_dimension,
            timeout_seconds=settings.request_timeout_seconds,
        )
    if settings.embedding_backend == "ollama":
        return OllamaEmbeddingProvider(
            base_url=settings.ollama_base_url,
            model_name=settings.ollama_embedding_model,
            timeout_seconds=settings.request_timeout_seconds,
        )
    return ZeroEmbeddingProvider(dimension=settings.embedding_dimension)


def build_completion(settings: Settings) -> CompletionPort:
    if settings.completion_backend == "ollama":
        return OllamaCompletionProvider(
            base_url=settings.ollama_base_url,
            model=settings.ollama_model,
            timeout_seconds=settings.request_timeout_seconds,
        )
    return GeminiCompletionProvider(
        api_key=settings.google_api_key,
        model=settings.gemini_llm_model,
        timeout_seconds=settings.request_timeout_seconds,
    )


def build_retriever(
    settings: Settings, embeddings: EmbeddingPort, vector_store: VectorStorePort
) -> RetrievalPort:
    if settings.retrieval_strategy == "keyword":
        return KeywordRetriever(
            vector_store,
            settings.qdrant_collection,
            top_k=settings.keyword_top_k,
            min_score=settings.keyword_min_score,
            scan_limit=settings.keyword_scan_limit,
        )
    return VectorRetriever(
        embeddings,
        vector_store,
        settings.qdrant_collection,
        top_k=settings.rag_top_k,
        min_relevance_score=settings.rag_min_relevance_score,
    )


def build_container(settings: Settings) -> Container:
    """Build the container from settings.

    Raises:
        InvalidConfigurationError: If the backend combination is unusable.
        MissingAPIKeyError: If a Gemini backend is selected without an API key.
    """
    validate_settings(settings)
    logger.info(
        "Building container (embeddings=%s, completion=%s, retrieval=%s)",
        settings.embedding_backend,
        settings.completion_backend,
        settings.retrieval_strategy,
    )

    embeddings = build_embeddings(settings)
    completion = build_completion(settings)
    vector_store = QdrantAdapter(
        url=settings.qdrant_url,
        api_key=settings.qdrant_api_key or None,
        timeout_seconds=settings.request_timeout_seconds,
    )
    retriever = build_retriever(settings, embeddings, vector_store)

    query_service = QueryService(
        retriever=retriever,
        generator=AnswerGenerator(
            completion,
            max_tokens=settings.rag_max_tokens,
            temperature=settings.rag_temperature,
        ),
        assembler=ContextAssembler(),
        confidence=ConfidenceEstimator(cap=settings.confidence_cap),
    )
    ingestion_service = IngestionService(
        embeddings,
        vector_store,
        collection_name=settings.qdrant_collection,
        vector_size=settings.embedding_dimension,
        chunk_size=settings.chunk_size,
        chunk_overlap=settings.chunk_overlap,
        backends={
            "embeddings": settings.embedding_backend,
            "completion": settings.completion_backend,
            "retrieval": settings.retrieval_strategy,
        },
    )

    return Container(
        settings=settings,
        embeddings=embeddings,
        vector_store=vector_store,
        completion=completion,
        retriever=retriever,
        query_service=query_service,
        ingestion_service=ingestion_service,
        rate_limiter=RateLimiter(
            settings.rate_limit_max_requests,
            window_seconds=settings.rate_limit_window_seconds,
        ),
    )
