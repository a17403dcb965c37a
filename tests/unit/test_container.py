"""Unit tests for settings and the composition root."""

import pytest

from knowledge_assistant.adapters.outbound.embeddings import (
    GeminiEmbeddingProvider,
    OllamaEmbeddingProvider,
    ZeroEmbeddingProvider,
)
from knowledge_assistant.adapters.outbound.llm import (
    GeminiCompletionProvider,
    OllamaCompletionProvider,
)
from knowledge_assistant.adapters.outbound.vector_store import QdrantAdapter
from knowledge_assistant.composition import build_container
from knowledge_assistant.config import Settings
from knowledge_assistant.core.domain.exceptions import (
    InvalidConfigurationError,
    MissingAPIKeyError,
)
from knowledge_assistant.core.services import KeywordRetriever, VectorRetriever

pytestmark = pytest.mark.unit


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.rag_top_k == 5
        assert settings.rag_min_relevance_score == 0.7
        assert settings.rag_max_tokens == 1500
        assert settings.rag_temperature == 0.3
        assert settings.confidence_cap == 95.0
        assert settings.rate_limit_max_requests == 100

    def test_secrets_are_sanitized(self):
        settings = Settings(_env_file=None, google_api_key="\ufeffsecret-key \n")
        assert settings.google_api_key == "secret-key"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("RAG_TOP_K", "3")
        monkeypatch.setenv("RETRIEVAL_STRATEGY", "keyword")

        settings = Settings(_env_file=None)

        assert settings.rag_top_k == 3
        assert settings.retrieval_strategy == "keyword"

    @pytest.mark.parametrize("raw", ["", "none", "NULL"])
    def test_confidence_cap_can_be_disabled_from_environment(self, monkeypatch, raw):
        monkeypatch.setenv("CONFIDENCE_CAP", raw)

        settings = Settings(_env_file=None)

        assert settings.confidence_cap is None

    def test_confidence_cap_reads_number_from_environment(self, monkeypatch):
        monkeypatch.setenv("CONFIDENCE_CAP", "80")

        assert Settings(_env_file=None).confidence_cap == 80.0


class TestBuildContainer:
    def test_default_gemini_vector_stack(self, settings):
        container = build_container(settings)

        assert isinstance(container.embeddings, GeminiEmbeddingProvider)
        assert isinstance(container.completion, GeminiCompletionProvider)
        assert isinstance(container.vector_store, QdrantAdapter)
        assert isinstance(container.retriever, VectorRetriever)
        assert container.retriever.top_k == 5
        assert container.query_service.retriever is container.retriever
        assert container.ingestion_service.collection_name == "test_kb"

    def test_local_ollama_stack(self, settings):
        settings = settings.model_copy(
            update={"embedding_backend": "ollama", "completion_backend": "ollama"}
        )

        container = build_container(settings)

        assert isinstance(container.embeddings, OllamaEmbeddingProvider)
        assert isinstance(container.completion, OllamaCompletionProvider)

    def test_keyword_mode_uses_zero_embeddings(self, settings):
        settings = settings.model_copy(
            update={"embedding_backend": "none", "retrieval_strategy": "keyword"}
        )

        container = build_container(settings)

        assert isinstance(container.embeddings, ZeroEmbeddingProvider)
        assert isinstance(container.retriever, KeywordRetriever)
        assert container.retriever.top_k == 3

    def test_vector_retrieval_without_embeddings_is_invalid(self, settings):
        settings = settings.model_copy(update={"embedding_backend": "none"})

        with pytest.raises(InvalidConfigurationError):
            build_container(settings)

    def test_overlap_not_smaller_than_chunk_is_invalid(self, settings):
        settings = settings.model_copy(update={"chunk_size": 100, "chunk_overlap": 100})

        with pytest.raises(InvalidConfigurationError):
            build_container(settings)

    def test_gemini_without_api_key_is_rejected(self, settings):
        settings = settings.model_copy(update={"google_api_key": ""})

        with pytest.raises(MissingAPIKeyError):
            build_container(settings)

    async def test_aclose_closes_every_backend(self, settings):
        container = build_container(
            settings.model_copy(update={"embedding_backend": "ollama", "completion_backend": "ollama"})
        )

        await container.aclose()

        assert container.embeddings._client is None
        assert container.completion._client is None
