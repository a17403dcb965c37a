"""
Pytest configuration and shared fixtures.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from knowledge_assistant.config import Settings
from knowledge_assistant.core.domain import Completion, TokenUsage
from knowledge_assistant.core.ports import CompletionPort, EmbeddingPort, VectorStorePort


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line(
        "markers", "integration: Integration tests (HTTP layer with mocked backends)"
    )


@pytest.fixture
def settings():
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        google_api_key="test-key",
        qdrant_url="http://qdrant.test:6333",
        qdrant_collection="test_kb",
        embedding_dimension=8,
    )


@pytest.fixture
def mock_embeddings():
    """Embedding port returning a fixed 8-dimensional vector."""
    embeddings = AsyncMock(spec=EmbeddingPort)
    embeddings.embed.return_value = [0.1] * 8
    embeddings.embed_document.return_value = [0.2] * 8
    return embeddings


@pytest.fixture
def mock_vector_store():
    """Vector store port with empty defaults."""
    store = AsyncMock(spec=VectorStorePort)
    store.search.return_value = []
    store.scroll.return_value = ([], None)
    store.upsert.side_effect = lambda collection, points: len(points)
    store.get_collection_stats.return_value = {"count": 0, "status": "green"}
    return store


@pytest.fixture
def mock_completion():
    """Completion port returning a canned answer."""
    completion = AsyncMock(spec=CompletionPort)
    completion.complete.return_value = Completion(
        text="Employees may work remotely up to three days a week [Document 1].",
        usage=TokenUsage(prompt_tokens=120, completion_tokens=20, total_tokens=140),
    )
    return completion


@pytest.fixture
def mock_retriever():
    """Retriever returning nothing unless a test says otherwise."""
    retriever = MagicMock()
    retriever.retrieve = AsyncMock(return_value=[])
    return retriever
