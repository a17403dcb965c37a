"""Exception hierarchy for the Knowledge Assistant.

One module per failure family: validation of inbound input, configuration,
the three backends (embedding, vector store, completion), the pipeline stages
that wrap them (retrieval, generation, ingestion) and inbound throttling.
Every class carries a unique ``error_code``.

    from knowledge_assistant.core.domain.exceptions import RetrievalError
"""

# Base classes
from .base import ErrorLocation, KnowledgeAssistantError

# Completion exceptions
from .completion import (
    CompletionConnectionError,
    CompletionError,
    CompletionRateLimitError,
    CompletionTimeoutError,
)

# Configuration exceptions
from .configuration import (
    ConfigurationError,
    InvalidConfigurationError,
    MissingAPIKeyError,
)

# Embedding exceptions
from .embedding import (
    EmbeddingAPIError,
    EmbeddingError,
    EmbeddingRateLimitError,
    EmbeddingTimeoutError,
)

# Pipeline exceptions
from .generation import GenerationError
from .ingestion import IngestionError
from .retrieval import RetrievalError
from .throttling import RateLimitExceededError

# Validation exceptions
from .validation import (
    BatchTooLargeError,
    DocumentValidationError,
    EmptyBatchError,
    EmptyQuestionError,
    QuestionTooLongError,
    QuestionTooShortError,
    ValidationError,
)

# Vector store exceptions
from .vector_store import (
    CollectionNotFoundError,
    QdrantConnectionError,
    QdrantQueryError,
    VectorStoreError,
    VectorStoreTimeoutError,
)

__all__ = [
    # Base
    "ErrorLocation",
    "KnowledgeAssistantError",
    # Configuration
    "ConfigurationError",
    "MissingAPIKeyError",
    "InvalidConfigurationError",
    # Vector Store
    "VectorStoreError",
    "QdrantConnectionError",
    "QdrantQueryError",
    "CollectionNotFoundError",
    "VectorStoreTimeoutError",
    # Embedding
    "EmbeddingError",
    "EmbeddingAPIError",
    "EmbeddingRateLimitError",
    "EmbeddingTimeoutError",
    # Completion
    "CompletionError",
    "CompletionConnectionError",
    "CompletionRateLimitError",
    "CompletionTimeoutError",
    # Pipeline
    "RetrievalError",
    "GenerationError",
    "IngestionError",
    "RateLimitExceededError",
    # Validation
    "ValidationError",
    "EmptyQuestionError",
    "QuestionTooShortError",
    "QuestionTooLongError",
    "EmptyBatchError",
    "BatchTooLargeError",
    "DocumentValidationError",
]
