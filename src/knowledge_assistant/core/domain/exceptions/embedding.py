"""Embedding exceptions for the Knowledge Assistant."""

from .base import KnowledgeAssistantError


class EmbeddingError(KnowledgeAssistantError):
    """Failed to generate embeddings."""

    error_code = "KA_EMB_001"


class EmbeddingAPIError(EmbeddingError):
    """Embedding backend returned an error or an unusable payload."""

    error_code = "KA_EMB_002"


class EmbeddingRateLimitError(EmbeddingError):
    """Embedding API rate limit exceeded."""

    error_code = "KA_EMB_003"


class EmbeddingTimeoutError(EmbeddingError):
    """Embedding backend did not answer within the request timeout."""

    error_code = "KA_EMB_004"
