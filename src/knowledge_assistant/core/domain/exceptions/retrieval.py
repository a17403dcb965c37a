"""Retrieval exceptions for the Knowledge Assistant."""

from .base import KnowledgeAssistantError


class RetrievalError(KnowledgeAssistantError):
    """Knowledge base search failed.

    Raised when the embedding backend or the vector store cannot serve a
    query. An empty result set is not an error.
    """

    error_code = "KA_RET_001"
