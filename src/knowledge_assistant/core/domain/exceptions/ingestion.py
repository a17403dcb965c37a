"""Document ingestion exceptions for the Knowledge Assistant."""

from .base import KnowledgeAssistantError


class IngestionError(KnowledgeAssistantError):
    """Failed to index, list or delete knowledge base documents."""

    error_code = "KA_ING_001"
