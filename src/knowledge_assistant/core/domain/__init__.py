"""Domain models for the Knowledge Assistant.

- document: Document, SearchResult, QueryResult and the ingestion records
- points: vector store boundary types
- completion: completion provider boundary types

All models are re-exported here for convenient importing:

    from knowledge_assistant.core.domain import Document, SearchResult, QueryResult
"""

from .completion import ChatMessage, Completion, TokenUsage
from .document import (
    Document,
    DocumentSummary,
    DocumentUpload,
    IngestionOutcome,
    QueryResult,
    SearchResult,
)
from .points import PointId, ScoredPoint, StoredPoint, VectorPoint

__all__ = [
    # Document models
    "Document",
    "SearchResult",
    "QueryResult",
    "DocumentUpload",
    "DocumentSummary",
    "IngestionOutcome",
    # Vector store models
    "PointId",
    "VectorPoint",
    "ScoredPoint",
    "StoredPoint",
    # Completion models
    "ChatMessage",
    "Completion",
    "TokenUsage",
]
