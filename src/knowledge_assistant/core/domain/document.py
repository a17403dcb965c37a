"""Document, search result and query result models for the RAG pipeline."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Document:
    """A unit of knowledge base content.

    Attributes:
        doc_id: Opaque identifier, stable for the lifetime of the document.
        title: Human-readable display name.
        content: Full text body (or one chunk of it).
        metadata: Open key-value map (category, tags, author, source, uploadedAt).
    """

    doc_id: str
    title: str
    content: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class SearchResult:
    """A retrieval hit: the matched document and its relevance score.

    Scores are only comparable within the result set of a single query.

    Attributes:
        document: The matched Document.
        score: Similarity or keyword relevance, higher is more relevant.
    """

    document: Document
    score: float

    @property
    def id(self) -> str:
        return self.document.doc_id

    @property
    def title(self) -> str:
        return self.document.title

    @property
    def content(self) -> str:
        return self.document.content

    @property
    def metadata(self) -> dict[str, Any]:
        return self.document.metadata


@dataclass
class QueryResult:
    """Answer produced by the query pipeline for one question.

    Attributes:
        answer: Generated (or fixed no-knowledge) answer text.
        sources: Results fed to the generator, in descending relevance.
        confidence: Mean source score on a 0-100 scale.
        processing_time_ms: Wall-clock duration of the pipeline invocation.
    """

    answer: str
    sources: list[SearchResult]
    confidence: float
    processing_time_ms: int


@dataclass
class DocumentUpload:
    """A document supplied for indexing."""

    title: str
    content: str
    category: str | None = None
    tags: list[str] = field(default_factory=list)
    author: str | None = None
    source: str | None = None


@dataclass
class DocumentSummary:
    """Listing entry for an indexed document."""

    doc_id: str
    title: str
    category: str | None = None
    uploaded_at: str | None = None
    author: str | None = None


@dataclass
class IngestionOutcome:
    """Per-document result of a bulk upload."""

    title: str
    success: bool
    doc_id: str | None = None
    error: str | None = None
