"""Pydantic models for API requests and responses.

Wire names are camelCase (``processingTimeMs``, ``relevanceScore``); models
accept either spelling on input and serialize by alias.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ....core.domain import QueryResult, SearchResult

EXCERPT_LENGTH = 200


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class QuestionRequest(CamelModel):
    """Request model for asking a question."""

    question: str = Field(
        ...,
        description="The question to answer from the knowledge base (3-1000 characters)",
        json_schema_extra={"example": "What is our remote work policy?"},
    )
    session_id: str | None = Field(None, alias="sessionId", description="Client session id")
    metadata: dict[str, Any] | None = Field(None, description="Opaque client metadata")


class BatchQuestionRequest(CamelModel):
    """Request model for answering several questions at once."""

    questions: list[str] = Field(..., description="1 to 10 questions, answered in order")


class FeedbackRequest(CamelModel):
    """User feedback on an answer."""

    question_id: str = Field(..., alias="questionId", min_length=1)
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    comment: str | None = Field(None, max_length=500)
    helpful: bool


class SourceInfo(CamelModel):
    """A knowledge base document used to produce an answer."""

    id: str = Field(..., description="Document id")
    title: str = Field(..., description="Document title")
    excerpt: str = Field(..., description="First 200 characters of the matched content")
    relevance_score: float = Field(..., alias="relevanceScore", description="Rounded to 2 decimals")
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_result(cls, result: SearchResult) -> "SourceInfo":
        content = result.content
        excerpt = content[:EXCERPT_LENGTH]
        if len(content) > EXCERPT_LENGTH:
            excerpt += "..."
        return cls(
            id=result.id,
            title=result.title,
            excerpt=excerpt,
            relevance_score=round(result.score, 2),
            metadata=result.metadata,
        )


class AnswerPayload(CamelModel):
    """Answer fields shared by single and batch responses."""

    answer: str = Field(..., description="The generated answer")
    sources: list[SourceInfo] = Field(default_factory=list)
    confidence: float = Field(..., ge=0, le=100, description="0-100, rounded to 2 decimals")
    processing_time_ms: int = Field(..., alias="processingTimeMs")

    @classmethod
    def from_result(cls, result: QueryResult, **extra: Any) -> "AnswerPayload":
        return cls(
            answer=result.answer,
            sources=[SourceInfo.from_result(source) for source in result.sources],
            confidence=round(result.confidence, 2),
            processing_time_ms=result.processing_time_ms,
            **extra,
        )


class QueryResponse(AnswerPayload):
    """Response model for an answered question."""

    timestamp: str = Field(..., description="ISO-8601 response time")


class BatchQueryResponse(CamelModel):
    """Response model for a batch, results in request order."""

    results: list[AnswerPayload]
    timestamp: str


class AcknowledgementResponse(CamelModel):
    message: str
    timestamp: str


class DocumentUploadRequest(CamelModel):
    """A document to add to the knowledge base."""

    title: str = Field(..., description="Document title")
    content: str = Field(..., description="Document body (10 characters to 1MB)")
    category: str | None = None
    tags: list[str] = Field(default_factory=list)
    author: str | None = None
    source: str | None = None


class BulkUploadRequest(CamelModel):
    documents: list[DocumentUploadRequest] = Field(..., min_length=1)


class DocumentUploadResponse(CamelModel):
    success: bool
    message: str
    document_id: str | None = Field(None, alias="documentId")


class BulkUploadResponse(CamelModel):
    results: list[DocumentUploadResponse]
    uploaded: int
    failed: int


class DocumentInfo(CamelModel):
    id: str
    title: str
    category: str | None = None
    uploaded_at: str | None = Field(None, alias="uploadedAt")
    author: str | None = None


class DocumentListResponse(CamelModel):
    documents: list[DocumentInfo]
    total: int


class StatsResponse(CamelModel):
    collection: str
    count: int
    status: str
    backends: dict[str, str] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    vector_store: str = Field(..., description="Vector store backend status")


class ErrorDetail(BaseModel):
    """Structured error detail information."""

    type: str = Field(..., description="Exception type name")
    code: str = Field(..., description="Error code (e.g., KA_RET_001)")
    message: str = Field(..., description="Human-readable error message")


class ErrorResponse(BaseModel):
    """Response model for structured errors.

    Example:
        {"error": {"type": "RetrievalError", "code": "KA_RET_001",
                   "message": "Failed to search knowledge base"}}

    In debug mode the body also carries location, context, cause and
    stack_trace.
    """

    error: ErrorDetail
    location: dict[str, Any] | None = None
    context: dict[str, Any] | None = None
    cause: dict[str, Any] | None = None
    stack_trace: list[str] | None = None
