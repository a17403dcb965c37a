"""Question answering endpoints."""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends

from .....core.services import QueryService
from .....core.services.validation import validate_batch, validate_question
from ..deps import enforce_rate_limit, get_query_service
from ..models import (
    AcknowledgementResponse,
    AnswerPayload,
    BatchQueryResponse,
    BatchQuestionRequest,
    ErrorResponse,
    FeedbackRequest,
    QueryResponse,
    QuestionRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/query", tags=["query"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}


def _now() -> str:
    return datetime.now(UTC).isoformat()


@router.post(
    "",
    response_model=QueryResponse,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(enforce_rate_limit)],
)
async def ask_question(
    request: QuestionRequest,
    service: QueryService = Depends(get_query_service),
) -> QueryResponse:
    """Answer a question from the knowledge base.

    A question with no relevant documents still returns 200, with no sources
    and zero confidence.
    """
    question = validate_question(request.question)
    logger.info(
        "Query received (session=%s, %d chars)", request.session_id or "none", len(question)
    )

    result = await service.answer(question)

    logger.info(
        "Query completed: %d sources, confidence %.2f, %dms",
        len(result.sources),
        result.confidence,
        result.processing_time_ms,
    )
    return QueryResponse.from_result(result, timestamp=_now())


@router.post(
    "/batch",
    response_model=BatchQueryResponse,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(enforce_rate_limit)],
)
async def ask_batch(
    request: BatchQuestionRequest,
    service: QueryService = Depends(get_query_service),
) -> BatchQueryResponse:
    """Answer up to 10 questions concurrently, results in request order."""
    questions = validate_batch(request.questions)
    logger.info("Batch query received: %d questions", len(questions))

    results = await service.answer_batch(questions)
    return BatchQueryResponse(
        results=[AnswerPayload.from_result(result) for result in results],
        timestamp=_now(),
    )


@router.post("/feedback", response_model=AcknowledgementResponse, responses=ERROR_RESPONSES)
async def submit_feedback(request: FeedbackRequest) -> AcknowledgementResponse:
    """Record user feedback on an answer (logged only)."""
    logger.info(
        "Feedback received: question=%s rating=%d helpful=%s comment=%s",
        request.question_id,
        request.rating,
        request.helpful,
        bool(request.comment),
    )
    return AcknowledgementResponse(message="Feedback received successfully", timestamp=_now())
