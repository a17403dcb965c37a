"""Input validation for questions and batches.

Runs at the inbound boundary (API models, CLI) so the pipeline never sees
malformed input.
"""

from ..domain.exceptions import (
    BatchTooLargeError,
    EmptyBatchError,
    EmptyQuestionError,
    QuestionTooLongError,
    QuestionTooShortError,
)
from ..domain.utils import normalize_text

MIN_QUESTION_LENGTH = 3
MAX_QUESTION_LENGTH = 1000
MAX_BATCH_SIZE = 10


def validate_question(question: str | None) -> str:
    """Normalize a question and enforce length bounds.

    Args:
        question: Raw question text.

    Returns:
        The normalized question.

    Raises:
        EmptyQuestionError: If the question is empty or whitespace only.
        QuestionTooShortError: If shorter than MIN_QUESTION_LENGTH characters.
        QuestionTooLongError: If longer than MAX_QUESTION_LENGTH characters.
    """
    clean = normalize_text(question)
    if not clean:
        raise EmptyQuestionError("Question cannot be empty or whitespace only")
    if len(clean) < MIN_QUESTION_LENGTH:
        raise QuestionTooShortError(
            f"Question must be at least {MIN_QUESTION_LENGTH} characters",
            context={"length": len(clean)},
        )
    if len(clean) > MAX_QUESTION_LENGTH:
        raise QuestionTooLongError(
            f"Question must be at most {MAX_QUESTION_LENGTH} characters",
            context={"length": len(clean)},
        )
    return clean


def validate_batch(questions: list[str] | None) -> list[str]:
    """Validate a batch of questions, preserving order.

    Raises:
        EmptyBatchError: If no questions were supplied.
        BatchTooLargeError: If more than MAX_BATCH_SIZE questions were supplied.
        ValidationError: If any single question is invalid.
    """
    if not questions:
        raise EmptyBatchError("Batch must contain at least one question")
    if len(questions) > MAX_BATCH_SIZE:
        raise BatchTooLargeError(
            f"Batch must contain at most {MAX_BATCH_SIZE} questions",
            context={"count": len(questions)},
        )
    return [validate_question(question) for question in questions]
