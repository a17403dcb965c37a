"""Unit tests for question and batch validation."""

import pytest

from knowledge_assistant.core.domain.exceptions import (
    BatchTooLargeError,
    EmptyBatchError,
    EmptyQuestionError,
    QuestionTooLongError,
    QuestionTooShortError,
)
from knowledge_assistant.core.services.validation import (
    MAX_BATCH_SIZE,
    MAX_QUESTION_LENGTH,
    validate_batch,
    validate_question,
)

pytestmark = pytest.mark.unit


class TestValidateQuestion:
    def test_returns_normalized_question(self):
        assert validate_question("  What is   the leave policy?  ") == "What is the leave policy?"

    @pytest.mark.parametrize("question", ["", "   ", None])
    def test_empty_question_rejected(self, question):
        with pytest.raises(EmptyQuestionError):
            validate_question(question)

    def test_too_short_rejected(self):
        with pytest.raises(QuestionTooShortError):
            validate_question("hi")

    def test_length_bounds_are_inclusive(self):
        assert validate_question("abc") == "abc"
        assert len(validate_question("x" * MAX_QUESTION_LENGTH)) == MAX_QUESTION_LENGTH

    def test_too_long_rejected(self):
        with pytest.raises(QuestionTooLongError) as exc_info:
            validate_question("x" * (MAX_QUESTION_LENGTH + 1))
        assert exc_info.value.extra_context["length"] == MAX_QUESTION_LENGTH + 1


class TestValidateBatch:
    def test_preserves_order(self):
        assert validate_batch(["first question", "second question"]) == [
            "first question",
            "second question",
        ]

    def test_empty_batch_rejected(self):
        with pytest.raises(EmptyBatchError):
            validate_batch([])

    def test_oversized_batch_rejected(self):
        with pytest.raises(BatchTooLargeError):
            validate_batch(["question"] * (MAX_BATCH_SIZE + 1))

    def test_invalid_member_rejects_batch(self):
        with pytest.raises(QuestionTooShortError):
            validate_batch(["valid question", "no"])
