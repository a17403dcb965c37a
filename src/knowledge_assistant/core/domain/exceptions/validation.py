"""Validation exceptions for the Knowledge Assistant."""

from .base import KnowledgeAssistantError


class ValidationError(KnowledgeAssistantError):
    """Input validation failed."""

    error_code = "KA_VAL_001"


class EmptyQuestionError(ValidationError):
    """Question cannot be empty or whitespace only."""

    error_code = "KA_VAL_002"


class QuestionTooShortError(ValidationError):
    """Question is shorter than the minimum allowed length."""

    error_code = "KA_VAL_003"


class QuestionTooLongError(ValidationError):
    """Question exceeds maximum allowed length."""

    error_code = "KA_VAL_004"


class EmptyBatchError(ValidationError):
    """Batch request contains no questions."""

    error_code = "KA_VAL_005"


class BatchTooLargeError(ValidationError):
    """Batch request contains more questions than allowed."""

    error_code = "KA_VAL_006"


class DocumentValidationError(ValidationError):
    """Uploaded document is missing a title or has unusable content."""

    error_code = "KA_VAL_007"
