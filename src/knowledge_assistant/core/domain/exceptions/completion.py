"""Completion provider exceptions for the Knowledge Assistant."""

from .base import KnowledgeAssistantError


class CompletionError(KnowledgeAssistantError):
    """Base error for completion provider operations."""

    error_code = "KA_LLM_001"


class CompletionConnectionError(CompletionError):
    """Failed to reach the completion provider.

    Common causes:
    - Invalid API key
    - Network issues
    - Local model server not running
    """

    error_code = "KA_LLM_002"


class CompletionRateLimitError(CompletionError):
    """Rate limit exceeded on the completion provider.

    Hosted free tiers allow a limited number of requests per minute.
    """

    error_code = "KA_LLM_003"


class CompletionTimeoutError(CompletionError):
    """Completion provider did not answer within the request timeout."""

    error_code = "KA_LLM_004"
