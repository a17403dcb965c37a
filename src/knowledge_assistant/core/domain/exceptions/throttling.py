"""Inbound throttling exceptions for the Knowledge Assistant."""

from .base import KnowledgeAssistantError


class RateLimitExceededError(KnowledgeAssistantError):
    """Caller exceeded the request budget for the current window."""

    error_code = "KA_RTL_001"
