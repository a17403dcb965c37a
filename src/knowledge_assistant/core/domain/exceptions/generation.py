"""Answer generation exceptions for the Knowledge Assistant."""

from .base import KnowledgeAssistantError


class GenerationError(KnowledgeAssistantError):
    """The completion provider failed while generating an answer.

    Distinct from the provider returning an empty completion, which is
    answered with a fallback string instead.
    """

    error_code = "KA_GEN_001"
