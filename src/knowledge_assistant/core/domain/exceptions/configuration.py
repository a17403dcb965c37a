"""Configuration exceptions for the Knowledge Assistant."""

from .base import KnowledgeAssistantError


class ConfigurationError(KnowledgeAssistantError):
    """Settings from the environment or ``.env`` cannot be used."""

    error_code = "KA_CFG_001"


class MissingAPIKeyError(ConfigurationError):
    """A Gemini backend was selected without ``GOOGLE_API_KEY``."""

    error_code = "KA_CFG_002"


class InvalidConfigurationError(ConfigurationError):
    """Backend or chunking settings that cannot work together."""

    error_code = "KA_CFG_003"
