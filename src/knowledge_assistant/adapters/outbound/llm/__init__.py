"""Completion backends."""

from .gemini_completion import GeminiCompletionProvider
from .ollama_completion import OllamaCompletionProvider

__all__ = ["GeminiCompletionProvider", "OllamaCompletionProvider"]
