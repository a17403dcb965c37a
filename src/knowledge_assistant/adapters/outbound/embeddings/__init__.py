"""Embedding backends."""

from .gemini_embeddings import GeminiEmbeddingProvider
from .ollama_embeddings import OllamaEmbeddingProvider
from .zero_embeddings import ZeroEmbeddingProvider

__all__ = ["GeminiEmbeddingProvider", "OllamaEmbeddingProvider", "ZeroEmbeddingProvider"]
