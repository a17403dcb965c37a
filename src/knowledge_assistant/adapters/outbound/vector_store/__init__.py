"""Vector store backends."""

from .qdrant_adapter import QdrantAdapter

__all__ = ["QdrantAdapter"]
