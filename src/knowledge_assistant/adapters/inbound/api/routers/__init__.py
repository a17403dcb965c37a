"""API routers."""

from . import documents, health, query

__all__ = ["documents", "health", "query"]
