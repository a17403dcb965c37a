"""Retrieval port abstraction."""

from typing import Protocol

from ..domain import SearchResult


class RetrievalPort(Protocol):
    """Fetches knowledge base documents relevant to a question."""

    async def retrieve(self, question: str) -> list[SearchResult]:  # pragma: no cover - protocol
        ...
