"""Embedding Port Interface."""

from abc import ABC, abstractmethod


class EmbeddingPort(ABC):
    """Abstract interface for embedding backends.

    Implementations raise ``EmbeddingError`` (or a subclass) on transport,
    auth or timeout failures.
    """

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """Embed a search query."""
        ...

    async def embed_document(self, text: str) -> list[float]:
        """Embed document content for indexing.

        Backends that distinguish query and document embeddings override this.
        """
        return await self.embed(text)

    async def aclose(self) -> None:
        """Release network resources held by the backend."""
