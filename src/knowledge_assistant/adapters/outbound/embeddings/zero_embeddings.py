"""Placeholder embeddings for keyword-only deployments."""

from ....core.ports.embedding_port import EmbeddingPort


class ZeroEmbeddingProvider(EmbeddingPort):
    """Returns all-zero vectors.

    Lets documents be stored without an embedding backend; such a collection
    can only be searched with the keyword retriever.
    """

    def __init__(self, dimension: int = 768) -> None:
        self.dimension = dimension

    async def embed(self, text: str) -> list[float]:
        return [0.0] * self.dimension
