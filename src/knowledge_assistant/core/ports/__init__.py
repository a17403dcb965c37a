"""Port interfaces implemented by outbound adapters."""

from .completion_port import CompletionPort
from .embedding_port import EmbeddingPort
from .retrieval_port import RetrievalPort
from .vector_store_port import VectorStorePort

__all__ = ["CompletionPort", "EmbeddingPort", "RetrievalPort", "VectorStorePort"]
