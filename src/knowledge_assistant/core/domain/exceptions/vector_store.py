"""Vector store exceptions for the Knowledge Assistant."""

from .base import KnowledgeAssistantError


class VectorStoreError(KnowledgeAssistantError):
    """Base error for knowledge base storage. Reported as 503 by the API."""

    error_code = "KA_VEC_001"


class QdrantConnectionError(VectorStoreError):
    """Qdrant could not be reached.

    Usually a wrong ``QDRANT_URL`` or API key, or the server is down.
    """

    error_code = "KA_VEC_002"


class QdrantQueryError(VectorStoreError):
    """Qdrant rejected or failed a request.

    Usually the collection was created with a different embedding dimension.
    """

    error_code = "KA_VEC_003"


class CollectionNotFoundError(VectorStoreError):
    """The knowledge base collection does not exist yet."""

    error_code = "KA_VEC_004"


class VectorStoreTimeoutError(VectorStoreError):
    """Qdrant did not answer within the request timeout."""

    error_code = "KA_VEC_005"
