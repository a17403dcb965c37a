"""Document ingestion: the write path into the knowledge base."""

import asyncio
import logging
import uuid
from datetime import UTC, datetime
from typing import Any

from ..domain import DocumentSummary, DocumentUpload, IngestionOutcome, VectorPoint
from ..domain.exceptions import DocumentValidationError, IngestionError, KnowledgeAssistantError
from ..domain.utils import chunk_text, normalize_text
from ..ports.embedding_port import EmbeddingPort
from ..ports.vector_store_port import VectorStorePort

logger = logging.getLogger(__name__)

MIN_CONTENT_LENGTH = 10
MAX_CONTENT_LENGTH = 1_000_000


class IngestionService:
    """Embeds uploaded documents and manages them in the vector store.

    Long documents are split into overlapping chunks; every chunk carries
    the parent ``doc_id`` so a document is listed and deleted as a unit.
    """

    def __init__(
        self,
        embeddings: EmbeddingPort,
        vector_store: VectorStorePort,
        collection_name: str,
        vector_size: int,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        backends: dict[str, str] | None = None,
    ) -> None:
        """Initialize the ingestion service.

        Args:
            embeddings: Embedding backend for document content.
            vector_store: Store holding the knowledge base collection.
            collection_name: Collection to write to.
            vector_size: Embedding dimension used when creating the collection.
            chunk_size: Target chunk size in characters.
            chunk_overlap: Overlap between consecutive chunks.
            backends: Configured backend names, reported by stats().
        """
        self.embeddings = embeddings
        self.vector_store = vector_store
        self.collection_name = collection_name
        self.vector_size = vector_size
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.backends = dict(backends or {})

    @staticmethod
    def validate_document(upload: DocumentUpload) -> tuple[str, str]:
        """Reject uploads without a title or with unusable content.

        Title and content are checked after normalization, so text made only
        of whitespace, byte order marks or replacement characters is empty.

        Returns:
            The normalized title and content.

        Raises:
            DocumentValidationError: Describing the violated constraint.
        """
        if upload.content and len(upload.content) > MAX_CONTENT_LENGTH:
            raise DocumentValidationError("Document content is too large (maximum 1MB)")

        title = normalize_text(upload.title)
        if not title:
            raise DocumentValidationError("Document title is required")
        content = normalize_text(upload.content)
        if not content:
            raise DocumentValidationError("Document content is required")
        if len(content) < MIN_CONTENT_LENGTH:
            raise DocumentValidationError(
                f"Document content is too short (minimum {MIN_CONTENT_LENGTH} characters)",
                context={"length": len(content)},
            )
        return title, content

    @staticmethod
    def point_id(doc_id: str, chunk_index: int) -> str:
        """Deterministic Qdrant-compatible UUID for one chunk of a document."""
        return str(uuid.uuid5(uuid.NAMESPACE_URL, f"{doc_id}:{chunk_index}"))

    def build_metadata(self, upload: DocumentUpload) -> dict[str, Any]:
        return {
            "category": upload.category or "general",
            "tags": list(upload.tags or []),
            "author": upload.author or "unknown",
            "source": upload.source or "user-upload",
            "uploadedAt": datetime.now(UTC).isoformat(),
        }

    async def index_document(self, upload: DocumentUpload) -> str:
        """Validate, chunk, embed and upsert a document.

        Returns:
            The new document id.

        Raises:
            DocumentValidationError: If the upload is invalid.
            IngestionError: If embedding or the store write fails.
        """
        title, content = self.validate_document(upload)

        doc_id = str(uuid.uuid4())
        metadata = self.build_metadata(upload)
        indexed_at = datetime.now(UTC).isoformat()
        chunks = chunk_text(content, self.chunk_size, self.chunk_overlap)

        logger.info("Indexing document %r (%d chunks)", title, len(chunks))

        try:
            vectors = await asyncio.gather(
                *(self.embeddings.embed_document(f"{title}\n\n{chunk}") for chunk in chunks)
            )
            points = [
                VectorPoint(
                    id=self.point_id(doc_id, index),
                    vector=list(vector),
                    payload={
                        "doc_id": doc_id,
                        "title": title,
                        "content": chunk,
                        "chunk_index": index,
                        "indexed_at": indexed_at,
                        "metadata": metadata,
                    },
                )
                for index, (chunk, vector) in enumerate(zip(chunks, vectors))
            ]
            await self.vector_store.ensure_collection(self.collection_name, self.vector_size)
            await self.vector_store.upsert(self.collection_name, points)
        except KnowledgeAssistantError as e:
            raise IngestionError(
                f"Failed to index document: {title}",
                cause=e,
                context={"title": title, "dependency": type(e).__name__},
            ) from e

        logger.info("Document indexed: %s (%s)", title, doc_id)
        return doc_id

    async def index_documents(self, uploads: list[DocumentUpload]) -> list[IngestionOutcome]:
        """Index several documents concurrently, reporting each outcome in order."""
        results = await asyncio.gather(
            *(self.index_document(upload) for upload in uploads), return_exceptions=True
        )

        outcomes = []
        for upload, result in zip(uploads, results):
            if isinstance(result, KnowledgeAssistantError):
                logger.warning("Upload failed for %r: %s", upload.title, result.message)
                outcomes.append(
                    IngestionOutcome(title=upload.title, success=False, error=result.message)
                )
            elif isinstance(result, BaseException):
                raise result
            else:
                outcomes.append(IngestionOutcome(title=upload.title, success=True, doc_id=result))

        logger.info(
            "Uploaded %d of %d documents successfully",
            sum(1 for o in outcomes if o.success),
            len(uploads),
        )
        return outcomes

    async def list_documents(self, limit: int = 100) -> list[DocumentSummary]:
        """List indexed documents, one entry per document rather than per chunk."""
        try:
            points, _ = await self.vector_store.scroll(self.collection_name, limit=limit)
        except KnowledgeAssistantError as e:
            raise IngestionError("Failed to list documents", cause=e) from e

        summaries: dict[str, DocumentSummary] = {}
        for point in points:
            payload = point.payload or {}
            doc_id = str(payload.get("doc_id") or point.id)
            if doc_id in summaries:
                continue
            metadata = payload.get("metadata") or {}
            summaries[doc_id] = DocumentSummary(
                doc_id=doc_id,
                title=str(payload.get("title") or "Untitled"),
                category=metadata.get("category"),
                uploaded_at=metadata.get("uploadedAt"),
                author=metadata.get("author"),
            )
        return list(summaries.values())

    async def delete_document(self, doc_id: str) -> None:
        """Delete every chunk of a document."""
        try:
            await self.vector_store.delete(self.collection_name, {"doc_id": doc_id})
        except KnowledgeAssistantError as e:
            raise IngestionError(
                f"Failed to delete document {doc_id}", cause=e, context={"doc_id": doc_id}
            ) from e
        logger.info("Deleted document %s", doc_id)

    async def stats(self) -> dict[str, Any]:
        """Collection statistics for the knowledge base."""
        stats = await self.vector_store.get_collection_stats(self.collection_name)
        return {"collection": self.collection_name, **stats, "backends": self.backends}
