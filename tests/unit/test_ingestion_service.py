"""Unit tests for IngestionService."""

import uuid

import httpx
import pytest

from knowledge_assistant.adapters.common.exception_handler import get_http_status_code
from knowledge_assistant.adapters.outbound.embeddings import OllamaEmbeddingProvider
from knowledge_assistant.core.domain import DocumentUpload, StoredPoint
from knowledge_assistant.core.domain.exceptions import (
    DocumentValidationError,
    EmbeddingAPIError,
    IngestionError,
    QdrantConnectionError,
)
from knowledge_assistant.core.services import IngestionService

pytestmark = pytest.mark.unit


@pytest.fixture
def service(mock_embeddings, mock_vector_store):
    return IngestionService(
        mock_embeddings,
        mock_vector_store,
        collection_name="kb",
        vector_size=8,
        chunk_size=100,
        chunk_overlap=20,
        backends={"embeddings": "gemini"},
    )


def upload(**overrides) -> DocumentUpload:
    fields = {"title": "Remote Work Policy", "content": "Employees may work remotely."}
    fields.update(overrides)
    return DocumentUpload(**fields)


class TestValidation:
    @pytest.mark.parametrize(
        "overrides",
        [
            {"title": ""},
            {"title": "   "},
            {"content": ""},
            {"content": "too short"},
            {"content": "x" * 1_000_001},
            {"title": "\ufeff\ufffd"},
            {"content": "\ufeff" * 20},
            {"content": "\ufffd \ufeff" * 10},
        ],
    )
    async def test_invalid_upload_rejected(self, service, mock_vector_store, overrides):
        with pytest.raises(DocumentValidationError):
            await service.index_document(upload(**overrides))
        mock_vector_store.upsert.assert_not_awaited()

    def test_returns_normalized_title_and_content(self):
        title, content = IngestionService.validate_document(
            upload(title="  Remote   Work Policy ", content="\ufeffEmployees  may work remotely.")
        )

        assert title == "Remote Work Policy"
        assert content == "Employees may work remotely."


class TestIndexDocument:
    async def test_indexes_single_chunk_with_defaults(self, service, mock_vector_store):
        doc_id = await service.index_document(upload())

        uuid.UUID(doc_id)
        mock_vector_store.ensure_collection.assert_awaited_once_with("kb", 8)
        collection, points = mock_vector_store.upsert.await_args.args
        assert collection == "kb"
        assert len(points) == 1

        payload = points[0].payload
        assert payload["doc_id"] == doc_id
        assert payload["title"] == "Remote Work Policy"
        assert payload["content"] == "Employees may work remotely."
        assert payload["chunk_index"] == 0
        assert payload["metadata"]["category"] == "general"
        assert payload["metadata"]["tags"] == []
        assert payload["metadata"]["author"] == "unknown"
        assert payload["metadata"]["source"] == "user-upload"
        assert "uploadedAt" in payload["metadata"]
        assert points[0].vector == [0.2] * 8

    async def test_explicit_metadata_is_kept(self, service, mock_vector_store):
        await service.index_document(
            upload(category="hr", tags=["remote"], author="alice", source="wiki")
        )

        metadata = mock_vector_store.upsert.await_args.args[1][0].payload["metadata"]
        assert (metadata["category"], metadata["tags"]) == ("hr", ["remote"])
        assert (metadata["author"], metadata["source"]) == ("alice", "wiki")

    async def test_long_document_is_chunked(self, service, mock_embeddings, mock_vector_store):
        content = "Sentence about policy details. " * 12
        doc_id = await service.index_document(upload(content=content))

        points = mock_vector_store.upsert.await_args.args[1]
        assert len(points) > 1
        assert [p.payload["chunk_index"] for p in points] == list(range(len(points)))
        assert {p.payload["doc_id"] for p in points} == {doc_id}
        assert len({p.id for p in points}) == len(points)
        assert mock_embeddings.embed_document.await_count == len(points)

    def test_point_ids_are_deterministic(self):
        assert IngestionService.point_id("doc", 0) == IngestionService.point_id("doc", 0)
        assert IngestionService.point_id("doc", 0) != IngestionService.point_id("doc", 1)

    async def test_embedding_failure_raises_ingestion_error(
        self, service, mock_embeddings, mock_vector_store
    ):
        mock_embeddings.embed_document.side_effect = EmbeddingAPIError("bad response")

        with pytest.raises(IngestionError):
            await service.index_document(upload())
        mock_vector_store.upsert.assert_not_awaited()

    async def test_gateway_page_from_embedder_is_a_server_error(self, mock_vector_store):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>gateway</html>"))
        embeddings = OllamaEmbeddingProvider(
            "http://ollama.test:11434",
            client=httpx.AsyncClient(base_url="http://ollama.test:11434", transport=transport),
        )
        service = IngestionService(embeddings, mock_vector_store, collection_name="kb", vector_size=8)

        with pytest.raises(IngestionError) as exc_info:
            await service.index_document(upload())

        assert isinstance(exc_info.value.cause, EmbeddingAPIError)
        assert get_http_status_code(exc_info.value) == 500
        mock_vector_store.upsert.assert_not_awaited()


class TestIndexDocuments:
    async def test_reports_each_outcome_in_order(self, service):
        outcomes = await service.index_documents(
            [upload(title="Good"), upload(title=""), upload(title="Also good")]
        )

        assert [o.success for o in outcomes] == [True, False, True]
        assert outcomes[0].doc_id and outcomes[2].doc_id
        assert outcomes[1].error == "Document title is required"


class TestListAndDelete:
    async def test_lists_one_entry_per_document(self, service, mock_vector_store):
        meta = {"category": "hr", "author": "alice", "uploadedAt": "2024-01-01T00:00:00"}
        mock_vector_store.scroll.return_value = (
            [
                StoredPoint(id="p1", payload={"doc_id": "d1", "title": "Leave", "metadata": meta}),
                StoredPoint(id="p2", payload={"doc_id": "d1", "title": "Leave", "metadata": meta}),
                StoredPoint(id="p3", payload={"doc_id": "d2", "title": "Travel", "metadata": {}}),
            ],
            None,
        )

        documents = await service.list_documents()

        assert [d.doc_id for d in documents] == ["d1", "d2"]
        assert documents[0].category == "hr"
        assert documents[0].uploaded_at == "2024-01-01T00:00:00"
        mock_vector_store.scroll.assert_awaited_once_with("kb", limit=100)

    async def test_list_failure_raises_ingestion_error(self, service, mock_vector_store):
        mock_vector_store.scroll.side_effect = QdrantConnectionError("down")

        with pytest.raises(IngestionError) as exc_info:
            await service.list_documents()
        assert isinstance(exc_info.value.cause, QdrantConnectionError)

    async def test_delete_filters_by_doc_id(self, service, mock_vector_store):
        await service.delete_document("d1")

        mock_vector_store.delete.assert_awaited_once_with("kb", {"doc_id": "d1"})

    async def test_stats_include_collection_and_backends(self, service, mock_vector_store):
        mock_vector_store.get_collection_stats.return_value = {"count": 12, "status": "green"}

        stats = await service.stats()

        assert stats == {
            "collection": "kb",
            "count": 12,
            "status": "green",
            "backends": {"embeddings": "gemini"},
        }
