"""Integration tests for FastAPI endpoints.

The app is built around a container whose backends are mocked ports, so the
full HTTP layer (routing, validation, error mapping, serialization) runs
against the real services.
"""

import pytest
from fastapi.testclient import TestClient

from knowledge_assistant.adapters.common.rate_limiter import RateLimiter
from knowledge_assistant.adapters.inbound.api.main import create_app
from knowledge_assistant.composition import Container
from knowledge_assistant.core.domain import Document, SearchResult, StoredPoint
from knowledge_assistant.core.domain.exceptions import (
    QdrantConnectionError,
    RetrievalError,
)
from knowledge_assistant.core.services import AnswerGenerator, IngestionService, QueryService
from knowledge_assistant.core.services.prompts import NO_RESULTS_ANSWER

pytestmark = pytest.mark.integration


def result(doc_id: str, score: float, content: str = "Remote work is allowed.", **metadata):
    return SearchResult(
        document=Document(
            doc_id=doc_id, title=f"Policy {doc_id}", content=content, metadata=metadata
        ),
        score=score,
    )


@pytest.fixture
def container(settings, mock_embeddings, mock_vector_store, mock_completion, mock_retriever):
    return Container(
        settings=settings,
        embeddings=mock_embeddings,
        vector_store=mock_vector_store,
        completion=mock_completion,
        retriever=mock_retriever,
        query_service=QueryService(mock_retriever, AnswerGenerator(mock_completion)),
        ingestion_service=IngestionService(
            mock_embeddings,
            mock_vector_store,
            collection_name=settings.qdrant_collection,
            vector_size=settings.embedding_dimension,
            backends={"embeddings": "gemini", "completion": "gemini", "retrieval": "vector"},
        ),
        rate_limiter=RateLimiter(None),
    )


@pytest.fixture
def client(container):
    return TestClient(create_app(container=container))


class TestHealthEndpoints:
    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data

    def test_readiness_check(self, client, mock_vector_store):
        mock_vector_store.get_collection_stats.return_value = {"count": 100, "status": "green"}

        response = client.get("/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ready"
        assert data["vector_store"] == "connected (100 points in test_kb)"

    def test_readiness_fails_when_store_unreachable(self, client, mock_vector_store):
        mock_vector_store.get_collection_stats.side_effect = QdrantConnectionError("refused")

        response = client.get("/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "unavailable"


class TestQueryEndpoint:
    def test_answer_with_sources(self, client, mock_retriever):
        long_content = "A" * 250
        mock_retriever.retrieve.return_value = [
            result("d1", 0.876, long_content, category="hr"),
            result("d2", 0.8),
        ]

        response = client.post("/api/v1/query", json={"question": "What is our remote policy?"})

        assert response.status_code == 200
        data = response.json()
        assert data["answer"].startswith("Employees may work remotely")
        assert data["confidence"] == 83.8
        assert isinstance(data["processingTimeMs"], int)
        assert "timestamp" in data

        first, second = data["sources"]
        assert first["id"] == "d1"
        assert first["relevanceScore"] == 0.88
        assert first["excerpt"] == "A" * 200 + "..."
        assert first["metadata"] == {"category": "hr"}
        assert second["excerpt"] == "Remote work is allowed."

    def test_no_relevant_documents_is_still_success(self, client, mock_completion):
        response = client.post("/api/v1/query", json={"question": "Who won the cup final?"})

        assert response.status_code == 200
        data = response.json()
        assert data["answer"] == NO_RESULTS_ANSWER
        assert data["sources"] == []
        assert data["confidence"] == 0
        mock_completion.complete.assert_not_awaited()

    def test_accepts_session_id(self, client):
        response = client.post(
            "/api/v1/query", json={"question": "What is our policy?", "sessionId": "s-1"}
        )
        assert response.status_code == 200

    def test_short_question_is_rejected(self, client):
        response = client.post("/api/v1/query", json={"question": "Hi"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["type"] == "QuestionTooShortError"
        assert error["code"] == "KA_VAL_003"

    def test_missing_field_is_reported_as_400(self, client):
        response = client.post("/api/v1/query", json={})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "KA_VAL_001"
        assert error["message"].startswith("question")

    def test_retrieval_failure_returns_error_block_only(self, client, mock_retriever):
        mock_retriever.retrieve.side_effect = RetrievalError("Failed to search knowledge base")

        response = client.post("/api/v1/query", json={"question": "What is our policy?"})

        assert response.status_code == 500
        body = response.json()
        assert body == {
            "error": {
                "type": "RetrievalError",
                "code": "KA_RET_001",
                "message": "Failed to search knowledge base",
            }
        }

    def test_unexpected_failure_hides_details(self, container):
        container.retriever.retrieve.side_effect = KeyError("internal detail")
        client = TestClient(create_app(container=container), raise_server_exceptions=False)

        response = client.post("/api/v1/query", json={"question": "What is our policy?"})

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["type"] == "InternalServerError"
        assert "internal detail" not in error["message"]

    def test_rate_limit_returns_429(self, container):
        container.rate_limiter = RateLimiter(1)
        client = TestClient(create_app(container=container))

        assert client.post("/api/v1/query", json={"question": "What is our policy?"}).status_code == 200
        response = client.post("/api/v1/query", json={"question": "What is our policy?"})

        assert response.status_code == 429
        assert response.json()["error"]["code"] == "KA_RTL_001"


class TestBatchAndFeedback:
    def test_batch_results_follow_request_order(self, client, mock_retriever):
        async def retrieve(question):
            return [result(question.split()[-1].rstrip("?"), 0.9)]

        mock_retriever.retrieve.side_effect = retrieve
        questions = ["What about leave?", "What about travel?", "What about expenses?"]

        response = client.post("/api/v1/query/batch", json={"questions": questions})

        assert response.status_code == 200
        results = response.json()["results"]
        assert [r["sources"][0]["id"] for r in results] == ["leave", "travel", "expenses"]

    def test_batch_over_ten_is_rejected(self, client):
        response = client.post(
            "/api/v1/query/batch", json={"questions": ["What is the policy?"] * 11}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "KA_VAL_006"

    def test_empty_batch_is_rejected(self, client):
        response = client.post("/api/v1/query/batch", json={"questions": []})

        assert response.status_code == 400

    def test_feedback_is_acknowledged(self, client):
        response = client.post(
            "/api/v1/query/feedback",
            json={"questionId": "q-1", "rating": 5, "helpful": True, "comment": "Clear"},
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Feedback received successfully"

    def test_feedback_rating_out_of_range(self, client):
        response = client.post(
            "/api/v1/query/feedback", json={"questionId": "q-1", "rating": 9, "helpful": False}
        )

        assert response.status_code == 400


class TestDocumentEndpoints:
    def test_upload_document(self, client, mock_vector_store):
        response = client.post(
            "/api/v1/documents",
            json={
                "title": "Remote Work Policy",
                "content": "Employees may work remotely three days a week.",
                "category": "hr",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == (
            f'Document "Remote Work Policy" added to knowledge base with ID: {data["documentId"]}'
        )
        mock_vector_store.upsert.assert_awaited_once()

    def test_invalid_document_is_rejected(self, client):
        response = client.post("/api/v1/documents", json={"title": "", "content": "Body text here"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "KA_VAL_007"

    def test_store_outage_during_upload_returns_503(self, client, mock_vector_store):
        mock_vector_store.ensure_collection.side_effect = QdrantConnectionError("refused")

        response = client.post(
            "/api/v1/documents",
            json={"title": "Travel", "content": "Book travel through the portal."},
        )

        assert response.status_code == 503
        assert response.json()["error"]["type"] == "IngestionError"

    def test_bulk_upload_reports_each_document(self, client):
        response = client.post(
            "/api/v1/documents/bulk",
            json={
                "documents": [
                    {"title": "Travel", "content": "Book travel through the portal."},
                    {"title": "", "content": "No title on this one."},
                ]
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert (data["uploaded"], data["failed"]) == (1, 1)
        assert data["results"][1]["message"] == (
            "Failed to upload document: Document title is required"
        )

    def test_list_documents(self, client, mock_vector_store):
        mock_vector_store.scroll.return_value = (
            [
                StoredPoint(
                    id="p1",
                    payload={
                        "doc_id": "d1",
                        "title": "Leave",
                        "metadata": {"category": "hr", "uploadedAt": "2024-01-01T00:00:00"},
                    },
                )
            ],
            None,
        )

        response = client.get("/api/v1/documents")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["documents"][0]["id"] == "d1"
        assert data["documents"][0]["uploadedAt"] == "2024-01-01T00:00:00"

    def test_delete_document(self, client, mock_vector_store):
        response = client.delete("/api/v1/documents/d1")

        assert response.status_code == 200
        assert response.json()["message"] == "Document with ID d1 deleted."
        mock_vector_store.delete.assert_awaited_once_with("test_kb", {"doc_id": "d1"})

    def test_stats(self, client, mock_vector_store):
        mock_vector_store.get_collection_stats.return_value = {"count": 7, "status": "green"}

        response = client.get("/api/v1/stats")

        assert response.status_code == 200
        data = response.json()
        assert data["collection"] == "test_kb"
        assert data["count"] == 7
        assert data["backends"]["retrieval"] == "vector"


class TestOpenAPI:
    def test_openapi_lists_routes(self, client):
        paths = client.get("/openapi.json").json()["paths"]

        for path in ("/health", "/ready", "/api/v1/query", "/api/v1/query/batch", "/api/v1/documents"):
            assert path in paths

    def test_docs_page(self, client):
        assert client.get("/docs").status_code == 200
