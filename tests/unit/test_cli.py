"""Unit tests for the Typer CLI."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from knowledge_assistant.adapters.inbound.cli.commands import app, load_uploads
from knowledge_assistant.core.domain import (
    Document,
    IngestionOutcome,
    QueryResult,
    SearchResult,
)
from knowledge_assistant.core.domain.exceptions import RetrievalError

pytestmark = pytest.mark.unit

runner = CliRunner()

BUILD_CONTAINER = "knowledge_assistant.adapters.inbound.cli.commands.build_container"


@pytest.fixture
def container():
    container = MagicMock()
    container.aclose = AsyncMock()
    container.query_service.answer = AsyncMock(
        return_value=QueryResult(
            answer="Up to three days a week [Document 1].",
            sources=[
                SearchResult(
                    document=Document(doc_id="d1", title="Remote Work Policy", content="..."),
                    score=0.91,
                )
            ],
            confidence=91.0,
            processing_time_ms=42,
        )
    )
    container.ingestion_service.index_documents = AsyncMock()
    container.ingestion_service.stats = AsyncMock(
        return_value={"collection": "kb", "count": 3, "status": "green", "backends": {}}
    )
    return container


class TestAsk:
    def test_prints_answer_and_sources(self, container):
        with patch(BUILD_CONTAINER, return_value=container):
            result = runner.invoke(app, ["ask", "What is the remote work policy?"])

        assert result.exit_code == 0
        assert "Up to three days a week" in result.output
        assert "Remote Work Policy" in result.output
        container.query_service.answer.assert_awaited_once_with("What is the remote work policy?")
        container.aclose.assert_awaited_once()

    def test_invalid_question_exits_before_building(self, container):
        with patch(BUILD_CONTAINER, return_value=container) as build:
            result = runner.invoke(app, ["ask", "Hi"])

        assert result.exit_code == 1
        assert "KA_VAL_003" in result.output
        build.assert_not_called()

    def test_pipeline_failure_exits_with_error_code(self, container):
        container.query_service.answer.side_effect = RetrievalError("Failed to search knowledge base")

        with patch(BUILD_CONTAINER, return_value=container):
            result = runner.invoke(app, ["ask", "What is the remote work policy?"])

        assert result.exit_code == 1
        assert "KA_RET_001" in result.output
        container.aclose.assert_awaited_once()


class TestIngest:
    def test_loads_text_and_json_documents(self, tmp_path):
        (tmp_path / "leave.md").write_text("Employees get 25 days of leave.", encoding="utf-8")
        (tmp_path / "notes.csv").write_text("ignored", encoding="utf-8")
        (tmp_path / "policies.json").write_text(
            json.dumps(
                [
                    {"title": "Travel", "content": "Book through the portal.", "tags": ["travel"]},
                    {"title": "Expenses", "content": "Submit receipts monthly."},
                ]
            ),
            encoding="utf-8",
        )

        uploads = load_uploads(tmp_path, category="hr")

        assert [u.title for u in uploads] == ["leave", "Travel", "Expenses"]
        assert uploads[0].source == "leave.md"
        assert uploads[1].tags == ["travel"]
        assert {u.category for u in uploads} == {"hr"}

    def test_reports_failures_with_exit_code(self, tmp_path, container):
        (tmp_path / "leave.txt").write_text("Employees get 25 days of leave.", encoding="utf-8")
        container.ingestion_service.index_documents.return_value = [
            IngestionOutcome(title="leave", success=False, error="Failed to index document: leave")
        ]

        with patch(BUILD_CONTAINER, return_value=container):
            result = runner.invoke(app, ["ingest", str(tmp_path)])

        assert result.exit_code == 1
        assert "0 indexed, 1 failed" in result.output

    def test_empty_directory(self, tmp_path):
        result = runner.invoke(app, ["ingest", str(tmp_path)])

        assert result.exit_code == 1
        assert "No .txt, .md or .json documents" in result.output


class TestStats:
    def test_shows_collection_and_count(self, container):
        with patch(BUILD_CONTAINER, return_value=container):
            result = runner.invoke(app, ["stats"])

        assert result.exit_code == 0
        assert "kb" in result.output
        assert "3" in result.output
