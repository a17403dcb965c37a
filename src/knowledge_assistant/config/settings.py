"""Configuration management for the Knowledge Assistant."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _sanitize_secret(value: str) -> str:
    """Remove BOM characters and whitespace from secrets.

    Secrets copied from dashboards or mounted by the platform may contain
    BOM characters that cause encoding errors when used in HTTP headers.
    """
    if not value:
        return value
    # Remove BOM (U+FEFF) and strip whitespace
    return value.lstrip("\ufeff").strip()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Backend selection
    embedding_backend: Literal["gemini", "ollama", "none"] = "gemini"
    completion_backend: Literal["gemini", "ollama"] = "gemini"
    retrieval_strategy: Literal["vector", "keyword"] = "vector"

    # Google AI API
    google_api_key: str = ""
    gemini_llm_model: str = "gemini-2.0-flash"
    gemini_embedding_model: str = "gemini-embedding-001"

    # Local model server
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.1"
    ollama_embedding_model: str = "nomic-embed-text"

    # Qdrant settings
    qdrant_url: str = "http://localhost:6333"
    qdrant_api_key: str = ""
    qdrant_collection: str = "knowledge_base"
    embedding_dimension: int = 768

    @field_validator("google_api_key", "qdrant_api_key", "qdrant_url", mode="after")
    @classmethod
    def sanitize_secrets(cls, value: str) -> str:
        """Remove BOM and whitespace from secret values."""
        return _sanitize_secret(value)

    # RAG settings
    rag_top_k: int = 5
    rag_min_relevance_score: float = 0.7
    rag_max_tokens: int = 1500
    rag_temperature: float = 0.3
    confidence_cap: float | None = 95.0

    @field_validator("confidence_cap", mode="before")
    @classmethod
    def parse_disabled_cap(cls, value: object) -> object:
        """Treat an empty value, "none" or "null" as no cap."""
        if isinstance(value, str) and value.strip().lower() in ("", "none", "null"):
            return None
        return value

    # Keyword fallback retrieval
    keyword_top_k: int = 3
    keyword_min_score: float = 0.1
    keyword_scan_limit: int = 100

    # Ingestion
    chunk_size: int = 1000
    chunk_overlap: int = 200

    # Outbound calls
    request_timeout_seconds: float = 30.0

    # Inbound API
    rate_limit_window_seconds: float = 60.0
    rate_limit_max_requests: int = 100
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    log_file: Path | None = None
    debug: bool = False


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings()
