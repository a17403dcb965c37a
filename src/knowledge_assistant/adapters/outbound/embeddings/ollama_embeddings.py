"""Ollama embedding backend over its local HTTP API."""

import logging

import httpx

from ....core.domain.exceptions import (
    EmbeddingAPIError,
    EmbeddingRateLimitError,
    EmbeddingTimeoutError,
)
from ....core.domain.utils import normalize_text
from ....core.ports.embedding_port import EmbeddingPort

logger = logging.getLogger(__name__)


class OllamaEmbeddingProvider(EmbeddingPort):
    """Embeds text with a model served by a local Ollama instance."""

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model_name: str = "nomic-embed-text",
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            base_url: Ollama server URL.
            model_name: Embedding model pulled into Ollama.
            timeout_seconds: Per-request timeout.
            client: Optional preconfigured client (tests inject a mock transport).
        """
        self.base_url = base_url.rstrip("/")
        self.model_name = model_name
        self.timeout_seconds = timeout_seconds
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout_seconds
            )
        return self._client

    async def embed(self, text: str) -> list[float]:
        context = {"model": self.model_name, "base_url": self.base_url}

        try:
            response = await self._get_client().post(
                "/api/embeddings",
                json={"model": self.model_name, "prompt": normalize_text(text)},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise EmbeddingTimeoutError(
                "Ollama embedding request timed out", cause=e, context=context
            ) from e
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 429:
                raise EmbeddingRateLimitError(
                    "Ollama embedding rate limit exceeded", cause=e, context=context
                ) from e
            raise EmbeddingAPIError(
                f"Ollama embedding request failed with status {e.response.status_code}",
                cause=e,
                context=context,
            ) from e
        except httpx.HTTPError as e:
            raise EmbeddingAPIError(
                f"Failed to reach Ollama at {self.base_url}", cause=e, context=context
            ) from e
        except ValueError as e:
            raise EmbeddingAPIError(
                "Ollama returned an invalid response", cause=e, context=context
            ) from e

        embedding = data.get("embedding") if isinstance(data, dict) else None
        if not embedding:
            raise EmbeddingAPIError("Ollama returned no embedding", context=context)
        try:
            return [float(value) for value in embedding]
        except (TypeError, ValueError) as e:
            raise EmbeddingAPIError(
                "Ollama returned an invalid response", cause=e, context=context
            ) from e

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
