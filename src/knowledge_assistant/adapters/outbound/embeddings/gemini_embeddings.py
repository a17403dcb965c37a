"""Google Gemini embedding backend using the google-genai async client."""

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from google import genai

from ....core.domain.exceptions import (
    EmbeddingAPIError,
    EmbeddingRateLimitError,
    EmbeddingTimeoutError,
    MissingAPIKeyError,
)
from ....core.domain.utils import normalize_text
from ....core.ports.embedding_port import EmbeddingPort

logger = logging.getLogger(__name__)

QUERY_TASK_TYPE = "RETRIEVAL_QUERY"
DOCUMENT_TASK_TYPE = "RETRIEVAL_DOCUMENT"


class GeminiEmbeddingProvider(EmbeddingPort):
    """Embeds text with a Gemini embedding model.

    Queries and documents use different task types so the model can
    optimise each side of the similarity search.
    """

    def __init__(
        self,
        api_key: str | None,
        model_name: str = "gemini-embedding-001",
        dimension: int = 768,
        timeout_seconds: float = 30.0,
    ) -> None:
        if not api_key:
            raise MissingAPIKeyError(
                "Google API key not set. Get one at https://aistudio.google.com/ "
                "and set GOOGLE_API_KEY in your .env file.",
                context={"backend": "gemini", "component": "embeddings"},
            )
        self.api_key = api_key
        self.model_name = model_name
        self.dimension = dimension
        self.timeout_seconds = timeout_seconds
        self._client: "genai.Client | None" = None

    def _get_client(self) -> "genai.Client":
        """Get or create the genai client."""
        if self._client is None:
            from google import genai

            self._client = genai.Client(api_key=self.api_key)
            logger.info("Gemini embedding client initialized for model: %s", self.model_name)
        return self._client

    async def embed(self, text: str) -> list[float]:
        return await self._embed(text, QUERY_TASK_TYPE)

    async def embed_document(self, text: str) -> list[float]:
        return await self._embed(text, DOCUMENT_TASK_TYPE)

    async def _embed(self, text: str, task_type: str) -> list[float]:
        from google.genai import errors, types

        client = self._get_client()
        context = {"model": self.model_name, "task_type": task_type}

        try:
            result = await asyncio.wait_for(
                client.aio.models.embed_content(
                    model=self.model_name,
                    contents=[normalize_text(text)],
                    config=types.EmbedContentConfig(
                        task_type=task_type,
                        output_dimensionality=self.dimension,
                    ),
                ),
                timeout=self.timeout_seconds,
            )
        except TimeoutError as e:
            raise EmbeddingTimeoutError(
                f"Embedding request timed out after {self.timeout_seconds}s",
                cause=e,
                context=context,
            ) from e
        except errors.APIError as e:
            if e.code == 429:
                raise EmbeddingRateLimitError(
                    "Gemini embedding rate limit exceeded", cause=e, context=context
                ) from e
            raise EmbeddingAPIError(
                f"Gemini embedding request failed: {e.message}", cause=e, context=context
            ) from e
        except Exception as e:
            raise EmbeddingAPIError(
                "Gemini embedding request failed", cause=e, context=context
            ) from e

        if not result or not result.embeddings or not result.embeddings[0].values:
            raise EmbeddingAPIError("Gemini returned no embedding", context=context)
        return list(result.embeddings[0].values)

    async def aclose(self) -> None:
        """Close the async HTTP session of the genai client, if one was created."""
        if self._client is not None:
            await self._client.aio.aclose()
            self._client = None
