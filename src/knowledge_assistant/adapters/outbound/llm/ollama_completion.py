"""Ollama completion backend over its local chat API."""

import logging

import httpx

from ....core.domain import ChatMessage, Completion, TokenUsage
from ....core.domain.exceptions import (
    CompletionConnectionError,
    CompletionError,
    CompletionRateLimitError,
    CompletionTimeoutError,
)
from ....core.ports.completion_port import CompletionPort

logger = logging.getLogger(__name__)


class OllamaCompletionProvider(CompletionPort):
    """Chat completions from a model served by a local Ollama instance."""

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3.1",
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model_name = model
        self.timeout_seconds = timeout_seconds
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout_seconds
            )
        return self._client

    async def complete(
        self,
        messages: list[ChatMessage],
        max_tokens: int = 1500,
        temperature: float = 0.3,
    ) -> Completion:
        context = {"model": self.model_name, "base_url": self.base_url}
        body = {
            "model": self.model_name,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "stream": False,
            "options": {"temperature": temperature, "num_predict": max_tokens},
        }

        try:
            response = await self._get_client().post("/api/chat", json=body)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise CompletionTimeoutError(
                "Ollama request timed out", cause=e, context=context
            ) from e
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 429:
                raise CompletionRateLimitError(
                    "Ollama rate limit exceeded", cause=e, context=context
                ) from e
            raise CompletionError(
                f"Ollama request failed with status {e.response.status_code}",
                cause=e,
                context=context,
            ) from e
        except httpx.HTTPError as e:
            raise CompletionConnectionError(
                f"Failed to reach Ollama at {self.base_url}", cause=e, context=context
            ) from e
        except ValueError as e:
            raise CompletionError(
                "Ollama returned an invalid response", cause=e, context=context
            ) from e

        if not isinstance(data, dict):
            raise CompletionError("Ollama returned an invalid response", context=context)
        prompt_tokens = data.get("prompt_eval_count")
        completion_tokens = data.get("eval_count")
        total = None
        if prompt_tokens is not None and completion_tokens is not None:
            total = prompt_tokens + completion_tokens

        return Completion(
            text=(data.get("message") or {}).get("content"),
            usage=TokenUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=total,
            ),
        )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
