"""Google Gemini completion backend using the google-genai async client."""

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from google import genai

from ....core.domain import ChatMessage, Completion, TokenUsage
from ....core.domain.exceptions import (
    CompletionConnectionError,
    CompletionError,
    CompletionRateLimitError,
    CompletionTimeoutError,
    MissingAPIKeyError,
)
from ....core.domain.utils import normalize_text
from ....core.ports.completion_port import CompletionPort

logger = logging.getLogger(__name__)


class GeminiCompletionProvider(CompletionPort):
    """Chat completions from a Gemini model.

    System messages are passed as ``system_instruction``; assistant turns are
    sent with the ``model`` role Gemini expects.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = "gemini-2.0-flash",
        timeout_seconds: float = 30.0,
    ) -> None:
        """Initialize the provider.

        Args:
            api_key: Google AI API key.
            model: Model to use (default: gemini-2.0-flash for free tier).
            timeout_seconds: Per-request timeout.
        """
        if not api_key:
            raise MissingAPIKeyError(
                "Google API key not set. Get one at https://aistudio.google.com/ "
                "and set GOOGLE_API_KEY in your .env file.",
                context={"backend": "gemini", "component": "completion"},
            )
        self.api_key = api_key
        self.model_name = model
        self.timeout_seconds = timeout_seconds
        self._client: "genai.Client | None" = None

    def _get_client(self) -> "genai.Client":
        """Lazy load the Gemini client."""
        if self._client is None:
            from google import genai

            self._client = genai.Client(api_key=self.api_key)
            logger.info("Gemini client initialized for model: %s", self.model_name)
        return self._client

    @staticmethod
    def split_messages(messages: list[ChatMessage]) -> tuple[str | None, list[dict]]:
        """Separate system instructions from the conversation turns."""
        system_parts = []
        contents = []
        for message in messages:
            text = normalize_text(message.content)
            if message.role == "system":
                system_parts.append(text)
                continue
            role = "model" if message.role == "assistant" else "user"
            contents.append({"role": role, "parts": [{"text": text}]})
        system_instruction = "\n\n".join(system_parts) if system_parts else None
        return system_instruction, contents

    async def complete(
        self,
        messages: list[ChatMessage],
        max_tokens: int = 1500,
        temperature: float = 0.3,
    ) -> Completion:
        from google.genai import errors
        from google.genai.types import GenerateContentConfig

        client = self._get_client()
        system_instruction, contents = self.split_messages(messages)
        context = {"model": self.model_name}

        try:
            response = await asyncio.wait_for(
                client.aio.models.generate_content(
                    model=self.model_name,
                    contents=contents,
                    config=GenerateContentConfig(
                        system_instruction=system_instruction,
                        temperature=temperature,
                        max_output_tokens=max_tokens,
                    ),
                ),
                timeout=self.timeout_seconds,
            )
        except TimeoutError as e:
            raise CompletionTimeoutError(
                f"Gemini request timed out after {self.timeout_seconds}s",
                cause=e,
                context=context,
            ) from e
        except errors.APIError as e:
            if e.code == 429:
                raise CompletionRateLimitError(
                    "Gemini rate limit exceeded", cause=e, context=context
                ) from e
            if e.code in (401, 403):
                raise CompletionConnectionError(
                    "Gemini rejected the API key", cause=e, context=context
                ) from e
            raise CompletionError(
                f"Gemini request failed: {e.message}", cause=e, context=context
            ) from e
        except Exception as e:
            raise CompletionConnectionError(
                "Failed to reach Gemini", cause=e, context=context
            ) from e

        # Safety filters yield no candidates and no text
        text = response.text if response.candidates else None
        usage = None
        if response.usage_metadata is not None:
            usage = TokenUsage(
                prompt_tokens=response.usage_metadata.prompt_token_count,
                completion_tokens=response.usage_metadata.candidates_token_count,
                total_tokens=response.usage_metadata.total_token_count,
            )
        return Completion(text=normalize_text(text) if text else None, usage=usage)

    async def aclose(self) -> None:
        """Close the async HTTP session of the genai client, if one was created."""
        if self._client is not None:
            await self._client.aio.aclose()
            self._client = None
