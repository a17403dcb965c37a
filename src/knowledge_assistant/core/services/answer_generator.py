"""Answer generation from an assembled context."""

import logging
import time

from ..domain import ChatMessage
from ..domain.exceptions import GenerationError
from ..ports.completion_port import CompletionPort
from .prompts import FALLBACK_ANSWER, SYSTEM_PROMPT, USER_PROMPT_TEMPLATE

logger = logging.getLogger(__name__)


class AnswerGenerator:
    """Prompts the completion provider to answer strictly from the context."""

    def __init__(
        self,
        completion: CompletionPort,
        max_tokens: int = 1500,
        temperature: float = 0.3,
        system_prompt: str = SYSTEM_PROMPT,
    ) -> None:
        """Initialize the generator.

        Args:
            completion: Completion backend.
            max_tokens: Upper bound on generated tokens.
            temperature: Sampling temperature; low values reduce variance.
            system_prompt: Instruction constraining the model to the context.
        """
        self.completion = completion
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.system_prompt = system_prompt

    def build_messages(self, question: str, context: str) -> list[ChatMessage]:
        """Build the system and user turns for a question."""
        return [
            ChatMessage(role="system", content=self.system_prompt),
            ChatMessage(
                role="user",
                content=USER_PROMPT_TEMPLATE.format(context=context, question=question),
            ),
        ]

    async def generate(self, question: str, context: str) -> str:
        """Generate an answer for the question from the context.

        Args:
            question: The user's question.
            context: Output of the context assembler.

        Returns:
            The generated answer, or FALLBACK_ANSWER if the provider returned
            no text.

        Raises:
            GenerationError: If the completion provider call fails.
        """
        messages = self.build_messages(question, context)
        started = time.perf_counter()

        try:
            completion = await self.completion.complete(
                messages,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as e:
            duration_ms = (time.perf_counter() - started) * 1000
            logger.error(
                "Answer generation failed after %.0fms: %s: %s",
                duration_ms,
                type(e).__name__,
                e,
            )
            raise GenerationError(
                "Failed to generate answer",
                cause=e,
                context={
                    "dependency": type(e).__name__,
                    "duration_ms": round(duration_ms, 1),
                },
            ) from e

        duration_ms = (time.perf_counter() - started) * 1000
        usage = completion.usage
        logger.info(
            "Answer generated in %.0fms (tokens: prompt=%s completion=%s total=%s)",
            duration_ms,
            usage.prompt_tokens if usage else None,
            usage.completion_tokens if usage else None,
            usage.total_tokens if usage else None,
        )

        text = (completion.text or "").strip()
        if not text:
            logger.warning("Completion provider returned no text, using fallback answer")
            return FALLBACK_ANSWER
        return text
