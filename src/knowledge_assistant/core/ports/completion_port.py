"""Completion Port Interface."""

from abc import ABC, abstractmethod

from ..domain import ChatMessage, Completion


class CompletionPort(ABC):
    """Abstract interface for text generation backends."""

    @abstractmethod
    async def complete(
        self,
        messages: list[ChatMessage],
        max_tokens: int = 1500,
        temperature: float = 0.3,
    ) -> Completion:
        """Generate a completion for a chat-style prompt.

        Raises:
            CompletionError: On transport, auth, rate-limit or timeout failure.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources held by the backend."""
