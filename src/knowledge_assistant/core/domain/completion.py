"""Completion provider boundary types."""

from dataclasses import dataclass


@dataclass
class ChatMessage:
    """A single message in a completion request."""

    role: str
    content: str


@dataclass
class TokenUsage:
    """Token accounting reported by a completion provider."""

    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None


@dataclass
class Completion:
    """Text returned by a completion provider, with optional usage."""

    text: str | None
    usage: TokenUsage | None = None
