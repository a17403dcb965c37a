"""Text helpers shared by ingestion and prompt construction."""

import re
import unicodedata

_HORIZONTAL_WS = re.compile(r"[ \t\f\v]+")
_WS_AROUND_NEWLINE = re.compile(r" ?\n ?")
_EXTRA_NEWLINES = re.compile(r"\n{3,}")

# Byte order marks and decoder replacement characters left by bad uploads
_STRAY_CHARS = str.maketrans("", "", "\ufeff\ufffd")

_SENTENCE_ENDS = (". ", ".\n", "? ", "?\n", "! ", "!\n")


def clean_text(text: str | None) -> str:
    """Drop BOM and replacement characters and apply NFKC normalization."""
    if not text:
        return ""
    return unicodedata.normalize("NFKC", str(text).translate(_STRAY_CHARS))


def normalize_text(text: str | None) -> str:
    """Clean text and collapse whitespace for prompts and payloads.

    Line endings become ``\\n``, runs of spaces collapse to one, spaces
    hugging a newline are dropped and at most one blank line is kept.
    """
    cleaned = clean_text(text)
    if not cleaned:
        return ""

    cleaned = cleaned.replace("\r\n", "\n").replace("\r", "\n")
    cleaned = _HORIZONTAL_WS.sub(" ", cleaned)
    cleaned = _WS_AROUND_NEWLINE.sub("\n", cleaned)
    cleaned = _EXTRA_NEWLINES.sub("\n\n", cleaned)
    return cleaned.strip()


def _sentence_break(text: str, start: int, end: int) -> int:
    """End of the last sentence in the back half of ``text[start:end]``, else ``end``."""
    last = max(text.rfind(mark, start, end) for mark in _SENTENCE_ENDS)
    if last > start + (end - start) // 2:
        return last + 1
    return end


def chunk_text(text: str, chunk_size: int = 1000, chunk_overlap: int = 200) -> list[str]:
    """Split text into overlapping windows of at most ``chunk_size`` characters.

    A window is cut after the last sentence end in its second half when there
    is one, so chunks tend to hold whole sentences. Consecutive windows share
    ``chunk_overlap`` characters.

    Raises:
        ValueError: If ``chunk_size`` is not positive or ``chunk_overlap`` is
            negative or not smaller than ``chunk_size``.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if not 0 <= chunk_overlap < chunk_size:
        raise ValueError("chunk_overlap must be non-negative and smaller than chunk_size")

    if len(text) <= chunk_size:
        return [text] if text else []

    chunks: list[str] = []
    start = 0
    while True:
        end = min(start + chunk_size, len(text))
        if end < len(text):
            end = _sentence_break(text, start, end)

        piece = text[start:end].strip()
        if piece:
            chunks.append(piece)
        if end == len(text):
            return chunks
        start = max(end - chunk_overlap, start + 1)
