"""Formats retrieved documents into the prompt context block."""

from ..domain import SearchResult
from ..domain.utils import normalize_text

DOCUMENT_SEPARATOR = "\n---\n\n"


class ContextAssembler:
    """Numbers documents in the order given so the model can cite "Document N".

    The assembler never re-sorts or truncates; chunking happens at indexing time.
    """

    @staticmethod
    def format_block(position: int, result: SearchResult) -> str:
        title = normalize_text(result.title) or "Untitled"
        content = normalize_text(result.content)
        return f"[Document {position}: {title}]\n{content}\n"

    def assemble(self, results: list[SearchResult]) -> str:
        return DOCUMENT_SEPARATOR.join(
            self.format_block(position, result) for position, result in enumerate(results, start=1)
        )
