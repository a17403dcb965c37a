"""Confidence scoring from retrieval scores."""

from ..domain import SearchResult


class ConfidenceEstimator:
    """Mean source score on a 0-100 scale.

    ``cap`` is a display clamp that keeps the assistant from ever reporting
    certainty; it is not a statistical property. ``None`` disables it.
    """

    def __init__(self, cap: float | None = 95.0) -> None:
        self.cap = cap

    def estimate(self, results: list[SearchResult]) -> float:
        if not results:
            return 0.0

        mean = sum(result.score for result in results) / len(results)
        confidence = min(max(mean * 100.0, 0.0), 100.0)
        if self.cap is not None:
            confidence = min(confidence, self.cap)
        return confidence
