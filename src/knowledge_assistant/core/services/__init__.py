"""Pipeline services: retrieval, context assembly, generation and orchestration."""

from .answer_generator import FALLBACK_ANSWER, AnswerGenerator
from .confidence import ConfidenceEstimator
from .context_assembler import ContextAssembler
from .ingestion_service import IngestionService
from .query_service import NO_RESULTS_ANSWER, QueryService
from .retrieval_service import KeywordRetriever, VectorRetriever

__all__ = [
    "AnswerGenerator",
    "ConfidenceEstimator",
    "ContextAssembler",
    "IngestionService",
    "KeywordRetriever",
    "QueryService",
    "VectorRetriever",
    "FALLBACK_ANSWER",
    "NO_RESULTS_ANSWER",
]
