"""Query orchestration: retrieval, generation and confidence scoring."""

import asyncio
import logging
import time
from enum import Enum

from ..domain import QueryResult, SearchResult
from ..domain.exceptions import KnowledgeAssistantError
from ..ports.retrieval_port import RetrievalPort
from .answer_generator import AnswerGenerator
from .confidence import ConfidenceEstimator
from .context_assembler import ContextAssembler
from .prompts import NO_RESULTS_ANSWER

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    """Stages a question passes through."""

    IDLE = "idle"
    RETRIEVING = "retrieving"
    NO_RESULTS = "no_results"
    ASSEMBLING = "assembling"
    GENERATING = "generating"
    SCORING_CONFIDENCE = "scoring_confidence"
    DONE = "done"
    FAILED = "failed"


class QueryService:
    """Answers questions from the knowledge base.

    Each call runs an independent pipeline; the injected collaborators must
    be safe for concurrent use. Failures from retrieval or generation are
    propagated unchanged: there is no retry and no degraded answer.
    """

    def __init__(
        self,
        retriever: RetrievalPort,
        generator: AnswerGenerator,
        assembler: ContextAssembler | None = None,
        confidence: ConfidenceEstimator | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            retriever: Vector or keyword retrieval strategy.
            generator: Answer generator wrapping the completion provider.
            assembler: Context assembler (default formatting if omitted).
            confidence: Confidence estimator (capped at 95 if omitted).
        """
        self.retriever = retriever
        self.generator = generator
        self.assembler = assembler or ContextAssembler()
        self.confidence = confidence or ConfidenceEstimator()

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int(round((time.perf_counter() - started) * 1000))

    @staticmethod
    def _transition(state: PipelineState) -> PipelineState:
        logger.debug("Pipeline state -> %s", state.value)
        return state

    async def answer(self, question: str) -> QueryResult:
        """Answer a single, already validated question.

        Args:
            question: The user's question.

        Returns:
            QueryResult. An empty knowledge match is a successful result with
            no sources and zero confidence.

        Raises:
            RetrievalError: If the knowledge base search fails.
            GenerationError: If the completion provider fails.
        """
        started = time.perf_counter()
        state = self._transition(PipelineState.IDLE)
        logger.info("Processing question (%d chars)", len(question))

        try:
            state = self._transition(PipelineState.RETRIEVING)
            sources: list[SearchResult] = await self.retriever.retrieve(question)

            if not sources:
                self._transition(PipelineState.NO_RESULTS)
                elapsed = self._elapsed_ms(started)
                logger.warning("No relevant documents found (%dms)", elapsed)
                return QueryResult(
                    answer=NO_RESULTS_ANSWER,
                    sources=[],
                    confidence=0.0,
                    processing_time_ms=elapsed,
                )

            state = self._transition(PipelineState.ASSEMBLING)
            context = self.assembler.assemble(sources)

            state = self._transition(PipelineState.GENERATING)
            answer = await self.generator.generate(question, context)
        except KnowledgeAssistantError as e:
            elapsed = self._elapsed_ms(started)
            e.extra_context.setdefault("stage", state.value)
            e.extra_context.setdefault("elapsed_ms", elapsed)
            e.extra_context.setdefault("question_length", len(question))
            self._transition(PipelineState.FAILED)
            logger.error(
                "Question failed during %s after %dms: %s", state.value, elapsed, e.message
            )
            raise

        self._transition(PipelineState.SCORING_CONFIDENCE)
        confidence = self.confidence.estimate(sources)
        elapsed = self._elapsed_ms(started)
        self._transition(PipelineState.DONE)

        logger.info(
            "Question processed successfully: %d sources, confidence %.1f, %dms",
            len(sources),
            confidence,
            elapsed,
        )
        return QueryResult(
            answer=answer,
            sources=sources,
            confidence=confidence,
            processing_time_ms=elapsed,
        )

    async def answer_batch(self, questions: list[str]) -> list[QueryResult]:
        """Answer several questions concurrently.

        Results are index-aligned with ``questions`` regardless of completion
        order. The first failure fails the whole batch and cancels the
        questions still in flight; that failure is re-raised unchanged.
        """
        logger.info("Processing batch of %d questions", len(questions))
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(self.answer(question)) for question in questions]
        except ExceptionGroup as failures:
            logger.warning(
                "Batch failed, cancelled remaining questions (%d failure(s))",
                len(failures.exceptions),
            )
            raise failures.exceptions[0]
        return [task.result() for task in tasks]
