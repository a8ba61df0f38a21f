"""Chat orchestration for the AI Analyst."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..config import Settings, get_settings
from ..errors import EmptyQueryError, QueryInFlightError
from ..ingestion.files import load_corpus_file
from ..ingestion.mock import generate_mock_corpus
from ..models import AnalyticsResponse, ChatMessage, MessageType
from ..retrieval.retriever import Retriever
from ..storage.corpus import Corpus
from ..utils.logging import get_logger
from .generator import InsightFailure, InsightGenerator, InsightResult
from .llm import GenerationBackend, OpenAIStructuredModel

logger = get_logger(__name__)

DASHBOARD_ERROR_MESSAGE = "Failed to generate insights. Please try again."


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a session for the presentation layer."""

    transcript: Tuple[ChatMessage, ...]
    response: Optional[AnalyticsResponse]
    response_query: Optional[str]
    error: Optional[str]
    in_flight: bool


class AnalystSession:
    """Glue together retrieval and generation for one conversation.

    At most one query is processed at a time; a submission that arrives
    while another is running is rejected with :class:`QueryInFlightError`.
    """

    def __init__(self, retriever: Retriever, generator: InsightGenerator) -> None:
        self.retriever = retriever
        self.generator = generator
        self._transcript: List[ChatMessage] = []
        self._response: Optional[AnalyticsResponse] = None
        self._response_query: Optional[str] = None
        self._error: Optional[str] = None
        self._in_flight = False
        self._lock = threading.Lock()

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def transcript(self) -> Tuple[ChatMessage, ...]:
        return tuple(self._transcript)

    @property
    def response(self) -> Optional[AnalyticsResponse]:
        return self._response

    @property
    def error(self) -> Optional[str]:
        return self._error

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            transcript=tuple(self._transcript),
            response=self._response,
            response_query=self._response_query,
            error=self._error,
            in_flight=self._in_flight,
        )

    def submit(self, query: str) -> InsightResult:
        """Answer ``query`` and record the exchange in the transcript."""

        query = query.strip()
        if not query:
            raise EmptyQueryError()
        if not self._lock.acquire(blocking=False):
            raise QueryInFlightError()

        try:
            self._in_flight = True
            self._error = None
            self._transcript.append(ChatMessage(MessageType.USER, query))

            context = self.retriever.retrieve(query)
            result = self.generator.generate(query, context)

            if isinstance(result, InsightFailure):
                self._error = DASHBOARD_ERROR_MESSAGE
                self._transcript.append(ChatMessage(MessageType.ERROR, result.message))
                logger.info("Query failed with %s", result.error.kind)
            else:
                self._response = result.response
                self._response_query = query
                self._transcript.append(ChatMessage(MessageType.AI, result.response.summary))
            return result
        finally:
            self._in_flight = False
            self._lock.release()


def load_corpus(settings: Settings) -> Corpus:
    """Load the configured corpus file, or generate the mock knowledge base."""

    if settings.ANALYST_CORPUS_PATH:
        corpus = load_corpus_file(settings.ANALYST_CORPUS_PATH)
        logger.info("Loaded %d documents from %s", len(corpus), settings.ANALYST_CORPUS_PATH)
        return corpus
    corpus = generate_mock_corpus(settings.ANALYST_MOCK_DOCS, seed=settings.ANALYST_MOCK_SEED)
    logger.info("Generated mock corpus with %d documents", len(corpus))
    return corpus


def create_session(
    *,
    settings: Optional[Settings] = None,
    corpus: Optional[Corpus] = None,
    backend: Optional[GenerationBackend] = None,
    max_results: Optional[int] = None,
) -> AnalystSession:
    """Assemble a session from settings, building defaults for missing parts."""

    settings = settings or get_settings()
    if corpus is None:
        corpus = load_corpus(settings)
    retriever = Retriever(corpus, max_results=max_results or settings.ANALYST_MAX_RESULTS)
    generator = InsightGenerator(backend or OpenAIStructuredModel(settings=settings))
    return AnalystSession(retriever, generator)
