"""AI Analyst: retrieval-augmented business insights from internal documents."""

from .chat.engine import AnalystSession, create_session
from .chat.generator import InsightFailure, InsightGenerator, InsightSuccess
from .errors import (
    AnalystError,
    EmptyQueryError,
    GenerationError,
    GenerationUnavailable,
    QueryInFlightError,
    SchemaViolation,
)
from .models import AnalyticsResponse, ChartDataPoint, ChatMessage, Document, Kpi
from .retrieval.retriever import Retriever
from .storage.corpus import Corpus

__version__ = "1.0.0"
__all__ = [
    "AnalystSession",
    "AnalyticsResponse",
    "AnalystError",
    "ChartDataPoint",
    "ChatMessage",
    "Corpus",
    "Document",
    "EmptyQueryError",
    "GenerationError",
    "GenerationUnavailable",
    "InsightFailure",
    "InsightGenerator",
    "InsightSuccess",
    "Kpi",
    "QueryInFlightError",
    "Retriever",
    "SchemaViolation",
    "create_session",
]
