"""Keyword retriever that builds the context block for the insight generator."""

from __future__ import annotations

import datetime
import re
from typing import Callable, Iterable, List, Optional, Set

import numpy as np

from ..models import Document, ScoredDocument
from ..storage.corpus import Corpus

NO_CONTEXT_FALLBACK = (
    "No specific context found. Analyze the query based on general business knowledge."
)

TITLE_MATCH_WEIGHT = 2
CONTENT_MATCH_WEIGHT = 1
RECENCY_WINDOW_MONTHS = 6
RECENCY_BOOST = 1.2
MIN_RELEVANCE_SCORE = 1
MIN_TOKEN_LENGTH = 4

_STRIP_PATTERN = re.compile(r"[?,.]")


def tokenize_query(query: str) -> Set[str]:
    """Return the distinct lower-cased query words longer than three characters."""

    cleaned = _STRIP_PATTERN.sub("", query.lower())
    return {word for word in cleaned.split() if len(word) >= MIN_TOKEN_LENGTH}


def months_between(earlier: datetime.date, later: datetime.date) -> int:
    """Whole calendar months from ``earlier`` to ``later``; days are ignored."""

    return (later.year - earlier.year) * 12 + (later.month - earlier.month)


def score_document(
    document: Document,
    tokens: Iterable[str],
    *,
    today: datetime.date,
) -> float:
    """Score ``document`` against the query ``tokens``.

    Each token adds 2 when found in the title and 1 when found in the
    content. Documents dated less than six months before ``today`` have
    the summed score multiplied by 1.2.
    """

    title = document.title.lower()
    content = document.content.lower()
    score: float = 0
    for token in tokens:
        if token in title:
            score += TITLE_MATCH_WEIGHT
        if token in content:
            score += CONTENT_MATCH_WEIGHT

    published = document.metadata.date
    if published is not None and months_between(published, today) < RECENCY_WINDOW_MONTHS:
        score *= RECENCY_BOOST
    return float(score)


def format_document(document: Document) -> str:
    return (
        f"--- Document: {document.title} "
        f"({document.metadata.source}, {document.metadata.date_label}) ---\n"
        f"{document.content}"
    )


class Retriever:
    """Rank corpus documents for a query and render the best ones as context."""

    def __init__(
        self,
        corpus: Corpus,
        *,
        max_results: int = 3,
        clock: Optional[Callable[[], datetime.date]] = None,
    ) -> None:
        if max_results < 1:
            raise ValueError("max_results must be a positive integer")
        self.corpus = corpus
        self.max_results = max_results
        self._clock = clock or datetime.date.today

    def rank(self, query: str, *, max_results: Optional[int] = None) -> List[ScoredDocument]:
        """Return the selected documents, highest score first.

        Only documents scoring strictly above 1 are kept. Equal scores keep
        their corpus order.
        """

        limit = self.max_results if max_results is None else max_results
        if limit < 1:
            raise ValueError("max_results must be a positive integer")

        tokens = tokenize_query(query)
        if not tokens or not len(self.corpus):
            return []

        today = self._clock()
        scores = np.fromiter(
            (score_document(document, tokens, today=today) for document in self.corpus),
            dtype=np.float64,
            count=len(self.corpus),
        )
        order = np.argsort(-scores, kind="stable")
        selected = [idx for idx in order if scores[idx] > MIN_RELEVANCE_SCORE][:limit]
        return [
            ScoredDocument(document=self.corpus[int(idx)], score=float(scores[idx]))
            for idx in selected
        ]

    def retrieve(self, query: str, *, max_results: Optional[int] = None) -> str:
        """Build the context block for ``query``.

        Returns an empty string when the query has no usable words and the
        fallback notice when no document is relevant enough.
        """

        if not tokenize_query(query):
            return ""
        results = self.rank(query, max_results=max_results)
        if not results:
            return NO_CONTEXT_FALLBACK
        return "\n\n".join(format_document(result.document) for result in results)
