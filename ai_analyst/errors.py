"""Exception types raised or reported by the analyst pipeline."""

from __future__ import annotations

from typing import Optional

GENERATION_FAILED_MESSAGE = (
    "Failed to communicate with the AI model. Please check your query or API key."
)


class AnalystError(Exception):
    """Base class for all AI Analyst errors."""


class EmptyQueryError(AnalystError, ValueError):
    """Raised when a submitted query has no content after trimming."""

    def __init__(self, message: str = "Query cannot be empty.") -> None:
        super().__init__(message)


class QueryInFlightError(AnalystError):
    """Raised when a session receives a query while another one is running."""

    def __init__(self, message: str = "A query is already being processed.") -> None:
        super().__init__(message)


class GenerationError(AnalystError):
    """A failure on the generation path.

    ``user_message`` is safe to show to end users; ``cause`` keeps the
    underlying exception for logging only.
    """

    kind = "generation_error"

    def __init__(
        self,
        detail: str,
        *,
        cause: Optional[BaseException] = None,
        user_message: str = GENERATION_FAILED_MESSAGE,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.cause = cause
        self.user_message = user_message


class GenerationUnavailable(GenerationError):
    """The model call failed or returned text that is not JSON."""

    kind = "generation_unavailable"


class SchemaViolation(GenerationError):
    """The model returned JSON that does not satisfy the response schema."""

    kind = "schema_violation"
