"""Turn a query and its retrieved context into a validated analytics payload."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Union

from pydantic import ValidationError

from ..errors import GenerationError, GenerationUnavailable, SchemaViolation
from ..models import CHART_VALUE_KEY, AnalyticsResponse
from ..retrieval.retriever import NO_CONTEXT_FALLBACK
from ..utils.logging import get_logger, log_with_context
from .llm import GenerationBackend
from .schema import REQUIRED_FIELDS, RESPONSE_SCHEMA, SYSTEM_INSTRUCTION

logger = get_logger(__name__)

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*\n?(.*)```", re.DOTALL)


@dataclass(frozen=True)
class InsightSuccess:
    response: AnalyticsResponse

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class InsightFailure:
    error: GenerationError

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return self.error.user_message


InsightResult = Union[InsightSuccess, InsightFailure]


def build_prompt(query: str, context: str) -> str:
    """Embed the context block and the literal query in delimited sections."""

    return (
        "CONTEXT:\n"
        "---\n"
        f"{context or NO_CONTEXT_FALLBACK}\n"
        "---\n"
        "\n"
        f"QUERY: {json.dumps(query, ensure_ascii=False)}\n"
        "\n"
        "Analyze the query based on the provided context and generate a response.\n"
    )


def parse_model_json(raw_output: Any) -> Any:
    """Parse model text as JSON, tolerating a Markdown code fence around it.

    Output that a backend has already decoded into a dict or list is
    returned unchanged.

    Raises
    ------
    GenerationUnavailable
        If the output is empty, truncated, too deeply nested or otherwise
        not JSON.
    """

    if isinstance(raw_output, (dict, list)):
        return raw_output
    if not isinstance(raw_output, str):
        raise GenerationUnavailable(
            f"Model returned {type(raw_output).__name__} instead of text"
        )

    cleaned = raw_output.strip()
    fence_match = _FENCE_PATTERN.fullmatch(cleaned)
    if fence_match:
        cleaned = fence_match.group(1).strip()
    if not cleaned:
        raise GenerationUnavailable("Model returned an empty response")
    try:
        return json.loads(cleaned)
    except (ValueError, RecursionError) as exc:
        raise GenerationUnavailable(f"Model returned invalid JSON: {exc}", cause=exc) from exc


def _normalize_chart_data(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    points = payload["chartData"]
    if not isinstance(points, list):
        raise SchemaViolation("chartData must be an array")

    declared_key = payload.get("chartKey")
    normalized: List[Dict[str, Any]] = []
    for position, point in enumerate(points):
        if not isinstance(point, dict):
            raise SchemaViolation(f"chartData[{position}] must be an object")
        if CHART_VALUE_KEY in point:
            value = point[CHART_VALUE_KEY]
        elif isinstance(declared_key, str) and declared_key in point:
            value = point[declared_key]
        else:
            raise SchemaViolation(f"chartData[{position}] has no numeric value")
        normalized.append({"name": point.get("name"), CHART_VALUE_KEY: value})
    return normalized


def normalize_response(payload: Any) -> AnalyticsResponse:
    """Validate parsed model output and rewrite it into the application shape.

    ``chartKey`` is always replaced by ``"value"`` and every chart point is
    reduced to ``{"name", "value"}``.

    Raises
    ------
    SchemaViolation
        If a required field is missing or a value is outside its domain.
    """

    if not isinstance(payload, dict):
        raise SchemaViolation("Model output must be a JSON object")

    missing = [name for name in REQUIRED_FIELDS if name not in payload]
    if missing:
        raise SchemaViolation(f"Missing required fields: {', '.join(missing)}")

    data = dict(payload)
    data["chartData"] = _normalize_chart_data(payload)
    data["chartKey"] = CHART_VALUE_KEY
    try:
        return AnalyticsResponse.model_validate(data)
    except ValidationError as exc:
        raise SchemaViolation(f"Model output failed validation: {exc}", cause=exc) from exc
    except (TypeError, ValueError, RecursionError) as exc:
        raise SchemaViolation(f"Model output could not be validated: {exc}", cause=exc) from exc


class InsightGenerator:
    """Call the model with the augmented prompt and validate what comes back."""

    def __init__(self, backend: GenerationBackend) -> None:
        self.backend = backend

    def generate(self, query: str, context: str) -> InsightResult:
        prompt = build_prompt(query, context)
        try:
            raw = self.backend.generate(
                prompt,
                schema=RESPONSE_SCHEMA,
                system_instruction=SYSTEM_INSTRUCTION,
            )
        except Exception as exc:
            logger.exception("Generation call failed")
            return InsightFailure(GenerationUnavailable(str(exc) or type(exc).__name__, cause=exc))

        try:
            response = normalize_response(parse_model_json(raw))
        except GenerationError as exc:
            log_with_context(
                logger,
                logging.WARNING,
                "Rejected model output",
                kind=exc.kind,
                detail=exc.detail,
            )
            return InsightFailure(exc)
        except Exception as exc:
            logger.exception("Unexpected error while processing model output")
            return InsightFailure(
                GenerationUnavailable(str(exc) or type(exc).__name__, cause=exc)
            )

        logger.debug("Generated insights with %d KPIs", len(response.kpis))
        return InsightSuccess(response)
