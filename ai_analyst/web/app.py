"""FastAPI application exposing the analyst session as a JSON API."""

from __future__ import annotations

from typing import List, Literal, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..chat.engine import AnalystSession, create_session
from ..chat.generator import InsightFailure
from ..errors import EmptyQueryError, QueryInFlightError
from ..ingestion.mock import EXAMPLE_QUERIES
from ..models import AnalyticsResponse, ChatMessage


class QueryRequest(BaseModel):
    """Request payload for the query endpoint."""

    query: str = Field(..., description="Business question to analyze")


class ChatMessagePayload(BaseModel):
    """Serialized transcript entry returned to the UI."""

    type: Literal["user", "ai", "error"]
    text: str

    @classmethod
    def from_message(cls, message: ChatMessage) -> "ChatMessagePayload":
        return cls(type=message.type.value, text=message.text)


class QueryResponsePayload(BaseModel):
    """Response payload for a successful query."""

    response: AnalyticsResponse
    transcript: List[ChatMessagePayload]


class SessionPayload(BaseModel):
    """Everything the dashboard needs to render the current session."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    transcript: List[ChatMessagePayload]
    response: Optional[AnalyticsResponse]
    response_query: Optional[str]
    error: Optional[str]
    in_flight: bool


def _transcript(session: AnalystSession) -> List[ChatMessagePayload]:
    return [ChatMessagePayload.from_message(message) for message in session.transcript]


def create_app(*, session: Optional[AnalystSession] = None) -> FastAPI:
    """Instantiate the FastAPI app around a single analyst session."""

    session = session or create_session()

    app = FastAPI(title="AI Analyst", version="1.0.0")

    @app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/examples")
    async def examples() -> dict[str, List[str]]:
        return {"examples": list(EXAMPLE_QUERIES)}

    @app.get("/api/session", response_model=SessionPayload)
    def session_state() -> SessionPayload:
        snapshot = session.snapshot()
        return SessionPayload(
            transcript=[ChatMessagePayload.from_message(m) for m in snapshot.transcript],
            response=snapshot.response,
            response_query=snapshot.response_query,
            error=snapshot.error,
            in_flight=snapshot.in_flight,
        )

    @app.post("/api/query", response_model=QueryResponsePayload)
    def query_endpoint(payload: QueryRequest) -> QueryResponsePayload:
        try:
            result = session.submit(payload.query)
        except EmptyQueryError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except QueryInFlightError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc

        if isinstance(result, InsightFailure):
            raise HTTPException(status_code=502, detail=result.message)
        return QueryResponsePayload(response=result.response, transcript=_transcript(session))

    return app
