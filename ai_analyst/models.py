"""Core domain models for the AI Analyst project."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


@dataclass(frozen=True)
class DocumentMetadata:
    """Provenance information attached to every corpus document."""

    source: str
    date: Optional[datetime.date] = None
    tags: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def date_label(self) -> str:
        return self.date.isoformat() if self.date else "undated"


@dataclass(frozen=True)
class Document:
    """A read-only document from the internal knowledge base."""

    id: str
    title: str
    content: str
    metadata: DocumentMetadata


@dataclass(frozen=True)
class ScoredDocument:
    """A retrieval candidate with its keyword relevance score."""

    document: Document
    score: float


class MessageType(str, Enum):
    USER = "user"
    AI = "ai"
    ERROR = "error"


@dataclass(frozen=True)
class ChatMessage:
    """One entry of a session transcript."""

    type: MessageType
    text: str


# ----------------------------------------------------------------------
# Generator-facing response models
# ----------------------------------------------------------------------
class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


ChangeType = Literal["increase", "decrease", "neutral"]
ChartType = Literal["bar", "line", "area"]

CHART_VALUE_KEY = "value"


class Kpi(_CamelModel):
    """A labelled metric with its change direction."""

    label: str
    value: str
    change: str
    change_type: ChangeType


class ChartDataPoint(_CamelModel):
    """A single x/y point; the y value is always stored under ``value``."""

    name: str
    value: float = Field(strict=True)


class AnalyticsResponse(_CamelModel):
    """Normalized analytics payload handed to the presentation layer."""

    summary: str
    kpis: List[Kpi]
    chart_data: List[ChartDataPoint]
    chart_type: ChartType
    chart_key: Literal["value"] = Field(default=CHART_VALUE_KEY)
    chart_title: str

    def to_payload(self) -> dict:
        """Serialize using the camelCase field names consumed by the UI."""

        return self.model_dump(by_alias=True)
