"""Pytest configuration and fixtures."""

import datetime
import json
import os
import threading

import pytest

os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("ANALYST_ENV", "test")

from ai_analyst.chat.engine import AnalystSession  # noqa: E402
from ai_analyst.chat.generator import InsightGenerator  # noqa: E402
from ai_analyst.retrieval.retriever import Retriever  # noqa: E402
from ai_analyst.storage.corpus import Corpus  # noqa: E402

TODAY = datetime.date(2024, 8, 1)

VALID_PAYLOAD = {
    "summary": "Revenue grew steadily through Q1. Pro Widget led the growth.",
    "kpis": [
        {"label": "Total Revenue", "value": "$6.8M", "change": "+12%", "changeType": "increase"},
        {"label": "Top Region", "value": "North America", "change": "$3.1M", "changeType": "neutral"},
        {"label": "Churn", "value": "4.1%", "change": "+0.5%", "changeType": "decrease"},
    ],
    "chartData": [
        {"name": "Jan", "value": 2.1},
        {"name": "Feb", "value": 2.2},
        {"name": "Mar", "value": 2.5},
    ],
    "chartType": "bar",
    "chartKey": "value",
    "chartTitle": "Q1 2024 Monthly Revenue",
}

CORPUS_RECORDS = [
    {
        "id": "sales_q1_2024",
        "title": "Q1 2024 Sales Report",
        "content": "Q1 2024 concluded with total revenue of $6.8M. The Eco Module had $0.5M in sales.",
        "metadata": {"date": "2024-04-05", "source": "Salesforce", "tags": ["Sales", "q1"]},
    },
    {
        "id": "hr_q1_2024",
        "title": "Q1 2024 People Operations Report",
        "content": "Headcount stands at 820 employees. Turnover was 2.1%.",
        "metadata": {"date": "2024-04-02", "source": "HRIS", "tags": ["hr"]},
    },
]


class StaticBackend:
    """Generation backend returning a fixed text and recording its calls."""

    model_name = "static"

    def __init__(self, text):
        self.text = text
        self.calls = []

    def generate(self, prompt, *, schema, system_instruction):
        self.calls.append(
            {"prompt": prompt, "schema": schema, "system_instruction": system_instruction}
        )
        return self.text


class FailingBackend:
    """Generation backend that raises on every call."""

    model_name = "failing"

    def __init__(self, exc=None):
        self.exc = exc or ConnectionError("connection reset by peer")
        self.calls = 0

    def generate(self, prompt, *, schema, system_instruction):
        self.calls += 1
        raise self.exc


class BlockingBackend(StaticBackend):
    """Backend that waits for the test to release it before answering."""

    def __init__(self, text):
        super().__init__(text)
        self.entered = threading.Event()
        self.release = threading.Event()

    def generate(self, prompt, *, schema, system_instruction):
        self.entered.set()
        self.release.wait(timeout=5)
        return super().generate(prompt, schema=schema, system_instruction=system_instruction)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def corpus():
    return Corpus.from_records(CORPUS_RECORDS)


@pytest.fixture
def retriever(corpus):
    return Retriever(corpus, clock=lambda: TODAY)


@pytest.fixture
def valid_payload():
    return json.loads(json.dumps(VALID_PAYLOAD))


@pytest.fixture
def static_backend(valid_payload):
    return StaticBackend(json.dumps(valid_payload))


@pytest.fixture
def make_session(retriever):
    def factory(backend):
        return AnalystSession(retriever, InsightGenerator(backend))

    return factory
