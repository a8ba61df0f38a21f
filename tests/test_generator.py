"""Tests for prompt assembly, output parsing and normalization."""

import json
import logging

import pytest

from conftest import FailingBackend, StaticBackend
from ai_analyst.chat.generator import (
    InsightFailure,
    InsightGenerator,
    InsightSuccess,
    build_prompt,
    normalize_response,
    parse_model_json,
)
from ai_analyst.chat.schema import RESPONSE_SCHEMA, SYSTEM_INSTRUCTION
from ai_analyst.errors import (
    GENERATION_FAILED_MESSAGE,
    GenerationUnavailable,
    SchemaViolation,
)
from ai_analyst.retrieval.retriever import NO_CONTEXT_FALLBACK


class TestBuildPrompt:
    def test_context_and_query_are_delimited(self):
        prompt = build_prompt('Q1 "sales" results', "--- Document: A (B, 2024-01-01) ---\nbody")

        assert prompt.startswith("CONTEXT:\n---\n--- Document: A (B, 2024-01-01) ---\nbody\n---\n")
        assert 'QUERY: "Q1 \\"sales\\" results"' in prompt
        assert prompt.rstrip().endswith("generate a response.")

    def test_empty_context_uses_fallback(self):
        prompt = build_prompt("Is Q1 up?", "")
        assert NO_CONTEXT_FALLBACK in prompt


class TestParseModelJson:
    def test_plain_json(self):
        assert parse_model_json('  {"a": 1} ') == {"a": 1}

    def test_fenced_json(self):
        assert parse_model_json('```json\n{"a": 1}\n```') == {"a": 1}

    def test_truncated_json(self):
        with pytest.raises(GenerationUnavailable):
            parse_model_json('{"summary": "Revenue gr')

    def test_empty_output(self):
        with pytest.raises(GenerationUnavailable):
            parse_model_json("   ")

    def test_fence_inside_string_is_kept(self):
        text = json.dumps({"summary": "Run ```sql\nSELECT 1\n``` to check."})
        assert parse_model_json(text) == {"summary": "Run ```sql\nSELECT 1\n``` to check."}

    def test_deeply_nested_json(self):
        with pytest.raises(GenerationUnavailable):
            parse_model_json("[" * 100000 + "]" * 100000)

    def test_already_decoded_output(self):
        assert parse_model_json({"a": 1}) == {"a": 1}

    def test_non_text_output(self):
        with pytest.raises(GenerationUnavailable, match="int"):
            parse_model_json(42)


class TestNormalizeResponse:
    def test_valid_payload(self, valid_payload):
        response = normalize_response(valid_payload)

        assert response.chart_key == "value"
        assert response.chart_type == "bar"
        assert response.kpis[0].change_type == "increase"
        assert [p.name for p in response.chart_data] == ["Jan", "Feb", "Mar"]

    def test_custom_chart_key_is_rewritten(self, valid_payload):
        valid_payload["chartKey"] = "revenue"
        valid_payload["chartData"] = [{"name": "Jan", "revenue": 5}]

        payload = normalize_response(valid_payload).to_payload()

        assert payload["chartKey"] == "value"
        assert payload["chartData"] == [{"name": "Jan", "value": 5}]

    def test_extra_point_fields_are_dropped(self, valid_payload):
        valid_payload["chartData"] = [{"name": "Jan", "value": 3, "color": "red", "target": 4}]

        payload = normalize_response(valid_payload).to_payload()

        assert payload["chartData"] == [{"name": "Jan", "value": 3}]

    def test_value_key_wins_over_declared_key(self, valid_payload):
        valid_payload["chartKey"] = "revenue"
        valid_payload["chartData"] = [{"name": "Jan", "value": 1, "revenue": 9}]

        response = normalize_response(valid_payload)

        assert response.chart_data[0].value == 1

    @pytest.mark.parametrize("field", ["summary", "kpis", "chartData", "chartType", "chartKey", "chartTitle"])
    def test_missing_required_field(self, valid_payload, field):
        del valid_payload[field]
        with pytest.raises(SchemaViolation, match=field):
            normalize_response(valid_payload)

    def test_unknown_chart_type(self, valid_payload):
        valid_payload["chartType"] = "pie"
        with pytest.raises(SchemaViolation):
            normalize_response(valid_payload)

    def test_unknown_change_type(self, valid_payload):
        valid_payload["kpis"][0]["changeType"] = "up"
        with pytest.raises(SchemaViolation):
            normalize_response(valid_payload)

    def test_point_without_value(self, valid_payload):
        valid_payload["chartData"] = [{"name": "Jan", "amount": 3}]
        with pytest.raises(SchemaViolation, match="chartData\\[0\\]"):
            normalize_response(valid_payload)

    def test_non_numeric_value(self, valid_payload):
        valid_payload["chartData"] = [{"name": "Jan", "value": "lots"}]
        with pytest.raises(SchemaViolation):
            normalize_response(valid_payload)

    @pytest.mark.parametrize("value", [True, "5", None])
    def test_value_must_be_a_number(self, valid_payload, value):
        valid_payload["chartData"] = [{"name": "Jan", "value": value}]
        with pytest.raises(SchemaViolation):
            normalize_response(valid_payload)

    def test_integer_value_is_accepted(self, valid_payload):
        valid_payload["chartData"] = [{"name": "Jan", "value": 7}]
        assert normalize_response(valid_payload).chart_data[0].value == 7

    def test_non_object_payload(self):
        with pytest.raises(SchemaViolation):
            normalize_response(["summary"])


class TestInsightGenerator:
    def test_success(self, static_backend):
        result = InsightGenerator(static_backend).generate("Q1 sales results", "context block")

        assert isinstance(result, InsightSuccess)
        assert result.ok
        assert result.response.chart_title == "Q1 2024 Monthly Revenue"

        call = static_backend.calls[0]
        assert call["schema"] is RESPONSE_SCHEMA
        assert call["system_instruction"] == SYSTEM_INSTRUCTION
        assert "context block" in call["prompt"]
        assert '"Q1 sales results"' in call["prompt"]

    def test_transport_error(self, caplog):
        backend = FailingBackend(ConnectionError("upstream timeout"))

        with caplog.at_level(logging.ERROR):
            result = InsightGenerator(backend).generate("Q1 sales", "ctx")

        assert isinstance(result, InsightFailure)
        assert not result.ok
        assert isinstance(result.error, GenerationUnavailable)
        assert isinstance(result.error.cause, ConnectionError)
        assert result.message == GENERATION_FAILED_MESSAGE
        assert "upstream timeout" not in result.message
        assert "Generation call failed" in caplog.text

    def test_non_json_output(self):
        result = InsightGenerator(StaticBackend("Sorry, I cannot help.")).generate("q", "ctx")

        assert isinstance(result, InsightFailure)
        assert isinstance(result.error, GenerationUnavailable)
        assert result.message == GENERATION_FAILED_MESSAGE

    def test_decoded_payload_from_backend(self, valid_payload):
        result = InsightGenerator(StaticBackend(valid_payload)).generate("q", "ctx")

        assert isinstance(result, InsightSuccess)
        assert result.response.chart_key == "value"

    def test_deeply_nested_output(self):
        backend = StaticBackend("[" * 100000 + "]" * 100000)

        result = InsightGenerator(backend).generate("q", "ctx")

        assert isinstance(result, InsightFailure)
        assert isinstance(result.error, GenerationUnavailable)
        assert isinstance(result.error.cause, RecursionError)

    def test_unexpected_processing_error(self, monkeypatch, static_backend, caplog):
        def explode(payload):
            raise RuntimeError("validator crashed")

        monkeypatch.setattr("ai_analyst.chat.generator.normalize_response", explode)

        with caplog.at_level(logging.ERROR):
            result = InsightGenerator(static_backend).generate("q", "ctx")

        assert isinstance(result, InsightFailure)
        assert isinstance(result.error, GenerationUnavailable)
        assert result.message == GENERATION_FAILED_MESSAGE
        assert "Unexpected error while processing model output" in caplog.text

    def test_schema_violation(self, valid_payload, caplog):
        del valid_payload["chartType"]
        backend = StaticBackend(json.dumps(valid_payload))

        with caplog.at_level(logging.WARNING):
            result = InsightGenerator(backend).generate("q", "ctx")

        assert isinstance(result, InsightFailure)
        assert isinstance(result.error, SchemaViolation)
        assert result.message == GENERATION_FAILED_MESSAGE
        assert "Rejected model output" in caplog.text


def test_response_schema_requires_every_field():
    assert set(RESPONSE_SCHEMA["required"]) == set(RESPONSE_SCHEMA["properties"])
    assert RESPONSE_SCHEMA["properties"]["chartType"]["enum"] == ["bar", "line", "area"]
    kpi_schema = RESPONSE_SCHEMA["properties"]["kpis"]["items"]
    assert kpi_schema["required"] == ["label", "value", "change", "changeType"]
