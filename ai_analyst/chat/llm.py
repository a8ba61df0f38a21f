"""Wrappers around the OpenAI API for schema-constrained generation."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from openai import OpenAI

from ..config import Settings, get_settings


class GenerationBackend:
    """Protocol for structured-output model providers."""

    model_name: str

    def generate(
        self,
        prompt: str,
        *,
        schema: Mapping[str, Any],
        system_instruction: str,
    ) -> Any:  # pragma: no cover - interface
        """Return the model output: JSON text matching ``schema``, or the
        equivalent object when the provider has already decoded it."""

        raise NotImplementedError


class OpenAIStructuredModel(GenerationBackend):
    """Chat Completions wrapper requesting strict JSON-schema output."""

    def __init__(
        self,
        *,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        settings: Optional[Settings] = None,
        client: Optional[OpenAI] = None,
    ) -> None:
        settings = settings or get_settings()
        self.model_name = model or settings.ANALYST_MODEL
        self.client = client or OpenAI(
            api_key=settings.OPENAI_API_KEY,
            timeout=timeout or settings.ANALYST_REQUEST_TIMEOUT,
            max_retries=0,
        )

    def generate(
        self,
        prompt: str,
        *,
        schema: Mapping[str, Any],
        system_instruction: str,
    ) -> str:
        response_format: Dict[str, Any] = {
            "type": "json_schema",
            "json_schema": {
                "name": "analytics_response",
                "strict": True,
                "schema": dict(schema),
            },
        }
        response = self.client.chat.completions.create(
            model=self.model_name,
            messages=[
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": prompt},
            ],
            response_format=response_format,
        )
        choice = response.choices[0]
        return choice.message.content or ""
