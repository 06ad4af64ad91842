"""LLM-powered sentiment and emotion analysis of journal entries."""

from __future__ import annotations

import json
import logging
import re
import time
from typing import Any, Dict, Optional

import anthropic
from anthropic import AsyncAnthropic
from pydantic import ValidationError

from mindflow.core.config import settings
from mindflow.core.logging_utils import log_llm_usage, sanitize_entry_text
from mindflow.core.tracing import get_tracer
from mindflow.features.journaling.models import AnalysisResult, Sentiment
from mindflow.shared.errors import (
    InvalidCredentialsError,
    MalformedResponseError,
    MissingCredentialsError,
    NetworkFailureError,
    ServiceUnavailableError,
)

logger = logging.getLogger("Mindflow.Intelligence.LLM")
tracer = get_tracer(__name__)

SYSTEM_INSTRUCTION = (
    "You are Mindflow, an empathetic AI journaling assistant. Analyze journal entries to identify "
    "sentiment, emotions, and potential triggers. Provide a concise summary and constructive, "
    "personalized wellness suggestions to help the user understand their thoughts and feelings. "
    "Respond by calling the record_journal_analysis tool with an object that follows its schema."
)

ANALYSIS_TOOL_NAME = "record_journal_analysis"

ANALYSIS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "sentiment": {
            "type": "string",
            "enum": [sentiment.value for sentiment in Sentiment],
            "description": "The overall sentiment of the journal entry.",
        },
        "emotions": {
            "type": "array",
            "items": {"type": "string"},
            "description": "A list of 2-5 primary emotions detected in the text (e.g., Joy, Sadness, Anger, Fear, Surprise).",
        },
        "triggers": {
            "type": "array",
            "items": {"type": "string"},
            "description": "A list of 1-3 potential emotional triggers mentioned in the text (e.g., 'Work stress', 'Family conflict', 'Positive social interaction').",
        },
        "suggestions": {
            "type": "array",
            "items": {"type": "string"},
            "description": "A list of 2-3 actionable, personalized coping strategies or wellness suggestions based on the entry's content.",
        },
        "summary": {
            "type": "string",
            "description": "A concise, one-sentence summary of the journal entry.",
        },
    },
    "required": ["sentiment", "emotions", "triggers", "suggestions", "summary"],
}

ANALYSIS_TOOL = {
    "name": ANALYSIS_TOOL_NAME,
    "description": "Record the structured analysis of one journal entry.",
    "input_schema": ANALYSIS_SCHEMA,
}


class EntryAnalyzer:
    """Send one journal entry to Claude and return its validated analysis."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        client: Optional[Any] = None,
    ) -> None:
        key = api_key or settings.ANTHROPIC_API_KEY
        if not key:
            raise MissingCredentialsError(
                "ANTHROPIC_API_KEY environment variable not set"
            )

        # Retries are the user's decision, never the SDK's.
        self.client = client or AsyncAnthropic(api_key=key, max_retries=0)
        self.model = model or settings.MINDFLOW_MODEL
        self.temperature = settings.MINDFLOW_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or settings.MINDFLOW_MAX_TOKENS

        logger.info("Journal analyzer initialized with model: %s", self.model)

    async def analyze(self, text: str) -> AnalysisResult:
        """
        Analyze a journal entry.

        Raises:
            InvalidCredentialsError: the API key was rejected.
            NetworkFailureError: the API could not be reached.
            ServiceUnavailableError: the API returned any other error.
            MalformedResponseError: the reply is not a valid analysis.
        """
        with tracer.start_as_current_span("journal.analyze") as span:
            span.set_attribute("llm.model", self.model)
            span.set_attribute("journal.text_length", len(text))

            logger.info("Analyzing journal entry: %s", sanitize_entry_text(text))
            started = time.monotonic()
            response = await self._invoke_model(text)
            duration_ms = int((time.monotonic() - started) * 1000)

            usage = getattr(response, "usage", None)
            if usage is not None:
                log_llm_usage(
                    model=self.model,
                    input_tokens=getattr(usage, "input_tokens", 0) or 0,
                    output_tokens=getattr(usage, "output_tokens", 0) or 0,
                    duration_ms=duration_ms,
                )

            result = self._parse_response(response)
            span.set_attribute("journal.sentiment", result.sentiment.value)

        logger.info(
            "Analysis complete with model %s: sentiment=%s, emotions=%s",
            self.model,
            result.sentiment.value,
            len(result.emotions),
        )
        return result

    async def _invoke_model(self, text: str) -> Any:
        """Send the request and translate SDK failures into analysis errors."""

        try:
            return await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=SYSTEM_INSTRUCTION,
                tools=[ANALYSIS_TOOL],
                tool_choice={"type": "tool", "name": ANALYSIS_TOOL_NAME},
                messages=[
                    {
                        "role": "user",
                        "content": f'Analyze the following journal entry: "{text}"',
                    }
                ],
            )
        except (anthropic.AuthenticationError, anthropic.PermissionDeniedError) as exc:
            logger.error("Anthropic rejected the API key: %s", exc)
            raise InvalidCredentialsError(str(exc)) from exc
        except anthropic.APIConnectionError as exc:
            logger.error("Could not reach Anthropic: %s", exc)
            raise NetworkFailureError(str(exc)) from exc
        except anthropic.APIError as exc:
            logger.error("Anthropic request failed: %s", exc)
            raise ServiceUnavailableError(str(exc)) from exc

    def _parse_response(self, response: Any) -> AnalysisResult:
        payload = self._extract_payload(response)
        try:
            return AnalysisResult.model_validate(payload)
        except ValidationError as exc:
            logger.error("Model %s returned an invalid analysis: %s", self.model, exc)
            raise MalformedResponseError(f"Analysis failed validation: {exc}") from exc

    def _extract_payload(self, response: Any) -> Dict[str, Any]:
        """Pull the analysis object out of the forced tool call, or failing that, the text."""

        blocks = getattr(response, "content", None) or []
        if not blocks:
            raise MalformedResponseError(f"Model {self.model} returned empty content")

        for block in blocks:
            if getattr(block, "type", None) == "tool_use" and getattr(block, "name", None) == ANALYSIS_TOOL_NAME:
                payload = block.input
                if not isinstance(payload, dict):
                    raise MalformedResponseError("Tool input is not a JSON object")
                return payload

        text_blocks = [block.text for block in blocks if getattr(block, "type", None) == "text"]
        result_text = "".join(text_blocks).strip()
        if not result_text:
            raise MalformedResponseError(f"Model {self.model} returned no analysis")

        if result_text.startswith("```"):
            result_text = re.sub(r"^```(?:json)?\n?", "", result_text)
            result_text = re.sub(r"\n?```$", "", result_text)

        try:
            payload = json.loads(result_text)
        except json.JSONDecodeError as exc:
            logger.error(
                "Model %s returned unparsable JSON: %s | snippet=%s",
                self.model,
                exc,
                result_text[:200],
            )
            raise MalformedResponseError(f"Unparsable analysis JSON: {exc}") from exc

        if not isinstance(payload, dict):
            raise MalformedResponseError("Analysis JSON is not an object")
        return payload
