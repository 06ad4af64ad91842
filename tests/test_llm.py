import json

import anthropic
import httpx
import pytest

from fakes import FakeAnthropicClient, text_response, tool_response
from mindflow.api.dependencies import get_analyzer
from mindflow.core.config import settings
from mindflow.features.journaling import RequestLifecycleController, Sentiment
from mindflow.features.journaling.controller import UNAVAILABLE_MESSAGE
from mindflow.services.llm import ANALYSIS_TOOL_NAME, SYSTEM_INSTRUCTION, EntryAnalyzer
from mindflow.shared.errors import (
    InvalidCredentialsError,
    MalformedResponseError,
    MissingCredentialsError,
    NetworkFailureError,
    ServiceUnavailableError,
)

REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _status_error(cls, status_code):
    return cls(
        f"Error code: {status_code}",
        response=httpx.Response(status_code, request=REQUEST),
        body=None,
    )


def _analyzer(client):
    return EntryAnalyzer(api_key="test-key", model="claude-test", client=client)


async def test_analyze_returns_validated_result(analysis_payload):
    analyzer = _analyzer(FakeAnthropicClient(response=tool_response(analysis_payload)))

    result = await analyzer.analyze("Deadline tomorrow and nothing works.")

    assert result.sentiment is Sentiment.NEGATIVE
    assert result.emotions == ("Anxiety", "Frustration")
    assert result.triggers == ("Work stress",)
    assert result.summary == analysis_payload["summary"]


async def test_request_carries_persona_schema_and_temperature(analysis_payload):
    client = FakeAnthropicClient(response=tool_response(analysis_payload))
    analyzer = EntryAnalyzer(api_key="test-key", model="claude-test", temperature=0.5, client=client)

    await analyzer.analyze("Slept well.")

    request = client.messages.requests[0]
    assert request["model"] == "claude-test"
    assert request["temperature"] == 0.5
    assert request["system"] == SYSTEM_INSTRUCTION
    assert request["tool_choice"] == {"type": "tool", "name": ANALYSIS_TOOL_NAME}
    schema = request["tools"][0]["input_schema"]
    assert set(schema["required"]) == {"sentiment", "emotions", "triggers", "suggestions", "summary"}
    assert schema["properties"]["sentiment"]["enum"] == ["Positive", "Negative", "Neutral"]
    assert request["messages"] == [
        {"role": "user", "content": 'Analyze the following journal entry: "Slept well."'}
    ]


def test_default_temperature_comes_from_settings():
    analyzer = _analyzer(FakeAnthropicClient())
    assert analyzer.temperature == settings.MINDFLOW_TEMPERATURE


async def test_text_reply_with_code_fence_is_parsed(analysis_payload):
    fenced = "```json\n" + json.dumps(analysis_payload) + "\n```"
    analyzer = _analyzer(FakeAnthropicClient(response=text_response(fenced)))

    result = await analyzer.analyze("Mixed day.")

    assert result.sentiment is Sentiment.NEGATIVE


async def test_missing_summary_is_malformed(analysis_payload):
    del analysis_payload["summary"]
    analyzer = _analyzer(FakeAnthropicClient(response=tool_response(analysis_payload)))

    with pytest.raises(MalformedResponseError):
        await analyzer.analyze("Anything")


async def test_invalid_sentiment_is_malformed(analysis_payload):
    analysis_payload["sentiment"] = "Ecstatic"
    analyzer = _analyzer(FakeAnthropicClient(response=tool_response(analysis_payload)))

    with pytest.raises(MalformedResponseError):
        await analyzer.analyze("Anything")


@pytest.mark.parametrize("reply", ["not json at all", "[1, 2, 3]", ""])
async def test_unusable_text_reply_is_malformed(reply):
    analyzer = _analyzer(FakeAnthropicClient(response=text_response(reply)))

    with pytest.raises(MalformedResponseError):
        await analyzer.analyze("Anything")


async def test_empty_content_is_malformed():
    analyzer = _analyzer(FakeAnthropicClient(response=text_response("x")))
    analyzer.client.messages.response.content = []

    with pytest.raises(MalformedResponseError):
        await analyzer.analyze("Anything")


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (_status_error(anthropic.AuthenticationError, 401), InvalidCredentialsError),
        (_status_error(anthropic.PermissionDeniedError, 403), InvalidCredentialsError),
        (anthropic.APIConnectionError(request=REQUEST), NetworkFailureError),
        (anthropic.APITimeoutError(request=REQUEST), NetworkFailureError),
        (_status_error(anthropic.InternalServerError, 500), ServiceUnavailableError),
        (_status_error(anthropic.RateLimitError, 429), ServiceUnavailableError),
        (_status_error(anthropic.BadRequestError, 400), ServiceUnavailableError),
    ],
)
async def test_sdk_errors_are_translated(error, expected):
    analyzer = _analyzer(FakeAnthropicClient(error=error))

    with pytest.raises(expected):
        await analyzer.analyze("Anything")


async def test_malformed_response_reaches_user_as_unavailable(analysis_payload):
    del analysis_payload["summary"]
    analyzer = _analyzer(FakeAnthropicClient(response=tool_response(analysis_payload)))
    controller = RequestLifecycleController(analyzer)

    await controller.submit("Quiet evening.")

    assert controller.error.message == UNAVAILABLE_MESSAGE
    assert controller.store.is_empty()


def test_missing_api_key_is_fatal(monkeypatch):
    monkeypatch.setattr(settings, "ANTHROPIC_API_KEY", None)
    get_analyzer.cache_clear()
    try:
        with pytest.raises(MissingCredentialsError):
            EntryAnalyzer()
        with pytest.raises(MissingCredentialsError):
            get_analyzer()
    finally:
        get_analyzer.cache_clear()
