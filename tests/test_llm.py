"""Tests for the chat completion module."""

from unittest.mock import AsyncMock

import httpx
import pytest

from vecbridge.config import OpenAISettings
from vecbridge.exceptions import (
    ConfigurationError,
    ErrorCode,
    LLMError,
    SamplingValidationError,
)
from vecbridge.llm.client import OpenAIClient
from vecbridge.llm.models import CompletionRequest, CompletionResponse, Message, Role

COMPLETION_BODY = {
    "id": "chatcmpl-1",
    "object": "chat.completion",
    "created": 1700000000,
    "model": "gpt-3.5-turbo",
    "usage": {"prompt_tokens": 9, "completion_tokens": 3, "total_tokens": 12},
    "choices": [
        {
            "index": 0,
            "finish_reason": "stop",
            "message": {"role": "assistant", "content": "Hello there"},
        }
    ],
}


def _request(**kwargs: object) -> CompletionRequest:
    return CompletionRequest(
        model="gpt-3.5-turbo",
        messages=[Message(role=Role.USER, content="Hi")],
        **kwargs,  # type: ignore[arg-type]
    )


class TestMessage:
    """Tests for Message model."""

    def test_role_values(self) -> None:
        """Role enum has expected values."""
        assert Role.SYSTEM.value == "system"
        assert Role.USER.value == "user"
        assert Role.ASSISTANT.value == "assistant"

    def test_token_count_uses_serialized_form(self) -> None:
        """The counter sees the JSON form of the message."""
        seen: list[str] = []

        def counter(text: str) -> int:
            seen.append(text)
            return 7

        msg = Message(role=Role.USER, content="Hello")

        assert msg.token_count(counter) == 7
        assert seen == ['{"role":"user","content":"Hello"}']


class TestSamplingValidation:
    """Tests for CompletionRequest.validate_sampling."""

    def test_unset_parameters_pass(self) -> None:
        """A request with no sampling fields is valid."""
        _request().validate_sampling()

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("temperature", 0.0),
            ("temperature", 2.0),
            ("top_p", 0.0),
            ("top_p", 1.0),
            ("presence_penalty", -2.0),
            ("frequency_penalty", 2.0),
        ],
    )
    def test_bounds_are_inclusive(self, name: str, value: float) -> None:
        """Values at the ends of a range are accepted."""
        _request(**{name: value}).validate_sampling()

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("temperature", 2.1),
            ("temperature", -0.5),
            ("top_p", -0.01),
            ("top_p", 1.5),
            ("presence_penalty", -2.5),
            ("frequency_penalty", 3.0),
        ],
    )
    def test_out_of_range_rejected(self, name: str, value: float) -> None:
        """Out-of-range values name the offending parameter."""
        with pytest.raises(SamplingValidationError) as exc_info:
            _request(**{name: value}).validate_sampling()

        assert exc_info.value.parameter == name
        assert exc_info.value.value == value
        assert exc_info.value.code == ErrorCode.INVALID_SAMPLING_PARAMETER

    def test_first_failure_reported(self) -> None:
        """Temperature is checked before top_p."""
        with pytest.raises(SamplingValidationError) as exc_info:
            _request(temperature=5.0, top_p=5.0).validate_sampling()

        assert exc_info.value.parameter == "temperature"

    def test_choice_count(self) -> None:
        """n must be at least one."""
        with pytest.raises(SamplingValidationError) as exc_info:
            _request(n=0).validate_sampling()
        assert exc_info.value.parameter == "n"

    def test_stop_sequence_limit(self) -> None:
        """At most four stop sequences are accepted."""
        _request(stop=["a", "b", "c", "d"]).validate_sampling()
        with pytest.raises(SamplingValidationError) as exc_info:
            _request(stop=["a", "b", "c", "d", "e"]).validate_sampling()
        assert exc_info.value.parameter == "stop"

    def test_logit_bias_range(self) -> None:
        """Each logit bias must lie within -100 and 100."""
        _request(logit_bias={"50256": -100}).validate_sampling()
        with pytest.raises(SamplingValidationError) as exc_info:
            _request(logit_bias={"50256": 101}).validate_sampling()
        assert exc_info.value.parameter == "logit_bias"


class TestCompletionModels:
    """Tests for request and response serialization."""

    def test_payload_omits_unset_fields(self) -> None:
        """Only set fields are sent."""
        payload = _request(temperature=0.2).to_payload()

        assert payload == {
            "model": "gpt-3.5-turbo",
            "messages": [{"role": "user", "content": "Hi"}],
            "temperature": 0.2,
        }

    def test_response_parsing(self) -> None:
        """Response body parses into typed fields."""
        response = CompletionResponse.model_validate(COMPLETION_BODY)

        assert response.content == "Hello there"
        assert response.usage.total_tokens == 12
        assert response.choices[0].finish_reason == "stop"

    def test_completion_tokens_optional(self) -> None:
        """Usage without completion tokens still parses."""
        body = {**COMPLETION_BODY, "usage": {"prompt_tokens": 4, "total_tokens": 4}}
        response = CompletionResponse.model_validate(body)

        assert response.usage.completion_tokens is None

    def test_empty_choices(self) -> None:
        """Content is empty when no choices were returned."""
        body = {**COMPLETION_BODY, "choices": []}
        assert CompletionResponse.model_validate(body).content == ""


class TestOpenAIClient:
    """Tests for OpenAIClient."""

    def test_missing_api_key(self) -> None:
        """A client cannot be built without a key."""
        with pytest.raises(ConfigurationError):
            OpenAIClient(settings=OpenAISettings(api_key=None))

    def test_model_name(self, openai_settings: OpenAISettings) -> None:
        """Client returns configured model name."""
        assert OpenAIClient(settings=openai_settings).model_name == "gpt-3.5-turbo"

    @pytest.mark.asyncio
    async def test_complete(
        self, openai_settings: OpenAISettings, mock_http: AsyncMock, make_response
    ) -> None:
        """A valid request is posted with a bearer token."""
        mock_http.post.return_value = make_response(COMPLETION_BODY)
        client = OpenAIClient(settings=openai_settings, client=mock_http)

        response = await client.complete(_request(temperature=0.5))

        assert response.content == "Hello there"
        args, kwargs = mock_http.post.call_args
        assert args[0] == "http://test/v1/chat/completions"
        assert kwargs["headers"] == {"Authorization": "Bearer sk-test"}
        assert kwargs["json"]["temperature"] == 0.5
        assert "top_p" not in kwargs["json"]

    @pytest.mark.asyncio
    async def test_invalid_request_not_sent(
        self, openai_settings: OpenAISettings, mock_http: AsyncMock
    ) -> None:
        """Sampling errors are raised before any network call."""
        client = OpenAIClient(settings=openai_settings, client=mock_http)

        with pytest.raises(SamplingValidationError):
            await client.complete(_request(top_p=1.01))

        mock_http.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_generate_text(
        self, openai_settings: OpenAISettings, mock_http: AsyncMock, make_response
    ) -> None:
        """generate_text builds system and user messages."""
        mock_http.post.return_value = make_response(COMPLETION_BODY)
        client = OpenAIClient(settings=openai_settings, client=mock_http)

        await client.generate_text("Hi", system_prompt="Be brief")

        messages = mock_http.post.call_args.kwargs["json"]["messages"]
        assert [m["role"] for m in messages] == ["system", "user"]

    @pytest.mark.asyncio
    async def test_timeout(self, openai_settings: OpenAISettings, mock_http: AsyncMock) -> None:
        """Timeouts map to a timeout error code."""
        mock_http.post.side_effect = httpx.TimeoutException("slow")
        client = OpenAIClient(settings=openai_settings, client=mock_http)

        with pytest.raises(LLMError) as exc_info:
            await client.complete(_request())

        assert exc_info.value.code == ErrorCode.LLM_TIMEOUT

    @pytest.mark.asyncio
    async def test_rate_limit(
        self, openai_settings: OpenAISettings, mock_http: AsyncMock, make_response
    ) -> None:
        """HTTP 429 maps to the rate-limit code."""
        mock_http.post.return_value = make_response(status_code=429)
        client = OpenAIClient(settings=openai_settings, client=mock_http)

        with pytest.raises(LLMError) as exc_info:
            await client.complete(_request())

        assert exc_info.value.code == ErrorCode.LLM_RATE_LIMIT

    @pytest.mark.asyncio
    async def test_server_error(
        self, openai_settings: OpenAISettings, mock_http: AsyncMock, make_response
    ) -> None:
        """Other status errors map to a service error."""
        mock_http.post.return_value = make_response(status_code=500)
        client = OpenAIClient(settings=openai_settings, client=mock_http)

        with pytest.raises(LLMError) as exc_info:
            await client.complete(_request())

        assert exc_info.value.code == ErrorCode.LLM_SERVICE_ERROR
        assert exc_info.value.details["status_code"] == 500

    @pytest.mark.asyncio
    async def test_connection_error(
        self, openai_settings: OpenAISettings, mock_http: AsyncMock
    ) -> None:
        """Connection failures map to a service error."""
        mock_http.post.side_effect = httpx.ConnectError("refused")
        client = OpenAIClient(settings=openai_settings, client=mock_http)

        with pytest.raises(LLMError) as exc_info:
            await client.complete(_request())

        assert exc_info.value.code == ErrorCode.LLM_SERVICE_ERROR

    @pytest.mark.asyncio
    async def test_malformed_response(
        self, openai_settings: OpenAISettings, mock_http: AsyncMock, make_response
    ) -> None:
        """Bodies missing required fields are rejected."""
        mock_http.post.return_value = make_response({"choices": []})
        client = OpenAIClient(settings=openai_settings, client=mock_http)

        with pytest.raises(LLMError):
            await client.complete(_request())

    @pytest.mark.asyncio
    async def test_close_leaves_injected_client(
        self, openai_settings: OpenAISettings, mock_http: AsyncMock
    ) -> None:
        """An injected HTTP client is owned by the caller."""
        client = OpenAIClient(settings=openai_settings, client=mock_http)

        await client.close()

        mock_http.aclose.assert_not_called()
