"""Chat completion client interface and implementation."""

import time
from abc import ABC, abstractmethod

import httpx

from vecbridge.exceptions import ErrorCode, LLMError
from vecbridge.llm.models import CompletionRequest, CompletionResponse, Message, Role
from vecbridge.logging_config import get_logger
from vecbridge.observability.metrics import track_llm_request
from vecbridge.openai_http import OpenAIHTTPBase

logger = get_logger(__name__)


class LLMClient(ABC):
    """Abstract base class for chat completion clients."""

    @abstractmethod
    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Send a completion request.

        Args:
            request: The request body.

        Returns:
            The parsed response.

        Raises:
            SamplingValidationError: If a sampling parameter is out of range.
            LLMError: If the call fails.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the default model name."""
        ...

    async def generate_text(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> CompletionResponse:
        """Reply to a single prompt with the default model."""
        messages = [Message(role=Role.USER, content=prompt)]
        if system_prompt:
            messages.insert(0, Message(role=Role.SYSTEM, content=system_prompt))

        return await self.complete(
            CompletionRequest(
                model=self.model_name,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        )


def _transport_error(error: httpx.HTTPError, timeout: float) -> LLMError:
    """Map an httpx failure to an LLMError with the matching code."""
    if isinstance(error, httpx.TimeoutException):
        return LLMError(
            "LLM request timed out",
            code=ErrorCode.LLM_TIMEOUT,
            details={"timeout": timeout},
        )
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        if status == 429:
            return LLMError(
                "Rate limit exceeded",
                code=ErrorCode.LLM_RATE_LIMIT,
                details={"status_code": status},
            )
        return LLMError(
            f"LLM service returned {status}",
            code=ErrorCode.LLM_SERVICE_ERROR,
            details={"status_code": status},
        )
    return LLMError(
        f"Failed to connect to LLM service: {error}",
        code=ErrorCode.LLM_SERVICE_ERROR,
    )


class OpenAIClient(OpenAIHTTPBase, LLMClient):
    """Client for OpenAI-compatible ``/chat/completions`` endpoints."""

    @property
    def model_name(self) -> str:
        """Get the default model name."""
        return self._settings.model

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Validate, then send, a chat completion request."""
        request.validate_sampling()

        start = time.perf_counter()
        try:
            response = await self._post("chat/completions", request.to_payload())
            result = CompletionResponse.model_validate(response.json())
        except httpx.HTTPError as e:
            track_llm_request(request.model, time.perf_counter() - start, 0, 0, success=False)
            error = _transport_error(e, self._settings.timeout)
            logger.error(f"Completion failed: {error.message}", extra={"model": request.model})
            raise error from e
        except ValueError as e:
            track_llm_request(request.model, time.perf_counter() - start, 0, 0, success=False)
            raise LLMError(
                f"Invalid response from LLM: {e}",
                code=ErrorCode.LLM_SERVICE_ERROR,
                details={"error": str(e)},
            ) from e

        track_llm_request(
            result.model,
            time.perf_counter() - start,
            prompt_tokens=result.usage.prompt_tokens,
            completion_tokens=result.usage.completion_tokens or 0,
        )
        return result
