"""Embedding service interface and implementation."""

import time
from abc import ABC, abstractmethod

import httpx

from vecbridge.config import OpenAISettings
from vecbridge.embeddings.models import EmbeddingRequest, EmbeddingResponse
from vecbridge.exceptions import EmbeddingError, ErrorCode, TokenLimitError
from vecbridge.logging_config import get_logger
from vecbridge.observability.metrics import track_embedding_request
from vecbridge.openai_http import OpenAIHTTPBase
from vecbridge.tokens import TokenCounter, count_tokens

logger = get_logger(__name__)

DEFAULT_DIMENSIONS = 1536
DEFAULT_TOKEN_LIMIT = 8191


class EmbeddingService(ABC):
    """Abstract base class for embedding services."""

    @abstractmethod
    async def embed(self, request: EmbeddingRequest) -> EmbeddingResponse:
        """Send an embedding request.

        Args:
            request: The request body.

        Returns:
            The parsed response.

        Raises:
            TokenLimitError: If the input is too long for the model.
            EmbeddingError: If the call fails.
        """
        ...

    @abstractmethod
    async def embed_text(self, text: str) -> list[float]:
        """Embed one text with the default model.

        Raises:
            EmbeddingError: If embedding fails.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name used for embeddings."""
        ...

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Get the embedding dimensions."""
        ...


class OpenAIEmbeddingService(OpenAIHTTPBase, EmbeddingService):
    """Embedding service for OpenAI-compatible ``/embeddings`` endpoints.

    Inputs are token-counted before sending; anything over the model's
    limit is rejected locally with TokenLimitError.
    """

    MODEL_DIMENSIONS = {
        "text-embedding-ada-002": 1536,
        "text-embedding-3-small": 1536,
        "text-embedding-3-large": 3072,
    }

    MODEL_TOKEN_LIMITS = {
        "text-embedding-ada-002": 8191,
        "text-embedding-3-small": 8191,
        "text-embedding-3-large": 8191,
    }

    def __init__(
        self,
        settings: OpenAISettings | None = None,
        client: httpx.AsyncClient | None = None,
        token_counter: TokenCounter | None = None,
    ) -> None:
        """Initialize the embedding service.

        Args:
            settings: API configuration. Uses application settings if not provided.
            client: HTTP client. Creates new one if not provided.
            token_counter: Tokenizer for the input limit check (tiktoken by default).

        Raises:
            ConfigurationError: If no API key is configured.
        """
        super().__init__(settings=settings, client=client)
        self._count_tokens = token_counter or count_tokens
        self._dimensions: int | None = None

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._settings.embedding_model

    @property
    def dimensions(self) -> int:
        """Dimensions seen in the last response, else the known model size."""
        if self._dimensions is not None:
            return self._dimensions
        return self.MODEL_DIMENSIONS.get(self.model_name, DEFAULT_DIMENSIONS)

    def token_limit(self, model: str) -> int:
        """Input token limit for a model."""
        return self.MODEL_TOKEN_LIMITS.get(model, DEFAULT_TOKEN_LIMIT)

    def check_token_limit(self, request: EmbeddingRequest) -> int:
        """Count the input's tokens and enforce the model limit.

        Returns:
            The token count.

        Raises:
            TokenLimitError: If the input exceeds the limit.
        """
        tokens = self._count_tokens(request.input)
        limit = self.token_limit(request.model)
        if tokens > limit:
            raise TokenLimitError(
                f"Input has {tokens} tokens, limit for {request.model} is {limit}",
                details={"tokens": tokens, "limit": limit, "model": request.model},
            )
        return tokens

    async def embed(self, request: EmbeddingRequest) -> EmbeddingResponse:
        """Check the token limit, then send an embedding request."""
        self.check_token_limit(request)

        start = time.perf_counter()
        try:
            response = await self._post("embeddings", request.to_payload())
        except httpx.HTTPStatusError as e:
            track_embedding_request(request.model, time.perf_counter() - start, success=False)
            status = e.response.status_code
            logger.error(f"Embedding request failed: {status}", extra={"model": request.model})
            raise EmbeddingError(
                f"Embedding service returned {status}",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                details={"status_code": status},
            ) from e
        except httpx.HTTPError as e:
            track_embedding_request(request.model, time.perf_counter() - start, success=False)
            logger.error(f"Embedding request error: {e}", extra={"model": request.model})
            raise EmbeddingError(
                f"Failed to connect to embedding service: {e}",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
            ) from e

        try:
            result = EmbeddingResponse.model_validate(response.json())
        except ValueError as e:
            track_embedding_request(request.model, time.perf_counter() - start, success=False)
            raise EmbeddingError(
                f"Invalid response from embedding service: {e}",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                details={"error": str(e)},
            ) from e

        track_embedding_request(request.model, time.perf_counter() - start)

        if result.data:
            self._dimensions = len(result.data[0].embedding)
        return result

    async def embed_text(self, text: str) -> list[float]:
        """Embed one text with the configured model."""
        result = await self.embed(EmbeddingRequest(input=text, model=self.model_name))
        if not result.data:
            raise EmbeddingError(
                "Embedding service returned no embeddings",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                details={"model": result.model},
            )
        return result.data[0].embedding
