"""HTTP client for the vector database."""

import time
from typing import Any, TypeVar

import httpx

from vecbridge.config import PineconeSettings, get_settings
from vecbridge.exceptions import (
    ConfigurationError,
    DeleteError,
    ErrorCode,
    FetchError,
    QueryError,
    UpdateError,
    UpsertError,
    VectorDBError,
)
from vecbridge.logging_config import get_logger
from vecbridge.observability.metrics import track_vectordb_operation, track_vectordb_rejection
from vecbridge.vectordb.models import (
    DeleteRequest,
    DeleteResponse,
    FetchRequest,
    FetchResponse,
    QueryRequest,
    QueryResponse,
    UpdateRequest,
    UpdateResponse,
    UpsertRequest,
    UpsertResponse,
    WireModel,
)

logger = get_logger(__name__)

ResponseT = TypeVar("ResponseT", bound=WireModel)


class VectorDBClient:
    """Client for a Pinecone-compatible index.

    Every public method validates its request first; an invalid request
    raises the operation's error class without touching the network. A
    valid request results in exactly one HTTP call. No retries.
    """

    def __init__(
        self,
        settings: PineconeSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the vector database client.

        Args:
            settings: Vector database configuration.
            client: HTTP client (for testing or sharing a pool).

        Raises:
            ConfigurationError: If no API key is configured.
        """
        self._settings = settings or get_settings().pinecone
        if self._settings.api_key is None:
            raise ConfigurationError(
                "PINECONE_API_KEY is not set",
                details={"setting": "PINECONE_API_KEY"},
            )
        self._api_key = self._settings.api_key.get_secret_value()
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Api-Key": self._api_key,
            "Content-Type": "application/json",
        }

    def _url(self, path: str) -> str:
        return f"{self._settings.index_url.rstrip('/')}/{path}"

    async def _send(
        self,
        error_cls: type[VectorDBError],
        method: str,
        url: str,
        response_model: type[ResponseT],
        payload: dict[str, Any] | None = None,
    ) -> ResponseT:
        """Dispatch one request and parse the response.

        Raises:
            VectorDBError: ``error_cls`` with the transport code on any
                HTTP or deserialization failure.
        """
        client = await self._get_client()
        operation = error_cls.operation
        start = time.perf_counter()

        try:
            response = await client.request(method, url, json=payload, headers=self._headers)
            response.raise_for_status()
            result = response_model.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            track_vectordb_operation(operation, time.perf_counter() - start, success=False)
            status = e.response.status_code
            logger.error(f"Vector database {operation} failed: {status}")
            raise error_cls(
                f"Vector database returned {status}: {e}",
                code=ErrorCode.VECTOR_DB_TRANSPORT,
                details={"status_code": status},
            ) from e
        except httpx.HTTPError as e:
            track_vectordb_operation(operation, time.perf_counter() - start, success=False)
            logger.error(f"Vector database {operation} request error: {e}")
            raise error_cls(
                f"Failed to send {operation} request: {e}",
                code=ErrorCode.VECTOR_DB_TRANSPORT,
                details={"url": url},
            ) from e
        except ValueError as e:
            # JSON decode and pydantic validation errors
            track_vectordb_operation(operation, time.perf_counter() - start, success=False)
            logger.error(f"Invalid {operation} response: {e}")
            raise error_cls(
                f"Failed to deserialize {operation} response: {e}",
                code=ErrorCode.VECTOR_DB_TRANSPORT,
                details={"error": str(e)},
            ) from e

        track_vectordb_operation(operation, time.perf_counter() - start)
        return result

    @staticmethod
    def _check(
        request: UpsertRequest | QueryRequest | UpdateRequest | FetchRequest | DeleteRequest,
    ) -> None:
        try:
            request.validate_request()
        except VectorDBError as e:
            track_vectordb_rejection(e.operation)
            logger.warning(f"Rejected {e.operation} request: {e.message}")
            raise

    async def upsert(self, request: UpsertRequest) -> UpsertResponse:
        """Insert or overwrite vectors.

        Raises:
            UpsertError: If the request is invalid or the call fails.
        """
        self._check(request)
        result = await self._send(
            UpsertError,
            "POST",
            self._url("vectors/upsert"),
            UpsertResponse,
            request.to_payload(),
        )
        logger.debug(
            f"Upserted {result.upserted_count} vectors",
            extra={"namespace": request.namespace},
        )
        return result

    async def query(self, request: QueryRequest) -> QueryResponse:
        """Search for the nearest vectors.

        Raises:
            QueryError: If the request is invalid or the call fails.
        """
        self._check(request)
        return await self._send(
            QueryError,
            "POST",
            self._url("query"),
            QueryResponse,
            request.to_payload(),
        )

    async def update(self, request: UpdateRequest) -> UpdateResponse:
        """Update one vector's sparse values or metadata.

        Raises:
            UpdateError: If the request is invalid or the call fails.
        """
        self._check(request)
        return await self._send(
            UpdateError,
            "POST",
            self._url("vectors/update"),
            UpdateResponse,
            request.to_payload(),
        )

    async def fetch(self, request: FetchRequest) -> FetchResponse:
        """Fetch vectors by id.

        Raises:
            FetchError: If the request is invalid or the call fails.
        """
        self._check(request)
        return await self._send(
            FetchError,
            "GET",
            request.build_url(self._settings.index_url),
            FetchResponse,
        )

    async def delete(self, request: DeleteRequest) -> DeleteResponse:
        """Delete vectors by id or clear a namespace.

        Raises:
            DeleteError: If the request is invalid or the call fails.
        """
        self._check(request)
        return await self._send(
            DeleteError,
            "POST",
            self._url("vectors/delete"),
            DeleteResponse,
            request.to_payload(),
        )
