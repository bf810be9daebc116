"""Connection handling shared by the OpenAI-style service clients."""

from typing import Any

import httpx

from vecbridge.config import OpenAISettings, get_settings
from vecbridge.exceptions import ConfigurationError


class OpenAIHTTPBase:
    """Owns the settings, bearer credentials and HTTP client for one service.

    The HTTP client is created lazily unless one is injected; an injected
    client is never closed here.
    """

    def __init__(
        self,
        settings: OpenAISettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the connection.

        Args:
            settings: API configuration. Uses application settings if not provided.
            client: HTTP client (for testing or sharing a pool).

        Raises:
            ConfigurationError: If no API key is configured.
        """
        self._settings = settings or get_settings().openai
        if self._settings.api_key is None:
            raise ConfigurationError(
                "OPENAI_API_KEY is not set",
                details={"setting": "OPENAI_API_KEY"},
            )
        self._api_key = self._settings.api_key.get_secret_value()
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _endpoint(self, path: str) -> str:
        return f"{self._settings.base_url.rstrip('/')}/{path}"

    async def _post(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        """POST a JSON body and raise for non-2xx statuses."""
        client = await self._get_client()
        response = await client.post(
            self._endpoint(path),
            json=payload,
            headers={"Authorization": f"Bearer {self._api_key}"},
        )
        response.raise_for_status()
        return response
