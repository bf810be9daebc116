"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from pydantic import SecretStr

from vecbridge.config import OpenAISettings, PineconeSettings

ResponseFactory = Callable[..., MagicMock]


@pytest.fixture
def openai_settings() -> OpenAISettings:
    """OpenAI settings pointing at a fake host."""
    return OpenAISettings(
        base_url="http://test/v1",
        api_key=SecretStr("sk-test"),
        model="gpt-3.5-turbo",
        embedding_model="text-embedding-ada-002",
    )


@pytest.fixture
def pinecone_settings() -> PineconeSettings:
    """Vector database settings pointing at a fake index."""
    return PineconeSettings(
        index_url="http://index.test/",
        api_key=SecretStr("pc-test"),
    )


@pytest.fixture
def mock_http() -> AsyncMock:
    """Mock HTTP client."""
    return AsyncMock(spec=httpx.AsyncClient)


@pytest.fixture
def make_response() -> ResponseFactory:
    """Build mock HTTP responses.

    Returns:
        Factory taking a JSON body and an optional status code.
    """

    def factory(json_data: Any = None, status_code: int = 200) -> MagicMock:
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = json_data if json_data is not None else {}
        if status_code >= 400:
            response.raise_for_status.side_effect = httpx.HTTPStatusError(
                f"Status {status_code}",
                request=MagicMock(),
                response=response,
            )
        else:
            response.raise_for_status = MagicMock()
        return response

    return factory
