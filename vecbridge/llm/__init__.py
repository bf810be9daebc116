"""Chat completion module."""

from vecbridge.llm.client import LLMClient, OpenAIClient
from vecbridge.llm.models import (
    Choice,
    CompletionRequest,
    CompletionResponse,
    Message,
    Role,
    Usage,
)

__all__ = [
    "Choice",
    "CompletionRequest",
    "CompletionResponse",
    "LLMClient",
    "Message",
    "OpenAIClient",
    "Role",
    "Usage",
]
