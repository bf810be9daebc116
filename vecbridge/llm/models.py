"""Chat completion data models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from vecbridge.exceptions import SamplingValidationError
from vecbridge.tokens import TokenCounter, count_tokens

MAX_STOP_SEQUENCES = 4


class Role(str, Enum):
    """Message role in a conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A message in a conversation.

    Attributes:
        role: The role of the message sender.
        content: The message content.
    """

    role: Role = Field(description="Message role")
    content: str = Field(description="Message content")

    def token_count(self, counter: TokenCounter | None = None) -> int:
        """Count tokens of the message as serialized for the wire."""
        return (counter or count_tokens)(self.model_dump_json())


# name -> (low, high), checked in this order
SAMPLING_RANGES: dict[str, tuple[float, float]] = {
    "temperature": (0.0, 2.0),
    "top_p": (0.0, 1.0),
    "presence_penalty": (-2.0, 2.0),
    "frequency_penalty": (-2.0, 2.0),
}


class CompletionRequest(BaseModel):
    """Chat completion request body.

    Only ``model`` and ``messages`` are required; every other field is
    left to the service default when ``None`` and is omitted from the
    payload.
    """

    model: str = Field(description="Model identifier")
    messages: list[Message] = Field(description="Conversation so far")
    temperature: float | None = Field(default=None, description="Sampling temperature, 0-2")
    top_p: float | None = Field(default=None, description="Nucleus sampling mass, 0-1")
    n: int | None = Field(default=None, description="Number of choices to generate")
    stream: bool | None = Field(default=None, description="Stream partial deltas")
    stop: list[str] | None = Field(default=None, description="Up to 4 stop sequences")
    max_tokens: int | None = Field(default=None, description="Completion token cap")
    presence_penalty: float | None = Field(default=None, description="-2 to 2")
    frequency_penalty: float | None = Field(default=None, description="-2 to 2")
    logit_bias: dict[str, float] | None = Field(default=None, description="Token bias, -100 to 100")
    user: str | None = Field(default=None, description="End-user identifier")

    def validate_sampling(self) -> None:
        """Check sampling parameters against their allowed ranges.

        Raises:
            SamplingValidationError: For the first parameter out of range.
        """
        for name, (low, high) in SAMPLING_RANGES.items():
            value = getattr(self, name)
            if value is not None and not low <= value <= high:
                raise SamplingValidationError(
                    name, value, f"{name} must be between {low} and {high}, got {value}"
                )

        if self.n is not None and self.n < 1:
            raise SamplingValidationError("n", self.n, f"n must be at least 1, got {self.n}")
        if self.stop is not None and len(self.stop) > MAX_STOP_SEQUENCES:
            raise SamplingValidationError(
                "stop",
                self.stop,
                f"stop accepts at most {MAX_STOP_SEQUENCES} sequences, got {len(self.stop)}",
            )
        for token, bias in (self.logit_bias or {}).items():
            if not -100.0 <= bias <= 100.0:
                raise SamplingValidationError(
                    "logit_bias",
                    {token: bias},
                    f"logit_bias for token {token} must be between -100 and 100, got {bias}",
                )

    def to_payload(self) -> dict[str, Any]:
        """Serialize for the wire, omitting unset fields."""
        return self.model_dump(exclude_none=True, mode="json")


class Usage(BaseModel):
    """Token accounting returned by the service."""

    prompt_tokens: int = Field(default=0, description="Prompt token count")
    total_tokens: int = Field(default=0, description="Total token count")
    completion_tokens: int | None = Field(default=None, description="Completion token count")


class Choice(BaseModel):
    """One generated alternative."""

    message: Message
    finish_reason: str | None = None
    index: int = 0


class CompletionResponse(BaseModel):
    """Chat completion response body."""

    id: str
    object: str
    created: int
    model: str
    usage: Usage = Field(default_factory=Usage)
    choices: list[Choice] = Field(default_factory=list)

    @property
    def content(self) -> str:
        """Text of the first choice, or an empty string."""
        return self.choices[0].message.content if self.choices else ""
