"""Application exception hierarchy.

All custom exceptions inherit from VecBridgeError.
Each exception has an error code for structured error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "VB-1000"
    CONFIGURATION_ERROR = "VB-1001"
    VALIDATION_ERROR = "VB-1002"

    # Codec errors (2xxx)
    TRUNCATED_INPUT = "VB-2000"
    UNENCODABLE_VALUE = "VB-2001"

    # Storage errors (3xxx)
    STORAGE_ERROR = "VB-3000"
    NOT_FOUND = "VB-3001"
    DUPLICATE_KEY = "VB-3002"
    CONNECTION_FAILURE = "VB-3003"
    CORRUPT_EMBEDDING = "VB-3004"
    INVALID_EMBEDDING = "VB-3005"

    # Vector database errors (4xxx)
    VECTOR_DB_VALIDATION = "VB-4000"
    VECTOR_DB_TRANSPORT = "VB-4001"

    # Completion errors (5xxx)
    LLM_SERVICE_ERROR = "VB-5000"
    LLM_TIMEOUT = "VB-5001"
    LLM_RATE_LIMIT = "VB-5002"
    INVALID_SAMPLING_PARAMETER = "VB-5003"

    # Embedding errors (6xxx)
    EMBEDDING_SERVICE_ERROR = "VB-6000"
    TOKEN_LIMIT_EXCEEDED = "VB-6001"

    # Document errors (7xxx)
    DOCUMENT_NOT_FOUND = "VB-7000"
    DOCUMENT_PARSE_ERROR = "VB-7001"
    UNSUPPORTED_DOCUMENT = "VB-7002"


class VecBridgeError(Exception):
    """Base exception for all vecbridge errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a serializable dictionary."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationError(VecBridgeError):
    """Configuration or environment error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class ValidationError(VecBridgeError):
    """Input validation error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details)


class CodecError(VecBridgeError):
    """Binary embedding codec error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TRUNCATED_INPUT,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class StorageError(VecBridgeError):
    """Storage backend error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.STORAGE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class VectorDBError(VecBridgeError):
    """Vector database operation error.

    Client-side validation failures and transport/deserialization
    failures share the per-operation class but carry different codes.
    """

    operation = "vector_db"

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VECTOR_DB_VALIDATION,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, {"operation": self.operation, **(details or {})})

    @property
    def is_validation(self) -> bool:
        """True when the request was rejected before reaching the network."""
        return self.code == ErrorCode.VECTOR_DB_VALIDATION


class UpsertError(VectorDBError):
    """Upsert request error."""

    operation = "upsert"


class QueryError(VectorDBError):
    """Query request error."""

    operation = "query"


class UpdateError(VectorDBError):
    """Update request error."""

    operation = "update"


class FetchError(VectorDBError):
    """Fetch request error."""

    operation = "fetch"


class DeleteError(VectorDBError):
    """Delete request error."""

    operation = "delete"


class LLMError(VecBridgeError):
    """Completion service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.LLM_SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class SamplingValidationError(LLMError):
    """A sampling parameter is outside its allowed range.

    Attributes:
        parameter: Name of the offending parameter.
        value: The rejected value.
    """

    def __init__(self, parameter: str, value: Any, message: str) -> None:
        self.parameter = parameter
        self.value = value
        super().__init__(
            message,
            code=ErrorCode.INVALID_SAMPLING_PARAMETER,
            details={"parameter": parameter, "value": value},
        )


class EmbeddingError(VecBridgeError):
    """Embedding service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.EMBEDDING_SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class TokenLimitError(EmbeddingError):
    """Input exceeds the embedding model's token limit."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.TOKEN_LIMIT_EXCEEDED, details)


class DocumentError(VecBridgeError):
    """Document loading error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.DOCUMENT_PARSE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)
