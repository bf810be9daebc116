"""Prometheus metrics for outbound calls and storage.

Every series lives under the ``vecbridge_`` namespace:

- completion latency, request counts and token usage per model
- embedding latency and request counts per model
- vector database call latency, and requests rejected before dispatch
- storage backend operation latency per backend
"""

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

NAMESPACE = "vecbridge"

# Remote calls: sub-second to a couple of minutes for long completions
_REMOTE_BUCKETS = (0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0)
# Local storage: sub-millisecond to one second
_STORAGE_BUCKETS = (0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 1.0)

COMPLETION_DURATION = Histogram(
    "completion_duration_seconds",
    "Chat completion request duration",
    ["model", "status"],
    namespace=NAMESPACE,
    buckets=_REMOTE_BUCKETS,
)

COMPLETION_REQUESTS = Counter(
    "completion_requests_total",
    "Chat completion requests",
    ["model", "status"],
    namespace=NAMESPACE,
)

COMPLETION_TOKENS = Counter(
    "completion_tokens_total",
    "Tokens reported by the completion service",
    ["model", "kind"],  # kind: prompt | completion
    namespace=NAMESPACE,
)

EMBEDDING_DURATION = Histogram(
    "embedding_duration_seconds",
    "Embedding request duration",
    ["model", "status"],
    namespace=NAMESPACE,
    buckets=_REMOTE_BUCKETS,
)

EMBEDDING_REQUESTS = Counter(
    "embedding_requests_total",
    "Embedding requests",
    ["model", "status"],
    namespace=NAMESPACE,
)

VECTORDB_DURATION = Histogram(
    "vectordb_duration_seconds",
    "Vector database call duration",
    ["operation", "status"],
    namespace=NAMESPACE,
    buckets=_REMOTE_BUCKETS,
)

VECTORDB_REJECTED = Counter(
    "vectordb_rejected_total",
    "Vector database requests rejected before dispatch",
    ["operation"],
    namespace=NAMESPACE,
)

STORAGE_DURATION = Histogram(
    "storage_duration_seconds",
    "Storage backend operation duration",
    ["backend", "operation", "status"],
    namespace=NAMESPACE,
    buckets=_STORAGE_BUCKETS,
)


def get_metrics() -> bytes:
    """Render every registered metric in the text exposition format."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Content type matching :func:`get_metrics` output."""
    return CONTENT_TYPE_LATEST


def _status(success: bool) -> str:
    return "success" if success else "error"


def track_llm_request(
    model: str,
    duration: float,
    prompt_tokens: int,
    completion_tokens: int,
    success: bool = True,
) -> None:
    """Record one chat completion call.

    Tokens are only counted for successful calls.

    Args:
        model: Model name.
        duration: Request duration in seconds.
        prompt_tokens: Prompt tokens reported by the service.
        completion_tokens: Completion tokens reported by the service.
        success: Whether the request succeeded.
    """
    status = _status(success)
    COMPLETION_DURATION.labels(model=model, status=status).observe(duration)
    COMPLETION_REQUESTS.labels(model=model, status=status).inc()

    if success:
        COMPLETION_TOKENS.labels(model=model, kind="prompt").inc(prompt_tokens)
        COMPLETION_TOKENS.labels(model=model, kind="completion").inc(completion_tokens)


def track_embedding_request(model: str, duration: float, success: bool = True) -> None:
    """Record one embedding call."""
    status = _status(success)
    EMBEDDING_DURATION.labels(model=model, status=status).observe(duration)
    EMBEDDING_REQUESTS.labels(model=model, status=status).inc()


def track_vectordb_operation(operation: str, duration: float, success: bool = True) -> None:
    """Record one dispatched vector database call."""
    VECTORDB_DURATION.labels(operation=operation, status=_status(success)).observe(duration)


def track_vectordb_rejection(operation: str) -> None:
    """Count a request that failed client-side validation."""
    VECTORDB_REJECTED.labels(operation=operation).inc()


def track_storage_operation(
    backend: str,
    operation: str,
    duration: float,
    success: bool = True,
) -> None:
    """Record one storage backend operation.

    Args:
        backend: Backend name (``sqlite`` or ``sql``).
        operation: Operation name (``create``, ``read``, ...).
        duration: Duration in seconds.
        success: Whether the operation succeeded.
    """
    STORAGE_DURATION.labels(
        backend=backend,
        operation=operation,
        status=_status(success),
    ).observe(duration)
