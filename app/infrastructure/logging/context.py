"""Context binding for structured logging.

Binds request-scoped (HTTP) or message-scoped (bus record) metadata to
structlog's context variables so every log entry emitted inside the block
carries it.

Usage:
    from infrastructure.logging import bind_message_context

    with bind_message_context(topic="order-events", partition=0, offset=42):
        logger.info("message_received")

Dependencies:
    - structlog.contextvars
"""

import uuid
from contextlib import contextmanager
from typing import Optional, Any, Generator
import structlog


@contextmanager
def bind_request_context(
    correlation_id: Optional[str] = None,
    request_path: Optional[str] = None,
    request_method: Optional[str] = None,
    **extra_context: Any,
) -> Generator[None, None, None]:
    """Bind request-scoped context to all logs within the context manager.

    Args:
        correlation_id: Unique request identifier. Auto-generated if not provided.
        request_path: HTTP request path (e.g., "/api/v1/notifications").
        request_method: HTTP method (e.g., "GET", "POST").
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        None - context is automatically bound to structlog's context vars.

    Example:
        @app.middleware("http")
        async def logging_middleware(request: Request, call_next):
            with bind_request_context(
                correlation_id=request.headers.get("X-Correlation-ID"),
                request_path=request.url.path,
                request_method=request.method,
            ):
                return await call_next(request)
    """
    context: dict[str, Any] = {}
    context["correlation_id"] = correlation_id or str(uuid.uuid4())

    if request_path is not None:
        context["request_path"] = request_path

    if request_method is not None:
        context["request_method"] = request_method

    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


@contextmanager
def bind_message_context(
    topic: str,
    partition: int,
    offset: int,
    correlation_id: Optional[str] = None,
    **extra_context: Any,
) -> Generator[None, None, None]:
    """Bind bus coordinates to all logs emitted while a record is processed.

    The correlation id defaults to ``{topic}-{partition}-{offset}``, the same
    key used for the dead letter envelope, so a dead lettered message can be
    traced back through the logs.

    Args:
        topic: Source topic of the record.
        partition: Partition the record was read from.
        offset: Offset of the record within the partition.
        correlation_id: Optional override for the correlation id.
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        None
    """
    context: dict[str, Any] = {
        "correlation_id": correlation_id or f"{topic}-{partition}-{offset}",
        "topic": topic,
        "partition": partition,
        "offset": offset,
    }
    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context.

    Returns:
        The correlation ID if set, None otherwise.
    """
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("correlation_id")


def clear_request_context() -> None:
    """Clear all bound context from the logging context."""
    structlog.contextvars.clear_contextvars()
