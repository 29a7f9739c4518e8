"""Logging and tracing for s3-folder-api.

Log events are structlog key/value events rendered as JSON (or as coloured
console lines when ``S3_FOLDER_API_LOG_FORMAT=console``). Anything bound with
``bind_request_context`` is merged into every event logged while handling
that request, so each storage call can be traced back to its request id.
"""

import logging
import sys
import uuid
from typing import Any, Optional

import structlog
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from .config import Settings, settings

REQUEST_ID_HEADER = "X-Request-ID"


def setup_tracing(config: Settings) -> None:
    """Install a tracer provider when tracing is enabled."""
    if not config.otel_enabled:
        return

    resource = Resource.create({"service.name": config.otel_service_name})
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(provider)


def setup_logging(config: Settings) -> None:
    """Route structlog through stdlib logging at the configured level."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, config.log_level.upper(), logging.INFO),
    )

    renderer: Any
    if config.log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a logger instance."""
    return structlog.get_logger(name)


def get_tracer(name: str) -> trace.Tracer:
    """Get a tracer (a no-op tracer unless tracing is enabled)."""
    return trace.get_tracer(name)


def bind_request_context(
    method: str, path: str, request_id: Optional[str] = None
) -> str:
    """Bind request details to the logging context of the current task.

    Returns:
        The request id, generated when the caller did not send one
    """
    request_id = request_id or uuid.uuid4().hex[:16]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id, method=method, path=path
    )
    return request_id


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


# Initialize on import
setup_logging(settings)
setup_tracing(settings)
