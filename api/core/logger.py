"""Centralized logging configuration using structlog.

- JSON output for production (LOG_FORMAT=json)
- Colored console output for local development (default)
- OpenTelemetry trace/span ID injection when tracing is enabled
- Third-party library logs (uvicorn, sqlalchemy) routed through the same formatter

Usage:
    from core import get_logger
    logger = get_logger(__name__)
    logger.info("gate.profile.approved", user_id="123")
"""

import logging
import os
import sys

import structlog
from structlog.types import EventDict, Processor

_TELEMETRY_ENABLED = bool(os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT"))

__all__ = [
    "configure_logging",
    "get_logger",
]


def _add_open_telemetry_spans(
    _logger: logging.Logger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add OpenTelemetry trace and span IDs to log entries for correlation."""
    if not _TELEMETRY_ENABLED:
        return event_dict

    try:
        from opentelemetry import trace

        span = trace.get_current_span()
        if span and span.is_recording():
            ctx = span.get_span_context()
            if ctx.is_valid:
                event_dict["trace_id"] = format(ctx.trace_id, "032x")
                event_dict["span_id"] = format(ctx.span_id, "016x")
    except Exception:
        # Telemetry errors must not break logging
        pass

    return event_dict


def _get_log_level() -> int:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def _is_json_format() -> bool:
    """JSON when LOG_FORMAT=json, or by default when tracing is enabled."""
    log_format = os.environ.get("LOG_FORMAT", "").lower()
    if log_format == "json":
        return True
    if log_format == "console":
        return False
    return _TELEMETRY_ENABLED


def configure_logging() -> None:
    """Configure structlog and stdlib logging. Call once at application startup."""
    log_level = _get_log_level()
    use_json = _is_json_format()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.stdlib.ExtraAdder(),
        _add_open_telemetry_spans,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if use_json:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True, exception_formatter=structlog.dev.plain_traceback
        )

    structlog.configure(
        processors=shared_processors
        + [
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Third-party logs (uvicorn, sqlalchemy) get the same formatting
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Example:
        logger = get_logger(__name__)
        logger.info("user.created", user_id="123", role="NANNY")
    """
    return structlog.stdlib.get_logger(name)
