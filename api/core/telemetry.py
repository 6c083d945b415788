"""Tracing helpers and the request timing middleware.

Spans go through the OpenTelemetry API. Without an exporter configured
(OTEL_EXPORTER_OTLP_ENDPOINT unset) the decorators are plain pass-throughs.
"""

import inspect
import os
import time
import uuid
from collections.abc import Callable
from functools import wraps
from typing import Any, ParamSpec, TypeVar, cast

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from core.logger import get_logger
from core.wide_event import clear_wide_event, get_wide_event, init_wide_event

logger = get_logger(__name__)

TELEMETRY_ENABLED = bool(os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT"))

SERVICE_NAME = os.getenv("SERVICE_NAME", "nanny-marketplace-api")
SERVICE_VERSION = os.getenv("SERVICE_VERSION", "0.1.0")

tracer = trace.get_tracer(__name__)

P = ParamSpec("P")
R = TypeVar("R")

# Requests slower than this are always logged
SLOW_REQUEST_MS = 1000


def instrument_sqlalchemy_engine(engine: Any) -> None:
    """Add OpenTelemetry query tracing when the instrumentation package is present."""
    if not TELEMETRY_ENABLED:
        return

    try:
        from opentelemetry.instrumentation.sqlalchemy import (
            SQLAlchemyInstrumentor,
        )

        SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)
        logger.info("sqlalchemy.instrumentation.enabled")
    except Exception as e:
        logger.warning("sqlalchemy.instrumentation.failed", error=str(e))


class RequestTimingMiddleware:
    """Emits one wide event per request (canonical log line).

    Errors, slow requests and requests touching a user are always emitted;
    fast successful anonymous requests (probes) are dropped.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start_time = time.perf_counter()
        method = scope.get("method", "UNKNOWN")
        path = scope.get("path", "")
        request_id = str(uuid.uuid4())

        wide_event = init_wide_event()
        wide_event["service_name"] = SERVICE_NAME
        wide_event["service_version"] = SERVICE_VERSION
        wide_event["request_id"] = request_id
        wide_event["http_method"] = method
        wide_event["http_path"] = path

        response_status: int | None = None

        async def send_wrapper(message: Message) -> None:
            nonlocal response_status

            if message.get("type") == "http.response.start":
                response_status = int(message.get("status", 0))
                headers: list[tuple[bytes, bytes]] = list(message.get("headers", []))
                duration_ms = (time.perf_counter() - start_time) * 1000
                headers.append(
                    (b"x-request-duration-ms", f"{duration_ms:.2f}".encode())
                )
                headers.append((b"x-request-id", request_id.encode()))
                message["headers"] = headers

            elif message.get("type") == "http.response.body" and not message.get(
                "more_body", False
            ):
                duration_ms = (time.perf_counter() - start_time) * 1000
                route = scope.get("route")
                route_path = getattr(route, "path", None) or path

                event = get_wide_event()
                event["http_route"] = route_path
                event["http_status_code"] = response_status
                event["duration_ms"] = round(duration_ms, 2)
                event["outcome"] = (
                    "success" if response_status and response_status < 400 else "error"
                )

                if (
                    response_status is None
                    or response_status >= 400
                    or duration_ms > SLOW_REQUEST_MS
                    or event.get("user_id")
                ):
                    logger.info("request.completed", **event)

                clear_wide_event()

            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            event = get_wide_event()
            event["duration_ms"] = round((time.perf_counter() - start_time) * 1000, 2)
            event["outcome"] = "exception"
            event["exception_type"] = type(exc).__name__
            logger.info("request.completed", **event)
            clear_wide_event()
            raise


def track_operation(operation_name: str):
    """Decorator that wraps a business operation in a span.

    Exceptions are recorded on the span and re-raised.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        if not inspect.iscoroutinefunction(func):
            raise TypeError("track_operation only supports async functions")

        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
            if not TELEMETRY_ENABLED:
                return await func(*args, **kwargs)

            with tracer.start_as_current_span(
                operation_name, attributes={"operation.name": operation_name}
            ) as span:
                start_time = time.perf_counter()
                try:
                    result = await func(*args, **kwargs)
                    span.set_attribute("operation.success", True)
                    return result
                except Exception as e:
                    span.set_attribute("operation.success", False)
                    span.record_exception(e)
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    raise
                finally:
                    duration_ms = (time.perf_counter() - start_time) * 1000
                    span.set_attribute("operation.duration_ms", duration_ms)

        return cast(Callable[P, R], wrapper)

    return decorator


def log_business_event(
    name: str, value: float, properties: dict[str, str] | None = None
) -> None:
    """Emit a structured business event (e.g. users.registered) as a log line."""
    logger.info("business.event", event_name=name, value=value, **(properties or {}))
