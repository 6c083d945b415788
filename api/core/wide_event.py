"""Request-scoped wide event for canonical log lines.

Services add context (user id, gate outcome, slow queries) as the request
runs; RequestTimingMiddleware emits the accumulated dict once at the end as
``request.completed``.

Usage:
    from core.wide_event import set_wide_event_fields

    set_wide_event_fields(user_id=user.id, gate_allowed=False)
    set_wide_event_nested("gate", missing=["admin_approved"])
"""

from contextvars import ContextVar
from typing import Any

_wide_event: ContextVar[dict[str, Any]] = ContextVar("wide_event")


def init_wide_event() -> dict[str, Any]:
    """Start a fresh event for the current async context."""
    event: dict[str, Any] = {}
    _wide_event.set(event)
    return event


def get_wide_event() -> dict[str, Any]:
    """Return the current event, or an empty dict outside a request."""
    try:
        return _wide_event.get()
    except LookupError:
        return {}


def set_wide_event_fields(**kwargs: Any) -> None:
    """Merge fields into the current event.

    No-op outside a request (CLI, tests without init).
    """
    event = _wide_event.get(None)
    if event is not None:
        event.update(kwargs)


def set_wide_event_nested(category: str, **kwargs: Any) -> None:
    """Merge fields under a nested key, e.g. ``{"gate": {...}}``."""
    event = _wide_event.get(None)
    if event is None:
        return
    event.setdefault(category, {}).update(kwargs)


def clear_wide_event() -> None:
    _wide_event.set({})
