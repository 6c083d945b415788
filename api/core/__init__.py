"""Core utilities for the nanny marketplace API.

    from core import get_logger
"""

from core.logger import get_logger
from core.wide_event import (
    set_wide_event_fields,
    set_wide_event_nested,
)

__all__ = [
    "get_logger",
    "set_wide_event_fields",
    "set_wide_event_nested",
]
