"""Admin authentication for operator endpoints.

Admin routes (profile approval, payment activation, background results)
are called by internal tooling and the payment webhook handler, which
present a shared token in the ``X-Admin-Token`` header.
"""

from __future__ import annotations

import secrets
from typing import Annotated

from fastapi import Header, HTTPException

from core.config import get_settings
from core.logger import get_logger
from core.wide_event import set_wide_event_fields

logger = get_logger(__name__)


def require_admin(
    x_admin_token: Annotated[str | None, Header()] = None,
) -> None:
    """Raise 401 unless the request carries the configured admin token."""
    expected = get_settings().admin_api_token

    if not expected:
        # Debug deployments may run without a token; admin routes stay closed
        logger.warning("auth.admin_token.unconfigured")
        raise HTTPException(status_code=401, detail="Admin access not configured")

    if not x_admin_token or not secrets.compare_digest(
        x_admin_token.encode(), expected.encode()
    ):
        set_wide_event_fields(auth_failed=True)
        raise HTTPException(status_code=401, detail="Invalid admin token")

    set_wide_event_fields(auth_admin=True)

