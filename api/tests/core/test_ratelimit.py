"""Unit tests for core.ratelimit module.

Tests rate limiting utilities:
- rate_limit_exceeded_handler returns proper 429 JSON response
- limiter is keyed by client address
"""

import json
from unittest.mock import MagicMock, patch

import pytest
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.ratelimit import (
    ACCESS_CHECK_LIMIT,
    ADMIN_LIMIT,
    HEALTH_LIMIT,
    SIGNUP_LIMIT,
    limiter,
    rate_limit_exceeded_handler,
)
from routes import health_routes, users_routes  # noqa: F401


def _make_rate_limit_exc(
    detail: str = "10 per 1 minute", retry_after: int | None = 30
) -> RateLimitExceeded:
    """Create a RateLimitExceeded with a mock Limit object."""
    mock_limit = MagicMock()
    mock_limit.error_message = None
    mock_limit.limit = detail
    exc = RateLimitExceeded(mock_limit)
    if retry_after is not None:
        object.__setattr__(exc, "retry_after", retry_after)
    return exc


@pytest.mark.unit
class TestRateLimitExceededHandler:
    """Test the 429 response body and headers."""

    @patch("core.ratelimit.get_remote_address", autospec=True)
    def test_returns_429_with_detail(self, mock_get_remote):
        mock_get_remote.return_value = "10.0.0.1"
        exc = _make_rate_limit_exc()

        response = rate_limit_exceeded_handler(MagicMock(), exc)

        assert response.status_code == 429
        body = json.loads(response.body)
        assert body["detail"] == "Rate limit exceeded. Please slow down."
        assert body["retry_after"] == exc.detail

    @patch("core.ratelimit.get_remote_address", autospec=True)
    def test_sets_retry_after_header(self, mock_get_remote):
        mock_get_remote.return_value = "10.0.0.1"

        response = rate_limit_exceeded_handler(
            MagicMock(), _make_rate_limit_exc(retry_after=12)
        )

        assert response.headers["Retry-After"] == "12"

    @patch("core.ratelimit.get_remote_address", autospec=True)
    def test_defaults_retry_after_to_a_minute(self, mock_get_remote):
        mock_get_remote.return_value = "10.0.0.1"

        response = rate_limit_exceeded_handler(
            MagicMock(), _make_rate_limit_exc(retry_after=None)
        )

        assert response.headers["Retry-After"] == "60"


@pytest.mark.unit
class TestLimiterConfiguration:
    def test_keyed_by_remote_address(self):
        assert limiter._key_func is get_remote_address

    def test_signup_is_stricter_than_admin(self):
        assert int(SIGNUP_LIMIT.split("/")[0]) < int(ADMIN_LIMIT.split("/")[0])

    def test_access_check_allows_more_than_admin(self):
        assert int(ACCESS_CHECK_LIMIT.split("/")[0]) > int(ADMIN_LIMIT.split("/")[0])

    @pytest.mark.parametrize(
        "endpoint, expected",
        [
            ("routes.users_routes.get_access_endpoint", ACCESS_CHECK_LIMIT),
            ("routes.health_routes.ready", HEALTH_LIMIT),
            ("routes.health_routes.health_detailed", HEALTH_LIMIT),
        ],
    )
    def test_routes_use_named_limits(self, endpoint, expected):
        limits = limiter._route_limits[endpoint]

        assert [limit.limit.amount for limit in limits] == [
            int(expected.split("/")[0])
        ]
