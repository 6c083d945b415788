"""Route tests run with slowapi switched off so limits never trip mid-test."""

from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def _limiter_off():
    with patch("core.ratelimit.limiter.enabled", False):
        yield
