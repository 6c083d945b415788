"""Tests for repositories.utils helpers."""

from unittest.mock import MagicMock, patch

import pytest

from core.wide_event import get_wide_event, init_wide_event
from models import Profile
from repositories.utils import log_slow_query, upsert_on_conflict


@pytest.mark.unit
class TestLogSlowQuery:
    async def test_returns_result(self):
        @log_slow_query("test.op")
        async def op() -> int:
            return 42

        assert await op() == 42

    async def test_records_failures_on_wide_event(self):
        init_wide_event()

        @log_slow_query("test.failing")
        async def op() -> None:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await op()

        event = get_wide_event()
        assert event["db_query_error"] is True
        assert event["db_operation"] == "test.failing"
        assert event["db_error_type"] == "RuntimeError"

    async def test_records_slow_calls(self):
        init_wide_event()

        @log_slow_query("test.slow")
        async def op() -> str:
            return "ok"

        with patch("repositories.utils.SLOW_QUERY_THRESHOLD_MS", -1):
            await op()

        assert get_wide_event()["db_slow_query"] is True


@pytest.mark.unit
class TestUpsertOnConflictValidation:
    async def test_rejects_update_fields_missing_from_values(self):
        db = MagicMock()

        with pytest.raises(ValueError, match="not present in values"):
            await upsert_on_conflict(
                db,
                Profile,
                values={"user_id": "u1"},
                index_elements=["user_id"],
                update_fields=["is_complete"],
            )

    async def test_rejects_unsupported_dialect(self):
        db = MagicMock()
        db.get_bind.return_value.dialect.name = "mysql"

        with pytest.raises(NotImplementedError, match="mysql"):
            await upsert_on_conflict(
                db,
                Profile,
                values={"user_id": "u1", "is_complete": True},
                index_elements=["user_id"],
                update_fields=["is_complete"],
            )
