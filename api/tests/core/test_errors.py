"""Unit tests for core.errors.

Tests cover:
- status codes of each error kind
- storage_errors mapping of SQLAlchemy exceptions
- unique violation detection across drivers
"""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from core.errors import (
    ConflictError,
    InternalError,
    NotFoundError,
    ServiceError,
    is_unique_violation,
    storage_errors,
)


class _PgUniqueViolation(Exception):
    sqlstate = "23505"


def _integrity_error(orig: Exception) -> IntegrityError:
    return IntegrityError("INSERT INTO users ...", {}, orig)


@pytest.mark.unit
class TestErrorKinds:
    def test_status_codes(self):
        assert NotFoundError().status_code == 404
        assert ConflictError("taken").status_code == 409
        assert InternalError().status_code == 500

    def test_default_details(self):
        assert NotFoundError().detail == "User not found"
        assert InternalError().detail == "An unexpected error occurred"

    def test_all_kinds_are_service_errors(self):
        for exc in (NotFoundError(), ConflictError("x"), InternalError()):
            assert isinstance(exc, ServiceError)


@pytest.mark.unit
class TestIsUniqueViolation:
    def test_postgres_sqlstate(self):
        assert is_unique_violation(_integrity_error(_PgUniqueViolation("dup")))

    def test_sqlite_message(self):
        exc = _integrity_error(Exception("UNIQUE constraint failed: users.email"))
        assert is_unique_violation(exc)

    def test_foreign_key_violation_is_not_unique(self):
        exc = _integrity_error(Exception("FOREIGN KEY constraint failed"))
        assert not is_unique_violation(exc)


@pytest.mark.unit
class TestStorageErrors:
    def test_passes_through_without_error(self):
        with storage_errors("test.op"):
            value = 1
        assert value == 1

    def test_unique_violation_becomes_conflict(self):
        with pytest.raises(ConflictError, match="Email already in use") as exc_info:
            with storage_errors("test.op", conflict_detail="Email already in use"):
                raise _integrity_error(_PgUniqueViolation("dup"))

        assert isinstance(exc_info.value.__cause__, IntegrityError)

    def test_other_integrity_error_becomes_internal(self):
        with pytest.raises(InternalError):
            with storage_errors("test.op"):
                raise _integrity_error(Exception("NOT NULL constraint failed"))

    def test_operational_error_becomes_internal_with_generic_detail(self):
        with pytest.raises(InternalError) as exc_info:
            with storage_errors("test.op"):
                raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        assert "connection refused" not in exc_info.value.detail

    def test_service_errors_pass_through(self):
        with pytest.raises(NotFoundError):
            with storage_errors("test.op"):
                raise NotFoundError()

    def test_unrelated_exceptions_are_not_mapped(self):
        with pytest.raises(ValueError):
            with storage_errors("test.op"):
                raise ValueError("bad input")
