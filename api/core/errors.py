"""Service-level error kinds and storage error mapping.

Services raise these; main.py maps them to HTTP status codes:
    NotFoundError -> 404, ConflictError -> 409, InternalError -> 500
"""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from core.logger import get_logger

logger = get_logger(__name__)

# PostgreSQL unique_violation
_UNIQUE_VIOLATION_SQLSTATE = "23505"


class ServiceError(Exception):
    """Base class for errors surfaced to callers."""

    status_code = 500

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(ServiceError):
    """Referenced record does not exist."""

    status_code = 404

    def __init__(self, detail: str = "User not found") -> None:
        super().__init__(detail)


class ConflictError(ServiceError):
    """A unique key is already taken."""

    status_code = 409


class InternalError(ServiceError):
    """Unexpected storage failure. The detail never carries storage internals."""

    def __init__(self, detail: str = "An unexpected error occurred") -> None:
        super().__init__(detail)


def is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    if getattr(orig, "sqlstate", None) == _UNIQUE_VIOLATION_SQLSTATE:
        return True
    if getattr(orig, "pgcode", None) == _UNIQUE_VIOLATION_SQLSTATE:
        return True
    message = str(orig).lower()
    return "unique constraint" in message or "duplicate key" in message


@contextmanager
def storage_errors(
    operation: str, *, conflict_detail: str = "Resource already exists"
) -> Iterator[None]:
    """Map storage-layer exceptions raised inside the block to ServiceError kinds.

    ServiceError passes through untouched.
    """
    try:
        yield
    except ServiceError:
        raise
    except IntegrityError as e:
        if is_unique_violation(e):
            logger.info("storage.conflict", operation=operation)
            raise ConflictError(conflict_detail) from e
        logger.exception("storage.integrity_error", operation=operation)
        raise InternalError() from e
    except SQLAlchemyError as e:
        logger.exception("storage.error", operation=operation)
        raise InternalError() from e
