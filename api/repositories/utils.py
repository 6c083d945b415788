"""Repository helpers: slow query logging and dialect-aware upserts."""

import time
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, ParamSpec, TypeVar

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from core.logger import get_logger
from core.wide_event import set_wide_event_fields

logger = get_logger(__name__)

SLOW_QUERY_THRESHOLD_MS = 500

P = ParamSpec("P")
R = TypeVar("R")


def log_slow_query(
    operation_name: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Record slow or failing repository calls on the wide event.

    Usage:
        @log_slow_query("users.get_by_id")
        async def get_by_id(self, user_id: str) -> User | None:
            ...
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start_time = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                duration_ms = (time.perf_counter() - start_time) * 1000
                set_wide_event_fields(
                    db_query_error=True,
                    db_operation=operation_name,
                    db_duration_ms=round(duration_ms, 2),
                    db_error_type=type(e).__name__,
                )
                raise

            duration_ms = (time.perf_counter() - start_time) * 1000
            if duration_ms > SLOW_QUERY_THRESHOLD_MS:
                logger.debug(
                    "db.query.slow",
                    operation=operation_name,
                    duration_ms=round(duration_ms, 2),
                )
                set_wide_event_fields(
                    db_slow_query=True,
                    db_operation=operation_name,
                    db_duration_ms=round(duration_ms, 2),
                )
            return result

        return wrapper

    return decorator


async def upsert_on_conflict(
    db: AsyncSession,
    model: type[Any],
    values: dict[str, Any],
    index_elements: list[str],
    update_fields: list[str],
) -> None:
    """INSERT ... ON CONFLICT DO UPDATE for PostgreSQL and SQLite.

    An empty ``update_fields`` means insert-if-missing (ON CONFLICT DO NOTHING).
    Does NOT commit. Caller owns the transaction.

    Column.onupdate hooks do not fire on the conflict branch; include
    timestamp columns in ``values`` and ``update_fields`` explicitly.
    """
    missing = [field for field in update_fields if field not in values]
    if missing:
        raise ValueError(
            f"Update fields {missing} not present in values {list(values.keys())}"
        )
    update_set = {field: values[field] for field in update_fields}

    bind = db.get_bind()
    dialect = bind.dialect.name if bind else ""

    if dialect == "postgresql":
        insert = pg_insert
    elif dialect == "sqlite":
        insert = sqlite_insert
    else:
        raise NotImplementedError(f"upsert not supported for dialect {dialect!r}")

    stmt = insert(model).values(**values)
    if update_set:
        stmt = stmt.on_conflict_do_update(
            index_elements=index_elements, set_=update_set
        )
    else:
        stmt = stmt.on_conflict_do_nothing(index_elements=index_elements)
    await db.execute(stmt)
