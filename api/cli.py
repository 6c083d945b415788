#!/usr/bin/env python3
"""CLI for Nanny Marketplace admin tasks.

Usage:
    python -m cli <command>

Commands:
    migrate                                Run database migrations
    approve <user_id>                      Approve a user's profile
    activate <user_id>                     Activate an account after payment
    suspend <user_id>                      Suspend an account
    background-status <user_id> <status>   Record a background-check result
    check-access <user_id>                 Show the service-access decision
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from alembic.config import Config
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import create_engine, create_session_maker, dispose_engine
from core.errors import ServiceError
from core.logger import configure_logging
from models import BackgroundStatus

logger = logging.getLogger(__name__)


def _get_alembic_config() -> Config:
    api_dir = Path(__file__).resolve().parent
    cfg = Config(str(api_dir / "alembic.ini"))
    # Absolute so it works from any working directory
    cfg.set_main_option("script_location", str(api_dir / "alembic"))
    return cfg


def cmd_migrate() -> int:
    """Run database migrations."""
    from alembic import command

    logger.info("Running database migrations...")
    command.upgrade(_get_alembic_config(), "head")
    logger.info("Migrations complete")
    return 0


async def _run_in_session(
    operation: Callable[[AsyncSession], Awaitable[Any]],
) -> Any:
    """Run one operation in its own transaction, committing on success."""
    engine = create_engine()
    session_maker = create_session_maker(engine)
    try:
        async with session_maker() as session:
            try:
                result = await operation(session)
                await session.commit()
                return result
            except Exception:
                await session.rollback()
                raise
    finally:
        await dispose_engine(engine)


def _run_gate_command(
    name: str, operation: Callable[[AsyncSession], Awaitable[Any]]
) -> int:
    try:
        result = asyncio.run(_run_in_session(operation))
    except ServiceError as e:
        logger.error("%s failed: %s", name, e.detail)
        return 1

    logger.info("%s succeeded: %s", name, result)
    return 0


def cmd_approve(user_id: str) -> int:
    from services.account_gate_service import approve_profile

    return _run_gate_command("approve", lambda db: approve_profile(db, user_id))


def cmd_activate(user_id: str) -> int:
    from services.account_gate_service import activate_after_payment

    return _run_gate_command(
        "activate", lambda db: activate_after_payment(db, user_id)
    )


def cmd_suspend(user_id: str) -> int:
    from services.account_gate_service import suspend_account

    return _run_gate_command("suspend", lambda db: suspend_account(db, user_id))


def cmd_background_status(user_id: str, status: str) -> int:
    from services.account_gate_service import set_background_status

    return _run_gate_command(
        "background-status",
        lambda db: set_background_status(db, user_id, BackgroundStatus(status)),
    )


def cmd_check_access(user_id: str) -> int:
    """Print the decision; exit 0 whether or not access is granted."""
    from services.account_gate_service import evaluate_access

    try:
        decision = asyncio.run(
            _run_in_session(lambda db: evaluate_access(db, user_id))
        )
    except ServiceError as e:
        logger.error("check-access failed: %s", e.detail)
        return 1

    if decision.allowed:
        print(f"{user_id}: access granted")
    else:
        print(f"{user_id}: access denied (missing: {', '.join(decision.missing)})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Nanny Marketplace API CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("migrate", help="Run database migrations")

    for name, help_text in (
        ("approve", "Approve a user's profile"),
        ("activate", "Activate an account after signup payment"),
        ("suspend", "Suspend an account"),
        ("check-access", "Show whether a user may use the service"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("user_id")

    background = subparsers.add_parser(
        "background-status", help="Record a background-check result"
    )
    background.add_argument("user_id")
    background.add_argument(
        "status", choices=[status.value for status in BackgroundStatus]
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)

    match args.command:
        case "migrate":
            return cmd_migrate()
        case "approve":
            return cmd_approve(args.user_id)
        case "activate":
            return cmd_activate(args.user_id)
        case "suspend":
            return cmd_suspend(args.user_id)
        case "background-status":
            return cmd_background_status(args.user_id, args.status)
        case "check-access":
            return cmd_check_access(args.user_id)
        case _:
            parser.print_help()
            return 1


if __name__ == "__main__":
    sys.exit(main())
