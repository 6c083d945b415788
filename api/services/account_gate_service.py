"""Account gate: who may use interactive marketplace features.

Access is a conjunction of four independently-transitioned dimensions:

    account_status       PENDING_PAYMENT -> ACTIVE <-> SUSPENDED
    profile.is_complete  false -> true          (admin approval only)
    background_status    PENDING -> PASSED | FAILED
    approved_at          null -> timestamp      (admin approval only, never cleared)

The gate is recomputed from a fresh read on every check; nothing is cached
or stored. Transitions do not cascade: a failed background check or a
suspension leaves approval in place, and the gate denies on its own.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from core import get_logger, set_wide_event_fields, set_wide_event_nested
from core.errors import NotFoundError, storage_errors
from core.telemetry import log_business_event, track_operation
from models import AccountStatus, BackgroundStatus, User, utcnow
from repositories.profile_repository import ProfileRepository
from repositories.user_repository import UserRepository
from services.users_service import UserData, load_user, to_user_data

logger = get_logger(__name__)


@dataclass(frozen=True)
class AccessDecision:
    """The four gate checks for one user at one point in time."""

    user_id: str
    account_active: bool
    profile_complete: bool
    background_passed: bool
    admin_approved: bool

    @property
    def allowed(self) -> bool:
        return (
            self.account_active
            and self.profile_complete
            and self.background_passed
            and self.admin_approved
        )

    @property
    def missing(self) -> list[str]:
        """Names of unmet requirements, in evaluation order."""
        checks = (
            ("account_active", self.account_active),
            ("profile_complete", self.profile_complete),
            ("background_passed", self.background_passed),
            ("admin_approved", self.admin_approved),
        )
        return [name for name, ok in checks if not ok]


def evaluate_gate(user: User | UserData) -> AccessDecision:
    """Pure decision over a loaded user record (profile included)."""
    return AccessDecision(
        user_id=user.id,
        account_active=user.account_status == AccountStatus.ACTIVE,
        profile_complete=user.profile is not None and bool(user.profile.is_complete),
        background_passed=user.background_status == BackgroundStatus.PASSED,
        admin_approved=user.approved_at is not None,
    )


async def evaluate_access(db: AsyncSession, user_id: str) -> AccessDecision:
    """Read the user fresh and evaluate every gate check."""
    user = await load_user(db, user_id)
    decision = evaluate_gate(user)

    set_wide_event_fields(user_id=user_id)
    set_wide_event_nested("gate", allowed=decision.allowed, missing=decision.missing)
    logger.debug(
        "gate.evaluated",
        user_id=user_id,
        allowed=decision.allowed,
        missing=decision.missing,
    )
    return decision


async def can_access_services(db: AsyncSession, user_id: str) -> bool:
    """True iff active, profile complete, background passed and admin-approved."""
    decision = await evaluate_access(db, user_id)
    return decision.allowed


@track_operation("gate_approve_profile")
async def approve_profile(db: AsyncSession, user_id: str) -> UserData:
    """Admin approval: complete the profile (creating it if needed) and stamp approved_at.

    Both writes run in one savepoint; a failure rolls back both. Safe to
    repeat: the first approval timestamp is kept.
    """
    await load_user(db, user_id)

    with storage_errors("gate.approve_profile"):
        async with db.begin_nested():
            await ProfileRepository(db).mark_complete(user_id)
            await UserRepository(db).mark_approved(user_id, utcnow())

    user = await load_user(db, user_id)

    set_wide_event_fields(user_id=user_id)
    log_business_event("gate.profile_approved", 1)
    logger.info("gate.profile.approved", user_id=user_id)
    return to_user_data(user)


@track_operation("gate_activate_after_payment")
async def activate_after_payment(db: AsyncSession, user_id: str) -> UserData:
    """Mark the account ACTIVE once the signup payment is confirmed.

    Unconditional: a SUSPENDED account is reactivated too (logged as a
    warning so operators can spot it).
    """
    user = await load_user(db, user_id)
    previous_status = user.account_status

    with storage_errors("gate.activate_after_payment"):
        updated = await UserRepository(db).set_account_status(
            user_id, AccountStatus.ACTIVE
        )
    if not updated:
        raise NotFoundError()

    if previous_status == AccountStatus.SUSPENDED:
        logger.warning("gate.account.reactivated_from_suspension", user_id=user_id)

    user = await load_user(db, user_id)

    set_wide_event_fields(user_id=user_id)
    logger.info(
        "gate.account.activated",
        user_id=user_id,
        previous_status=previous_status.value,
    )
    return to_user_data(user)


@track_operation("gate_suspend_account")
async def suspend_account(db: AsyncSession, user_id: str) -> UserData:
    """Admin suspension. Approval and profile completeness are kept."""
    with storage_errors("gate.suspend_account"):
        updated = await UserRepository(db).set_account_status(
            user_id, AccountStatus.SUSPENDED
        )
    if not updated:
        raise NotFoundError()

    user = await load_user(db, user_id)

    set_wide_event_fields(user_id=user_id)
    logger.info("gate.account.suspended", user_id=user_id)
    return to_user_data(user)


@track_operation("gate_set_background_status")
async def set_background_status(
    db: AsyncSession, user_id: str, status: BackgroundStatus
) -> UserData:
    """Record a background-check result. Overwrites; no other field changes."""
    with storage_errors("gate.set_background_status"):
        updated = await UserRepository(db).set_background_status(user_id, status)
    if not updated:
        raise NotFoundError()

    # The user can vanish between the write and the read-back
    user = await load_user(db, user_id)

    set_wide_event_fields(user_id=user_id)
    logger.info(
        "gate.background_status.updated", user_id=user_id, status=status.value
    )
    return to_user_data(user)
