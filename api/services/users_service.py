"""User directory: signup, lookup, listing and self-service updates.

Account gating lives in services/account_gate_service.py; this module never
touches account status, background status, approval or profile completeness.
"""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from core import get_logger, set_wide_event_fields
from core.errors import NotFoundError, storage_errors
from core.telemetry import log_business_event, track_operation
from models import AccountStatus, BackgroundStatus, Profile, Role, User
from repositories.profile_repository import ProfileRepository
from repositories.user_repository import UserRepository
from schemas import CreateUserRequest, UpdateUserRequest

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 20


@dataclass(frozen=True)
class ProfileData:
    id: str
    bio: str | None
    location: str | None
    experience: int | None
    is_complete: bool


@dataclass(frozen=True)
class UserData:
    """Detached snapshot of a user record, safe to use after the session closes."""

    id: str
    email: str
    full_name: str
    role: Role
    account_status: AccountStatus
    background_status: BackgroundStatus
    approved_at: datetime | None
    created_at: datetime
    updated_at: datetime
    profile: ProfileData | None


def to_profile_data(profile: Profile | None) -> ProfileData | None:
    if profile is None:
        return None
    return ProfileData(
        id=profile.id,
        bio=profile.bio,
        location=profile.location,
        experience=profile.experience,
        is_complete=profile.is_complete,
    )


def to_user_data(user: User) -> UserData:
    return UserData(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        role=user.role,
        account_status=user.account_status,
        background_status=user.background_status,
        approved_at=user.approved_at,
        created_at=user.created_at,
        updated_at=user.updated_at,
        profile=to_profile_data(user.profile),
    )


async def load_user(db: AsyncSession, user_id: str) -> User:
    """Fetch a user with profile or raise NotFoundError."""
    with storage_errors("users.get"):
        user = await UserRepository(db).get_by_id(user_id)
    if user is None:
        raise NotFoundError()
    return user


async def _create_user_with_role(
    db: AsyncSession, data: CreateUserRequest, role: Role
) -> UserData:
    user_repo = UserRepository(db)
    profile = data.profile

    with storage_errors("users.create", conflict_detail="Email already in use"):
        # Savepoint keeps the outer transaction usable after a duplicate email
        async with db.begin_nested():
            user = await user_repo.create(
                email=data.email,
                password=data.password,
                full_name=data.full_name,
                role=role,
                with_profile=profile is not None,
                bio=profile.bio if profile else None,
                location=profile.location if profile else None,
                experience=profile.experience if profile else None,
            )

    set_wide_event_fields(user_id=user.id, user_role=role.value)
    log_business_event("users.registered", 1, {"role": role.value})
    logger.info("user.created", user_id=user.id, role=role.value)
    return to_user_data(user)


@track_operation("user_create_parent")
async def create_parent(db: AsyncSession, data: CreateUserRequest) -> UserData:
    return await _create_user_with_role(db, data, Role.PARENT)


@track_operation("user_create_nanny")
async def create_nanny(db: AsyncSession, data: CreateUserRequest) -> UserData:
    return await _create_user_with_role(db, data, Role.NANNY)


async def get_user(db: AsyncSession, user_id: str) -> UserData:
    return to_user_data(await load_user(db, user_id))


async def _list_by_role(
    db: AsyncSession, role: Role, skip: int, take: int
) -> list[UserData]:
    with storage_errors("users.list"):
        users = await UserRepository(db).list_by_role(role, skip=skip, take=take)
    return [to_user_data(user) for user in users]


async def list_parents(
    db: AsyncSession, skip: int = 0, take: int = DEFAULT_PAGE_SIZE
) -> list[UserData]:
    return await _list_by_role(db, Role.PARENT, skip, take)


async def list_nannies(
    db: AsyncSession, skip: int = 0, take: int = DEFAULT_PAGE_SIZE
) -> list[UserData]:
    return await _list_by_role(db, Role.NANNY, skip, take)


@track_operation("user_update")
async def update_user(
    db: AsyncSession, user_id: str, data: UpdateUserRequest
) -> UserData:
    """Update name/password and upsert profile text fields.

    A profile payload creates the profile when missing; its completeness
    flag is left as it was.
    """
    user_repo = UserRepository(db)
    profile_repo = ProfileRepository(db)

    user = await load_user(db, user_id)

    with storage_errors("users.update"):
        await user_repo.update(user, full_name=data.full_name, password=data.password)
        if data.profile is not None:
            await profile_repo.upsert_details(
                user_id,
                bio=data.profile.bio,
                location=data.profile.location,
                experience=data.profile.experience,
            )

    set_wide_event_fields(user_id=user_id)
    logger.info(
        "user.updated", user_id=user_id, profile_updated=data.profile is not None
    )
    return to_user_data(await load_user(db, user_id))
