"""User repository for database operations."""

from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from models import AccountStatus, BackgroundStatus, Profile, Role, User, utcnow
from repositories.utils import log_slow_query


class UserRepository:
    """Repository for User database operations.

    Reads always load the profile and overwrite any stale instance already
    in the session, so a gate check never sees state cached earlier in the
    same request.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @log_slow_query("users.get_by_id")
    async def get_by_id(self, user_id: str) -> User | None:
        """Get a user (with profile) by ID."""
        result = await self.db.execute(
            select(User)
            .where(User.id == user_id)
            .options(selectinload(User.profile))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @log_slow_query("users.list_by_role")
    async def list_by_role(self, role: Role, skip: int = 0, take: int = 20) -> list[User]:
        """Newest first, with profiles."""
        result = await self.db.execute(
            select(User)
            .where(User.role == role)
            .order_by(User.created_at.desc(), User.id)
            .offset(skip)
            .limit(take)
            .options(selectinload(User.profile))
        )
        return list(result.scalars().all())

    async def create(
        self,
        *,
        email: str,
        password: str,
        full_name: str,
        role: Role,
        bio: str | None = None,
        location: str | None = None,
        experience: int | None = None,
        with_profile: bool = False,
    ) -> User:
        """Create a user, optionally with a (never complete) profile.

        Flushes so unique violations surface here rather than at commit.
        """
        user = User(email=email, password=password, full_name=full_name, role=role)
        if with_profile:
            user.profile = Profile(bio=bio, location=location, experience=experience)
        else:
            user.profile = None
        self.db.add(user)
        await self.db.flush()
        return user

    async def update(
        self,
        user: User,
        *,
        full_name: str | None = None,
        password: str | None = None,
    ) -> User:
        """Update user fields. Only non-None values are updated."""
        if full_name is not None:
            user.full_name = full_name
        if password is not None:
            user.password = password
        user.updated_at = utcnow()
        await self.db.flush()
        return user

    async def _update_columns(self, user_id: str, **values) -> bool:
        result = await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    @log_slow_query("users.set_account_status")
    async def set_account_status(self, user_id: str, status: AccountStatus) -> bool:
        """Returns False when no user matched."""
        return await self._update_columns(user_id, account_status=status)

    @log_slow_query("users.set_background_status")
    async def set_background_status(
        self, user_id: str, status: BackgroundStatus
    ) -> bool:
        """Returns False when no user matched."""
        return await self._update_columns(user_id, background_status=status)

    @log_slow_query("users.mark_approved")
    async def mark_approved(self, user_id: str, approved_at: datetime) -> bool:
        """Stamp approved_at once; an existing stamp is kept.

        Returns False when no user matched.
        """
        return await self._update_columns(
            user_id, approved_at=func.coalesce(User.approved_at, approved_at)
        )
