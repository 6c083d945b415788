"""Profile repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import Profile, new_id
from repositories.utils import log_slow_query, upsert_on_conflict


class ProfileRepository:
    """Repository for Profile database operations.

    Profiles are keyed by ``user_id`` (unique), so every write is an upsert
    on that column: no read-then-write race between concurrent requests.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_user_id(self, user_id: str) -> Profile | None:
        result = await self.db.execute(
            select(Profile)
            .where(Profile.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @log_slow_query("profiles.upsert_details")
    async def upsert_details(
        self,
        user_id: str,
        *,
        bio: str | None = None,
        location: str | None = None,
        experience: int | None = None,
    ) -> None:
        """Create the profile or update the given free-text fields.

        None means "leave unchanged". Never touches ``is_complete``.
        """
        details = {
            key: value
            for key, value in (
                ("bio", bio),
                ("location", location),
                ("experience", experience),
            )
            if value is not None
        }
        await upsert_on_conflict(
            self.db,
            Profile,
            values={"id": new_id(), "user_id": user_id, "is_complete": False, **details},
            index_elements=["user_id"],
            update_fields=list(details),
        )

    @log_slow_query("profiles.mark_complete")
    async def mark_complete(self, user_id: str) -> None:
        """Create a complete profile, or flag the existing one complete.

        Single idempotent statement.
        """
        await upsert_on_conflict(
            self.db,
            Profile,
            values={"id": new_id(), "user_id": user_id, "is_complete": True},
            index_elements=["user_id"],
            update_fields=["is_complete"],
        )
