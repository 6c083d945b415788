"""Repository layer for database operations.

Repositories encapsulate all database queries, keeping services free of SQL:
- Single source of truth for user/profile queries
- Services can be unit tested with mocked repositories
- Dialect-specific statements (upserts) live in one place
"""

from repositories.profile_repository import ProfileRepository
from repositories.user_repository import UserRepository
from repositories.utils import log_slow_query

__all__ = ["ProfileRepository", "UserRepository", "log_slow_query"]
