"""Pydantic schemas for API request/response validation."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from models import AccountStatus, BackgroundStatus, Role


class ProfileInput(BaseModel):
    """Free-text profile fields a user may set. Completeness is admin-only."""

    model_config = ConfigDict(extra="forbid")

    bio: str | None = Field(default=None, max_length=5000)
    location: str | None = Field(default=None, max_length=255)
    experience: int | None = Field(default=None, ge=0)


class CreateUserRequest(BaseModel):
    """Signup payload. ``password`` arrives already hashed."""

    email: EmailStr
    password: str = Field(min_length=1)
    full_name: str = Field(min_length=1, max_length=255)
    profile: ProfileInput | None = None

    @field_validator("email", "full_name", mode="before")
    @classmethod
    def strip_whitespace(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v


class UpdateUserRequest(BaseModel):
    full_name: str | None = Field(default=None, min_length=1, max_length=255)
    password: str | None = Field(default=None, min_length=1)
    profile: ProfileInput | None = None


class BackgroundStatusRequest(BaseModel):
    status: BackgroundStatus


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    bio: str | None = None
    location: str | None = None
    experience: int | None = None
    is_complete: bool


class UserResponse(BaseModel):
    """User record as returned to callers. Never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    full_name: str
    role: Role
    account_status: AccountStatus
    background_status: BackgroundStatus
    approved_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    profile: ProfileResponse | None = None


class AccessResponse(BaseModel):
    """Outcome of the service-access gate, with the individual checks."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    can_access: bool
    account_active: bool
    profile_complete: bool
    background_passed: bool
    admin_approved: bool
    missing: list[str]


class HealthResponse(BaseModel):
    status: str
    service: str


class PoolStatusResponse(BaseModel):
    pool_size: int
    checked_out: int
    overflow: int
    checked_in: int


class DetailedHealthResponse(BaseModel):
    status: str
    service: str
    database: bool
    pool: PoolStatusResponse | None = None
