"""User directory endpoints and the service-access check."""

from fastapi import APIRouter, Query, Request

from core.database import DbSession, DbSessionReadOnly
from core.ratelimit import ACCESS_CHECK_LIMIT, SIGNUP_LIMIT, limiter
from schemas import AccessResponse, CreateUserRequest, UpdateUserRequest, UserResponse
from services.account_gate_service import evaluate_access
from services.users_service import (
    create_nanny,
    create_parent,
    get_user,
    list_nannies,
    list_parents,
    update_user,
)

router = APIRouter(prefix="/api/users", tags=["users"])

_NOT_FOUND = {404: {"description": "User not found"}}


@router.post(
    "/parents",
    response_model=UserResponse,
    status_code=201,
    responses={409: {"description": "Email already in use"}},
)
@limiter.limit(SIGNUP_LIMIT)
async def create_parent_endpoint(
    request: Request, payload: CreateUserRequest, db: DbSession
) -> UserResponse:
    """Register a parent account (starts in PENDING_PAYMENT)."""
    user = await create_parent(db, payload)
    return UserResponse.model_validate(user)


@router.post(
    "/nannies",
    response_model=UserResponse,
    status_code=201,
    responses={409: {"description": "Email already in use"}},
)
@limiter.limit(SIGNUP_LIMIT)
async def create_nanny_endpoint(
    request: Request, payload: CreateUserRequest, db: DbSession
) -> UserResponse:
    """Register a nanny account (starts in PENDING_PAYMENT)."""
    user = await create_nanny(db, payload)
    return UserResponse.model_validate(user)


@router.get("/parents", response_model=list[UserResponse])
async def list_parents_endpoint(
    db: DbSessionReadOnly,
    skip: int = Query(default=0, ge=0),
    take: int = Query(default=20, ge=1, le=100),
) -> list[UserResponse]:
    users = await list_parents(db, skip=skip, take=take)
    return [UserResponse.model_validate(user) for user in users]


@router.get("/nannies", response_model=list[UserResponse])
async def list_nannies_endpoint(
    db: DbSessionReadOnly,
    skip: int = Query(default=0, ge=0),
    take: int = Query(default=20, ge=1, le=100),
) -> list[UserResponse]:
    users = await list_nannies(db, skip=skip, take=take)
    return [UserResponse.model_validate(user) for user in users]


@router.get("/{user_id}", response_model=UserResponse, responses=_NOT_FOUND)
async def get_user_endpoint(user_id: str, db: DbSessionReadOnly) -> UserResponse:
    user = await get_user(db, user_id)
    return UserResponse.model_validate(user)


@router.patch("/{user_id}", response_model=UserResponse, responses=_NOT_FOUND)
async def update_user_endpoint(
    user_id: str, payload: UpdateUserRequest, db: DbSession
) -> UserResponse:
    """Update name, password hash, or profile text fields."""
    user = await update_user(db, user_id, payload)
    return UserResponse.model_validate(user)


@router.get("/{user_id}/access", response_model=AccessResponse, responses=_NOT_FOUND)
@limiter.limit(ACCESS_CHECK_LIMIT)
async def get_access_endpoint(
    request: Request, user_id: str, db: DbSessionReadOnly
) -> AccessResponse:
    """Whether the user may use interactive features, and what is missing if not."""
    decision = await evaluate_access(db, user_id)
    return AccessResponse(
        user_id=decision.user_id,
        can_access=decision.allowed,
        account_active=decision.account_active,
        profile_complete=decision.profile_complete,
        background_passed=decision.background_passed,
        admin_approved=decision.admin_approved,
        missing=decision.missing,
    )
