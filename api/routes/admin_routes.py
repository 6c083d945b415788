"""Admin endpoints for account gating.

Called by operators and by the payment webhook handler. All endpoints
require the X-Admin-Token header.
"""

from fastapi import APIRouter, Depends, Request

from core.auth import require_admin
from core.database import DbSession
from core.ratelimit import ADMIN_LIMIT, limiter
from schemas import BackgroundStatusRequest, UserResponse
from services.account_gate_service import (
    activate_after_payment,
    approve_profile,
    set_background_status,
    suspend_account,
)

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
    responses={
        401: {"description": "Missing or invalid admin token"},
        404: {"description": "User not found"},
    },
)


@router.post("/users/{user_id}/approve", response_model=UserResponse)
@limiter.limit(ADMIN_LIMIT)
async def approve_profile_endpoint(
    request: Request, user_id: str, db: DbSession
) -> UserResponse:
    """Approve the user's profile: marks it complete and stamps approved_at.

    Creates an empty complete profile when the user has none. Idempotent.
    """
    user = await approve_profile(db, user_id)
    return UserResponse.model_validate(user)


@router.post("/users/{user_id}/activate", response_model=UserResponse)
@limiter.limit(ADMIN_LIMIT)
async def activate_endpoint(
    request: Request, user_id: str, db: DbSession
) -> UserResponse:
    """Activate the account after a confirmed signup payment.

    Also reactivates suspended accounts.
    """
    user = await activate_after_payment(db, user_id)
    return UserResponse.model_validate(user)


@router.post("/users/{user_id}/suspend", response_model=UserResponse)
@limiter.limit(ADMIN_LIMIT)
async def suspend_endpoint(
    request: Request, user_id: str, db: DbSession
) -> UserResponse:
    user = await suspend_account(db, user_id)
    return UserResponse.model_validate(user)


@router.put("/users/{user_id}/background-status", response_model=UserResponse)
@limiter.limit(ADMIN_LIMIT)
async def background_status_endpoint(
    request: Request,
    user_id: str,
    payload: BackgroundStatusRequest,
    db: DbSession,
) -> UserResponse:
    """Record the background-check result (PENDING, PASSED or FAILED)."""
    user = await set_background_status(db, user_id, payload.status)
    return UserResponse.model_validate(user)
