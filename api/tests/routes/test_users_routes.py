"""Tests for users_routes.

User directory endpoints and the access check, through the full ASGI stack.
"""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from models import AccountStatus, BackgroundStatus
from tests.factories import (
    ApprovedNannyFactory,
    NannyFactory,
    ProfileFactory,
    UserFactory,
    create_async,
)

pytestmark = pytest.mark.integration


async def _seed(app: FastAPI, factory_class, **kwargs):
    """Create a row through the app's session maker and commit it."""
    async with app.state.session_maker() as session:
        instance = await create_async(factory_class, session, **kwargs)
        await session.commit()
    return instance


class TestCreateParent:
    """Tests for POST /api/users/parents."""

    async def test_creates_parent(self, client: AsyncClient):
        """Should return 201 with the new user, never the password."""
        response = await client.post(
            "/api/users/parents",
            json={
                "email": "parent@example.com",
                "password": "hashed-pw",
                "full_name": "Pat Parent",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "parent@example.com"
        assert data["role"] == "PARENT"
        assert data["account_status"] == "PENDING_PAYMENT"
        assert data["background_status"] == "PENDING"
        assert data["approved_at"] is None
        assert data["profile"] is None
        assert "password" not in data

    async def test_duplicate_email_returns_409(self, client: AsyncClient):
        """Should reject a second signup with the same email."""
        body = {"email": "dup@example.com", "password": "pw", "full_name": "A"}
        first = await client.post("/api/users/parents", json=body)
        assert first.status_code == 201

        response = await client.post("/api/users/nannies", json=body)

        assert response.status_code == 409
        assert response.json()["detail"] == "Email already in use"

    @pytest.mark.parametrize(
        "body",
        [
            {"email": "not-an-email", "password": "pw", "full_name": "A"},
            {"email": "a@b..com", "password": "pw", "full_name": "A"},
            {"email": "a@example.com", "password": "", "full_name": "A"},
            {"email": "a@example.com", "password": "pw", "full_name": ""},
            {"email": "a@example.com", "password": "pw"},
        ],
    )
    async def test_invalid_body_returns_422(self, client: AsyncClient, body):
        response = await client.post("/api/users/parents", json=body)

        assert response.status_code == 422


class TestCreateNanny:
    """Tests for POST /api/users/nannies."""

    async def test_creates_nanny_with_incomplete_profile(self, client: AsyncClient):
        response = await client.post(
            "/api/users/nannies",
            json={
                "email": "nanny@example.com",
                "password": "hashed-pw",
                "full_name": "Nia Nanny",
                "profile": {"bio": "Ex-teacher", "location": "Nairobi", "experience": 5},
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["role"] == "NANNY"
        assert data["profile"]["bio"] == "Ex-teacher"
        assert data["profile"]["is_complete"] is False

    async def test_cannot_self_complete_profile(self, client: AsyncClient):
        """is_complete is not an accepted profile field."""
        response = await client.post(
            "/api/users/nannies",
            json={
                "email": "sneaky@example.com",
                "password": "pw",
                "full_name": "Sneaky",
                "profile": {"bio": "x", "is_complete": True},
            },
        )

        assert response.status_code == 422

    async def test_negative_experience_returns_422(self, client: AsyncClient):
        response = await client.post(
            "/api/users/nannies",
            json={
                "email": "n@example.com",
                "password": "pw",
                "full_name": "N",
                "profile": {"experience": -1},
            },
        )

        assert response.status_code == 422


class TestListUsers:
    """Tests for GET /api/users/parents and /api/users/nannies."""

    async def test_lists_nannies_newest_first(self, client: AsyncClient, app: FastAPI):
        base = datetime(2025, 1, 1, tzinfo=UTC)
        older = await _seed(app, NannyFactory, created_at=base)
        newer = await _seed(app, NannyFactory, created_at=base + timedelta(days=1))
        await _seed(app, UserFactory)

        response = await client.get("/api/users/nannies")

        assert response.status_code == 200
        assert [u["id"] for u in response.json()] == [newer.id, older.id]

    async def test_paging(self, client: AsyncClient, app: FastAPI):
        base = datetime(2025, 1, 1, tzinfo=UTC)
        for i in range(3):
            await _seed(app, UserFactory, created_at=base + timedelta(hours=i))

        response = await client.get("/api/users/parents", params={"skip": 1, "take": 1})

        assert response.status_code == 200
        assert len(response.json()) == 1

    @pytest.mark.parametrize(
        "params", [{"take": 0}, {"take": 101}, {"skip": -1}, {"take": "many"}]
    )
    async def test_invalid_paging_returns_422(self, client: AsyncClient, params):
        response = await client.get("/api/users/parents", params=params)

        assert response.status_code == 422


class TestGetUser:
    """Tests for GET /api/users/{id}."""

    async def test_returns_user(self, client: AsyncClient, app: FastAPI):
        user = await _seed(app, NannyFactory, full_name="Grace")
        await _seed(app, ProfileFactory, user_id=user.id, location="Eldoret")

        response = await client.get(f"/api/users/{user.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["full_name"] == "Grace"
        assert data["profile"]["location"] == "Eldoret"

    async def test_returns_404_for_unknown_user(self, client: AsyncClient):
        response = await client.get("/api/users/missing-user")

        assert response.status_code == 404
        assert response.json()["detail"] == "User not found"


class TestUpdateUser:
    """Tests for PATCH /api/users/{id}."""

    async def test_updates_name_and_profile(self, client: AsyncClient, app: FastAPI):
        user = await _seed(app, NannyFactory)

        response = await client.patch(
            f"/api/users/{user.id}",
            json={"full_name": "Renamed", "profile": {"bio": "Updated bio"}},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["full_name"] == "Renamed"
        assert data["profile"]["bio"] == "Updated bio"
        assert data["profile"]["is_complete"] is False

    async def test_update_is_persisted(self, client: AsyncClient, app: FastAPI):
        user = await _seed(app, UserFactory)
        await client.patch(f"/api/users/{user.id}", json={"full_name": "Persisted"})

        response = await client.get(f"/api/users/{user.id}")

        assert response.json()["full_name"] == "Persisted"

    async def test_returns_404_for_unknown_user(self, client: AsyncClient):
        response = await client.patch("/api/users/missing-user", json={"full_name": "X"})

        assert response.status_code == 404


class TestAccessCheck:
    """Tests for GET /api/users/{id}/access."""

    async def test_new_user_is_denied(self, client: AsyncClient, app: FastAPI):
        user = await _seed(app, NannyFactory)

        response = await client.get(f"/api/users/{user.id}/access")

        assert response.status_code == 200
        data = response.json()
        assert data["user_id"] == user.id
        assert data["can_access"] is False
        assert data["missing"] == [
            "account_active",
            "profile_complete",
            "background_passed",
            "admin_approved",
        ]

    async def test_fully_approved_user_is_allowed(
        self, client: AsyncClient, app: FastAPI
    ):
        user = await _seed(app, ApprovedNannyFactory)
        await _seed(app, ProfileFactory, user_id=user.id, is_complete=True)

        response = await client.get(f"/api/users/{user.id}/access")

        data = response.json()
        assert data["can_access"] is True
        assert data["missing"] == []

    async def test_failed_check_is_denied(self, client: AsyncClient, app: FastAPI):
        user = await _seed(
            app,
            ApprovedNannyFactory,
            account_status=AccountStatus.ACTIVE,
            background_status=BackgroundStatus.FAILED,
        )
        await _seed(app, ProfileFactory, user_id=user.id, is_complete=True)

        response = await client.get(f"/api/users/{user.id}/access")

        data = response.json()
        assert data["can_access"] is False
        assert data["admin_approved"] is True
        assert data["missing"] == ["background_passed"]

    async def test_returns_404_for_unknown_user(self, client: AsyncClient):
        response = await client.get("/api/users/missing-user/access")

        assert response.status_code == 404
