"""Unit tests for request schema validation."""

import pytest
from pydantic import ValidationError

from schemas import CreateUserRequest, ProfileInput

pytestmark = pytest.mark.unit


def _signup(**overrides) -> dict:
    body = {"email": "nanny@example.com", "password": "hashed", "full_name": "N"}
    body.update(overrides)
    return body


class TestCreateUserRequestEmail:
    @pytest.mark.parametrize(
        "email",
        [
            "not-an-email",
            "a@b..com",
            "x@-host.com",
            "a@b.com\u200b",
            "two@@example.com",
            "@example.com",
            "",
        ],
    )
    def test_rejects_malformed_address(self, email):
        with pytest.raises(ValidationError):
            CreateUserRequest(**_signup(email=email))

    def test_accepts_plain_address(self):
        request = CreateUserRequest(**_signup(email="nia.nanny+jobs@example.com"))

        assert request.email == "nia.nanny+jobs@example.com"

    def test_strips_surrounding_whitespace(self):
        request = CreateUserRequest(**_signup(email="  pat@example.com "))

        assert request.email == "pat@example.com"


class TestProfileInput:
    def test_rejects_completeness_flag(self):
        with pytest.raises(ValidationError):
            ProfileInput(bio="x", is_complete=True)

    def test_rejects_negative_experience(self):
        with pytest.raises(ValidationError):
            ProfileInput(experience=-1)
