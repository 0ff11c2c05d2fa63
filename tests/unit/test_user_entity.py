"""Unit tests for the User entity."""

from __future__ import annotations

import pytest

from akcity.domain.errors import ValidationError
from akcity.domain.models import User, UserRole, UserStatus


def make_user(**overrides) -> User:
    fields = {
        "name": "  Jane Doe ",
        "email": "Jane.Doe@AKCity.io",
        "password_hash": "$2b$04$hash",
        "phone": "+1 555 0100",
        "role": UserRole.ARCHITECT,
    }
    fields.update(overrides)
    return User.create(**fields)


class TestUserCreation:
    """Tests for building users."""

    def test_create_normalises_fields(self) -> None:
        user = make_user()
        assert user.name == "Jane Doe"
        assert user.email == "jane.doe@akcity.io"
        assert user.status is UserStatus.ACTIVE
        assert user.is_active is True
        assert user.id is None
        assert user.projects == []

    def test_role_string_is_coerced(self) -> None:
        assert make_user(role="driver").role is UserRole.DRIVER

    def test_unknown_role_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            make_user(role="astronaut")

    def test_password_hidden_from_repr_and_public_dict(self) -> None:
        user = make_user()
        assert "$2b$04$hash" not in repr(user)
        assert "password" not in user.to_public_dict()
        assert user.to_persistence()["password"] == "$2b$04$hash"

    def test_from_persistence_restores_state(self) -> None:
        original = make_user()
        original.id = "abc123"
        original.suspend()
        restored = User.from_persistence(original.to_persistence())
        assert restored.id == "abc123"
        assert restored.status is UserStatus.SUSPENDED
        assert restored.is_active is False
        assert restored.created_at == original.created_at


class TestUserBehaviour:
    """Tests for mutators and permission checks."""

    def test_status_changes(self) -> None:
        user = make_user()
        user.deactivate()
        assert user.status is UserStatus.INACTIVE
        user.activate()
        assert user.is_active

    def test_update_profile_ignores_empty_values(self) -> None:
        user = make_user()
        user.update_profile(name="Jane Roe", phone="")
        assert user.name == "Jane Roe"
        assert user.phone == "+1 555 0100"

    def test_update_last_login(self) -> None:
        user = make_user()
        assert user.last_login is None
        user.update_last_login()
        assert user.last_login is not None
        assert user.last_login.tzinfo is not None

    def test_project_membership_is_idempotent(self) -> None:
        user = make_user()
        user.join_project("p1")
        user.join_project("p1")
        assert user.projects == ["p1"]
        user.leave_project("p1")
        user.leave_project("p1")
        assert user.projects == []

    def test_permissions_follow_role(self) -> None:
        user = make_user()
        assert user.has_permission("document:write") is True
        assert user.has_permission("project:delete") is False
        assert "task:read" in user.permissions()
