"""Tests for the User aggregate."""

import pytest
from protean.exceptions import ValidationError
from protean.utils import DomainObjects
from protean.utils.reflection import declared_fields

from storefront.identity.events import UserRegistered
from storefront.identity.passwords import hash_password
from storefront.identity.user import Role, User


def _register(**overrides):
    defaults = {
        "email": "Jane.Doe@Example.com",
        "password_hash": hash_password("Secret#123"),
        "first_name": "Jane",
        "last_name": "Doe",
    }
    defaults.update(overrides)
    return User.register(**defaults)


class TestUserConstruction:
    def test_element_type(self):
        assert User.element_type == DomainObjects.AGGREGATE

    def test_declared_fields(self):
        fields = declared_fields(User)
        for name in (
            "email",
            "password_hash",
            "first_name",
            "last_name",
            "phone",
            "date_of_birth",
            "address",
            "role",
            "is_active",
            "created_at",
        ):
            assert name in fields

    def test_register_defaults(self):
        user = _register()
        assert user.role == Role.CUSTOMER.value
        assert user.is_active is True
        assert user.created_at is not None
        assert user.full_name == "Jane Doe"

    def test_email_is_normalised(self):
        user = _register(email="  Jane.Doe@Example.COM ")
        assert user.email == "jane.doe@example.com"


class TestUserRegisteredEvent:
    def test_register_raises_event(self):
        user = _register(role=Role.SELLER.value)

        assert len(user._events) == 1
        event = user._events[0]
        assert isinstance(event, UserRegistered)
        assert event.user_id == user.id
        assert event.email == "jane.doe@example.com"
        assert event.role == "Seller"


class TestEmailInvariant:
    @pytest.mark.parametrize(
        "email",
        [
            "no-at-sign.example.com",
            "two@@example.com",
            "missing-domain@",
            "@missing-local.com",
            "no-dot@localhost",
            "spaces in@example.com",
            ".leading@example.com",
            "bad@-hyphen.example.com",
            "semi;colon@example.com",
        ],
    )
    def test_malformed_email_rejected(self, email):
        with pytest.raises(ValidationError) as exc:
            _register(email=email)
        assert "email" in exc.value.messages

    def test_well_formed_email_accepted(self):
        user = _register(email="first.last+tag@mail.example.org")
        assert user.email == "first.last+tag@mail.example.org"


class TestRoles:
    def test_has_role(self):
        user = _register(role=Role.SELLER.value)
        assert user.has_role(Role.SELLER)
        assert user.has_role(Role.ADMIN, Role.SELLER)
        assert not user.has_role(Role.ADMIN)


class TestPasswords:
    def test_check_password(self):
        user = _register()
        assert user.check_password("Secret#123")
        assert not user.check_password("secret#123")

    def test_change_password(self):
        user = _register()
        user.change_password("Secret#123", "N3w-Secret")
        assert user.check_password("N3w-Secret")
        assert not user.check_password("Secret#123")

    def test_change_password_requires_current_password(self):
        user = _register()
        with pytest.raises(ValidationError) as exc:
            user.change_password("wrong", "N3w-Secret")
        assert exc.value.messages == {"current_password": ["Current password is incorrect"]}

    def test_change_password_applies_strength_rules(self):
        user = _register()
        with pytest.raises(ValidationError) as exc:
            user.change_password("Secret#123", "weak")
        assert "new_password" in exc.value.messages


class TestActivation:
    def test_deactivate_and_reactivate(self):
        user = _register()
        user.set_active(False)
        assert user.is_active is False
        user.set_active(True)
        assert user.is_active is True
