"""Application tests for sign-in, password changes and account status."""

import pytest
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.identity.account import SetUserStatus, authenticate, change_password
from storefront.identity.exceptions import AuthenticationFailed
from storefront.identity.tokens import decode_token
from storefront.identity.user import User


class TestAuthenticate:
    def test_valid_credentials(self, customer):
        user, issued = authenticate("customer@example.com", "Secret#123")

        assert user.id == customer.id
        assert decode_token(issued.token)["sub"] == str(customer.id)

    def test_email_lookup_ignores_case(self, customer):
        user, _ = authenticate("Customer@Example.com", "Secret#123")
        assert user.id == customer.id

    def test_wrong_password(self, customer):
        with pytest.raises(AuthenticationFailed) as exc:
            authenticate("customer@example.com", "Wrong#123")
        assert exc.value.message == "Invalid credentials"

    def test_unknown_email(self):
        with pytest.raises(AuthenticationFailed) as exc:
            authenticate("nobody@example.com", "Secret#123")
        assert exc.value.message == "Invalid credentials"

    def test_deactivated_account(self, customer):
        current_domain.process(SetUserStatus(user_id=str(customer.id), is_active=False), asynchronous=False)

        with pytest.raises(AuthenticationFailed):
            authenticate("customer@example.com", "Secret#123")


class TestChangePassword:
    def test_change_password(self, customer):
        change_password(str(customer.id), "Secret#123", "Brand-N3w")

        user, _ = authenticate("customer@example.com", "Brand-N3w")
        assert user.id == customer.id

    def test_wrong_current_password(self, customer):
        with pytest.raises(ValidationError):
            change_password(str(customer.id), "Wrong#123", "Brand-N3w")

        assert current_domain.repository_for(User).get(customer.id).check_password("Secret#123")


class TestSetUserStatus:
    def test_deactivate_and_reactivate(self, customer):
        current_domain.process(SetUserStatus(user_id=str(customer.id), is_active=False), asynchronous=False)
        assert current_domain.repository_for(User).get(customer.id).is_active is False

        current_domain.process(SetUserStatus(user_id=str(customer.id), is_active=True), asynchronous=False)
        assert current_domain.repository_for(User).get(customer.id).is_active is True
