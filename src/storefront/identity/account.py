"""Sign-in, password changes and account activation."""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.exceptions import AuthenticationFailed
from storefront.identity.tokens import IssuedToken, issue_token
from storefront.identity.user import User

logger = structlog.get_logger(__name__)


def authenticate(email: str, password: str) -> tuple[User, IssuedToken]:
    """Exchange credentials for a bearer token.

    Unknown emails, wrong passwords and deactivated accounts are
    indistinguishable to the caller.
    """
    user = current_domain.repository_for(User).find_by_email(email)
    if user is None or not user.is_active or not user.check_password(password):
        logger.info("login_failed", email=email)
        raise AuthenticationFailed("Invalid credentials")

    logger.info("login_succeeded", user_id=str(user.id))
    return user, issue_token(user)


def change_password(user_id: str, current_password: str, new_password: str) -> None:
    repo = current_domain.repository_for(User)
    user = repo.get(user_id)
    user.change_password(current_password, new_password)
    repo.add(user)
    logger.info("password_changed", user_id=user_id)


@storefront.command(part_of="User")
class SetUserStatus:
    user_id = Identifier(required=True)
    is_active = Boolean(required=True)


@storefront.command_handler(part_of=User)
class AccountHandler:
    @handle(SetUserStatus)
    def set_user_status(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.set_active(command.is_active)
        repo.add(user)
