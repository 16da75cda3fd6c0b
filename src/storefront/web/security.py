"""Bearer-token authentication and role policies as FastAPI dependencies."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.identity.exceptions import AuthenticationFailed, PermissionDenied
from storefront.identity.tokens import decode_token
from storefront.identity.user import Role, User

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    if credentials is None:
        raise AuthenticationFailed("Authentication credentials were not provided")

    claims = decode_token(credentials.credentials)
    try:
        user = current_domain.repository_for(User).get(claims["sub"])
    except ObjectNotFoundError as exc:
        raise AuthenticationFailed("Invalid token") from exc

    if not user.is_active:
        raise AuthenticationFailed("Account is deactivated")
    return user


def require_roles(*roles: Role):
    """Build a dependency that admits only users holding one of ``roles``."""

    async def dependency(user: User = Depends(get_current_user)) -> User:
        if not user.has_role(*roles):
            raise PermissionDenied()
        return user

    return dependency


admin_only = require_roles(Role.ADMIN)
seller_only = require_roles(Role.SELLER)
customer_only = require_roles(Role.CUSTOMER)
admin_or_seller = require_roles(Role.ADMIN, Role.SELLER)
