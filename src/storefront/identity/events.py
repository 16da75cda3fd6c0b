"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="User")
class UserRegistered:
    """A new account was created, either as a customer or as a seller."""

    __version__ = 1

    user_id = Identifier(required=True)
    email = String(required=True)
    first_name = String(required=True)
    role = String(required=True)
    registered_at = DateTime(required=True)
