"""User aggregate: credentials, profile and role of everyone who signs in."""

from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Date, DateTime, String

from storefront.domain import storefront
from storefront.identity.events import UserRegistered
from storefront.identity.passwords import prepare_password, verify_password
from storefront.shared.clock import utcnow
from storefront.shared.queries import fetch_all, fetch_page


class Role(Enum):
    ADMIN = "Admin"
    SELLER = "Seller"
    CUSTOMER = "Customer"


_FORBIDDEN_EMAIL_CHARS = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


def _is_well_formed_email(email: str) -> bool:
    if any(ch.isspace() for ch in email) or email.count("@") != 1:
        return False

    local_part, domain_part = email.split("@", 1)
    if not local_part or local_part.startswith(".") or local_part.endswith("."):
        return False
    if not domain_part or domain_part.startswith(".") or domain_part.endswith("."):
        return False
    if "." not in domain_part or ".." in email:
        return False
    if any(label.startswith("-") or label.endswith("-") for label in domain_part.split(".")):
        return False
    return not any(ch in email for ch in _FORBIDDEN_EMAIL_CHARS)


@storefront.aggregate
class User:
    """A person who can sign in to the storefront.

    Emails are stored lower-cased and are unique across all roles. The role
    is fixed at registration: customers and sellers sign themselves up,
    administrators are created from the management CLI.
    """

    email = String(required=True, max_length=254, unique=True)
    password_hash = String(required=True, max_length=255)
    first_name = String(required=True, max_length=100)
    last_name = String(required=True, max_length=100)
    phone = String(max_length=20)
    date_of_birth = Date()
    address = String(max_length=500)
    role = String(choices=Role, default=Role.CUSTOMER.value)
    is_active = Boolean(default=True)
    created_at = DateTime(default=utcnow)

    @invariant.post
    def email_must_be_well_formed(self):
        if self.email and not _is_well_formed_email(self.email):
            raise ValidationError({"email": [f"Invalid email address: {self.email!r}"]})

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @classmethod
    def register(
        cls,
        email,
        password_hash,
        first_name,
        last_name,
        role=Role.CUSTOMER.value,
        phone=None,
        date_of_birth=None,
        address=None,
    ):
        now = utcnow()
        user = cls(
            email=email.strip().lower(),
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            role=role,
            phone=phone,
            date_of_birth=date_of_birth,
            address=address,
            created_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                email=user.email,
                first_name=first_name,
                role=role,
                registered_at=now,
            )
        )
        return user

    def has_role(self, *roles: Role) -> bool:
        return Role(self.role) in roles

    def check_password(self, password: str) -> bool:
        return verify_password(password, self.password_hash)

    def change_password(self, current_password: str, new_password: str) -> None:
        if not self.check_password(current_password):
            raise ValidationError({"current_password": ["Current password is incorrect"]})
        self.password_hash = prepare_password(new_password, field="new_password")

    def set_active(self, is_active: bool) -> None:
        self.is_active = is_active


@storefront.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email: str):
        return self._dao.query.filter(email=email.strip().lower()).all().first

    def with_role(self, role: Role) -> list:
        return fetch_all(self._dao.query.filter(role=role.value))

    def newest_page(self, page: int, page_size: int) -> tuple[list, int]:
        return fetch_page(self._dao.query.order_by("-created_at"), page, page_size)

    def count(self) -> int:
        return self._dao.query.all().total
