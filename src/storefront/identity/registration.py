"""Account registration: command and handler."""

from datetime import date

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import Role, User


@storefront.command(part_of="User")
class RegisterUser:
    """Create an account. The password arrives already validated and hashed."""

    email = String(required=True, max_length=254)
    password_hash = String(required=True, max_length=255)
    first_name = String(required=True, max_length=100)
    last_name = String(required=True, max_length=100)
    role = String(choices=Role, default=Role.CUSTOMER.value)
    phone = String(max_length=20)
    date_of_birth = String(max_length=10)
    address = String(max_length=500)


@storefront.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        if repo.find_by_email(command.email) is not None:
            raise ValidationError({"email": ["Email is already registered"]})

        dob = None
        if command.date_of_birth:
            try:
                dob = date.fromisoformat(command.date_of_birth)
            except ValueError as exc:
                raise ValidationError({"date_of_birth": ["Date of birth must be YYYY-MM-DD"]}) from exc

        user = User.register(
            email=command.email,
            password_hash=command.password_hash,
            first_name=command.first_name,
            last_name=command.last_name,
            role=command.role,
            phone=command.phone,
            date_of_birth=dob,
            address=command.address,
        )
        repo.add(user)
        return str(user.id)
