"""Password strength rules and bcrypt hashing."""

import bcrypt
from protean.exceptions import ValidationError

from storefront.config import get_settings

MIN_PASSWORD_LENGTH = 6
# bcrypt only considers the first 72 bytes
MAX_PASSWORD_BYTES = 72


def check_password_strength(password: str, field: str = "password") -> None:
    """Raise ``ValidationError`` listing every rule ``password`` breaks."""
    problems = []
    if len(password) < MIN_PASSWORD_LENGTH:
        problems.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        problems.append(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")
    if not any(ch.isupper() for ch in password):
        problems.append("Password must contain an uppercase letter")
    if not any(ch.islower() for ch in password):
        problems.append("Password must contain a lowercase letter")
    if not any(ch.isdigit() for ch in password):
        problems.append("Password must contain a digit")
    if all(ch.isalnum() for ch in password):
        problems.append("Password must contain a non-alphanumeric character")

    if problems:
        raise ValidationError({field: problems})


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=get_settings().bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def prepare_password(password: str, field: str = "password") -> str:
    """Validate ``password`` against the strength rules and return its hash."""
    check_password_strength(password, field=field)
    return hash_password(password)
