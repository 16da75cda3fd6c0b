"""FastAPI endpoints for registration, sign-in and password management."""

from datetime import date, datetime

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain
from pydantic import BaseModel, Field

from storefront.identity.account import authenticate, change_password
from storefront.identity.passwords import prepare_password
from storefront.identity.registration import RegisterUser
from storefront.identity.tokens import issue_token
from storefront.identity.user import Role, User
from storefront.web.envelope import ApiResponse, ok
from storefront.web.security import get_current_user

router = APIRouter(prefix="/api/auth", tags=["auth"])


# --- Schemas ---


class RegisterRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "email": "jane.doe@example.com",
                    "password": "Secret#123",
                    "first_name": "Jane",
                    "last_name": "Doe",
                    "phone": "+1-555-0100",
                }
            ]
        }
    }

    email: str = Field(..., max_length=254)
    password: str = Field(..., min_length=1, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=20)
    date_of_birth: date | None = None
    address: str | None = Field(None, max_length=500)


class LoginRequest(BaseModel):
    email: str
    password: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., max_length=128)


class UserResponse(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    phone: str | None = None
    date_of_birth: date | None = None
    address: str | None = None
    role: str
    is_active: bool
    created_at: datetime | None = None


class TokenResponse(BaseModel):
    token: str
    expires: datetime
    refresh_token: str
    user: UserResponse


def user_response(user: User) -> UserResponse:
    return UserResponse(
        id=str(user.id),
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        phone=user.phone,
        date_of_birth=user.date_of_birth,
        address=user.address,
        role=user.role,
        is_active=user.is_active,
        created_at=user.created_at,
    )


def token_response(user: User) -> TokenResponse:
    issued = issue_token(user)
    return TokenResponse(
        token=issued.token,
        expires=issued.expires,
        refresh_token=issued.refresh_token,
        user=user_response(user),
    )


def _register(body: RegisterRequest, role: Role) -> TokenResponse:
    """Register a user and sign them straight in."""
    command = RegisterUser(
        email=body.email,
        password_hash=prepare_password(body.password),
        first_name=body.first_name,
        last_name=body.last_name,
        role=role.value,
        phone=body.phone,
        date_of_birth=body.date_of_birth.isoformat() if body.date_of_birth else None,
        address=body.address,
    )
    user_id = current_domain.process(command, asynchronous=False)
    return token_response(current_domain.repository_for(User).get(user_id))


# --- Endpoints ---


@router.post("/register", status_code=201, response_model=ApiResponse[TokenResponse])
async def register(body: RegisterRequest):
    return ok(_register(body, Role.CUSTOMER), "Registration successful")


@router.post("/register/seller", status_code=201, response_model=ApiResponse[TokenResponse])
async def register_seller(body: RegisterRequest):
    return ok(_register(body, Role.SELLER), "Seller registration successful")


@router.post("/login", response_model=ApiResponse[TokenResponse])
async def login(body: LoginRequest):
    user, issued = authenticate(body.email, body.password)
    return ok(
        TokenResponse(
            token=issued.token,
            expires=issued.expires,
            refresh_token=issued.refresh_token,
            user=user_response(user),
        ),
        "Login successful",
    )


@router.post("/logout", response_model=ApiResponse[bool])
async def logout(user: User = Depends(get_current_user)):
    return ok(True, "Logout successful")


@router.post("/change-password", response_model=ApiResponse[bool])
async def change_password_endpoint(body: ChangePasswordRequest, user: User = Depends(get_current_user)):
    change_password(str(user.id), body.current_password, body.new_password)
    return ok(True, "Password changed successfully")


@router.get("/me", response_model=ApiResponse[UserResponse])
async def me(user: User = Depends(get_current_user)):
    return ok(user_response(user))
