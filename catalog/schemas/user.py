"""User and token request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterUserRequest(BaseModel):
    """Request body for POST /users.

    Password length is checked in bytes by validate_password_strength().
    """

    model_config = ConfigDict(extra="forbid")

    username: str = Field(min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class ActivateUserRequest(BaseModel):
    """Request body for PUT /users/activated."""

    model_config = ConfigDict(extra="forbid")

    token: str = Field(min_length=1, max_length=128)


class UserResponse(BaseModel):
    """User as returned by the API. Never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    activated: bool
    created_at: datetime
    version: int


class AuthenticationTokenRequest(BaseModel):
    """Request body for POST /tokens/authentication."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class ActivationTokenRequest(BaseModel):
    """Request body for POST /tokens/activation."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr


class TokenResponse(BaseModel):
    """A freshly issued token. The only response that carries a plaintext.

    Attributes:
        token: Plaintext bearer token.
        expiry: When the token stops being accepted.
        scope: Token purpose.
    """

    token: str
    expiry: datetime
    scope: str
