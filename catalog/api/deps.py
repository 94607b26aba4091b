"""Shared dependencies for API endpoints.

Authentication uses opaque bearer tokens minted by TokenService:
``Authorization: Bearer <token>``. The token is looked up by digest with
the authentication scope; no claims are decoded locally.

WHY DEPENDENCY INJECTION:
- Consistent auth across all endpoints
- Testable with overridden dependencies
"""

from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.background import BackgroundTaskGroup
from catalog.core.database import get_db
from catalog.core.errors import (
    InactiveAccountError,
    InvalidTokenError,
    MalformedTokenError,
    NotFoundError,
    UnauthorizedError,
)
from catalog.models import TokenScope, User
from catalog.repositories.user_repository import UserRepository
from catalog.services.token_service import TokenService

DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_bearer_token(request: Request) -> str:
    """Extract the token from the Authorization header.

    Args:
        request: HTTP request (injected by FastAPI).

    Returns:
        The raw token string.

    Raises:
        UnauthorizedError: If the header is missing or not a Bearer credential.
    """
    header = request.headers.get("Authorization")
    if not header:
        raise UnauthorizedError()

    scheme, _, token = header.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise UnauthorizedError("Invalid or missing authentication token")
    return token


async def get_current_user(
    token: Annotated[str, Depends(get_bearer_token)],
    db: DbSession,
) -> User:
    """Resolve the bearer token to its user.

    Security: Every failure (malformed, unknown, expired, wrong scope,
    deleted user) surfaces as the same InvalidTokenError.

    Args:
        token: Bearer token (injected by get_bearer_token).
        db: Database session (injected).

    Returns:
        User owning the token.

    Raises:
        InvalidTokenError: 401 for any token failure.
    """
    try:
        user_id = await TokenService.validate(db, TokenScope.AUTHENTICATION, token)
        return await UserRepository.fetch(db, user_id)
    except (MalformedTokenError, NotFoundError) as exc:
        raise InvalidTokenError() from exc


async def get_activated_user(
    user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Require the authenticated user to have activated their account.

    Raises:
        InactiveAccountError: 403 if the account is not activated.
    """
    if not user.activated:
        raise InactiveAccountError()
    return user


def get_expected_version(
    x_expected_version: Annotated[int | None, Header(ge=1)] = None,
) -> int | None:
    """Read the optional X-Expected-Version precondition header."""
    return x_expected_version


def get_task_group(request: Request) -> BackgroundTaskGroup:
    """Return the application's background task group."""
    return request.app.state.tasks


# Reusable type aliases for dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
ActivatedUser = Annotated[User, Depends(get_activated_user)]
ExpectedVersion = Annotated[int | None, Depends(get_expected_version)]
TaskGroup = Annotated[BackgroundTaskGroup, Depends(get_task_group)]
