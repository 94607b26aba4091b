"""Tokens API router.

Endpoints:
- POST /tokens/authentication - Exchange email + password for a bearer token
- POST /tokens/activation - Re-send an activation token

Security considerations:
- authentication: constant-time password check via DUMMY_HASH prevents
  user enumeration; one generic error for unknown email and bad password
- activation: issuing a new token revokes every older activation token
- both endpoints are rate limited per client IP
"""

from datetime import timedelta

from fastapi import APIRouter, Request

from catalog.api.deps import DbSession, TaskGroup
from catalog.core.auth import verify_password
from catalog.core.config import settings
from catalog.core.email import send_activation_email
from catalog.core.errors import UnauthorizedError, ValidationError
from catalog.core.rate_limiting import limiter
from catalog.core.responses import DataResponse
from catalog.models import TokenScope
from catalog.repositories.user_repository import UserRepository
from catalog.schemas.user import (
    ActivationTokenRequest,
    AuthenticationTokenRequest,
    TokenResponse,
)
from catalog.services.token_service import TokenService

router = APIRouter()


# ===================================================================
# POST /tokens/authentication
# ===================================================================


@router.post("/authentication", status_code=201)
@limiter.limit(lambda: settings.rate_limit_auth)
async def create_authentication_token(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    body: AuthenticationTokenRequest,
    db: DbSession,
) -> DataResponse[TokenResponse]:
    """Verify email + password and issue an authentication token."""
    user = await UserRepository.get_by_email(db, body.email)

    password_hash = user.password_hash if user else None
    if not verify_password(body.password, password_hash) or user is None:
        raise UnauthorizedError("Invalid email or password")

    token = await TokenService.new(
        db,
        user.id,
        timedelta(hours=settings.authentication_token_ttl_hours),
        TokenScope.AUTHENTICATION,
    )
    await db.commit()
    return DataResponse(
        data=TokenResponse(
            token=token.reveal(), expiry=token.expiry, scope=token.scope.value
        )
    )


# ===================================================================
# POST /tokens/activation
# ===================================================================


@router.post("/activation", status_code=202)
@limiter.limit(lambda: settings.rate_limit_auth)
async def create_activation_token(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    body: ActivationTokenRequest,
    db: DbSession,
    tasks: TaskGroup,
) -> DataResponse[dict]:
    """Issue a fresh activation token and mail it.

    Older activation tokens of the user stop working.
    """
    user = await UserRepository.get_by_email(db, body.email)
    if user is None:
        raise ValidationError(
            "No matching account",
            details=[{"field": "email", "message": "no matching email address found"}],
        )
    if user.activated:
        raise ValidationError(
            "Account already activated",
            details=[{"field": "email", "message": "user has already been activated"}],
        )

    await TokenService.revoke_all(db, TokenScope.ACTIVATION, user.id)
    token = await TokenService.new(
        db,
        user.id,
        timedelta(hours=settings.activation_token_ttl_hours),
        TokenScope.ACTIVATION,
    )
    await db.commit()

    tasks.spawn(
        send_activation_email(
            to_email=user.email, token=token.reveal(), user_id=user.id
        ),
        name=f"activation-email-{user.id}",
    )
    return DataResponse(
        data={"message": "an email will be sent to you containing activation instructions"}
    )
