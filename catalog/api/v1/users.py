"""Users API router.

Endpoints:
- POST /users - Register; mails an activation token in the background
- PUT /users/activated - Activate an account with an activation token
- GET /users/{id} - Fetch a user

Security considerations:
- register: bcrypt cost 12, email uniqueness, password length in bytes
- activate: token is single-purpose; all activation tokens of the user are
  revoked once it succeeds
"""

from datetime import timedelta

from fastapi import APIRouter, Request

from catalog.api.deps import DbSession, TaskGroup
from catalog.core.auth import hash_password, validate_password_strength
from catalog.core.config import settings
from catalog.core.email import send_activation_email
from catalog.core.rate_limiting import limiter
from catalog.core.responses import DataResponse
from catalog.models import TokenScope, User
from catalog.repositories.user_repository import UserRepository
from catalog.schemas.user import ActivateUserRequest, RegisterUserRequest, UserResponse
from catalog.services.token_service import TokenService

router = APIRouter()


# ===================================================================
# POST /users
# ===================================================================


@router.post("", status_code=201)
@limiter.limit(lambda: settings.rate_limit_auth)
async def register_user(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    body: RegisterUserRequest,
    db: DbSession,
    tasks: TaskGroup,
) -> DataResponse[UserResponse]:
    """Register a new, not yet activated user.

    The user row and its activation token are committed before the email
    is queued, so the emailed token is always redeemable.
    """
    validate_password_strength(body.password)

    user = await UserRepository.insert(
        db,
        User(
            username=body.username,
            email=body.email,
            password_hash=hash_password(body.password),
            activated=False,
        ),
    )
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
    return DataResponse(data=UserResponse.model_validate(user))


# ===================================================================
# PUT /users/activated
# ===================================================================


@router.put("/activated")
async def activate_user(
    body: ActivateUserRequest,
    db: DbSession,
) -> DataResponse[UserResponse]:
    """Activate the account owning an activation token.

    Activating an already active account is a no-op write that still
    consumes the token.
    """
    user_id = await TokenService.validate(db, TokenScope.ACTIVATION, body.token)
    user = await UserRepository.fetch(db, user_id)

    user.activated = True
    await UserRepository.update(db, user, expected_version=user.version)
    await TokenService.revoke_all(db, TokenScope.ACTIVATION, user.id)
    await db.commit()

    return DataResponse(data=UserResponse.model_validate(user))


# ===================================================================
# GET /users/{id}
# ===================================================================


@router.get("/{user_id}")
async def get_user(user_id: int, db: DbSession) -> DataResponse[UserResponse]:
    """Get a user by ID."""
    user = await UserRepository.fetch(db, user_id)
    return DataResponse(data=UserResponse.model_validate(user))
