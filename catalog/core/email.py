"""Email sending via Resend API.

Simple HTTP POST to Resend for account activation emails. Plain-text
format only.
"""

import logging

import httpx

from catalog.core.config import settings

logger = logging.getLogger(__name__)

_RESEND_API_URL = "https://api.resend.com/emails"
_RESEND_TIMEOUT = 10.0


def _describe_ttl(hours: int) -> str:
    if hours % 24 == 0:
        days = hours // 24
        return f"{days} day" if days == 1 else f"{days} days"
    return f"{hours} hour" if hours == 1 else f"{hours} hours"


def activation_email_text(*, token: str, user_id: int) -> str:
    """Render the plain-text body of the activation email."""
    activate_url = f"{settings.frontend_url}/users/activate?token={token}"
    lifetime = _describe_ttl(settings.activation_token_ttl_hours)
    return (
        f"Thanks for signing up. Your user id is {user_id}.\n\n"
        f"Activate your account here:\n\n{activate_url}\n\n"
        "Or send this token to PUT /api/v1/users/activated:\n\n"
        f'{{"token": "{token}"}}\n\n'
        f"The token expires in {lifetime} and can be used once."
    )


async def send_activation_email(*, to_email: str, token: str, user_id: int) -> None:
    """Send the welcome email carrying an activation token.

    Runs as a background task after registration; failures are logged and
    never reach the client, whose user row is already committed.

    Args:
        to_email: Recipient email address.
        token: Plain activation token.
        user_id: Id of the newly registered user.
    """
    if not settings.resend_api_key.get_secret_value():
        logger.info("Email delivery not configured; skipping activation email")
        return

    try:
        async with httpx.AsyncClient() as client:
            resp = await client.post(
                _RESEND_API_URL,
                headers={
                    "Authorization": f"Bearer {settings.resend_api_key.get_secret_value()}",
                },
                json={
                    "from": settings.email_from,
                    "to": to_email,
                    "subject": "Welcome! Activate your account",
                    "text": activation_email_text(token=token, user_id=user_id),
                },
                timeout=_RESEND_TIMEOUT,
            )
            resp.raise_for_status()
    except httpx.HTTPError:
        logger.warning("Failed to send activation email", exc_info=True)
