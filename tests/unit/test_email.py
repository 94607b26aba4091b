"""Tests for activation email rendering and delivery."""

from unittest.mock import patch

import pytest
from pydantic import SecretStr

from catalog.core import email
from catalog.core.config import settings

_TOKEN = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class TestActivationEmailText:
    @pytest.mark.parametrize(
        ("hours", "wording"),
        [(72, "3 days"), (24, "1 day"), (36, "36 hours"), (1, "1 hour")],
    )
    def test_lifetime_follows_configured_ttl(
        self, monkeypatch: pytest.MonkeyPatch, hours, wording
    ):
        monkeypatch.setattr(settings, "activation_token_ttl_hours", hours)

        text = email.activation_email_text(token=_TOKEN, user_id=7)

        assert f"expires in {wording} and" in text

    def test_includes_token_and_user_id(self):
        text = email.activation_email_text(token=_TOKEN, user_id=7)
        assert f'{{"token": "{_TOKEN}"}}' in text
        assert "user id is 7" in text


class TestSendActivationEmail:
    async def test_skips_delivery_without_api_key(
        self, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setattr(settings, "resend_api_key", SecretStr(""))

        with patch.object(email.httpx, "AsyncClient") as client_cls:
            await email.send_activation_email(
                to_email="dana@example.com", token=_TOKEN, user_id=7
            )

        client_cls.assert_not_called()
