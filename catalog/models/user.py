"""User model - registered accounts.

Tier 0 - no FK dependencies. Email is stored lower-case so the unique
constraint is effectively case-insensitive on every dialect.
"""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog.models.base import Base, VersionedMixin

if TYPE_CHECKING:
    from catalog.models.token import Token

_CASCADE_ALL_DELETE_ORPHAN = "all, delete-orphan"


class User(Base, VersionedMixin):
    """User account.

    Attributes:
        username: Display name (max 200 chars).
        email: Unique email address, lower-case.
        password_hash: bcrypt hash of the login password.
        activated: Whether the account has been activated by email token.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    activated: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        server_default=text("false"),
        default=False,
    )

    tokens: Mapped[list["Token"]] = relationship(
        "Token",
        back_populates="user",
        cascade=_CASCADE_ALL_DELETE_ORPHAN,
        passive_deletes=True,
    )
