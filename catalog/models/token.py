"""Token model - hashed bearer tokens.

Only the SHA-256 digest of a token is stored; the plaintext leaves the
process exactly once, in the response that issued it. Rows are never
updated: invalidation is deletion.
"""

from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog.models.base import Base, BigIntId

if TYPE_CHECKING:
    from catalog.models.user import User

TOKEN_HASH_BYTES = 32


class TokenScope(StrEnum):
    """Declared purpose of a token. Part of the token's identity."""

    ACTIVATION = "activation"
    AUTHENTICATION = "authentication"


class Token(Base):
    """Scoped, expiring bearer token.

    Attributes:
        hash: SHA-256 digest of the plaintext (primary key).
        user_id: Owning user.
        expiry: Token is invalid at or after this instant.
        scope: "activation" or "authentication".
    """

    __tablename__ = "tokens"
    __table_args__ = (Index("ix_tokens_user_id_scope", "user_id", "scope"),)

    hash: Mapped[bytes] = mapped_column(
        LargeBinary(TOKEN_HASH_BYTES),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        BigIntId,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    expiry: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    scope: Mapped[str] = mapped_column(String(20), nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="tokens")
