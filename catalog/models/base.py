"""SQLAlchemy base classes and common mixins.

Defines the declarative base and the versioned-entity mixin shared by every
mutable resource (products, reviews, users).
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, func, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# BIGINT identity on PostgreSQL; SQLite only autoincrements INTEGER PRIMARY KEY
BigIntId = BigInteger().with_variant(Integer(), "sqlite")


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }


class VersionedMixin:
    """Mixin for store-assigned identity, creation time and row version.

    Attributes:
        id: Surrogate key assigned by the database on insert. Immutable.
        created_at: Set once by the database on insert. Never updated.
        version: Starts at 1 on insert and is incremented by exactly 1 in
            the same UPDATE statement as every field change.
    """

    id: Mapped[int] = mapped_column(
        BigIntId,
        primary_key=True,
        autoincrement=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    version: Mapped[int] = mapped_column(
        Integer,
        server_default=text("1"),
        nullable=False,
    )
