"""Generic versioned-entity repository.

Uniform insert/fetch/update/delete/exists/list contract for every resource
whose rows carry an integer version (VersionedMixin). Concrete repositories
set the model, the fields a whole-row update may write, and the text columns
listings may search.

Versioning rules:
- insert: database assigns id, created_at and version=1
- update: one UPDATE sets the fields AND version = version + 1, RETURNING
  the new version; when expected_version is given it is part of the WHERE
  clause and a mismatch raises EditConflictError
- delete: zero affected rows raises NotFoundError

Every statement runs inside store_operation(), so it is time-bounded and
transport failures surface as StoreUnavailableError.
"""

from collections.abc import Mapping
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import ColumnElement, delete, exists, func, inspect, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from catalog.core.database import store_operation
from catalog.core.errors import (
    APIError,
    ConflictError,
    EditConflictError,
    NotFoundError,
    UnsafeSortInputError,
)
from catalog.core.pagination import PageRequest
from catalog.models.base import VersionedMixin

ModelT = TypeVar("ModelT", bound=VersionedMixin)


def _contains_pattern(term: str) -> str:
    """Build a LIKE pattern matching term as a literal substring."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class VersionedRepository(Generic[ModelT]):
    """Base repository for versioned entities.

    All methods are classmethods with no instance state. Pass an
    AsyncSession for every call so the caller controls transaction
    boundaries.

    Attributes:
        model: Mapped class handled by this repository.
        resource: Human-readable name used in error messages.
        updatable_fields: Fields written by update(). Never includes
            id, created_at or version.
        search_columns: Text columns list() may filter on.
    """

    model: ClassVar[type[Any]]
    resource: ClassVar[str]
    updatable_fields: ClassVar[frozenset[str]] = frozenset()
    search_columns: ClassVar[frozenset[str]] = frozenset()

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    @classmethod
    def constraint_error(cls, exc: IntegrityError) -> ConflictError:  # noqa: ARG003
        """Translate a constraint violation into a ConflictError.

        Subclasses override this to report kind-specific codes
        (e.g., DUPLICATE_EMAIL).
        """
        return ConflictError(
            code="CONSTRAINT_VIOLATION",
            message="A database constraint was violated.",
        )

    # -------------------------------------------------------------------------
    # Contract
    # -------------------------------------------------------------------------

    @classmethod
    async def insert(cls, db: AsyncSession, entity: ModelT) -> ModelT:
        """Insert a new row.

        Args:
            db: Async database session.
            entity: Unsaved model instance.

        Returns:
            The same instance with id, created_at and version populated.

        Raises:
            ConflictError: If a unique or check constraint is violated.
        """
        async with store_operation(f"{cls.resource}.insert"):
            db.add(entity)
            try:
                await db.flush()
            except IntegrityError as exc:
                raise cls.constraint_error(exc) from exc
            await db.refresh(entity)
        return entity

    @classmethod
    async def fetch(cls, db: AsyncSession, entity_id: int) -> ModelT:
        """Fetch a row by id.

        Always reads from the database so rows deleted or changed by a
        bulk statement are never served from the identity map.

        Args:
            db: Async database session.
            entity_id: Primary key.

        Returns:
            The model instance.

        Raises:
            NotFoundError: If no row has this id (ids < 1 never query).
        """
        if entity_id < 1:
            raise NotFoundError(cls.resource, entity_id)

        stmt = (
            select(cls.model)
            .where(cls.model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        async with store_operation(f"{cls.resource}.fetch"):
            result = await db.execute(stmt)
            entity = result.scalar_one_or_none()

        if entity is None:
            raise NotFoundError(cls.resource, entity_id)
        return entity

    @classmethod
    async def update(
        cls,
        db: AsyncSession,
        entity: ModelT,
        *,
        expected_version: int | None = None,
    ) -> int:
        """Write all updatable fields of entity and bump its version.

        Whole-row semantics: partial merges happen in the caller before
        this is invoked.

        If the write is rejected, the edits on entity are reverted to the
        loaded values so no later flush can apply them.

        Args:
            db: Async database session.
            entity: Instance carrying the desired field values.
            expected_version: Version the caller read. When given, the
                write only applies if the stored version still matches.

        Returns:
            The new version, also set on entity.

        Raises:
            NotFoundError: If the row no longer exists.
            EditConflictError: If expected_version is stale.
            ConflictError: If a constraint is violated.
        """
        values = {field: getattr(entity, field) for field in cls.updatable_fields}
        try:
            new_version = await cls._versioned_write(
                db, entity.id, values, expected_version=expected_version
            )
        except APIError:
            # A rejected edit must not reach the row through a later autoflush
            cls._discard_pending(db, entity, values)
            raise

        # Sync the instance without leaving dirty state for the next flush
        for field, value in values.items():
            set_committed_value(entity, field, value)
        set_committed_value(entity, "version", new_version)
        return new_version

    @classmethod
    async def delete(cls, db: AsyncSession, entity_id: int) -> None:
        """Delete a row by id. Dependent rows cascade in the database.

        Args:
            db: Async database session.
            entity_id: Primary key.

        Raises:
            NotFoundError: If no row was deleted.
        """
        if entity_id < 1:
            raise NotFoundError(cls.resource, entity_id)

        stmt = (
            delete(cls.model)
            .where(cls.model.id == entity_id)
            .execution_options(synchronize_session=False)
        )
        async with store_operation(f"{cls.resource}.delete"):
            result = await db.execute(stmt)

        if result.rowcount == 0:  # type: ignore[attr-defined]
            raise NotFoundError(cls.resource, entity_id)

    @classmethod
    async def exists(cls, db: AsyncSession, entity_id: int) -> bool:
        """Check whether a row exists without loading it.

        Args:
            db: Async database session.
            entity_id: Primary key.

        Returns:
            True if the row exists.
        """
        if entity_id < 1:
            return False

        stmt = select(exists().where(cls.model.id == entity_id))
        async with store_operation(f"{cls.resource}.exists"):
            result = await db.execute(stmt)
            return bool(result.scalar())

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _discard_pending(
        db: AsyncSession, entity: ModelT, fields: Mapping[str, Any]
    ) -> None:
        """Reset unflushed edits of fields back to their loaded values."""
        state = inspect(entity)
        unrestorable = []
        for field in fields:
            history = state.attrs[field].history
            if not history.added:
                continue
            if history.deleted:
                set_committed_value(entity, field, history.deleted[0])
            else:
                unrestorable.append(field)
        if unrestorable:
            db.expire(entity, unrestorable)

    @classmethod
    def _search_conditions(
        cls, search: Mapping[str, str | None]
    ) -> list[ColumnElement[bool]]:
        unknown = set(search) - cls.search_columns
        if unknown:
            msg = f"Unsearchable columns: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        conditions: list[ColumnElement[bool]] = []
        for column_name, term in search.items():
            term = (term or "").strip()
            if not term:
                continue
            column = cls.model.__table__.c[column_name]
            conditions.append(column.ilike(_contains_pattern(term), escape="\\"))
        return conditions

    @classmethod
    async def _versioned_write(
        cls,
        db: AsyncSession,
        entity_id: int | None,
        values: Mapping[str, Any],
        *,
        expected_version: int | None = None,
    ) -> int:
        """Apply values and version + 1 in one statement.

        Returns:
            The new version.
        """
        if entity_id is None or entity_id < 1:
            raise NotFoundError(cls.resource, entity_id)

        stmt = (
            update(cls.model)
            .where(cls.model.id == entity_id)
            .values(**values, version=cls.model.version + 1)
            .returning(cls.model.version)
            .execution_options(synchronize_session=False)
        )
        if expected_version is not None:
            stmt = stmt.where(cls.model.version == expected_version)

        # Pending attribute changes on the instance must not flush as a
        # separate, unversioned UPDATE ahead of this statement
        with db.no_autoflush:
            async with store_operation(f"{cls.resource}.update"):
                try:
                    result = await db.execute(stmt)
                except IntegrityError as exc:
                    raise cls.constraint_error(exc) from exc
                new_version = result.scalar_one_or_none()

            if new_version is None:
                if expected_version is not None and await cls.exists(db, entity_id):
                    raise EditConflictError(cls.resource.lower())
                raise NotFoundError(cls.resource, entity_id)

        return int(new_version)

    # Defined last: inside the class body this name shadows the builtin list
    @classmethod
    async def list(
        cls,
        db: AsyncSession,
        *,
        page: PageRequest,
        search: Mapping[str, str | None] | None = None,
        conditions: tuple[ColumnElement[bool], ...] = (),
    ) -> tuple[list[ModelT], int]:
        """List one page of rows together with the total match count.

        One statement returns both: COUNT(*) OVER () is computed before
        LIMIT/OFFSET apply. Rows are ordered by the resolved sort column,
        then by id ascending for a stable order.

        Args:
            db: Async database session.
            page: Validated pagination and sort request.
            search: Column name to free-text term. Empty terms match all.
            conditions: Extra fixed predicates (e.g., product_id == 5).

        Returns:
            Tuple of (rows on this page, total matching rows). The total
            is 0 when the page lies past the last row.

        Raises:
            UnsafeSortInputError: If the sort token is not safelisted or
                does not name a column of this model.
        """
        sort = page.sort_spec()
        sort_column = cls.model.__table__.c.get(sort.column)
        if sort_column is None:
            raise UnsafeSortInputError(page.sort)

        order = sort_column.desc() if sort.descending else sort_column.asc()
        total_records = func.count().over().label("total_records")
        stmt = (
            select(cls.model, total_records)
            .where(*conditions, *cls._search_conditions(search or {}))
            .order_by(order, cls.model.id.asc())
            .limit(page.limit)
            .offset(page.offset)
        )

        async with store_operation(f"{cls.resource}.list"):
            result = await db.execute(stmt)
            rows = result.all()

        total = rows[0].total_records if rows else 0
        return [row[0] for row in rows], total
