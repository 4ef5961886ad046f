"""
Base repository with common CRUD operations.

Provides generic database operations inherited by the platform and
tenant-scoped repositories. Tenant repositories receive a session already
routed to the tenant schema, so none of them take a tenant argument.
"""

from typing import Any, Generic, Type, TypeVar

from sqlalchemy import select, update, delete, func, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hms.core.exceptions import DuplicateException

# Type variable for generic model
ModelType = TypeVar("ModelType")

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    """Check whether an IntegrityError comes from a unique constraint."""
    orig = error.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return code == UNIQUE_VIOLATION


class BaseRepository(Generic[ModelType]):
    """
    Base repository providing common CRUD operations.

    Attributes:
        model: SQLAlchemy model class
        session: Async database session
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def get_by_id(self, id: Any) -> ModelType | None:
        """
        Get a single record by primary key.

        Args:
            id: Primary key value

        Returns:
            Model instance or None if not found
        """
        query = select(self.model).where(self.model.id == id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_field(self, field_name: str, value: Any) -> ModelType | None:
        """
        Get a single record by field value.

        Args:
            field_name: Name of the field to filter by
            value: Value to match

        Returns:
            Model instance or None if not found
        """
        field = getattr(self.model, field_name, None)
        if field is None:
            raise ValueError(f"Field '{field_name}' does not exist on {self.model.__name__}")

        query = select(self.model).where(field == value)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def create(self, obj_data: dict[str, Any]) -> ModelType:
        """
        Create a new record.

        Args:
            obj_data: Dictionary of field values

        Returns:
            Created model instance

        Raises:
            DuplicateException: If a unique constraint rejects the row
        """
        db_obj = self.model(**obj_data)
        self.session.add(db_obj)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            self._raise_duplicate(exc)
        await self.session.refresh(db_obj)
        return db_obj

    async def update(
        self,
        id: Any,
        obj_data: dict[str, Any],
        exclude_none: bool = True,
    ) -> ModelType | None:
        """
        Update a record by primary key.

        Args:
            id: Primary key value
            obj_data: Dictionary of fields to update
            exclude_none: Drop None values instead of writing NULL

        Returns:
            Updated model instance or None if not found

        Raises:
            DuplicateException: If a unique constraint rejects the change
        """
        if exclude_none:
            update_data = {k: v for k, v in obj_data.items() if v is not None}
        else:
            update_data = dict(obj_data)

        if not update_data:
            return await self.get_by_id(id)

        query = (
            update(self.model)
            .where(self.model.id == id)
            .values(**update_data)
            .returning(self.model)
        )

        try:
            result = await self.session.execute(query)
            await self.session.flush()
        except IntegrityError as exc:
            self._raise_duplicate(exc)

        return result.scalar_one_or_none()

    async def delete(self, id: Any) -> bool:
        """
        Delete a record by primary key.

        Args:
            id: Primary key value

        Returns:
            True if deleted, False if not found
        """
        query = delete(self.model).where(self.model.id == id)
        result = await self.session.execute(query)
        await self.session.flush()

        return result.rowcount > 0

    async def exists_by_field(
        self,
        field_name: str,
        value: Any,
        exclude_id: Any = None,
    ) -> bool:
        """
        Check if a record exists by field value.

        Args:
            field_name: Name of the field to check
            value: Value to match
            exclude_id: Optional primary key to ignore (for updates)

        Returns:
            True if exists, False otherwise
        """
        field = getattr(self.model, field_name, None)
        if field is None:
            raise ValueError(f"Field '{field_name}' does not exist on {self.model.__name__}")

        conditions = [field == value]
        if exclude_id is not None:
            conditions.append(self.model.id != exclude_id)

        query = select(func.count()).select_from(self.model).where(and_(*conditions))
        result = await self.session.execute(query)
        count = result.scalar()

        return count is not None and count > 0

    def _raise_duplicate(self, error: IntegrityError) -> None:
        # Concurrent writers can pass the pre-insert duplicate checks
        if is_unique_violation(error):
            raise DuplicateException(resource=self.model.__name__, field="unique value") from error
        raise error
