"""Base repository class with common CRUD operations.

Write helpers take ``commit=False`` so a caller can stage several changes and
commit them as one unit of work (the credit ledger relies on this).
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from copydrive.db.models import Base
from copydrive.utils import generate_id, get_timestamp_ms

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with common CRUD operations."""

    id_prefix: str = ""

    def __init__(self, model: type[ModelType]):
        """Initialize repository with model class.

        Args:
            model: SQLAlchemy model class
        """
        self.model = model

    def new_id(self) -> str:
        return generate_id(self.id_prefix)

    def get_by_id(self, db: Session, id: str) -> ModelType | None:
        """Get entity by ID, or None if not found."""
        return db.get(self.model, id)

    def list_by(self, db: Session, limit: int = 100, **filters: Any) -> list[ModelType]:
        """List entities matching column equality filters, newest first when possible."""
        stmt = select(self.model).filter_by(**filters)
        if hasattr(self.model, "created_at"):
            stmt = stmt.order_by(self.model.created_at.desc())
        stmt = stmt.limit(limit)
        return list(db.execute(stmt).scalars().all())

    def create(self, db: Session, obj_in: dict[str, Any], commit: bool = True) -> ModelType:
        """Create a new entity.

        Missing ``id`` and ``created_at``/``updated_at`` values are filled in.

        Args:
            db: Database session
            obj_in: Entity data as dict
            commit: Commit immediately (otherwise only flush)

        Returns:
            Created entity
        """
        data = dict(obj_in)
        data.setdefault("id", self.new_id())
        now = get_timestamp_ms()
        for ts_field in ("created_at", "updated_at"):
            if hasattr(self.model, ts_field):
                data.setdefault(ts_field, now)

        db_obj = self.model(**data)
        db.add(db_obj)
        self._finish(db, db_obj, commit)
        return db_obj

    def update(
        self,
        db: Session,
        db_obj: ModelType,
        obj_in: dict[str, Any],
        commit: bool = True,
    ) -> ModelType:
        """Update an existing entity with the given field values."""
        for field, value in obj_in.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        if hasattr(db_obj, "updated_at") and "updated_at" not in obj_in:
            db_obj.updated_at = get_timestamp_ms()
        db.add(db_obj)
        self._finish(db, db_obj, commit)
        return db_obj

    def delete(self, db: Session, id: str) -> bool:
        """Delete an entity by ID.

        Returns:
            True if deleted, False if not found
        """
        obj = db.get(self.model, id)
        if obj:
            db.delete(obj)
            db.commit()
            return True
        return False

    def exists(self, db: Session, id: str) -> bool:
        """Check if entity exists."""
        return db.get(self.model, id) is not None

    @staticmethod
    def _finish(db: Session, db_obj: ModelType, commit: bool) -> None:
        if commit:
            db.commit()
            db.refresh(db_obj)
        else:
            db.flush()
