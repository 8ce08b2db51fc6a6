"""
Base Repository with the record-store contract shared by every table.

Each entity gets a typed subclass; the router and scheduler layers never
touch table names or raw sessions for CRUD.
"""

import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import String, cast, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from paystream.core.exceptions import AppException, NotFoundError
from paystream.database import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    model: Type[ModelT]
    resource_type: str = "Record"

    def __init__(self, db: Session):
        self.db = db

    def _commit(self, error_message: str = "Database operation failed"):
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"{error_message}: {e}")
            raise AppException(
                message=error_message,
                status_code=500,
                error_code="DATABASE_ERROR",
                details={"original_error": str(e)}
            ) from e

    def create(self, record: Dict[str, Any]) -> ModelT:
        """Insert a record; an id is assigned by the model default when absent."""
        values = dict(record)
        if values.get("id") is None:
            values.pop("id", None)
        instance = self.model(**values)
        self.db.add(instance)
        self._commit(f"Failed to create {self.resource_type}")
        self.db.refresh(instance)
        return instance

    def get(self, record_id: str) -> ModelT:
        instance = self.db.get(self.model, record_id)
        if instance is None:
            raise NotFoundError(self.resource_type, record_id)
        return instance

    def find(self, record_id: str) -> Optional[ModelT]:
        return self.db.get(self.model, record_id)

    def list(self, skip: int = 0, limit: int = 100) -> List[ModelT]:
        return self.db.query(self.model).offset(skip).limit(limit).all()

    def search(self, term: str) -> List[ModelT]:
        """Records where any column contains *term*, case-insensitively."""
        needle = (term or "").lower()
        columns = list(self.model.__table__.columns)
        clauses = [
            func.lower(cast(column, String)).contains(needle, autoescape=True)
            for column in columns
        ]
        return self.db.query(self.model).filter(or_(*clauses)).all()

    def update(self, record_id: str, fields: Dict[str, Any]) -> ModelT:
        instance = self.get(record_id)
        for key, value in fields.items():
            if key == "id" or not hasattr(instance, key):
                continue
            setattr(instance, key, value)
        self._commit(f"Failed to update {self.resource_type}")
        self.db.refresh(instance)
        return instance

    def delete(self, record_id: str) -> bool:
        instance = self.get(record_id)
        self.db.delete(instance)
        self._commit(f"Failed to delete {self.resource_type}")
        return True
