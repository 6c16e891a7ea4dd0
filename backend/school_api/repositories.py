"""Repository classes encapsulating database operations.

One repository per stored collection (students, courses). Repositories
return SQLModel objects, perform commits/refreshes, and translate
SQLAlchemy failures into domain errors: a unique-constraint violation
becomes `DuplicateKeyError`, anything else `StoreError`.
"""

from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from . import models
from .errors import DuplicateKeyError, StoreError


class _Repository:
    model: type = SQLModel
    entity = "record"

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def _store_errors(self, operation: str, record: Optional[SQLModel] = None) -> Iterator[None]:
        # read the record before the commit; once it fails the session refuses attribute loads
        message = self._duplicate_message(record)
        try:
            yield
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateKeyError(message, operation=operation, entity=self.entity) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError(f"Failed to {operation} {self.entity}", operation=operation, entity=self.entity, cause=str(e)) from e

    def _duplicate_message(self, record: Optional[SQLModel]) -> str:
        return f"Duplicate {self.entity}"

    def create(self, record: SQLModel) -> SQLModel:
        """Persist a new record and return the managed instance."""
        with self._store_errors("create", record):
            self.session.add(record)
            self.session.commit()
            self.session.refresh(record)
        return record

    def get(self, record_id: str) -> Optional[SQLModel]:
        """Get a record by primary key, `None` if it does not exist."""
        with self._store_errors("fetch"):
            return self.session.get(self.model, record_id)

    def save(self, record: SQLModel) -> SQLModel:
        """Flush changes made to a managed record."""
        with self._store_errors("update", record):
            self.session.add(record)
            self.session.commit()
            self.session.refresh(record)
        return record

    def delete(self, record_id: str) -> Optional[dict]:
        """Remove a record by id.

        Returns the removed record's fields as a dict (the instance itself
        is detached once the delete is committed), or `None` if no record
        had that id.
        """
        with self._store_errors("delete"):
            record = self.session.get(self.model, record_id)
            if record is None:
                return None
            removed = record.model_dump()
            self.session.delete(record)
            self.session.commit()
        return removed

    def list(self, *order_by) -> List[SQLModel]:
        with self._store_errors("list"):
            return list(self.session.exec(select(self.model).order_by(*order_by)).all())

    def count(self, **filters) -> int:
        """Count records whose columns equal the given keyword values."""
        stmt = select(func.count()).select_from(self.model)
        for column, value in filters.items():
            stmt = stmt.where(getattr(self.model, column) == value)
        with self._store_errors("count"):
            return self.session.exec(stmt).one()


class StudentRepository(_Repository):
    """CRUD operations for `Student` objects."""
    model = models.Student
    entity = "student"

    def _duplicate_message(self, record):
        if record is not None:
            return f"A student with email {record.email} already exists"
        return "A student with this email already exists"

    def list_newest_first(self) -> List[models.Student]:
        return self.list(models.Student.created_at.desc())

    def count_enrolled(self, course_id: str) -> int:
        """Number of students whose `course` references `course_id`."""
        return self.count(course=course_id)


class CourseRepository(_Repository):
    """CRUD operations for `Course` objects."""
    model = models.Course
    entity = "course"

    def _duplicate_message(self, record):
        if record is not None:
            return f"A course named {record.name} already exists"
        return "A course with this name already exists"

    def list_by_name(self) -> List[models.Course]:
        return self.list(models.Course.name.asc())
