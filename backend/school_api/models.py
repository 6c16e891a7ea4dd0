"""SQLModel data models.

This module defines the two stored collections, `student` and `course`.
Ids are application-generated hex strings. `Student.course` holds a
course id but is deliberately not a foreign key: enrollment integrity is
checked by `CourseService.delete`, not by the database.
"""

import uuid
from datetime import date, datetime, timezone
from enum import Enum

from sqlmodel import Field, SQLModel


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Status(str, Enum):
    active = "active"
    inactive = "inactive"


class Student(SQLModel, table=True):
    """An enrolled student.

    Fields:
    - `email`: unique across all students
    - `course`: id of the `Course` the student is enrolled in
    """
    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    name: str
    email: str = Field(index=True, unique=True)
    course: str = Field(index=True)
    enrollment_date: date
    status: Status = Field(default=Status.active)
    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)


class Course(SQLModel, table=True):
    """A course offered by the school; `name` is unique."""
    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    name: str = Field(index=True, unique=True)
    description: str
    duration: float
    status: Status = Field(default=Status.active)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


def touch(record: SQLModel) -> None:
    """Refresh `updated_at` on a record that is about to be saved."""
    record.updated_at = utcnow()
