"""Business logic services used by HTTP controllers.

Services validate input, apply the domain rules and persist through the
repositories. They raise the errors from `errors` and never build HTTP
responses themselves. The one cross-entity rule lives in
`CourseService.delete`: a course that students still reference cannot
be removed. That check and the delete run as two separate statements,
so a student created in between can still end up referencing a deleted
course.
"""

import logging
from typing import List, Type, Union

import pydantic
from sqlmodel import Session

from . import models, repositories
from .errors import ConflictError, NotFoundError, ValidationError
from .schemas import CourseCreate, CourseUpdate, StudentCreate, StudentUpdate
from .utils.logging_setup import log_event

logger = logging.getLogger("school_api.services")


def _parse(schema: Type[pydantic.BaseModel], fields, operation: str, entity: str):
    """Accept either a schema instance or a raw field dict."""
    if isinstance(fields, schema):
        return fields
    try:
        return schema.model_validate(fields)
    except pydantic.ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}" for err in e.errors()
        )
        raise ValidationError(f"{entity.capitalize()} validation failed: {problems}", operation=operation, entity=entity) from e


def _check_required(values: dict, required, operation: str, entity: str) -> None:
    """Reject required fields that are missing, null or blank strings."""
    missing = []
    for name in required:
        if name not in values:
            continue
        value = values[name]
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    if missing:
        raise ValidationError(
            f"{entity.capitalize()} validation failed: {', '.join(missing)} is required",
            operation=operation, entity=entity, fields=missing,
        )


def _apply(record, changes: dict) -> None:
    for name, value in changes.items():
        setattr(record, name, value)
    models.touch(record)


class StudentService:
    """CRUD operations on students."""
    REQUIRED = ("name", "email", "course", "enrollment_date", "status")

    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.StudentRepository(session)

    def list(self) -> List[models.Student]:
        """All students, most recently created first."""
        students = self.repo.list_newest_first()
        log_event(logger, "students_listed", {"count": len(students)})
        return students

    def get_by_id(self, student_id: str) -> models.Student:
        student = self.repo.get(student_id)
        if student is None:
            raise NotFoundError("Student not found", operation="fetch", student_id=student_id)
        return student

    def create(self, fields: Union[StudentCreate, dict]) -> models.Student:
        """Validate and store a new student.

        Raises `ValidationError` for a missing/blank required field and
        `DuplicateKeyError` (a `ValidationError`) when the email is taken.
        """
        payload = _parse(StudentCreate, fields, "create", "student")
        values = payload.model_dump()
        _check_required(values, self.REQUIRED, "create", "student")
        student = self.repo.create(models.Student(**values))
        log_event(logger, "student_created", {"student_id": student.id, "name": student.name, "course": student.course})
        return student

    def update(self, student_id: str, fields: Union[StudentUpdate, dict]) -> models.Student:
        """Apply the fields present in `fields` and return the updated student."""
        payload = _parse(StudentUpdate, fields, "update", "student")
        student = self.repo.get(student_id)
        if student is None:
            raise NotFoundError("Student not found", operation="update", student_id=student_id)
        changes = payload.model_dump(exclude_unset=True)
        _check_required(changes, self.REQUIRED, "update", "student")
        _apply(student, changes)
        student = self.repo.save(student)
        log_event(logger, "student_updated", {"student_id": student.id, "name": student.name, "course": student.course})
        return student

    def delete(self, student_id: str) -> dict:
        """Remove a student; returns its id, name and course."""
        removed = self.repo.delete(student_id)
        if removed is None:
            raise NotFoundError("Student not found", operation="delete", student_id=student_id)
        summary = {"id": removed["id"], "name": removed["name"], "course": removed["course"]}
        log_event(logger, "student_deleted", summary)
        return summary


class CourseService:
    """CRUD operations on courses, guarded by enrollment checks."""
    REQUIRED = ("name", "description", "duration", "status")

    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.CourseRepository(session)
        self.students = repositories.StudentRepository(session)

    def list(self) -> List[models.Course]:
        """All courses sorted by name."""
        courses = self.repo.list_by_name()
        log_event(logger, "courses_listed", {"count": len(courses)})
        return courses

    def get_by_id(self, course_id: str) -> models.Course:
        course = self.repo.get(course_id)
        if course is None:
            raise NotFoundError("Course not found", operation="fetch", course_id=course_id)
        return course

    def create(self, fields: Union[CourseCreate, dict]) -> models.Course:
        payload = _parse(CourseCreate, fields, "create", "course")
        values = payload.model_dump()
        _check_required(values, self.REQUIRED, "create", "course")
        course = self.repo.create(models.Course(**values))
        log_event(logger, "course_created", {"course_id": course.id, "name": course.name})
        return course

    def update(self, course_id: str, fields: Union[CourseUpdate, dict]) -> models.Course:
        payload = _parse(CourseUpdate, fields, "update", "course")
        course = self.repo.get(course_id)
        if course is None:
            raise NotFoundError("Course not found", operation="update", course_id=course_id)
        changes = payload.model_dump(exclude_unset=True)
        _check_required(changes, self.REQUIRED, "update", "course")
        _apply(course, changes)
        course = self.repo.save(course)
        log_event(logger, "course_updated", {"course_id": course.id, "name": course.name})
        return course

    def delete(self, course_id: str) -> dict:
        """Delete a course that no student is enrolled in.

        Raises `ConflictError` while any student references the course
        and `NotFoundError` if the id does not resolve.
        """
        enrolled = self.students.count_enrolled(course_id)
        if enrolled > 0:
            raise ConflictError(
                "Cannot delete course with enrolled students",
                operation="delete", course_id=course_id, enrolled_students=enrolled,
            )
        removed = self.repo.delete(course_id)
        if removed is None:
            raise NotFoundError("Course not found", operation="delete", course_id=course_id)
        summary = {"id": removed["id"], "name": removed["name"]}
        log_event(logger, "course_deleted", summary)
        return summary


class DashboardService:
    """Read-only counts over both collections."""

    def __init__(self, session: Session):
        self.session = session
        self.students = repositories.StudentRepository(session)
        self.courses = repositories.CourseRepository(session)

    def get_stats(self) -> dict:
        # independent queries; under concurrent writes the numbers may not line up exactly
        stats = {
            "totalStudents": self.students.count(),
            "activeStudents": self.students.count(status=models.Status.active),
            "totalCourses": self.courses.count(),
            "activeCourses": self.courses.count(status=models.Status.active),
        }
        log_event(logger, "dashboard_stats", stats)
        return stats
