"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable. JSON uses camelCase keys
(`enrollmentDate`, `createdAt`); request bodies also accept the Python
field names. The `*Update` schemas describe partial updates: every field
is optional and only fields present in the request are applied.
"""

from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from .models import Status


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class StudentCreate(CamelModel):
    """Payload for `POST /api/students`."""
    name: str
    email: str
    course: str
    enrollment_date: date
    status: Status = Status.active


class StudentUpdate(CamelModel):
    """Partial payload for `PUT /api/students/{id}`."""
    name: Optional[str] = None
    email: Optional[str] = None
    course: Optional[str] = None
    enrollment_date: Optional[date] = None
    status: Optional[Status] = None


class StudentOut(CamelModel):
    id: str
    name: str
    email: str
    course: str
    enrollment_date: date
    status: Status
    created_at: datetime
    updated_at: datetime


class CourseCreate(CamelModel):
    """Payload for `POST /api/courses`."""
    name: str
    description: str
    duration: float
    status: Status = Status.active


class CourseUpdate(CamelModel):
    """Partial payload for `PUT /api/courses/{id}`."""
    name: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[float] = None
    status: Optional[Status] = None


class CourseOut(CamelModel):
    id: str
    name: str
    description: str
    duration: Union[int, float]
    status: Status
    created_at: datetime
    updated_at: datetime

    @field_validator("duration")
    @classmethod
    def _whole_numbers_as_int(cls, value):
        # stored as REAL; 12 should come back as 12, not 12.0
        return int(value) if float(value).is_integer() else value


class DashboardStats(CamelModel):
    """Counts shown on the admin dashboard."""
    total_students: int
    active_students: int
    total_courses: int
    active_courses: int


class MessageOut(BaseModel):
    """Generic `{message}` body used for confirmations and errors."""
    message: str


class HealthOut(BaseModel):
    status: str
    message: str
    uptime: str
