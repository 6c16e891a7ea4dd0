"""Domain error types raised by repositories and services.

Each error carries a human-readable `message` (returned to the caller as
`{"message": ...}`), the HTTP status the API layer maps it to, and a
`context` dict with structured details (operation, entity id) that only
goes to the log sink.
"""


class ServiceError(Exception):
    """Base class for expected failures of a service operation."""
    status_code = 500

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context


class ValidationError(ServiceError):
    """A required field is missing/blank or a field value is rejected."""
    status_code = 400


class DuplicateKeyError(ValidationError):
    """A unique field (student email, course name) already exists."""


class NotFoundError(ServiceError):
    """The requested id does not resolve to a stored document."""
    status_code = 404


class ConflictError(ServiceError):
    """A referential-integrity rule blocks the operation."""
    status_code = 400


class StoreError(ServiceError):
    """The store could not be reached or failed to execute a query."""
    status_code = 500
