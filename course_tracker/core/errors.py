# /course-tracker/course_tracker/core/errors.py

"""
The error taxonomy shared by every layer of the course tracker.

Services raise these; the FastAPI exception handler in `main.py` is the only
place that turns them into HTTP responses. Each class carries the status code
the transport layer should use, so routers never need to know the rules that
produced the error.
"""

from typing import Any, Dict, List, Optional


class CourseTrackerError(Exception):
    """Base class for every domain error raised by the core."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_report(self) -> Dict[str, Any]:
        return {"detail": self.message}


class ValidationError(CourseTrackerError):
    """
    A payload failed field-level or date-ordering checks. Nothing was written.

    Carries one entry per failing field so the caller can correct exactly the
    inputs that were rejected.
    """

    status_code = 422

    def __init__(self, errors: List[Dict[str, str]], message: str = "Validation failed"):
        super().__init__(message)
        self.errors = errors

    @property
    def fields(self) -> List[str]:
        return [e["field"] for e in self.errors]

    def to_report(self) -> Dict[str, Any]:
        return {"detail": self.message, "errors": self.errors}


class ConstraintViolation(CourseTrackerError):
    """A uniqueness, range or capacity rule was violated at store level."""

    status_code = 409

    def __init__(self, field: Optional[str], message: str):
        super().__init__(message)
        self.field = field

    def to_report(self) -> Dict[str, Any]:
        return {"detail": self.message, "errors": [{"field": self.field, "message": self.message}]}


class DanglingReference(CourseTrackerError):
    """A foreign key points at a row that does not exist or is inactive."""

    status_code = 400

    def __init__(self, field: Optional[str], target_id: Any = None, message: Optional[str] = None):
        super().__init__(message or f"Referenced record for '{field}' ({target_id}) does not exist.")
        self.field = field
        self.target_id = target_id

    def to_report(self) -> Dict[str, Any]:
        return {"detail": self.message, "errors": [{"field": self.field, "message": self.message}]}


class ReferentialIntegrityError(CourseTrackerError):
    """A delete was blocked because other records still depend on the target."""

    status_code = 409


class AccessDenied(CourseTrackerError):
    """The caller's role scope does not allow the requested operation."""

    status_code = 403


class NotFoundError(CourseTrackerError):
    """The requested id does not exist within the caller's visible scope."""

    status_code = 404
