"""Error taxonomy for sessions, check-ins and the store.

Every error carries the HTTP status it maps to and a ``context`` dict naming
the course, session or constraint involved, so the caller can tell the user
what to retry.
"""
from typing import Any, Dict, Optional


class AttendanceError(Exception):
    """Base class for all ClassCheck errors."""

    status_code = 400
    default_message = "Attendance operation failed"

    def __init__(self, message: Optional[str] = None, **context: Any):
        self.message = message or self.default_message
        self.context: Dict[str, Any] = context
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.__class__.__name__, **self.context}


class SessionAlreadyActive(AttendanceError):
    status_code = 409
    default_message = "An attendance session is already active for this course"


class SessionNotActive(AttendanceError):
    status_code = 409
    default_message = "Check-in window closed"


class AlreadyCheckedIn(AttendanceError):
    status_code = 409
    default_message = "You have already checked in to this session"


class TooFarFromClassroom(AttendanceError):
    status_code = 403

    def __init__(self, distance_feet: float, threshold_feet: float, **context: Any):
        message = (
            f"You are {distance_feet:.0f} feet from the classroom; "
            f"check-in requires {threshold_feet:.0f} feet or less"
        )
        super().__init__(
            message,
            distance_feet=round(distance_feet, 1),
            threshold_feet=threshold_feet,
            **context
        )
        self.distance_feet = distance_feet
        self.threshold_feet = threshold_feet


class NotEnrolled(AttendanceError):
    status_code = 403
    default_message = "You are not enrolled in this course"


class AlreadyEnrolled(AttendanceError):
    status_code = 409
    default_message = "Already enrolled in course"


class PermissionDenied(AttendanceError):
    status_code = 403
    default_message = "You are not allowed to do that"


class StoreError(AttendanceError):
    """Failure reported by the document store."""

    status_code = 500
    default_message = "Store operation failed"


class NotFound(StoreError):
    status_code = 404
    default_message = "Row not found"


class UniqueViolation(StoreError):
    status_code = 409
    default_message = "Uniqueness constraint violated"


class QueryNotSupported(StoreError):
    status_code = 400
    default_message = "The store cannot evaluate this filter"


class StoreUnavailable(StoreError):
    status_code = 503
    default_message = "Attendance store is unavailable, try again"
