"""Models package with all models."""
from .base import BaseModel
from .user import User
from .course import Course
from .enrollment import Enrollment
from .attendance_session import AttendanceSession
from .check_in import CheckIn

__all__ = [
    'BaseModel', 'User', 'Course', 'Enrollment',
    'AttendanceSession', 'CheckIn'
]
