"""Attendance session: one open/closed check-in window for a course."""
from datetime import datetime
from classcheck import db
from classcheck.models.base import BaseModel

class AttendanceSession(BaseModel):
    """NONE -> ACTIVE (is_active, no end_time) -> CLOSED (end_time set).

    A closed row is never reopened; the next window is a new row.
    """
    
    __tablename__ = 'attendance_sessions'
    __table_args__ = (
        # At most one active session per course, enforced by the database
        db.Index(
            'uq_attendance_sessions_one_active',
            'course_id',
            unique=True,
            sqlite_where=db.text('is_active = 1'),
            postgresql_where=db.text('is_active'),
        ),
    )
    
    course_id = db.Column(db.Integer, db.ForeignKey('courses.id'), nullable=False, index=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    start_time = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    end_time = db.Column(db.DateTime, nullable=True)
    
    def __repr__(self):
        state = 'ACTIVE' if self.is_active else 'CLOSED'
        return f'<AttendanceSession {self.id} course={self.course_id} {state}>'
