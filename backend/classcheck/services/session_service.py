# backend/classcheck/services/session_service.py
"""Attendance session lifecycle per course: start, stop, query-active."""
import logging
from datetime import datetime
from typing import Callable, List, Optional

from classcheck.models import AttendanceSession
from classcheck.store.base import Eq, Tables
from classcheck.utils.exceptions import (
    QueryNotSupported, SessionAlreadyActive, StoreError, StoreUnavailable, UniqueViolation
)

logger = logging.getLogger(__name__)

class SessionService:
    """Owns the NONE -> ACTIVE -> CLOSED state machine of a course's sessions.

    The "no active session" read in ``start_session`` is a fast-fail only. The
    partial unique index on ``attendance_sessions(course_id) WHERE is_active``
    decides the winner when two professors' clients race; the loser gets the
    same ``SessionAlreadyActive`` as the read check would have raised.
    """
    
    def __init__(self, store, now: Optional[Callable[[], datetime]] = None):
        self.store = store
        self._now = now or datetime.utcnow
    
    def start_session(self, course_id: int) -> AttendanceSession:
        """Open a new check-in window for the course."""
        self.store.get(Tables.COURSES, course_id)
        
        if self.get_active_session(course_id) is not None:
            raise SessionAlreadyActive(course_id=course_id)
        
        try:
            session = self.store.create(Tables.SESSIONS, {
                'course_id': course_id,
                'is_active': True,
                'start_time': self._now(),
                'end_time': None
            })
        except UniqueViolation as e:
            logger.info("Lost start race for course %s", course_id)
            raise SessionAlreadyActive(course_id=course_id) from e
        
        logger.info("Attendance session %s started for course %s", session.id, course_id)
        return session
    
    def stop_session(self, course_id: int) -> Optional[AttendanceSession]:
        """Close the active session. Returns None when there was nothing to stop."""
        active = self._active_sessions(course_id)
        if not active:
            logger.debug("No active session to stop for course %s", course_id)
            return None
        
        end_time = self._now()
        with self.store.transaction():
            # More than one row only if a start race slipped past the index
            closed = [
                self.store.update(Tables.SESSIONS, session.id, {
                    'is_active': False,
                    'end_time': end_time
                })
                for session in active
            ]
        
        logger.info("Attendance session %s stopped for course %s", closed[0].id, course_id)
        return closed[0]
    
    def get_active_session(self, course_id: int) -> Optional[AttendanceSession]:
        """The course's ACTIVE session, or None."""
        active = self._active_sessions(course_id)
        if len(active) > 1:
            logger.warning(
                "Course %s has %d active sessions, using the newest", course_id, len(active)
            )
        return active[0] if active else None
    
    def list_sessions(self, course_id: int) -> List[AttendanceSession]:
        """Session history for a course, newest first."""
        return self.store.list(
            Tables.SESSIONS,
            [Eq('course_id', course_id)],
            order_by='-start_time'
        )
    
    def _active_sessions(self, course_id: int) -> List[AttendanceSession]:
        try:
            rows = self.store.list(Tables.SESSIONS, [
                Eq('course_id', course_id),
                Eq('is_active', True)
            ])
        except QueryNotSupported:
            # Linear scan over the course's history; fine for a few dozen rows
            logger.debug("Store cannot filter on is_active, scanning course %s", course_id)
            try:
                rows = [
                    row for row in self.store.list(Tables.SESSIONS, [Eq('course_id', course_id)])
                    if row.is_active
                ]
            except StoreUnavailable:
                raise
            except StoreError as e:
                raise StoreUnavailable(course_id=course_id) from e
        
        return sorted(rows, key=lambda row: (row.start_time, row.id), reverse=True)
