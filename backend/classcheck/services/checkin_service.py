# backend/classcheck/services/checkin_service.py
"""Proximity-gated check-in against an active session."""
import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from classcheck.models import AttendanceSession, CheckIn, Course
from classcheck.services.geo_service import GeoService
from classcheck.store.base import Eq, Tables
from classcheck.utils.exceptions import (
    AlreadyCheckedIn, NotEnrolled, SessionNotActive, TooFarFromClassroom, UniqueViolation
)

logger = logging.getLogger(__name__)

DEFAULT_PROXIMITY_FEET = 500.0

class CheckInService:
    """Validates and records check-ins.

    Order of checks: session active, not already checked in, within range of
    the classroom, then write. The existence check is a fast-fail; the unique
    constraint on ``check_ins(session_id, student_id)`` is the guarantee.
    Courses without a geo-anchor skip the distance test.
    """
    
    def __init__(self, store, sessions, threshold_feet: float = DEFAULT_PROXIMITY_FEET,
                 now: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.sessions = sessions
        self.threshold_feet = threshold_feet
        self._now = now or datetime.utcnow
    
    def threshold_for(self, course: Course) -> float:
        if course.proximity_threshold_feet is not None:
            return course.proximity_threshold_feet
        return self.threshold_feet
    
    def check_in(self, session: Optional[AttendanceSession], student_id: int,
                 latitude: float, longitude: float) -> CheckIn:
        """Record the student's presence in ``session``."""
        if session is None or not session.is_active:
            raise SessionNotActive(
                session_id=session.id if session is not None else None,
                student_id=student_id
            )
        
        existing = self.store.list(Tables.CHECK_INS, [
            Eq('session_id', session.id),
            Eq('student_id', student_id)
        ])
        if existing:
            raise AlreadyCheckedIn(session_id=session.id, student_id=student_id)
        
        course = self.store.get(Tables.COURSES, session.course_id)
        distance = None
        if course.has_anchor:
            distance = GeoService.distance_feet(latitude, longitude, course.latitude, course.longitude)
            threshold = self.threshold_for(course)
            if distance > threshold:
                logger.info(
                    "Rejected check-in of student %s to session %s: %.1f ft > %.1f ft",
                    student_id, session.id, distance, threshold
                )
                raise TooFarFromClassroom(
                    distance, threshold, course_id=course.id, session_id=session.id
                )
        
        try:
            check_in = self.store.create(Tables.CHECK_INS, {
                'session_id': session.id,
                'student_id': student_id,
                'timestamp': self._now(),
                'latitude': latitude,
                'longitude': longitude,
                'distance_feet': distance
            })
        except UniqueViolation as e:
            raise AlreadyCheckedIn(session_id=session.id, student_id=student_id) from e
        
        logger.info("Student %s checked in to session %s", student_id, session.id)
        return check_in
    
    def check_in_to_course(self, course_id: int, student_id: int,
                           latitude: float, longitude: float) -> CheckIn:
        """Look up the course's current session and check in to it."""
        enrolled = self.store.count(Tables.ENROLLMENTS, [
            Eq('course_id', course_id),
            Eq('student_id', student_id)
        ])
        if not enrolled:
            raise NotEnrolled(course_id=course_id, student_id=student_id)
        
        session = self.sessions.get_active_session(course_id)
        if session is None:
            raise SessionNotActive(course_id=course_id, student_id=student_id)
        
        return self.check_in(session, student_id, latitude, longitude)
    
    def proximity(self, course: Course, latitude: float, longitude: float) -> Dict:
        """Distance readout for display; never writes."""
        threshold = self.threshold_for(course)
        if not course.has_anchor:
            return {
                'has_anchor': False,
                'distance_feet': None,
                'threshold_feet': threshold,
                'within_range': True
            }
        
        distance = GeoService.distance_feet(latitude, longitude, course.latitude, course.longitude)
        return {
            'has_anchor': True,
            'distance_feet': round(distance, 1),
            'threshold_feet': threshold,
            'within_range': distance <= threshold
        }
    
    def list_check_ins(self, session_id: int) -> List[CheckIn]:
        """All check-ins for a session, oldest first."""
        return self.store.list(
            Tables.CHECK_INS,
            [Eq('session_id', session_id)],
            order_by='timestamp'
        )
