# backend/classcheck/services/course_service.py
"""Course and enrollment management."""
import logging
from typing import Dict, List, Optional

from classcheck.models import Course, Enrollment
from classcheck.store.base import Eq, In, Tables
from classcheck.utils.exceptions import (
    AlreadyEnrolled, NotEnrolled, PermissionDenied, UniqueViolation
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    'name', 'code', 'schedule', 'location',
    'latitude', 'longitude', 'proximity_threshold_feet'
)

class CourseService:
    """Service for courses and enrollments."""
    
    def __init__(self, store):
        self.store = store
    
    def create_course(self, professor_id: int, name: str, code: str,
                      schedule: Optional[str] = None, location: Optional[str] = None,
                      latitude: Optional[float] = None, longitude: Optional[float] = None,
                      proximity_threshold_feet: Optional[float] = None) -> Course:
        """Create a course owned by a professor."""
        professor = self.store.get(Tables.USERS, professor_id)
        if not professor.is_professor:
            raise PermissionDenied("Only professors can create courses", user_id=professor_id)
        
        course = self.store.create(Tables.COURSES, {
            'professor_id': professor_id,
            'name': name,
            'code': code,
            'schedule': schedule,
            'location': location,
            'latitude': latitude,
            'longitude': longitude,
            'proximity_threshold_feet': proximity_threshold_feet
        })
        logger.info("Course %s (%s) created by professor %s", course.id, code, professor_id)
        return course
    
    def get_course(self, course_id: int) -> Course:
        return self.store.get(Tables.COURSES, course_id)
    
    def require_owner(self, course_id: int, professor_id: int) -> Course:
        """Fetch the course, insisting the caller owns it."""
        course = self.store.get(Tables.COURSES, course_id)
        if course.professor_id != professor_id:
            raise PermissionDenied(
                "Only the course's professor can do that",
                course_id=course_id, user_id=professor_id
            )
        return course
    
    def update_course(self, course_id: int, professor_id: int, fields: Dict) -> Course:
        """Edit course details."""
        self.require_owner(course_id, professor_id)
        changes = {key: value for key, value in fields.items() if key in EDITABLE_FIELDS}
        if not changes:
            return self.store.get(Tables.COURSES, course_id)
        return self.store.update(Tables.COURSES, course_id, changes)
    
    def delete_course(self, course_id: int, professor_id: int) -> None:
        """Delete a course with its sessions, check-ins and enrollments.

        One transaction, children first: either the whole course disappears
        or nothing does.
        """
        self.require_owner(course_id, professor_id)
        
        with self.store.transaction():
            sessions = self.store.list(Tables.SESSIONS, [Eq('course_id', course_id)])
            session_ids = [session.id for session in sessions]
            
            check_ins = []
            if session_ids:
                check_ins = self.store.list(Tables.CHECK_INS, [In('session_id', session_ids)])
            for check_in in check_ins:
                self.store.delete(Tables.CHECK_INS, check_in.id)
            
            for session_id in session_ids:
                self.store.delete(Tables.SESSIONS, session_id)
            
            enrollments = self.store.list(Tables.ENROLLMENTS, [Eq('course_id', course_id)])
            for enrollment in enrollments:
                self.store.delete(Tables.ENROLLMENTS, enrollment.id)
            
            self.store.delete(Tables.COURSES, course_id)
        
        logger.info(
            "Course %s deleted with %d sessions, %d check-ins, %d enrollments",
            course_id, len(session_ids), len(check_ins), len(enrollments)
        )
    
    def list_professor_courses(self, professor_id: int) -> List[Course]:
        return self.store.list(Tables.COURSES, [Eq('professor_id', professor_id)])
    
    def list_student_courses(self, student_id: int) -> List[Course]:
        enrollments = self.store.list(Tables.ENROLLMENTS, [Eq('student_id', student_id)])
        if not enrollments:
            return []
        return self.store.list(Tables.COURSES, [In('id', [e.course_id for e in enrollments])])
    
    def is_enrolled(self, student_id: int, course_id: int) -> bool:
        return self.store.count(Tables.ENROLLMENTS, [
            Eq('student_id', student_id),
            Eq('course_id', course_id)
        ]) > 0
    
    def enroll(self, student_id: int, course_id: int) -> Enrollment:
        """Self-enroll a student."""
        student = self.store.get(Tables.USERS, student_id)
        if student.is_professor:
            raise PermissionDenied("Only students can enroll", user_id=student_id)
        self.store.get(Tables.COURSES, course_id)
        
        if self.is_enrolled(student_id, course_id):
            raise AlreadyEnrolled(course_id=course_id, student_id=student_id)
        
        try:
            enrollment = self.store.create(Tables.ENROLLMENTS, {
                'student_id': student_id,
                'course_id': course_id
            })
        except UniqueViolation as e:
            raise AlreadyEnrolled(course_id=course_id, student_id=student_id) from e
        
        logger.info("Student %s enrolled in course %s", student_id, course_id)
        return enrollment
    
    def drop(self, student_id: int, course_id: int) -> None:
        """Remove a student's enrollment."""
        enrollments = self.store.list(Tables.ENROLLMENTS, [
            Eq('student_id', student_id),
            Eq('course_id', course_id)
        ])
        if not enrollments:
            raise NotEnrolled(course_id=course_id, student_id=student_id)
        
        self.store.delete(Tables.ENROLLMENTS, enrollments[0].id)
        logger.info("Student %s dropped course %s", student_id, course_id)
