# backend/classcheck/services/stats_service.py
"""Attendance rates and rosters derived from sessions and check-ins."""
import io
import math
from collections import Counter
from typing import Dict, List, Optional

import pandas as pd

from classcheck.store.base import Eq, In, Tables

ROSTER_COLUMNS = ['student_id', 'name', 'attended', 'total_classes', 'attendance_rate']

def percent(part: int, whole: int) -> int:
    """Whole-number percentage rounded half up; 0 when ``whole`` is 0."""
    if whole == 0:
        return 0
    return int(math.floor(100 * part / whole + 0.5))

class StatsService:
    """Read-only attendance statistics.

    A session counts toward ``total_classes`` from the moment it starts,
    including the one currently open.
    """
    
    GRADES = ((95, 'A'), (90, 'A-'), (85, 'B+'), (80, 'B'), (75, 'C'))
    
    def __init__(self, store, sessions):
        self.store = store
        self.sessions = sessions
    
    @staticmethod
    def attendance_grade(rate: int) -> str:
        for floor, grade in StatsService.GRADES:
            if rate >= floor:
                return grade
        return 'D'
    
    def attendance_rate(self, student_id: int, course_id: int) -> int:
        """Percentage of the course's sessions the student checked in to."""
        session_ids = self._session_ids(course_id)
        if not session_ids:
            return 0
        
        attended = self.store.count(Tables.CHECK_INS, [
            In('session_id', session_ids),
            Eq('student_id', student_id)
        ])
        return percent(attended, len(session_ids))
    
    def course_roster(self, course_id: int) -> List[Dict]:
        """Enrolled students by attendance rate, highest first.

        Ties keep enrollment order.
        """
        session_ids = self._session_ids(course_id)
        enrollments = self.store.list(Tables.ENROLLMENTS, [Eq('course_id', course_id)])
        names = self._names([e.student_id for e in enrollments])
        
        attended = Counter()
        if session_ids:
            for check_in in self.store.list(Tables.CHECK_INS, [In('session_id', session_ids)]):
                attended[check_in.student_id] += 1
        
        roster = [
            {
                'student_id': e.student_id,
                'name': names.get(e.student_id),
                'attended': attended[e.student_id],
                'total_classes': len(session_ids),
                'attendance_rate': percent(attended[e.student_id], len(session_ids))
            }
            for e in enrollments
        ]
        # sorted() is stable, reverse=True included
        return sorted(roster, key=lambda row: row['attendance_rate'], reverse=True)
    
    def live_roster(self, course_id: int) -> Dict:
        """Who has checked in to the course's current session."""
        session = self.sessions.get_active_session(course_id)
        enrollments = self.store.list(Tables.ENROLLMENTS, [Eq('course_id', course_id)])
        names = self._names([e.student_id for e in enrollments])
        
        check_ins = {}
        if session is not None:
            for check_in in self.store.list(Tables.CHECK_INS, [Eq('session_id', session.id)]):
                check_ins[check_in.student_id] = check_in
        
        students = []
        for e in enrollments:
            check_in = check_ins.get(e.student_id)
            students.append({
                'student_id': e.student_id,
                'name': names.get(e.student_id),
                'checked_in': check_in is not None,
                'timestamp': check_in.timestamp.isoformat() if check_in else None
            })
        
        checked_in_count = sum(1 for s in students if s['checked_in'])
        enrolled_count = len(students)
        return {
            'session': session.to_dict() if session else None,
            'is_active': session is not None,
            'students': students,
            'checked_in_count': checked_in_count,
            'enrolled_count': enrolled_count,
            'percentage': round(100 * checked_in_count / enrolled_count, 1) if enrolled_count else 0
        }
    
    def student_summary(self, student_id: int) -> Dict:
        """Per-course rates plus an overall figure for one student."""
        enrollments = self.store.list(Tables.ENROLLMENTS, [Eq('student_id', student_id)])
        courses = []
        
        for e in enrollments:
            course = self.store.get(Tables.COURSES, e.course_id)
            session_ids = self._session_ids(course.id)
            attended = 0
            if session_ids:
                attended = self.store.count(Tables.CHECK_INS, [
                    In('session_id', session_ids),
                    Eq('student_id', student_id)
                ])
            rate = percent(attended, len(session_ids))
            courses.append({
                'course_id': course.id,
                'code': course.code,
                'name': course.name,
                'attended': attended,
                'total_classes': len(session_ids),
                'attendance_rate': rate,
                'grade': self.attendance_grade(rate)
            })
        
        with_data = [c for c in courses if c['total_classes'] > 0]
        overall = 0
        if with_data:
            overall = int(math.floor(sum(c['attendance_rate'] for c in with_data) / len(with_data) + 0.5))
        
        return {
            'overall_rate': overall,
            'grade': self.attendance_grade(overall),
            'classes_attended': sum(c['attended'] for c in with_data),
            'total_classes': sum(c['total_classes'] for c in with_data),
            'courses': sorted(courses, key=lambda c: c['attendance_rate'], reverse=True)
        }
    
    def roster_frame(self, course_id: int) -> pd.DataFrame:
        """Course roster as a DataFrame, for export."""
        return pd.DataFrame(self.course_roster(course_id), columns=ROSTER_COLUMNS)
    
    def export_roster(self, course_id: int, file_format: str = 'csv') -> bytes:
        """Serialize the roster as CSV or an Excel workbook."""
        df = self.roster_frame(course_id)
        
        if file_format == 'xlsx':
            buffer = io.BytesIO()
            with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
                df.to_excel(writer, sheet_name='Roster', index=False)
            return buffer.getvalue()
        
        return df.to_csv(index=False).encode('utf-8')
    
    def _session_ids(self, course_id: int) -> List[int]:
        return [s.id for s in self.store.list(Tables.SESSIONS, [Eq('course_id', course_id)])]
    
    def _names(self, user_ids: List[int]) -> Dict[int, Optional[str]]:
        if not user_ids:
            return {}
        return {u.id: u.name for u in self.store.list(Tables.USERS, [In('id', user_ids)])}
