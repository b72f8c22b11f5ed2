# File: backend/classcheck/api/attendance.py
"""Attendance session and check-in API endpoints."""
from flask import Blueprint, current_app, g, request
from flask_jwt_extended import jwt_required
from classcheck import limiter
from classcheck.services import get_services
from classcheck.store.base import Tables
from classcheck.utils.decorators import professor_required, rate_limit_key, student_required
from classcheck.utils.helpers import success_response
from classcheck.utils.validators import Validator

attendance_bp = Blueprint('attendance', __name__)

@attendance_bp.route('/attendance/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return success_response(message='Attendance service is running')

@attendance_bp.route('/courses/<int:course_id>/session/start', methods=['POST'])
@jwt_required()
@professor_required
def start_session(course_id):
    """Open check-in for a course."""
    services = get_services()
    services.courses.require_owner(course_id, g.current_user.id)
    
    session = services.sessions.start_session(course_id)
    return success_response(
        data=session.to_dict(),
        message="Attendance session started. Students can now check in.",
        status_code=201
    )

@attendance_bp.route('/courses/<int:course_id>/session/stop', methods=['POST'])
@jwt_required()
@professor_required
def stop_session(course_id):
    """Close check-in for a course. Stopping twice is not an error."""
    services = get_services()
    services.courses.require_owner(course_id, g.current_user.id)
    
    session = services.sessions.stop_session(course_id)
    if session is None:
        return success_response(data=None, message="No active attendance session to stop")
    
    return success_response(data=session.to_dict(), message="Attendance session stopped.")

@attendance_bp.route('/courses/<int:course_id>/session', methods=['GET'])
@jwt_required()
def active_session(course_id):
    """Current session state of a course."""
    services = get_services()
    services.courses.get_course(course_id)
    
    session = services.sessions.get_active_session(course_id)
    return success_response(data={
        'session': session.to_dict() if session else None,
        'is_active': session is not None
    })

@attendance_bp.route('/courses/<int:course_id>/sessions', methods=['GET'])
@jwt_required()
@professor_required
def session_history(course_id):
    """All sessions ever started for a course, newest first."""
    services = get_services()
    services.courses.require_owner(course_id, g.current_user.id)
    
    sessions = services.sessions.list_sessions(course_id)
    return success_response(data=[session.to_dict() for session in sessions])

@attendance_bp.route('/courses/<int:course_id>/check-in', methods=['POST'])
@jwt_required()
@student_required
@limiter.limit(lambda: current_app.config['CHECKIN_RATE_LIMIT'], key_func=rate_limit_key)
def check_in(course_id):
    """Check in to the course's active session from the reported location."""
    latitude, longitude = Validator.parse_location(request.get_json(silent=True))
    
    record = get_services().check_ins.check_in_to_course(
        course_id, g.current_user.id, latitude, longitude
    )
    return success_response(
        data=record.to_dict(),
        message="Your attendance has been recorded",
        status_code=201
    )

@attendance_bp.route('/sessions/<int:session_id>/check-ins', methods=['GET'])
@jwt_required()
@professor_required
def session_check_ins(session_id):
    """Everyone checked in to a session."""
    services = get_services()
    session = services.store.get(Tables.SESSIONS, session_id)
    services.courses.require_owner(session.course_id, g.current_user.id)
    
    check_ins = services.check_ins.list_check_ins(session_id)
    return success_response(data=[check_in.to_dict() for check_in in check_ins])
