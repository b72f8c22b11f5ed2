# File: backend/classcheck/api/stats.py
"""Attendance statistics and roster export endpoints."""
from datetime import datetime
import io
from flask import Blueprint, g, request, send_file
from flask_jwt_extended import jwt_required
from classcheck.services import get_services
from classcheck.utils.decorators import professor_required, student_required
from classcheck.utils.exceptions import NotEnrolled
from classcheck.utils.helpers import error_response, success_response

stats_bp = Blueprint('stats', __name__)

EXPORT_MIMETYPES = {
    'csv': 'text/csv',
    'xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
}

@stats_bp.route('/stats/me', methods=['GET'])
@jwt_required()
@student_required
def my_stats():
    """Attendance overview across the caller's courses."""
    return success_response(data=get_services().stats.student_summary(g.current_user.id))

@stats_bp.route('/stats/courses/<int:course_id>/rate', methods=['GET'])
@jwt_required()
@student_required
def my_course_rate(course_id):
    """The caller's attendance rate in one course."""
    services = get_services()
    if not services.courses.is_enrolled(g.current_user.id, course_id):
        raise NotEnrolled(course_id=course_id, student_id=g.current_user.id)
    
    rate = services.stats.attendance_rate(g.current_user.id, course_id)
    return success_response(data={
        'course_id': course_id,
        'attendance_rate': rate,
        'grade': services.stats.attendance_grade(rate)
    })

@stats_bp.route('/courses/<int:course_id>/roster', methods=['GET'])
@jwt_required()
@professor_required
def roster(course_id):
    """Enrolled students ranked by attendance rate."""
    services = get_services()
    services.courses.require_owner(course_id, g.current_user.id)
    
    return success_response(data=services.stats.course_roster(course_id))

@stats_bp.route('/courses/<int:course_id>/roster/live', methods=['GET'])
@jwt_required()
@professor_required
def live_roster(course_id):
    """Check-in status of every enrolled student for the open session."""
    services = get_services()
    services.courses.require_owner(course_id, g.current_user.id)
    
    return success_response(data=services.stats.live_roster(course_id))

@stats_bp.route('/courses/<int:course_id>/roster/export', methods=['GET'])
@jwt_required()
@professor_required
def export_roster(course_id):
    """Download the roster as CSV or Excel."""
    file_format = request.args.get('format', 'csv')
    if file_format not in EXPORT_MIMETYPES:
        return error_response("format must be csv or xlsx", 400)
    
    services = get_services()
    course = services.courses.require_owner(course_id, g.current_user.id)
    content = services.stats.export_roster(course_id, file_format)
    
    code = course.code.replace(' ', '_')
    return send_file(
        io.BytesIO(content),
        as_attachment=True,
        download_name=f"{code}_roster_{datetime.now().strftime('%Y%m%d')}.{file_format}",
        mimetype=EXPORT_MIMETYPES[file_format]
    )
