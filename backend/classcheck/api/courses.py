# File: backend/classcheck/api/courses.py
"""Course and enrollment API endpoints."""
from flask import Blueprint, g, request
from flask_jwt_extended import jwt_required
from classcheck.services import get_services
from classcheck.utils.decorators import professor_required, student_required, user_required
from classcheck.utils.helpers import success_response
from classcheck.utils.validators import ValidationError, Validator

courses_bp = Blueprint('courses', __name__)

@courses_bp.route('', methods=['POST'])
@jwt_required()
@professor_required
def create_course():
    """Create a course owned by the calling professor."""
    data = request.get_json(silent=True) or {}
    
    _validate_text(data)
    validation = Validator.validate_required_fields(
        {key: (data.get(key) or '').strip() for key in ('name', 'code')},
        ['name', 'code']
    )
    if not validation['is_valid']:
        raise ValidationError('; '.join(validation['errors']))
    
    anchor = Validator.parse_optional_anchor(data)
    course = get_services().courses.create_course(
        professor_id=g.current_user.id,
        name=data['name'].strip(),
        code=data['code'].strip(),
        schedule=data.get('schedule'),
        location=data.get('location'),
        latitude=anchor['latitude'],
        longitude=anchor['longitude'],
        proximity_threshold_feet=_optional_float(data, 'proximity_threshold_feet')
    )
    
    return success_response(data=course.to_dict(), message="Course created", status_code=201)

@courses_bp.route('', methods=['GET'])
@jwt_required()
@user_required
def list_courses():
    """Courses taught by a professor, or taken by a student."""
    courses = get_services().courses
    user = g.current_user
    
    if user.is_professor:
        rows = courses.list_professor_courses(user.id)
    else:
        rows = courses.list_student_courses(user.id)
    
    return success_response(data=[course.to_dict() for course in rows])

@courses_bp.route('/<int:course_id>', methods=['GET'])
@jwt_required()
def get_course(course_id):
    """Course details."""
    course = get_services().courses.get_course(course_id)
    return success_response(data=course.to_dict())

@courses_bp.route('/<int:course_id>', methods=['PATCH'])
@jwt_required()
@professor_required
def update_course(course_id):
    """Edit a course. Sending latitude/longitude null clears the anchor."""
    data = request.get_json(silent=True) or {}
    _validate_text(data)
    for key in ('name', 'code'):
        if key in data and not (data[key] or '').strip():
            raise ValidationError(f"{key} cannot be empty")
    fields = {key: data[key] for key in ('name', 'code', 'schedule', 'location') if key in data}
    
    if 'latitude' in data or 'longitude' in data:
        fields.update(Validator.parse_optional_anchor(data))
    if 'proximity_threshold_feet' in data:
        fields['proximity_threshold_feet'] = _optional_float(data, 'proximity_threshold_feet')
    
    course = get_services().courses.update_course(course_id, g.current_user.id, fields)
    return success_response(data=course.to_dict(), message="Course updated")

@courses_bp.route('/<int:course_id>', methods=['DELETE'])
@jwt_required()
@professor_required
def delete_course(course_id):
    """Delete a course with all its sessions, check-ins and enrollments."""
    get_services().courses.delete_course(course_id, g.current_user.id)
    return success_response(message="Course deleted")

@courses_bp.route('/<int:course_id>/enrollment', methods=['POST'])
@jwt_required()
@student_required
def enroll(course_id):
    """Self-enroll in a course."""
    enrollment = get_services().courses.enroll(g.current_user.id, course_id)
    return success_response(data=enrollment.to_dict(), message="Enrolled in course", status_code=201)

@courses_bp.route('/<int:course_id>/enrollment', methods=['DELETE'])
@jwt_required()
@student_required
def drop(course_id):
    """Drop a course."""
    get_services().courses.drop(g.current_user.id, course_id)
    return success_response(message="Dropped course")

@courses_bp.route('/<int:course_id>/distance', methods=['GET'])
@jwt_required()
def distance(course_id):
    """Distance from the classroom for display. Does not check in."""
    latitude, longitude = Validator.parse_location(request.args)
    services = get_services()
    course = services.courses.get_course(course_id)
    
    return success_response(data=services.check_ins.proximity(course, latitude, longitude))

def _validate_text(data):
    validation = Validator.validate_text_fields(data, ['name', 'code', 'schedule', 'location'])
    if not validation['is_valid']:
        raise ValidationError('; '.join(validation['errors']))

def _optional_float(data, key):
    value = data.get(key)
    if value is None:
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be a number")
    if value <= 0:
        raise ValidationError(f"{key} must be positive")
    return value
