# File: backend/classcheck/api/realtime.py
"""Server-Sent Event streams of session state and check-in rosters."""
from flask import Blueprint, Response, current_app, stream_with_context
from flask_jwt_extended import jwt_required
from classcheck.realtime import event_stream
from classcheck.services import get_services
from classcheck.store.base import Tables

realtime_bp = Blueprint('realtime', __name__)

def _sse_response(generator) -> Response:
    return Response(
        stream_with_context(generator),
        mimetype='text/event-stream',
        headers={'Cache-Control': 'no-cache', 'X-Accel-Buffering': 'no'}
    )

@realtime_bp.route('/courses/<int:course_id>/session/stream', methods=['GET'])
@jwt_required()
def course_session_stream(course_id):
    """Push ``{session, is_active}`` whenever the course's session changes."""
    services = get_services()
    services.courses.get_course(course_id)
    
    return _sse_response(event_stream(
        services.fanout.subscribe_course,
        course_id,
        current_app.config['SSE_HEARTBEAT_SECONDS'],
        event='session'
    ))

@realtime_bp.route('/sessions/<int:session_id>/check-ins/stream', methods=['GET'])
@jwt_required()
def session_check_ins_stream(session_id):
    """Push the full check-in list whenever someone checks in."""
    services = get_services()
    services.store.get(Tables.SESSIONS, session_id)
    
    return _sse_response(event_stream(
        services.fanout.subscribe_check_ins,
        session_id,
        current_app.config['SSE_HEARTBEAT_SECONDS'],
        event='check_ins'
    ))
