"""Test the HTTP API end to end."""
import io

import pandas as pd

from classcheck import db
from conftest import ANCHOR, north_of

def location(lat, lon):
    return {'latitude': lat, 'longitude': lon}

def test_health_check(client):
    """Test health check endpoint."""
    response = client.get('/health')
    assert response.status_code == 200
    assert response.get_json()['status'] == 'healthy'

def test_requires_token(client, course):
    """Protected endpoints reject anonymous callers."""
    response = client.post(f'/api/courses/{course.id}/session/start')
    
    assert response.status_code == 401
    assert response.get_json()['message'] == 'Authorization token required'

def test_session_start_stop_flow(client, course, professor, auth_headers):
    """Start, read, stop, and stop again."""
    headers = auth_headers(professor)
    
    response = client.post(f'/api/courses/{course.id}/session/start', headers=headers)
    assert response.status_code == 201
    session_id = response.get_json()['data']['id']
    
    response = client.get(f'/api/courses/{course.id}/session', headers=headers)
    data = response.get_json()['data']
    assert data['is_active'] is True
    assert data['session']['id'] == session_id
    
    response = client.post(f'/api/courses/{course.id}/session/start', headers=headers)
    assert response.status_code == 409
    assert response.get_json()['data']['kind'] == 'SessionAlreadyActive'
    
    response = client.post(f'/api/courses/{course.id}/session/stop', headers=headers)
    assert response.status_code == 200
    assert response.get_json()['data']['is_active'] is False
    assert response.get_json()['data']['end_time'] is not None
    
    response = client.post(f'/api/courses/{course.id}/session/stop', headers=headers)
    assert response.status_code == 200
    assert 'data' not in response.get_json()

def test_only_owner_controls_session(client, course, other_professor, student, auth_headers):
    """Students and other professors cannot start a session."""
    response = client.post(f'/api/courses/{course.id}/session/start',
                           headers=auth_headers(other_professor))
    assert response.status_code == 403
    
    response = client.post(f'/api/courses/{course.id}/session/start',
                           headers=auth_headers(student))
    assert response.status_code == 403
    assert response.get_json()['message'] == 'Professor access required'

def test_check_in_flow(client, services, course, professor, student, auth_headers):
    """Check in once, then get a conflict."""
    services.sessions.start_session(course.id)
    headers = auth_headers(student)
    
    response = client.post(f'/api/courses/{course.id}/check-in',
                           json=location(*ANCHOR), headers=headers)
    assert response.status_code == 201
    assert response.get_json()['data']['student_id'] == student.id
    
    response = client.post(f'/api/courses/{course.id}/check-in',
                           json=location(*ANCHOR), headers=headers)
    assert response.status_code == 409
    assert response.get_json()['data']['kind'] == 'AlreadyCheckedIn'

def test_check_in_too_far(client, services, course, student, auth_headers):
    """Far-away students see how far they are."""
    services.sessions.start_session(course.id)
    
    response = client.post(f'/api/courses/{course.id}/check-in',
                           json=location(*north_of(*ANCHOR, 1000)),
                           headers=auth_headers(student))
    
    assert response.status_code == 403
    data = response.get_json()['data']
    assert data['kind'] == 'TooFarFromClassroom'
    assert abs(data['distance_feet'] - 1000) < 1
    assert data['threshold_feet'] == 500

def test_check_in_without_session(client, course, student, auth_headers):
    """Check-in is refused when no session is open."""
    response = client.post(f'/api/courses/{course.id}/check-in',
                           json=location(*ANCHOR), headers=auth_headers(student))
    
    assert response.status_code == 409
    assert response.get_json()['message'] == 'Check-in window closed'

def test_check_in_validates_location(client, services, course, student, auth_headers):
    """Missing or out-of-range coordinates are a 400."""
    services.sessions.start_session(course.id)
    headers = auth_headers(student)
    
    response = client.post(f'/api/courses/{course.id}/check-in',
                           json={'latitude': 40.1}, headers=headers)
    assert response.status_code == 400
    assert 'longitude is required' in response.get_json()['message']
    
    response = client.post(f'/api/courses/{course.id}/check-in',
                           json=location(91, 0), headers=headers)
    assert response.status_code == 400

def test_session_check_ins_listing(client, services, course, professor, students, auth_headers):
    """The owner sees everyone checked in to a session."""
    session = services.sessions.start_session(course.id)
    for s in students[:2]:
        services.check_ins.check_in(session, s.id, *ANCHOR)
    
    response = client.get(f'/api/sessions/{session.id}/check-ins', headers=auth_headers(professor))
    
    assert response.status_code == 200
    assert [c['student_id'] for c in response.get_json()['data']] == [s.id for s in students[:2]]

def test_distance_endpoint(client, course, student, auth_headers):
    """Distance readout does not record anything."""
    lat, lon = north_of(*ANCHOR, 200)
    response = client.get(
        f'/api/courses/{course.id}/distance?latitude={lat}&longitude={lon}',
        headers=auth_headers(student)
    )
    
    data = response.get_json()['data']
    assert response.status_code == 200
    assert data['within_range'] is True
    assert abs(data['distance_feet'] - 200) < 1

def test_create_and_list_courses(client, professor, student, auth_headers):
    """Professors create courses; half an anchor is rejected."""
    headers = auth_headers(professor)
    
    response = client.post('/api/courses', headers=headers, json={
        'name': 'Compilers', 'code': 'CS 426', 'latitude': 40.11, 'longitude': -88.22
    })
    assert response.status_code == 201
    assert response.get_json()['data']['has_anchor'] is True
    
    response = client.post('/api/courses', headers=headers, json={
        'name': 'Graphics', 'code': 'CS 418', 'latitude': 40.11
    })
    assert response.status_code == 400
    
    response = client.post('/api/courses', headers=headers, json={'name': 'No code'})
    assert response.status_code == 400
    
    response = client.get('/api/courses', headers=headers)
    assert [c['code'] for c in response.get_json()['data']] == ['CS 426']
    
    response = client.post('/api/courses', headers=auth_headers(student),
                           json={'name': 'Mine', 'code': 'X 1'})
    assert response.status_code == 403

def test_enrollment_endpoints(client, unanchored_course, store, auth_headers):
    """Students enroll once and can drop."""
    from classcheck.store.base import Tables
    newcomer = store.create(Tables.USERS, {
        'email': 'late@example.com', 'name': 'Late Joiner', 'is_professor': False
    })
    headers = auth_headers(newcomer)
    url = f'/api/courses/{unanchored_course.id}/enrollment'
    
    assert client.post(url, headers=headers).status_code == 201
    assert client.post(url, headers=headers).status_code == 409
    assert client.delete(url, headers=headers).status_code == 200
    assert client.delete(url, headers=headers).status_code == 403

def test_delete_course(client, services, course, professor, auth_headers):
    """Deleting a course makes it disappear."""
    services.sessions.start_session(course.id)
    course_id = course.id
    headers = auth_headers(professor)
    
    assert client.delete(f'/api/courses/{course_id}', headers=headers).status_code == 200
    
    response = client.get(f'/api/courses/{course_id}', headers=headers)
    assert response.status_code == 404
    assert response.get_json()['data']['kind'] == 'NotFound'

def test_roster_and_export(client, services, course, professor, students, auth_headers):
    """Roster JSON and CSV agree on the ranking."""
    session = services.sessions.start_session(course.id)
    services.check_ins.check_in(session, students[1].id, *ANCHOR)
    services.sessions.stop_session(course.id)
    headers = auth_headers(professor)
    
    response = client.get(f'/api/courses/{course.id}/roster', headers=headers)
    roster = response.get_json()['data']
    assert roster[0]['student_id'] == students[1].id
    assert roster[0]['attendance_rate'] == 100
    
    response = client.get(f'/api/courses/{course.id}/roster/export?format=csv', headers=headers)
    assert response.status_code == 200
    assert response.mimetype == 'text/csv'
    df = pd.read_csv(io.BytesIO(response.data))
    assert list(df['student_id']) == [r['student_id'] for r in roster]
    
    response = client.get(f'/api/courses/{course.id}/roster/export?format=pdf', headers=headers)
    assert response.status_code == 400

def test_student_stats(client, services, course, student, auth_headers):
    """Students read their own rates."""
    session = services.sessions.start_session(course.id)
    services.check_ins.check_in(session, student.id, *ANCHOR)
    services.sessions.stop_session(course.id)
    services.sessions.start_session(course.id)
    headers = auth_headers(student)
    
    response = client.get(f'/api/stats/courses/{course.id}/rate', headers=headers)
    assert response.get_json()['data']['attendance_rate'] == 50
    
    response = client.get('/api/stats/me', headers=headers)
    assert response.get_json()['data']['overall_rate'] == 50

def test_stop_session_visible_to_fixture_session(client, services, course, professor, auth_headers):
    """Writes made through the API are visible to services afterwards."""
    headers = auth_headers(professor)
    client.post(f'/api/courses/{course.id}/session/start', headers=headers)
    client.post(f'/api/courses/{course.id}/session/stop', headers=headers)
    
    db.session.expire_all()
    assert services.sessions.get_active_session(course.id) is None
    assert len(services.sessions.list_sessions(course.id)) == 1

def test_course_text_fields_must_be_strings(client, course, professor, auth_headers):
    """Non-string names and codes are a 400, not a server error."""
    headers = auth_headers(professor)
    
    response = client.post('/api/courses', headers=headers, json={'name': 123, 'code': 'CS 1'})
    assert response.status_code == 400
    assert 'name must be a string' in response.get_json()['message']
    
    response = client.post('/api/courses', headers=headers, json={'name': 'Graphs', 'code': ['CS']})
    assert response.status_code == 400
    
    response = client.post('/api/courses', headers=headers, json={'name': '   ', 'code': 'CS 1'})
    assert response.status_code == 400
    
    response = client.patch(f'/api/courses/{course.id}', headers=headers, json={'location': 42})
    assert response.status_code == 400
    
    response = client.patch(f'/api/courses/{course.id}', headers=headers, json={'name': None})
    assert response.status_code == 400
