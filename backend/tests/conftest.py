"""Shared fixtures for ClassCheck tests."""
import math

import pytest
from flask_jwt_extended import create_access_token

from classcheck import create_app, db
from classcheck.services.geo_service import GeoService
from classcheck.store.base import Tables

ANCHOR = (40.1000, -88.2000)


def north_of(lat, lon, feet):
    """Point ``feet`` due north of (lat, lon) on the haversine sphere."""
    meters = feet / GeoService.FEET_PER_METER
    return lat + math.degrees(meters / GeoService.EARTH_RADIUS_METERS), lon


@pytest.fixture
def app():
    """Create test app."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()
        app.extensions['classcheck'].close()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def services(app):
    return app.extensions['classcheck']


@pytest.fixture
def store(services):
    return services.store


@pytest.fixture
def professor(store):
    return store.create(Tables.USERS, {
        'email': 'prof@example.com',
        'name': 'Prof Ada',
        'is_professor': True
    })


@pytest.fixture
def other_professor(store):
    return store.create(Tables.USERS, {
        'email': 'other.prof@example.com',
        'name': 'Prof Grace',
        'is_professor': True
    })


@pytest.fixture
def students(store):
    return [
        store.create(Tables.USERS, {
            'email': f'student{i}@example.com',
            'name': f'Student {i}',
            'is_professor': False
        })
        for i in range(1, 4)
    ]


@pytest.fixture
def student(students):
    return students[0]


@pytest.fixture
def course(services, professor, students):
    """Course anchored at ANCHOR with every student enrolled."""
    course = services.courses.create_course(
        professor.id, 'Intro to Databases', 'CS 411',
        schedule='MWF 10:00 - 10:50 AM', location='Siebel 1404',
        latitude=ANCHOR[0], longitude=ANCHOR[1]
    )
    for s in students:
        services.courses.enroll(s.id, course.id)
    return course


@pytest.fixture
def unanchored_course(services, professor, students):
    course = services.courses.create_course(professor.id, 'Online Seminar', 'CS 499')
    for s in students:
        services.courses.enroll(s.id, course.id)
    return course


@pytest.fixture
def auth_headers(app):
    """Build bearer headers for a user."""
    def _headers(user):
        token = create_access_token(identity=str(user.id))
        return {'Authorization': f'Bearer {token}'}
    return _headers
