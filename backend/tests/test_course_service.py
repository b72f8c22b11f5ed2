"""Test course management and cascade delete."""
import pytest

from classcheck import db
from classcheck.services.seed_service import SeedService
from classcheck.store.base import Eq, Tables
from classcheck.utils.exceptions import (
    AlreadyEnrolled, NotEnrolled, NotFound, PermissionDenied
)
from conftest import ANCHOR

def test_create_course_with_anchor(course):
    """Anchored courses report it."""
    assert course.has_anchor
    assert course.to_dict()['has_anchor'] is True

def test_create_course_requires_professor(services, student):
    """Students cannot create courses."""
    with pytest.raises(PermissionDenied):
        services.courses.create_course(student.id, 'Nope', 'X 1')

def test_update_course_only_by_owner(services, course, other_professor, professor):
    """Only the owner edits; unknown fields are ignored."""
    with pytest.raises(PermissionDenied):
        services.courses.update_course(course.id, other_professor.id, {'name': 'Hijacked'})
    
    updated = services.courses.update_course(
        course.id, professor.id, {'name': 'Databases', 'professor_id': other_professor.id}
    )
    assert updated.name == 'Databases'
    assert updated.professor_id == professor.id

def test_clearing_anchor(services, course, professor):
    """Removing the coordinates removes the anchor."""
    updated = services.courses.update_course(
        course.id, professor.id, {'latitude': None, 'longitude': None}
    )
    assert not updated.has_anchor

def test_enroll_and_drop(services, unanchored_course, store):
    """Enrollment is unique per pair and can be dropped."""
    newcomer = store.create(Tables.USERS, {
        'email': 'new@example.com', 'name': 'New', 'is_professor': False
    })
    services.courses.enroll(newcomer.id, unanchored_course.id)
    
    with pytest.raises(AlreadyEnrolled):
        services.courses.enroll(newcomer.id, unanchored_course.id)
    assert unanchored_course.id in [c.id for c in services.courses.list_student_courses(newcomer.id)]
    
    services.courses.drop(newcomer.id, unanchored_course.id)
    assert not services.courses.is_enrolled(newcomer.id, unanchored_course.id)
    with pytest.raises(NotEnrolled):
        services.courses.drop(newcomer.id, unanchored_course.id)

def test_professor_cannot_enroll(services, course, other_professor):
    """Professors do not enroll as students."""
    with pytest.raises(PermissionDenied):
        services.courses.enroll(other_professor.id, course.id)

def test_list_professor_courses(services, course, unanchored_course, professor, other_professor):
    """Professors see only their own courses."""
    assert [c.id for c in services.courses.list_professor_courses(professor.id)] == \
        [course.id, unanchored_course.id]
    assert services.courses.list_professor_courses(other_professor.id) == []

def _populate(services, course, students):
    session = services.sessions.start_session(course.id)
    for s in students:
        services.check_ins.check_in(session, s.id, *ANCHOR)
    services.sessions.stop_session(course.id)
    services.sessions.start_session(course.id)

def test_delete_course_cascades(services, store, course, unanchored_course, professor, students):
    """Deleting a course removes its sessions, check-ins and enrollments only."""
    _populate(services, course, students)
    _populate(services, unanchored_course, students[:1])
    
    services.courses.delete_course(course.id, professor.id)
    
    with pytest.raises(NotFound):
        store.get(Tables.COURSES, course.id)
    assert store.count(Tables.SESSIONS, [Eq('course_id', course.id)]) == 0
    assert store.count(Tables.ENROLLMENTS, [Eq('course_id', course.id)]) == 0
    assert store.count(Tables.CHECK_INS) == 1
    assert store.count(Tables.SESSIONS, [Eq('course_id', unanchored_course.id)]) == 2

def test_delete_course_requires_owner(services, course, other_professor):
    """Other professors cannot delete the course."""
    with pytest.raises(PermissionDenied):
        services.courses.delete_course(course.id, other_professor.id)

def test_delete_course_is_all_or_nothing(services, store, course, professor, students, monkeypatch):
    """A failure midway leaves every row in place."""
    _populate(services, course, students)
    real_delete = store.delete
    
    def failing_delete(table, row_id):
        if table == Tables.ENROLLMENTS:
            raise RuntimeError('disk full')
        return real_delete(table, row_id)
    
    monkeypatch.setattr(store, 'delete', failing_delete)
    with pytest.raises(RuntimeError):
        services.courses.delete_course(course.id, professor.id)
    monkeypatch.undo()
    
    db.session.expire_all()
    assert store.get(Tables.COURSES, course.id).id == course.id
    assert store.count(Tables.SESSIONS, [Eq('course_id', course.id)]) == 2
    assert store.count(Tables.CHECK_INS) == len(students)
    assert store.count(Tables.ENROLLMENTS, [Eq('course_id', course.id)]) == len(students)

def test_seed_twice_reuses_rows(services, store):
    """Seeding again creates no duplicate users, courses or enrollments."""
    _, _, first = SeedService.seed_all(services)
    _, _, second = SeedService.seed_all(services)
    
    assert [c.id for c in second] == [c.id for c in first]
    assert store.count(Tables.COURSES) == 2
    assert store.count(Tables.USERS) == 4
    assert store.count(Tables.ENROLLMENTS) == 6
