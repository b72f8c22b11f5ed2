"""Service layer, composed once per application around one store handle."""
from flask import current_app

from classcheck.realtime import RealtimeFanout

from .checkin_service import CheckInService
from .course_service import CourseService
from .geo_service import GeoService
from .session_service import SessionService
from .stats_service import StatsService


class Services:
    """Every service built over the same store."""
    
    def __init__(self, store, threshold_feet: float, now=None):
        self.store = store
        self.sessions = SessionService(store, now=now)
        self.check_ins = CheckInService(store, self.sessions, threshold_feet=threshold_feet, now=now)
        self.courses = CourseService(store)
        self.stats = StatsService(store, self.sessions)
        self.fanout = RealtimeFanout(store, self.sessions, self.check_ins)
    
    def start(self) -> None:
        self.store.init()
        self.fanout.start()
    
    def close(self) -> None:
        self.fanout.stop()
        self.store.close()


def get_services() -> Services:
    """Services of the current application."""
    return current_app.extensions['classcheck']


__all__ = [
    'CheckInService', 'CourseService', 'GeoService', 'SessionService',
    'StatsService', 'Services', 'get_services'
]
