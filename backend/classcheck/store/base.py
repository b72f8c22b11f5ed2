"""Store-level vocabulary: filters, change events and table names."""
from collections import namedtuple
from enum import Enum
from typing import Any, Dict


class Tables:
    """Table identifiers understood by the store."""
    
    USERS = 'users'
    COURSES = 'courses'
    ENROLLMENTS = 'course_enrollments'
    SESSIONS = 'attendance_sessions'
    CHECK_INS = 'check_ins'


class EventType(str, Enum):
    CREATE = 'create'
    UPDATE = 'update'
    DELETE = 'delete'


Eq = namedtuple('Eq', ['field', 'value'])
In = namedtuple('In', ['field', 'values'])


class ChangeEvent(namedtuple('ChangeEvent', ['event_type', 'topic', 'payload'])):
    """One committed row change. ``payload`` is the row as a plain dict."""
    
    __slots__ = ()
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'event_type': self.event_type.value,
            'topic': self.topic,
            'payload': self.payload
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChangeEvent':
        return cls(EventType(data['event_type']), data['topic'], data['payload'])
