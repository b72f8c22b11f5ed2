"""Document store handle and change buses."""
from .base import ChangeEvent, Eq, EventType, In, Tables
from .events import InMemoryChangeBus, RedisChangeBus, create_change_bus
from .session_store import SessionStore

__all__ = [
    'ChangeEvent', 'Eq', 'EventType', 'In', 'Tables',
    'InMemoryChangeBus', 'RedisChangeBus', 'create_change_bus',
    'SessionStore'
]
