"""Realtime feeds of session state and check-in rosters.

Store change events are translated into two keyed feeds:

* course feed (key: course id) emits ``{'session': row | None, 'is_active': bool}``
* check-in feed (key: session id) emits the full list of the session's
  check-ins, re-fetched on every change

Every subscription is primed with a snapshot when it is made. Each emission
is a complete state to replace the previous one, never a delta, so duplicate
or late delivery is harmless.
"""
import copy
import logging
import threading
import uuid
from typing import Any, Callable, Dict, List, Tuple

from classcheck.store.base import ChangeEvent, EventType, Tables

logger = logging.getLogger(__name__)

COURSE_FEED = 'course_session'
CHECK_IN_FEED = 'session_check_ins'

Callback = Callable[[Any], None]


class Subscription:
    """Handle returned by a subscribe call. Call it, or ``cancel()`` it, to detach."""
    
    def __init__(self, fanout: 'RealtimeFanout', feed: str, key: int, token: str):
        self._fanout = fanout
        self.feed = feed
        self.key = key
        self.token = token
    
    @property
    def active(self) -> bool:
        return self._fanout._is_attached(self.feed, self.key, self.token)
    
    def cancel(self) -> None:
        self._fanout._detach(self.feed, self.key, self.token)
    
    __call__ = cancel
    
    def __repr__(self) -> str:
        return f'<Subscription {self.feed}:{self.key}>'


class RealtimeFanout:
    """Observer registry keyed by (feed, id)."""
    
    def __init__(self, store, sessions, check_ins):
        self.store = store
        self.sessions = sessions
        self.check_ins = check_ins
        self._observers: Dict[Tuple[str, int], Dict[str, Callback]] = {}
        self._lock = threading.RLock()
        self._store_detach: List[Callable[[], None]] = []
    
    def start(self) -> None:
        """Attach to the store's change stream."""
        if self._store_detach:
            return
        self._store_detach = [
            self.store.subscribe(Tables.SESSIONS, self._on_session_event),
            self.store.subscribe(Tables.CHECK_INS, self._on_check_in_event),
        ]
        self.store.bus.on_reconnect(self.resync)
    
    def stop(self) -> None:
        for detach in self._store_detach:
            detach()
        self._store_detach = []
        with self._lock:
            self._observers.clear()
    
    # --- subscribing -------------------------------------------------
    
    def subscribe_course(self, course_id: int, callback: Callback) -> Subscription:
        """Follow whether the course has an active session."""
        return self._subscribe(COURSE_FEED, course_id, callback)
    
    def subscribe_check_ins(self, session_id: int, callback: Callback) -> Subscription:
        """Follow the full check-in list of a session."""
        return self._subscribe(CHECK_IN_FEED, session_id, callback)
    
    def subscriber_count(self, feed: str, key: int) -> int:
        with self._lock:
            return len(self._observers.get((feed, key), {}))
    
    # --- snapshots ---------------------------------------------------
    
    def course_snapshot(self, course_id: int) -> Dict[str, Any]:
        session = self.sessions.get_active_session(course_id)
        return {
            'session': session.to_dict() if session else None,
            'is_active': session is not None
        }
    
    def check_ins_snapshot(self, session_id: int) -> List[Dict[str, Any]]:
        return [check_in.to_dict() for check_in in self.check_ins.list_check_ins(session_id)]
    
    def resync(self) -> None:
        """Re-prime every live subscription, e.g. after the change bus reconnects."""
        with self._lock:
            keys = list(self._observers)
        
        for feed, key in keys:
            self._emit(feed, key, self._snapshot(feed, key))
    
    # --- store events ------------------------------------------------
    
    def _on_session_event(self, event: ChangeEvent) -> None:
        if event.event_type not in (EventType.CREATE, EventType.UPDATE):
            return
        course_id = event.payload.get('course_id')
        if not self.subscriber_count(COURSE_FEED, course_id):
            return
        
        self._emit(COURSE_FEED, course_id, {
            'session': event.payload,
            'is_active': bool(event.payload.get('is_active'))
        })
    
    def _on_check_in_event(self, event: ChangeEvent) -> None:
        if event.event_type not in (EventType.CREATE, EventType.UPDATE):
            return
        session_id = event.payload.get('session_id')
        if not self.subscriber_count(CHECK_IN_FEED, session_id):
            return
        
        self._emit(CHECK_IN_FEED, session_id, self.check_ins_snapshot(session_id))
    
    # --- registry ----------------------------------------------------
    
    def _subscribe(self, feed: str, key: int, callback: Callback) -> Subscription:
        token = uuid.uuid4().hex
        with self._lock:
            self._observers.setdefault((feed, key), {})[token] = callback
        subscription = Subscription(self, feed, key, token)
        
        try:
            snapshot = self._snapshot(feed, key)
        except Exception:
            subscription.cancel()
            raise
        self._deliver(feed, key, token, callback, snapshot)
        return subscription
    
    def _snapshot(self, feed: str, key: int):
        if feed == COURSE_FEED:
            return self.course_snapshot(key)
        return self.check_ins_snapshot(key)
    
    def _emit(self, feed: str, key: int, state: Any) -> None:
        with self._lock:
            observers = list(self._observers.get((feed, key), {}).items())
        
        for token, callback in observers:
            self._deliver(feed, key, token, callback, state)
    
    def _deliver(self, feed: str, key: int, token: str, callback: Callback, state: Any) -> None:
        # Skip observers cancelled since the emission started
        if not self._is_attached(feed, key, token):
            return
        try:
            callback(copy.deepcopy(state))
        except Exception:
            logger.exception("Realtime subscriber on %s:%s failed", feed, key)
    
    def _is_attached(self, feed: str, key: int, token: str) -> bool:
        with self._lock:
            return token in self._observers.get((feed, key), {})
    
    def _detach(self, feed: str, key: int, token: str) -> None:
        with self._lock:
            observers = self._observers.get((feed, key))
            if observers is None:
                return
            observers.pop(token, None)
            if not observers:
                del self._observers[(feed, key)]
