"""Realtime fan-out of session and check-in state."""
from .fanout import CHECK_IN_FEED, COURSE_FEED, RealtimeFanout, Subscription
from .sse import event_stream, format_sse

__all__ = [
    'CHECK_IN_FEED', 'COURSE_FEED', 'RealtimeFanout', 'Subscription',
    'event_stream', 'format_sse'
]
