"""Server-Sent Events framing for the realtime feeds."""
import json
import queue
from typing import Any, Callable, Iterator, Optional


def format_sse(data: Any, event: Optional[str] = None) -> str:
    """Encode one SSE message."""
    payload = json.dumps(data, default=str)
    message = f'data: {payload}\n\n'
    if event is not None:
        message = f'event: {event}\n{message}'
    return message


def event_stream(subscribe: Callable, key: int, heartbeat_seconds: float,
                 event: Optional[str] = None) -> Iterator[str]:
    """Yield SSE frames for one feed subscription until the client goes away.

    ``subscribe`` is a fan-out subscribe method; its priming snapshot is the
    first frame. A comment line is sent whenever the feed is idle for
    ``heartbeat_seconds``. Closing the generator cancels the subscription.
    """
    updates: queue.Queue = queue.Queue()
    subscription = subscribe(key, updates.put)
    try:
        while True:
            try:
                state = updates.get(timeout=heartbeat_seconds)
            except queue.Empty:
                yield ': keep-alive\n\n'
                continue
            yield format_sse(state, event)
    finally:
        subscription.cancel()
