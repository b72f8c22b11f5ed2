"""Change buses carrying committed store events to subscribers.

``InMemoryChangeBus`` delivers inside one process. ``RedisChangeBus`` fans the
same events out over redis pub/sub so every worker process sees every write.
"""
import json
import logging
import threading
import time
import uuid
from contextlib import nullcontext
from typing import Callable, Dict, Optional

import redis

from classcheck.store.base import ChangeEvent

logger = logging.getLogger(__name__)

Listener = Callable[[ChangeEvent], None]


class InMemoryChangeBus:
    """Synchronous in-process bus. Delivery order is publish order per topic."""
    
    def __init__(self):
        self._listeners: Dict[str, Dict[str, Listener]] = {}
        self._lock = threading.RLock()
        self._reconnect_hooks = []
    
    def start(self) -> None:
        pass
    
    def stop(self) -> None:
        with self._lock:
            self._listeners.clear()
    
    def on_reconnect(self, hook: Callable[[], None]) -> None:
        self._reconnect_hooks.append(hook)
    
    def subscribe(self, topic: str, listener: Listener) -> Callable[[], None]:
        token = uuid.uuid4().hex
        with self._lock:
            self._listeners.setdefault(topic, {})[token] = listener
        
        def detach():
            with self._lock:
                self._listeners.get(topic, {}).pop(token, None)
        
        return detach
    
    def publish(self, event: ChangeEvent) -> None:
        self._deliver(event)
    
    def _deliver(self, event: ChangeEvent) -> None:
        with self._lock:
            listeners = list(self._listeners.get(event.topic, {}).values())
        
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Change listener failed for topic %s", event.topic)


class RedisChangeBus(InMemoryChangeBus):
    """Publishes events to ``classcheck:<topic>`` and relays them back locally.

    Local listeners receive events from the redis listener thread, so writes
    from other processes reach them too. After a dropped connection the
    listener reconnects and calls the reconnect hooks; events published while
    disconnected are not replayed, subscribers resync from a fresh snapshot.
    """
    
    CHANNEL_PREFIX = 'classcheck:'
    RECONNECT_DELAY = 1.0
    
    def __init__(self, url: str, app=None, client: Optional[redis.Redis] = None):
        super().__init__()
        self._app = app
        self._client = client or redis.Redis.from_url(url, decode_responses=True)
        self._thread: Optional[threading.Thread] = None
        self._running = threading.Event()
    
    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._running.set()
        self._thread = threading.Thread(target=self._listen, name='classcheck-redis-bus', daemon=True)
        self._thread.start()
    
    def stop(self) -> None:
        self._running.clear()
        if self._thread:
            self._thread.join(timeout=2)
            self._thread = None
        super().stop()
    
    def publish(self, event: ChangeEvent) -> None:
        self._client.publish(self.CHANNEL_PREFIX + event.topic, json.dumps(event.to_dict()))
    
    def _listen(self) -> None:
        first_connect = True
        while self._running.is_set():
            pubsub = self._client.pubsub(ignore_subscribe_messages=True)
            try:
                pubsub.psubscribe(self.CHANNEL_PREFIX + '*')
                if not first_connect:
                    logger.warning("Redis change bus reconnected, resyncing subscribers")
                    with self._context():
                        for hook in self._reconnect_hooks:
                            try:
                                hook()
                            except Exception:
                                logger.exception("Reconnect hook %r failed", hook)
                first_connect = False
                
                while self._running.is_set():
                    message = pubsub.get_message(timeout=1.0)
                    if message and message.get('type') == 'pmessage':
                        self._relay(message)
            except redis.RedisError as e:
                logger.warning("Redis change bus disconnected: %s", e)
                time.sleep(self.RECONNECT_DELAY)
            finally:
                pubsub.close()

    def _relay(self, message) -> None:
        try:
            event = ChangeEvent.from_dict(json.loads(message['data']))
        except (ValueError, KeyError, TypeError):
            logger.exception("Dropping malformed change message on %s", message.get('channel'))
            return
        
        with self._context():
            self._deliver(event)

    def _context(self):
        return self._app.app_context() if self._app is not None else nullcontext()


def create_change_bus(backend: str, redis_url: Optional[str] = None, app=None):
    """Build the change bus named by ``REALTIME_BACKEND``."""
    if backend == 'redis':
        if not redis_url:
            raise RuntimeError("REALTIME_BACKEND=redis requires REDIS_URL")
        return RedisChangeBus(redis_url, app=app)
    return InMemoryChangeBus()
