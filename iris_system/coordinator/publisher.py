"""
Angle Publisher
Topic-based fan-out of computed angles to display/logging consumers
"""

import logging
import threading
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

TOPIC_ORIENTATION = 'orientation'
TOPIC_DEPTH = 'depth'
TOPIC_TRIANGLE = 'triangle'

Subscriber = Callable[[Any, Any], None]


class AnglePublisher:
    """
    Delivers (payload, timestamp) pairs to the subscribers of a topic.

    Processors publish from whatever thread delivered the sensor event.
    A subscriber that raises is logged and skipped; the remaining
    subscribers still receive the update.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: Dict[str, List[Subscriber]] = defaultdict(list)
        self.publish_count = 0

    def subscribe(self, topic: str, callback: Subscriber):
        """
        Register a callback for a topic

        Args:
            topic: One of 'orientation', 'depth', 'triangle'
            callback: Called as callback(payload, timestamp)
        """
        with self._lock:
            self._subscribers[topic].append(callback)
        logger.debug(f"Subscribed {getattr(callback, '__name__', callback)!r} to '{topic}'")

    def unsubscribe(self, topic: str, callback: Subscriber) -> bool:
        """Remove a callback; returns False if it was not subscribed."""
        with self._lock:
            try:
                self._subscribers[topic].remove(callback)
            except ValueError:
                return False
        return True

    def publish(self, topic: str, payload: Any, timestamp: Any = None):
        with self._lock:
            subscribers = list(self._subscribers.get(topic, ()))
            self.publish_count += 1

        for callback in subscribers:
            try:
                callback(payload, timestamp)
            except Exception as e:
                logger.error(f"Subscriber for '{topic}' failed: {e}", exc_info=True)

    def subscriber_count(self, topic: str) -> int:
        with self._lock:
            return len(self._subscribers.get(topic, ()))

    def clear(self):
        with self._lock:
            self._subscribers.clear()

    def __repr__(self):
        with self._lock:
            topics = {topic: len(subs) for topic, subs in self._subscribers.items()}
        return f"<AnglePublisher(topics={topics})>"
