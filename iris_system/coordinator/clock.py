"""
Central Clock
Publication timestamps shared by the motion and iris depth processors
"""

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Optional

logger = logging.getLogger(__name__)

TICK = timedelta(microseconds=1)


class CentralClock:
    """
    One strictly increasing UTC time source for every published update

    Motion events and depth packets are delivered on different threads;
    stamping both from this clock keeps orientation and triangle updates
    on one ordered timeline. Two calls inside the same microsecond are
    separated by one tick.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._last: Optional[datetime] = None
        self._calls = 0
        self._bumped = 0

        logger.info("Central clock initialized")

    def now(self) -> datetime:
        """
        Next publication timestamp

        Returns:
            datetime: UTC, strictly later than every earlier result
        """
        with self._lock:
            stamp = datetime.now(timezone.utc)
            if self._last is not None and stamp <= self._last:
                stamp = self._last + TICK
                self._bumped += 1

            self._last = stamp
            self._calls += 1
            return stamp

    def get_stats(self) -> dict:
        with self._lock:
            return {
                'total_calls': self._calls,
                'bumped_calls': self._bumped,
                'last_timestamp': self._last.isoformat() if self._last else None,
            }

    def __repr__(self):
        return f"<CentralClock(calls={self._calls}, bumped={self._bumped})>"
