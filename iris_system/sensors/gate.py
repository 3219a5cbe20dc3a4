"""
Update Gates
Decide whether an incoming sample may trigger recomputation and display
"""

import logging
from typing import Callable

logger = logging.getLogger(__name__)


class UpdateGate:
    """Base gate: processors call should_update() before every recomputation."""

    def should_update(self) -> bool:
        raise NotImplementedError

    def __call__(self) -> bool:
        return self.should_update()


class AlwaysUpdateGate(UpdateGate):
    """Gate for headless use - every sample is processed."""

    def should_update(self) -> bool:
        return True

    def __repr__(self):
        return "<AlwaysUpdateGate>"


class ScreenLockGate(UpdateGate):
    """
    Allow updates only while the device screen is unlocked

    The host supplies a query returning True while the keyguard is locked.
    Updates are suppressed while locked, and also when the query cannot be
    answered (it raises) - the gate then defaults to "do not update".
    """

    def __init__(self, is_screen_locked: Callable[[], bool]):
        """
        Args:
            is_screen_locked: Callable returning True while the screen is locked
        """
        self._is_screen_locked = is_screen_locked
        self.suppressed_count = 0

    def should_update(self) -> bool:
        try:
            locked = bool(self._is_screen_locked())
        except Exception as e:
            logger.warning(f"Screen lock state unavailable, suppressing update: {e}")
            self.suppressed_count += 1
            return False

        if locked:
            self.suppressed_count += 1
            return False
        return True

    def __repr__(self):
        return f"<ScreenLockGate(suppressed={self.suppressed_count})>"


class PredicateGate(UpdateGate):
    """Wrap any zero-argument predicate; a failing predicate means "do not update"."""

    def __init__(self, predicate: Callable[[], bool]):
        self._predicate = predicate

    def should_update(self) -> bool:
        try:
            return bool(self._predicate())
        except Exception as e:
            logger.warning(f"Update predicate failed, suppressing update: {e}")
            return False


def as_gate(gate) -> UpdateGate:
    """
    Normalise a gate argument

    Args:
        gate: None, an UpdateGate, or a zero-argument callable

    Returns:
        UpdateGate instance
    """
    if gate is None:
        return AlwaysUpdateGate()
    if isinstance(gate, UpdateGate):
        return gate
    if callable(gate):
        return PredicateGate(gate)
    raise TypeError(f"Expected UpdateGate or callable, got {type(gate).__name__}")
