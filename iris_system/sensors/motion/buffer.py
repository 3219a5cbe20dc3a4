"""
Latest-sample buffer for the accelerometer and magnetometer channels
"""

from typing import Optional, Sequence, Tuple

import numpy as np


def _as_vec3(values: Sequence[float], channel: str) -> np.ndarray:
    vec = np.asarray(values, dtype=float).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"{channel} sample must have 3 components, got {vec.size}")
    return vec


class SampleBuffer:
    """
    Holds the most recent accelerometer and magnetometer readings.

    Channels are overwritten independently as their events arrive; there is
    no averaging and no timestamp pairing. Once both channels have reported
    at least once the buffer stays ready until clear().
    """

    def __init__(self):
        self._accel: Optional[np.ndarray] = None
        self._mag: Optional[np.ndarray] = None
        self.accel_sample_count = 0
        self.mag_sample_count = 0

    def update_accel(self, values: Sequence[float]):
        self._accel = _as_vec3(values, 'accelerometer')
        self.accel_sample_count += 1

    def update_mag(self, values: Sequence[float]):
        self._mag = _as_vec3(values, 'magnetometer')
        self.mag_sample_count += 1

    def has_both_channels(self) -> bool:
        return self._accel is not None and self._mag is not None

    def latest(self) -> Optional[Tuple[np.ndarray, np.ndarray]]:
        """
        Returns:
            Copies of (accel, mag), or None until both channels have reported
        """
        if not self.has_both_channels():
            return None
        return self._accel.copy(), self._mag.copy()

    def clear(self):
        """Discard both channels (shutdown)."""
        self._accel = None
        self._mag = None

    def __repr__(self):
        return (
            f"<SampleBuffer(accel={self.accel_sample_count}, "
            f"mag={self.mag_sample_count}, ready={self.has_both_channels()})>"
        )
