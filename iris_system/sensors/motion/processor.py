"""
Motion Processor
Turns asynchronous accelerometer / magnetometer events into smoothed
heading, pitch and roll, published on the 'orientation' topic
"""

import logging
import threading
from typing import Optional, Sequence, TYPE_CHECKING

from iris_system.coordinator import SensorCoordinator, TOPIC_ORIENTATION

from ..gate import as_gate
from ..utils import round_half_up
from .buffer import SampleBuffer
from .config import MotionConfig
from .orientation import OrientationEstimate, OrientationEstimator
from .smoother import ExponentialSmoother

if TYPE_CHECKING:
    from ..gate import UpdateGate

logger = logging.getLogger(__name__)

SENSOR_ACCELEROMETER = 'accelerometer'
SENSOR_MAGNETIC_FIELD = 'magnetic_field'


class MotionProcessor:
    """
    Orientation pipeline for one device

    Every accepted channel update runs:
        sample buffer -> gate -> orientation estimator -> per-angle smoother -> publish

    The buffer and the three smoothers are only touched while holding
    self._lock, so accelerometer and magnetometer callbacks delivered on
    different threads never write the same filter state concurrently.
    self._lock is never held while subscribers run; publishing happens
    under self._publish_lock, which is taken before self._lock, so updates
    reach subscribers in the order they were computed and a subscriber may
    read any processor's state.
    A degenerate sample pair publishes nothing and leaves the smoothed
    angles as they were.
    """

    def __init__(
            self,
            coordinator: Optional[SensorCoordinator] = None,
            config: Optional[MotionConfig] = None,
            gate: Optional['UpdateGate'] = None
    ):
        """
        Initialize motion processor

        Args:
            coordinator: Provides the clock and publisher; a private one is created if omitted
            config: Motion configuration
            gate: UpdateGate or zero-argument callable; defaults to always updating
        """
        self.coordinator = coordinator if coordinator else SensorCoordinator()
        self.config = config if config else MotionConfig.for_session()
        self.gate = as_gate(gate)

        self.buffer = SampleBuffer()
        self.estimator = OrientationEstimator(self.config)

        alpha = self.config.smoothing_alpha
        self.yaw_filter = ExponentialSmoother(alpha)
        self.pitch_filter = ExponentialSmoother(alpha)
        self.roll_filter = ExponentialSmoother(alpha)

        self._lock = threading.Lock()
        self._publish_lock = threading.RLock()
        self._current: Optional[OrientationEstimate] = None

        # State management
        self.is_running = False
        self.update_count = 0
        self.degenerate_count = 0
        self.gated_count = 0

        logger.info(f"Motion processor initialized (alpha={alpha}, mode={self.config.mode})")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self):
        if self.is_running:
            logger.warning("Motion processor already running")
            return

        with self._lock:
            self.is_running = True
            self.update_count = 0
            self.degenerate_count = 0
            self.gated_count = 0

        logger.info("✓ Motion processor started")

    def stop(self):
        """
        Stop accepting events and discard buffered samples.

        The last published orientation stays readable via get_current_orientation().
        """
        if not self.is_running:
            logger.warning("Motion processor not running")
            return

        with self._lock:
            self.is_running = False
            self.buffer.clear()

        logger.info(f"✓ Motion processor stopped after {self.update_count} updates")

    # ------------------------------------------------------------------
    # Event entry points
    # ------------------------------------------------------------------

    def on_accel(self, values: Sequence[float]) -> Optional[OrientationEstimate]:
        return self._on_channel(SENSOR_ACCELEROMETER, values)

    def on_mag(self, values: Sequence[float]) -> Optional[OrientationEstimate]:
        return self._on_channel(SENSOR_MAGNETIC_FIELD, values)

    def on_sensor_changed(self, sensor_type: str, values: Sequence[float]) -> Optional[OrientationEstimate]:
        """
        Dispatch a raw sensor event by type

        Args:
            sensor_type: 'accelerometer' or 'magnetic_field'; other types are ignored
            values: Sensor values, first three components are used

        Returns:
            Smoothed orientation if this event produced a new one, else None
        """
        if sensor_type not in (SENSOR_ACCELEROMETER, SENSOR_MAGNETIC_FIELD):
            logger.debug(f"Ignoring sensor event of type '{sensor_type}'")
            return None
        return self._on_channel(sensor_type, list(values)[:3])

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_current_orientation(self) -> Optional[OrientationEstimate]:
        """
        Thread-safe read of the last published orientation.

        Returns:
            Smoothed OrientationEstimate, or None before the first update
        """
        with self._lock:
            return self._current

    def get_status(self) -> dict:
        current = self.get_current_orientation()
        decimals = self.config.display_decimals
        return {
            'sensor_type': 'motion',
            'mode': self.config.mode,
            'is_running': self.is_running,
            'accel_samples': self.buffer.accel_sample_count,
            'mag_samples': self.buffer.mag_sample_count,
            'updates_published': self.update_count,
            'degenerate_samples': self.degenerate_count,
            'gated_samples': self.gated_count,
            'heading': round_half_up(current.yaw, decimals) if current else None,
            'pitch': round_half_up(current.pitch, decimals) if current else None,
            'roll': round_half_up(current.roll, decimals) if current else None,
        }

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    def _on_channel(self, channel: str, values: Sequence[float]) -> Optional[OrientationEstimate]:
        allowed = self.gate.should_update()

        with self._publish_lock:
            smoothed = self._update(channel, values, allowed)
            if smoothed is not None:
                self.coordinator.publish(TOPIC_ORIENTATION, smoothed)

        return smoothed

    def _update(self, channel: str, values: Sequence[float], allowed: bool) -> Optional[OrientationEstimate]:
        with self._lock:
            if not self.is_running:
                return None

            if channel == SENSOR_ACCELEROMETER:
                self.buffer.update_accel(values)
            else:
                self.buffer.update_mag(values)

            if not allowed:
                self.gated_count += 1
                return None

            pair = self.buffer.latest()
            if pair is None:
                return None

            raw = self.estimator.estimate(*pair)
            if raw is None:
                self.degenerate_count += 1
                return None

            smoothed = OrientationEstimate(
                yaw=self.yaw_filter.apply(raw.yaw),
                pitch=self.pitch_filter.apply(raw.pitch),
                roll=self.roll_filter.apply(raw.roll),
            )
            self._current = smoothed
            self.update_count += 1

        self._log_update(smoothed)
        return smoothed

    def _log_update(self, orientation: OrientationEstimate):
        level = logging.INFO if self.config.log_every_update else logging.DEBUG
        if logger.isEnabledFor(level):
            logger.log(
                level,
                f"Orientation heading={orientation.yaw:.2f} "
                f"pitch={orientation.pitch:.2f} roll={orientation.roll:.2f}"
            )

    def __repr__(self):
        status = "running" if self.is_running else "stopped"
        return f"<MotionProcessor(status={status}, updates={self.update_count})>"
