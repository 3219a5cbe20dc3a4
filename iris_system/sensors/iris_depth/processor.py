"""
Iris Depth Processor
Receives left/right iris depth callbacks from the MediaPipe graph,
publishes each converted depth and the face-orientation triangle
"""

import logging
import math
import threading
from dataclasses import dataclass
from typing import Any, Optional, TYPE_CHECKING

from iris_system.coordinator import SensorCoordinator, TOPIC_DEPTH, TOPIC_TRIANGLE

from ..gate import as_gate
from ..utils import round_half_up
from .config import IrisDepthConfig
from .triangulator import DepthPair, TriangleAngles, solve_pair

if TYPE_CHECKING:
    from ..gate import UpdateGate

logger = logging.getLogger(__name__)

SIDE_LEFT = 'left'
SIDE_RIGHT = 'right'


@dataclass(frozen=True)
class DepthReading:
    """One converted depth callback"""
    side: str
    depth_mm: float
    timestamp: Any = None  # opaque graph timestamp, only logged


class IrisDepthProcessor:
    """
    Face-orientation proxy from two monocular iris depths

    Left and right depths arrive independently, possibly on a different
    thread from the motion sensors. Both scalars are stored under
    self._lock; after each accepted update, if both sides are known, a fresh
    DepthPair is triangulated. The reading and the angles are published
    after self._lock is released, under self._publish_lock, so subscribers
    see updates in order and may read either processor's state. Pairs that
    do not form a triangle publish no angles and the last good angles remain.
    """

    def __init__(
            self,
            coordinator: Optional[SensorCoordinator] = None,
            config: Optional[IrisDepthConfig] = None,
            gate: Optional['UpdateGate'] = None
    ):
        """
        Initialise the iris depth processor.

        Args:
            coordinator: Provides the clock and publisher; a private one is created if omitted
            config: IrisDepthConfig instance. Defaults to IrisDepthConfig.for_session()
            gate: UpdateGate or zero-argument callable; defaults to always updating
        """
        self.coordinator = coordinator if coordinator else SensorCoordinator()
        self.config = config if config else IrisDepthConfig.for_session()
        self.gate = as_gate(gate)

        self._lock = threading.Lock()
        self._publish_lock = threading.RLock()
        self._left_mm: Optional[float] = None
        self._right_mm: Optional[float] = None
        self._angles: Optional[TriangleAngles] = None

        self.is_running = False
        self.sample_count = 0
        self.triangle_count = 0
        self.rejected_count = 0

        logger.info(f"IrisDepthProcessor initialised (baseline={self.config.baseline_mm})")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def start(self):
        if self.is_running:
            logger.warning("IrisDepthProcessor already running")
            return

        with self._lock:
            self.is_running = True
            self.sample_count = 0
            self.triangle_count = 0
            self.rejected_count = 0

        logger.info("✓ IrisDepthProcessor started")

    def stop(self):
        """
        Stop accepting depth callbacks and forget the stored depths.

        Returns:
            None.
        """
        if not self.is_running:
            return

        with self._lock:
            self.is_running = False
            self._left_mm = None
            self._right_mm = None

        logger.info(
            f"✓ IrisDepthProcessor stopped — {self.sample_count} depths, "
            f"{self.triangle_count} triangles"
        )

    def on_depth(self, side: str, raw_value: float, timestamp: Any = None) -> Optional[TriangleAngles]:
        """
        Handle one depth callback.

        Args:
            side:      'left' or 'right'.
            raw_value: Depth as reported by the graph, in tenths of a millimetre.
            timestamp: Graph timestamp, used only for logging.

        Returns:
            TriangleAngles if this update produced a valid triangle, else None.

        Raises:
            ValueError: If side is not 'left' or 'right'.
        """
        if side not in (SIDE_LEFT, SIDE_RIGHT):
            raise ValueError(f"Unknown depth side: {side!r}")

        if not self.gate.should_update():
            return None

        with self._publish_lock:
            reading, angles = self._update(side, raw_value, timestamp)
            if reading is not None:
                self.coordinator.publish(TOPIC_DEPTH, reading)
            if angles is not None:
                self.coordinator.publish(TOPIC_TRIANGLE, angles)

        return angles

    def _update(self, side: str, raw_value: float, timestamp: Any):
        """Store one depth and triangulate; returns (DepthReading, TriangleAngles), either may be None."""
        with self._lock:
            if not self.is_running:
                return None, None

            depth_mm = float(raw_value) / self.config.depth_scale
            if not math.isfinite(depth_mm):
                self.rejected_count += 1
                logger.debug(f"[TS:{timestamp}] Ignoring non-finite {side} depth")
                return None, None

            if side == SIDE_LEFT:
                self._left_mm = depth_mm
            else:
                self._right_mm = depth_mm
            self.sample_count += 1

            reading = DepthReading(side=side, depth_mm=depth_mm, timestamp=timestamp)
            self._log(f"[TS:{timestamp}] {side} depth {depth_mm:.2f}")

            if self._left_mm is None or self._right_mm is None:
                return reading, None

            angles = solve_pair(DepthPair(
                left_mm=self._left_mm,
                right_mm=self._right_mm,
                baseline_mm=self.config.baseline_mm,
            ))
            if angles is None:
                self.rejected_count += 1
                return reading, None

            self._angles = angles
            self.triangle_count += 1

        self._log(
            f"Triangle alpha={angles.alpha:.2f} beta={angles.beta:.2f} gamma={angles.gamma:.2f}"
        )
        return reading, angles

    def on_left_depth(self, raw_value: float, timestamp: Any = None) -> Optional[TriangleAngles]:
        return self.on_depth(SIDE_LEFT, raw_value, timestamp)

    def on_right_depth(self, raw_value: float, timestamp: Any = None) -> Optional[TriangleAngles]:
        return self.on_depth(SIDE_RIGHT, raw_value, timestamp)

    def get_current_depths(self):
        """
        Thread-safe read of the latest depths.

        Returns:
            Tuple of (left_mm, right_mm); either may be None.
        """
        with self._lock:
            return (self._left_mm, self._right_mm)

    def get_current_angles(self) -> Optional[TriangleAngles]:
        with self._lock:
            return self._angles

    def get_status(self) -> dict:
        left, right = self.get_current_depths()
        angles = self.get_current_angles()
        decimals = self.config.display_decimals
        return {
            'sensor_type':       'iris_depth',
            'mode':              self.config.mode,
            'is_running':        self.is_running,
            'samples_collected': self.sample_count,
            'triangles':         self.triangle_count,
            'rejected':          self.rejected_count,
            'left_depth_mm':     round_half_up(left, decimals),
            'right_depth_mm':    round_half_up(right, decimals),
            'angles': (
                tuple(round_half_up(a, decimals) for a in angles.as_tuple()) if angles else None
            ),
        }

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    def _log(self, message: str):
        level = logging.INFO if self.config.log_every_update else logging.DEBUG
        logger.log(level, message)

    def __repr__(self):
        status = "running" if self.is_running else "stopped"
        return f"<IrisDepthProcessor(status={status}, samples={self.sample_count})>"
