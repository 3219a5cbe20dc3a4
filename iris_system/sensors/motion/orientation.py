"""
Orientation Estimator
Device heading, pitch and roll from one accelerometer + magnetometer pair

The rotation matrix is built by two-vector alignment:
- gravity (accelerometer) gives the "up" axis A
- the magnetic field crossed with gravity gives the horizontal east axis H
- A x H gives magnetic north M

Rows of R are [H, M, A], mapping device coordinates to world (east, north, up).
Euler angles are then extracted with atan2 so the result is defined over the
full circle for yaw and roll.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .config import MotionConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrientationEstimate:
    """Euler angles in degrees"""
    yaw: float    # heading, rotation about the world up axis
    pitch: float
    roll: float

    def as_tuple(self):
        return (self.yaw, self.pitch, self.roll)


def rotation_matrix(
        accel: Sequence[float],
        mag: Sequence[float],
        min_gravity_norm: float = 0.981,
        min_field_norm: float = 0.1
) -> Optional[np.ndarray]:
    """
    Build the device rotation matrix from gravity and geomagnetic vectors

    Args:
        accel: Accelerometer reading [ax, ay, az] in m/s²
        mag: Magnetometer reading [mx, my, mz] in µT
        min_gravity_norm: Accelerometer magnitude below which the device is
                          treated as in free fall
        min_field_norm: Magnitude of mag x accel below which the vectors are
                        treated as parallel (or the field as missing)

    Returns:
        3x3 rotation matrix, or None if the inputs are degenerate
    """
    a = np.asarray(accel, dtype=float)
    e = np.asarray(mag, dtype=float)

    if not (np.all(np.isfinite(a)) and np.all(np.isfinite(e))):
        return None

    norm_a = np.linalg.norm(a)
    if norm_a < min_gravity_norm:
        return None

    h = np.cross(e, a)
    norm_h = np.linalg.norm(h)
    if norm_h < min_field_norm:
        return None

    h = h / norm_h
    a = a / norm_a
    m = np.cross(a, h)

    return np.vstack((h, m, a))


def euler_from_matrix(r: np.ndarray) -> OrientationEstimate:
    """
    Decompose a rotation matrix into yaw, pitch and roll

    Args:
        r: 3x3 rotation matrix with rows [east, north, up]

    Returns:
        OrientationEstimate in degrees
    """
    yaw = math.atan2(r[0, 1], r[1, 1])
    pitch = math.atan2(-r[2, 1], math.hypot(r[2, 0], r[2, 2]))
    roll = math.atan2(-r[2, 0], r[2, 2])

    return OrientationEstimate(
        yaw=math.degrees(yaw),
        pitch=math.degrees(pitch),
        roll=math.degrees(roll),
    )


class OrientationEstimator:
    """
    Converts paired accelerometer/magnetometer samples into Euler angles.

    Stateless apart from its thresholds; safe to share between threads.
    Degenerate inputs produce None so callers keep their previous output.
    """

    def __init__(self, config: Optional[MotionConfig] = None):
        self.config = config if config else MotionConfig()

    def rotation_matrix(self, accel: Sequence[float], mag: Sequence[float]) -> Optional[np.ndarray]:
        return rotation_matrix(
            accel,
            mag,
            min_gravity_norm=self.config.min_gravity_norm,
            min_field_norm=self.config.min_field_norm,
        )

    def estimate(self, accel: Sequence[float], mag: Sequence[float]) -> Optional[OrientationEstimate]:
        """
        Estimate orientation from one sample pair

        Args:
            accel: [ax, ay, az]
            mag: [mx, my, mz]

        Returns:
            OrientationEstimate in degrees, or None if the pair is degenerate
        """
        r = self.rotation_matrix(accel, mag)
        if r is None:
            logger.debug("Degenerate accel/mag pair, no orientation estimate")
            return None

        estimate = euler_from_matrix(r)
        if not all(math.isfinite(angle) for angle in estimate.as_tuple()):
            logger.debug("Non-finite orientation discarded")
            return None
        return estimate
