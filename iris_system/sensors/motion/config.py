"""
Motion Sensor Configuration
Accelerometer + magnetometer orientation parameters
"""

from dataclasses import dataclass


@dataclass
class MotionConfig:
    """Motion (orientation) processing configuration parameters"""

    # Operating mode
    mode: str = 'session'  # 'calibration' or 'session'

    # Smoothing - one low-pass filter per angle, all with the same alpha
    smoothing_alpha: float = 0.8

    # Degeneracy thresholds for the rotation matrix
    gravity: float = 9.81  # m/s²
    free_fall_fraction: float = 0.1  # below 0.1 g there is no usable gravity direction
    min_field_norm: float = 0.1  # |mag x accel| below this means parallel or missing field

    # Display
    display_decimals: int = 2
    log_every_update: bool = False  # Set based on mode

    def __post_init__(self):
        if not 0.0 < self.smoothing_alpha <= 1.0:
            raise ValueError(f"smoothing_alpha must be in (0, 1], got {self.smoothing_alpha}")
        if self.gravity <= 0.0:
            raise ValueError(f"gravity must be positive, got {self.gravity}")
        if self.free_fall_fraction < 0.0 or self.min_field_norm < 0.0:
            raise ValueError("degeneracy thresholds must be non-negative")

    @property
    def min_gravity_norm(self) -> float:
        """
        Smallest accelerometer magnitude that still defines "down".

        Returns:
            Threshold in m/s².
        """
        return self.free_fall_fraction * self.gravity

    @classmethod
    def for_calibration(cls) -> 'MotionConfig':
        """
        Configuration for checking the sensors by eye.

        Every published orientation is logged at INFO.
        """
        return cls(mode='calibration', log_every_update=True)

    @classmethod
    def for_session(cls) -> 'MotionConfig':
        """Configuration for normal operation (per-update logging at DEBUG only)."""
        return cls(mode='session', log_every_update=False)
