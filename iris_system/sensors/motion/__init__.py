"""
Motion Sensor Module for Iris System
Device orientation from accelerometer + magnetometer

Architecture:
- SampleBuffer: Latest reading per channel, updated independently
- OrientationEstimator: Rotation matrix + Euler angles from one sample pair
- ExponentialSmoother: Per-angle low-pass filter with wraparound snap
- MotionProcessor: Gate -> buffer -> estimate -> smooth -> publish

Usage:
    processor = MotionProcessor(coordinator, MotionConfig.for_session(), gate)
    processor.start()
    processor.on_sensor_changed('accelerometer', [0.0, 0.0, 9.81])
    processor.on_sensor_changed('magnetic_field', [0.0, 22.0, -40.0])
    processor.get_current_orientation()
    processor.stop()
"""

from .buffer import SampleBuffer
from .config import MotionConfig
from .orientation import OrientationEstimate, OrientationEstimator, rotation_matrix, euler_from_matrix
from .processor import MotionProcessor, SENSOR_ACCELEROMETER, SENSOR_MAGNETIC_FIELD
from .smoother import ExponentialSmoother, WRAPAROUND_THRESHOLD_DEG

__all__ = [
    'SampleBuffer',
    'MotionConfig',
    'OrientationEstimate',
    'OrientationEstimator',
    'rotation_matrix',
    'euler_from_matrix',
    'MotionProcessor',
    'SENSOR_ACCELEROMETER',
    'SENSOR_MAGNETIC_FIELD',
    'ExponentialSmoother',
    'WRAPAROUND_THRESHOLD_DEG',
]

__version__ = '1.0.0'
