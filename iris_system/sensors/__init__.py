"""
Iris System Sensors
Real-time processing of device motion and iris depth

Available Sensors:
- Motion: accelerometer + magnetometer -> smoothed heading, pitch, roll
- Iris depth: MediaPipe left/right iris depth -> face-orientation triangle

All sensors support:
- An update gate queried before every recomputation
- Coordinator-based clock and angle publishing
- Thread-safe state with start()/stop() lifecycle
"""

from .gate import UpdateGate, AlwaysUpdateGate, ScreenLockGate, PredicateGate
from .motion import MotionProcessor, MotionConfig
from .iris_depth import IrisDepthProcessor, IrisDepthConfig

__all__ = [
    # Gates
    'UpdateGate',
    'AlwaysUpdateGate',
    'ScreenLockGate',
    'PredicateGate',

    # Motion (accelerometer + magnetometer)
    'MotionProcessor',
    'MotionConfig',

    # Iris depth
    'IrisDepthProcessor',
    'IrisDepthConfig',
]

__version__ = '1.0.0'
