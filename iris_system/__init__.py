"""
Iris System
Device orientation and iris-depth face orientation for the iris tracking prototype
"""

from .pipeline import SensorPipeline, SENSOR_MOTION, SENSOR_IRIS_DEPTH

__all__ = [
    'SensorPipeline',
    'SENSOR_MOTION',
    'SENSOR_IRIS_DEPTH',
]

__version__ = '1.0.0'
