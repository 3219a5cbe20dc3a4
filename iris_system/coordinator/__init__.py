"""
Iris System Sensor Coordinator
Manages processor lifecycle, the shared clock and angle publishing
"""

from .clock import CentralClock
from .coordinator import SensorCoordinator
from .publisher import AnglePublisher, TOPIC_ORIENTATION, TOPIC_DEPTH, TOPIC_TRIANGLE

__all__ = [
    'CentralClock',
    'SensorCoordinator',
    'AnglePublisher',
    'TOPIC_ORIENTATION',
    'TOPIC_DEPTH',
    'TOPIC_TRIANGLE',
]

__version__ = '1.0.0'
