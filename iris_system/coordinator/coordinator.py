"""
Sensor Coordinator
Manages lifecycle and shared services of the iris system processors
"""

import logging
from typing import Dict, Optional, Any

from .clock import CentralClock
from .publisher import AnglePublisher

logger = logging.getLogger(__name__)


class SensorCoordinator:
    """
    Coordinates the motion and iris depth processors

    Responsibilities:
    - Manage processor lifecycle (start/stop)
    - Provide the shared clock and publisher
    - Track processor status
    - Handle graceful shutdown
    """

    def __init__(
            self,
            clock: Optional[CentralClock] = None,
            publisher: Optional[AnglePublisher] = None
    ):
        """
        Initialize sensor coordinator

        Args:
            clock: Shared clock; a new one is created if omitted
            publisher: Shared publisher; a new one is created if omitted
        """
        self.clock = clock if clock else CentralClock()
        self.publisher = publisher if publisher else AnglePublisher()

        # Sensor registry
        self.sensors: Dict[str, Any] = {}
        self.sensor_configs: Dict[str, Any] = {}

        logger.info("Sensor Coordinator initialized")

    def get_central_timestamp(self):
        """
        Get synchronized timestamp for published updates

        Returns:
            datetime: Current synchronized timestamp
        """
        return self.clock.now()

    def publish(self, topic: str, payload: Any, timestamp: Any = None):
        """Publish on the shared publisher, stamping with the central clock if needed."""
        if timestamp is None:
            timestamp = self.get_central_timestamp()
        self.publisher.publish(topic, payload, timestamp)

    def register_sensor(self, sensor_name: str, sensor_instance: Any, config: Optional[Any] = None):
        """
        Register a sensor with the coordinator

        Args:
            sensor_name: Unique identifier for sensor (e.g., 'motion', 'iris_depth')
            sensor_instance: Processor instance exposing start()/stop()
            config: Optional sensor configuration
        """
        if sensor_name in self.sensors:
            logger.warning(f"Sensor '{sensor_name}' already registered, replacing")

        self.sensors[sensor_name] = sensor_instance
        if config:
            self.sensor_configs[sensor_name] = config

        logger.info(f"✓ Registered sensor: {sensor_name}")

    def start_sensor(self, sensor_name: str):
        """
        Start a registered sensor

        Args:
            sensor_name: Name of sensor to start

        Raises:
            ValueError: If the sensor is not registered
        """
        if sensor_name not in self.sensors:
            logger.error(f"Sensor '{sensor_name}' not registered")
            raise ValueError(f"Unknown sensor: {sensor_name}")

        try:
            self.sensors[sensor_name].start()
            logger.info(f"✓ Started sensor: {sensor_name}")
        except Exception as e:
            logger.error(f"✗ Failed to start sensor '{sensor_name}': {e}", exc_info=True)
            raise

    def stop_sensor(self, sensor_name: str):
        """
        Stop a registered sensor

        Args:
            sensor_name: Name of sensor to stop
        """
        if sensor_name not in self.sensors:
            logger.warning(f"Sensor '{sensor_name}' not registered")
            return

        try:
            self.sensors[sensor_name].stop()
            logger.info(f"✓ Stopped sensor: {sensor_name}")
        except Exception as e:
            logger.error(f"✗ Error stopping sensor '{sensor_name}': {e}", exc_info=True)

    def stop_all_sensors(self):
        """Stop all registered sensors"""
        logger.info(f"Stopping {len(self.sensors)} sensors...")

        for sensor_name in self.sensors:
            self.stop_sensor(sensor_name)

        logger.info("✓ All sensors stopped")

    def get_sensor_status(self, sensor_name: str) -> Optional[dict]:
        """
        Get status of a specific sensor

        Args:
            sensor_name: Name of sensor

        Returns:
            dict: Sensor status or None if not found
        """
        if sensor_name not in self.sensors:
            return None

        sensor = self.sensors[sensor_name]
        if hasattr(sensor, 'get_status'):
            return sensor.get_status()

        return {'sensor_name': sensor_name, 'registered': True}

    def get_all_status(self) -> Dict[str, dict]:
        return {name: self.get_sensor_status(name) for name in self.sensors}

    def get_coordinator_status(self) -> dict:
        """
        Get overall coordinator status

        Returns:
            dict: Coordinator status information
        """
        return {
            'registered_sensors': list(self.sensors.keys()),
            'sensor_count': len(self.sensors),
            'clock_stats': self.clock.get_stats(),
            'published_updates': self.publisher.publish_count,
            'sensors': self.get_all_status(),
        }

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - cleanup"""
        self.stop_all_sensors()

    def __repr__(self):
        return f"<SensorCoordinator(sensors={len(self.sensors)})>"
