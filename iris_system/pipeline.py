"""
Iris System - Sensor Pipeline
==============================
Central module that owns the lifecycle of both processors.

Usage in the host application:
    pipeline = SensorPipeline(gate=ScreenLockGate(keyguard.is_locked))
    pipeline.subscribe('orientation', show_orientation)
    pipeline.subscribe('triangle', show_face_angles)
    pipeline.start()

    # sensor framework callback
    pipeline.on_sensor_changed('accelerometer', values)

    # camera started (may be called on every resume)
    side_packets = pipeline.on_camera_started(graph, focal_length_px)

    pipeline.stop()

Sensors managed:
    - motion      : accelerometer + magnetometer -> heading / pitch / roll
    - iris_depth  : MediaPipe left/right iris depth -> face triangle angles

Failure policy:
    If a processor fails to initialise, it is skipped and recorded in
    get_status()['failed_sensors']. The pipeline continues with whichever
    processors are available; events for a missing processor are dropped.
"""

import logging
from typing import Any, Callable, Dict, Optional, Sequence

from iris_system.coordinator import CentralClock, SensorCoordinator
from iris_system.sensors.gate import as_gate

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Sensor names used in the coordinator registry
# ---------------------------------------------------------------------------
SENSOR_MOTION      = 'motion'
SENSOR_IRIS_DEPTH  = 'iris_depth'


class SensorPipeline:
    """
    Owns the motion and iris depth processors for one host application.

    Responsibilities:
      - Build each processor with its config and the shared update gate
      - Register them with the SensorCoordinator
      - Route sensor and depth events to the right processor
      - Wire the MediaPipe graph exactly once, however often the camera restarts
      - Report which processors are active via get_status()
    """

    def __init__(
        self,
        clock: Optional[CentralClock] = None,
        gate=None,
        motion_config=None,
        depth_config=None,
    ):
        """
        Args:
            clock         : Shared CentralClock; a new one is created if omitted
            gate          : UpdateGate or zero-argument callable shared by both processors
            motion_config : MotionConfig, defaults to MotionConfig.for_session()
            depth_config  : IrisDepthConfig, defaults to IrisDepthConfig.for_session()
        """
        self.clock = clock if clock else CentralClock()
        self.gate = as_gate(gate)
        self.motion_config = motion_config
        self.depth_config = depth_config

        self.coordinator = SensorCoordinator(clock=self.clock)

        self._active_sensors: list = []
        self._failed_sensors: list = []

        self.motion_processor = None
        self.iris_depth_processor = None

        self._graph_attached = False
        self._side_packets: Dict[str, Any] = {}

        logger.info("SensorPipeline created")

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def start(self):
        """
        Initialise and start both processors.
        Failed processors are logged and skipped.
        """
        logger.info("=" * 55)
        logger.info("  Iris Sensor Pipeline — starting")
        logger.info("=" * 55)

        if self.motion_processor is None:
            self._init_motion()
        else:
            self.coordinator.start_sensor(SENSOR_MOTION)

        if self.iris_depth_processor is None:
            self._init_iris_depth()
        else:
            self.coordinator.start_sensor(SENSOR_IRIS_DEPTH)

        logger.info(
            f"Pipeline ready — active: {self._active_sensors or 'none'} | "
            f"failed: {self._failed_sensors or 'none'}"
        )

    def stop(self):
        """
        Stop accepting events and discard buffered samples.
        """
        logger.info("Stopping sensor pipeline...")
        self.coordinator.stop_all_sensors()
        logger.info("✓ Sensor pipeline stopped")

    def subscribe(self, topic: str, callback: Callable[[Any, Any], None]):
        """Subscribe to 'orientation', 'depth' or 'triangle' updates."""
        self.coordinator.publisher.subscribe(topic, callback)

    def on_sensor_changed(self, sensor_type: str, values: Sequence[float]):
        """Forward a raw motion sensor event."""
        if self.motion_processor is None:
            logger.debug("Motion processor unavailable, dropping sensor event")
            return None
        return self.motion_processor.on_sensor_changed(sensor_type, values)

    def on_depth(self, side: str, raw_value: float, timestamp: Any = None):
        """Forward a raw iris depth value (tenths of a millimetre)."""
        if self.iris_depth_processor is None:
            logger.debug("Iris depth processor unavailable, dropping depth event")
            return None
        return self.iris_depth_processor.on_depth(side, raw_value, timestamp)

    def on_camera_started(
        self,
        graph,
        focal_length_px: Optional[float] = None,
        get_float: Optional[Callable] = None,
        create_float: Optional[Callable] = None,
    ) -> Dict[str, Any]:
        """
        Wire the iris graph the first time the camera starts.

        The host calls this on every camera start (each resume); the side
        packets are built and the depth streams observed only once.

        Args:
            graph           : MediaPipe CalculatorGraph (or compatible object)
            focal_length_px : Camera focal length in pixels, None if unknown
            get_float       : Optional packet reader override
            create_float    : Optional packet factory override

        Returns:
            Input side packets to pass to graph.start_run()
        """
        if self._graph_attached:
            return self._side_packets

        if self.iris_depth_processor is None:
            logger.warning("Iris depth processor unavailable, graph not attached")
            return {}

        from iris_system.sensors.iris_depth.graph import attach_depth_streams, build_side_packets

        config = self.iris_depth_processor.config
        self._side_packets = build_side_packets(focal_length_px, config, create_float=create_float)
        attach_depth_streams(graph, self.iris_depth_processor, config, get_float=get_float)
        self._graph_attached = True

        logger.info("✓ Iris graph attached")
        return self._side_packets

    def get_status(self) -> dict:
        """
        Return a summary of processor states for logging / UI display.
        """
        return {
            'active_sensors' : self._active_sensors,
            'failed_sensors' : self._failed_sensors,
            'graph_attached' : self._graph_attached,
            'coordinator'    : self.coordinator.get_coordinator_status(),
        }

    # -----------------------------------------------------------------------
    # Private: processor initialisation helpers
    # -----------------------------------------------------------------------

    def _init_motion(self):
        """Initialise the accelerometer/magnetometer orientation processor."""
        sensor_name = SENSOR_MOTION
        try:
            from iris_system.sensors.motion.config import MotionConfig
            from iris_system.sensors.motion.processor import MotionProcessor

            config = self.motion_config or MotionConfig.for_session()
            processor = MotionProcessor(
                coordinator=self.coordinator,
                config=config,
                gate=self.gate,
            )

            self.coordinator.register_sensor(sensor_name, processor, config)
            self.coordinator.start_sensor(sensor_name)

            self.motion_processor = processor
            self._mark_active(sensor_name)
            logger.info(f"✓ Motion initialised (alpha={config.smoothing_alpha})")

        except Exception as e:
            self._handle_sensor_failure(sensor_name, e)

    def _init_iris_depth(self):
        """Initialise the iris depth triangulation processor."""
        sensor_name = SENSOR_IRIS_DEPTH
        try:
            from iris_system.sensors.iris_depth.config import IrisDepthConfig
            from iris_system.sensors.iris_depth.processor import IrisDepthProcessor

            config = self.depth_config or IrisDepthConfig.for_session()
            processor = IrisDepthProcessor(
                coordinator=self.coordinator,
                config=config,
                gate=self.gate,
            )

            self.coordinator.register_sensor(sensor_name, processor, config)
            self.coordinator.start_sensor(sensor_name)

            self.iris_depth_processor = processor
            self._mark_active(sensor_name)
            logger.info(f"✓ Iris depth initialised (baseline={config.baseline_mm})")

        except Exception as e:
            self._handle_sensor_failure(sensor_name, e)

    def _mark_active(self, sensor_name: str):
        """Record a processor as running; a successful retry clears its failure."""
        if sensor_name in self._failed_sensors:
            self._failed_sensors.remove(sensor_name)
        if sensor_name not in self._active_sensors:
            self._active_sensors.append(sensor_name)

    def _handle_sensor_failure(self, sensor_name: str, exc: Exception):
        """
        Mark a processor as skipped. The pipeline keeps running without it,
        and the next start() retries its initialisation.
        """
        if sensor_name not in self._failed_sensors:
            self._failed_sensors.append(sensor_name)
        logger.warning(
            f"⚠ {sensor_name} failed to initialise — skipping. "
            f"Error: {type(exc).__name__}: {exc}"
        )

    # -----------------------------------------------------------------------
    # Dunder helpers
    # -----------------------------------------------------------------------

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()

    def __repr__(self):
        return (
            f"<SensorPipeline("
            f"active={self._active_sensors}, "
            f"failed={self._failed_sensors})>"
        )
