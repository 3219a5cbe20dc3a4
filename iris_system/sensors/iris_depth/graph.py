"""
MediaPipe Graph Adapter
Connects the iris tracking graph's depth streams to an IrisDepthProcessor

The graph itself (camera frames, face mesh, iris landmark models) runs
outside this package. Only two things cross the boundary:
- the focal length side packet the iris graph needs to estimate depth
- the left/right depth output streams, observed here and forwarded

MediaPipe is imported lazily so the rest of the package works without it;
packet readers/creators can be injected for other graph runtimes and tests.
"""

import logging
from typing import Any, Callable, Dict, Optional, TYPE_CHECKING

import numpy as np

from .config import IrisDepthConfig
from .processor import SIDE_LEFT, SIDE_RIGHT
from .utils import format_landmarks, landmark_count

if TYPE_CHECKING:
    from .processor import IrisDepthProcessor

logger = logging.getLogger(__name__)

# Camera helpers report this when the focal length is unknown
FOCAL_LENGTH_UNKNOWN = float(np.finfo(np.float32).smallest_subnormal)


def _mediapipe_packet_getter():
    from mediapipe.python import packet_getter
    return packet_getter


def _mediapipe_packet_creator():
    from mediapipe.python import packet_creator
    return packet_creator


def build_side_packets(
        focal_length_px: Optional[float],
        config: Optional[IrisDepthConfig] = None,
        create_float: Optional[Callable[[float], Any]] = None
) -> Dict[str, Any]:
    """
    Build the input side packets for the iris graph

    Args:
        focal_length_px: Camera focal length in pixels, or None / the unknown sentinel
        config: Stream naming
        create_float: Packet factory; defaults to mediapipe packet_creator.create_float

    Returns:
        {side_packet_name: packet}, or {} when the focal length is unknown
    """
    config = config if config else IrisDepthConfig()

    if focal_length_px is None or focal_length_px == FOCAL_LENGTH_UNKNOWN:
        logger.warning("Focal length unknown, graph will run without focal length side packet")
        return {}

    if create_float is None:
        create_float = _mediapipe_packet_creator().create_float

    logger.debug(f"Focal length side packet: {focal_length_px}")
    return {config.focal_length_side_packet: create_float(float(focal_length_px))}


def attach_depth_streams(
        graph,
        processor: 'IrisDepthProcessor',
        config: Optional[IrisDepthConfig] = None,
        get_float: Optional[Callable[[Any], float]] = None,
        get_proto: Optional[Callable[[Any], Any]] = None
) -> list:
    """
    Observe the depth (and optionally landmark) streams of a graph

    Args:
        graph: Object with observe_output_stream(name, callback(stream_name, packet)),
               e.g. mediapipe CalculatorGraph
        processor: Receives the depth values
        config: Stream naming and landmark logging switch
        get_float: Reads a float from a packet; defaults to mediapipe packet_getter.get_float
        get_proto: Reads a proto from a packet; defaults to mediapipe packet_getter.get_proto

    Returns:
        Names of the streams that were observed
    """
    config = config if config else processor.config

    want_landmarks = config.log_landmarks and logger.isEnabledFor(logging.DEBUG)

    if get_float is None or (get_proto is None and want_landmarks):
        packet_getter = _mediapipe_packet_getter()
        get_float = get_float or packet_getter.get_float
        get_proto = get_proto or packet_getter.get_proto

    def depth_callback(side: str):
        def on_packet(stream_name, packet):
            try:
                value = get_float(packet)
            except Exception as e:
                logger.error(f"Could not read {stream_name} packet: {e}", exc_info=True)
                return
            processor.on_depth(side, value, getattr(packet, 'timestamp', None))
        return on_packet

    graph.observe_output_stream(config.left_depth_stream, depth_callback(SIDE_LEFT))
    graph.observe_output_stream(config.right_depth_stream, depth_callback(SIDE_RIGHT))
    observed = [config.left_depth_stream, config.right_depth_stream]

    if want_landmarks:
        def on_landmarks(stream_name, packet):
            timestamp = getattr(packet, 'timestamp', None)
            try:
                landmarks = get_proto(packet)
            except Exception as e:
                logger.error(f"Couldn't parse landmarks - {e}")
                return
            if landmarks is None:
                logger.debug(f"[TS:{timestamp}] No landmarks.")
                return
            logger.debug(
                f"[TS:{timestamp}] #Landmarks for face (including iris): {landmark_count(landmarks)}"
            )
            logger.debug(format_landmarks(landmarks))

        graph.observe_output_stream(config.landmarks_stream, on_landmarks)
        observed.append(config.landmarks_stream)

    logger.info(f"✓ Observing graph streams: {observed}")
    return observed
