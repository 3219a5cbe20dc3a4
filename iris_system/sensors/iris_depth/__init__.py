"""
Iris Depth Module for Iris System
Face-orientation proxy from MediaPipe iris depth estimates

Architecture:
- DepthPair / solve:       Law-of-cosines triangle from two depths and the baseline
- IrisDepthProcessor:      Stores left/right depths, triangulates, publishes
- attach_depth_streams:    Wires a MediaPipe graph's depth streams to the processor
- build_side_packets:      Focal length side packet for the iris graph
- IrisDepthConfig:         Configuration parameters

Usage:
    processor = IrisDepthProcessor(coordinator, IrisDepthConfig.for_session())
    processor.start()
    graph.start_run(build_side_packets(focal_length_px))
    attach_depth_streams(graph, processor)
    angles = processor.get_current_angles()
    processor.stop()
"""

from .config import IrisDepthConfig
from .graph import attach_depth_streams, build_side_packets, FOCAL_LENGTH_UNKNOWN
from .processor import IrisDepthProcessor, DepthReading, SIDE_LEFT, SIDE_RIGHT
from .triangulator import DepthPair, TriangleAngles, solve, solve_pair
from .utils import format_landmarks

__all__ = [
    'IrisDepthConfig',
    'IrisDepthProcessor',
    'DepthReading',
    'SIDE_LEFT',
    'SIDE_RIGHT',
    'DepthPair',
    'TriangleAngles',
    'solve',
    'solve_pair',
    'attach_depth_streams',
    'build_side_packets',
    'FOCAL_LENGTH_UNKNOWN',
    'format_landmarks',
]

__version__ = '1.0.0'
