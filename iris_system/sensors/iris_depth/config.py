"""
Iris Depth Configuration
Triangulation baseline and MediaPipe stream names
"""

from dataclasses import dataclass


@dataclass
class IrisDepthConfig:
    """Iris depth / face orientation configuration parameters"""

    # Operating mode
    mode: str = 'session'  # 'calibration' or 'session'

    # Geometry
    baseline_mm: float = 6.3       # interocular distance, same units as the depths
    depth_scale: float = 10.0      # graph reports tenths of a millimetre

    # MediaPipe graph streams (iris tracking graph)
    left_depth_stream: str = 'left_iris_depth_mm'
    right_depth_stream: str = 'right_iris_depth_mm'
    landmarks_stream: str = 'iris_landmarks'
    focal_length_side_packet: str = 'focal_length_pixel'

    # Logging
    log_landmarks: bool = False    # observe the landmark stream when DEBUG is on
    log_every_update: bool = False  # Set based on mode
    display_decimals: int = 2

    def __post_init__(self):
        if self.baseline_mm <= 0.0:
            raise ValueError(f"baseline_mm must be positive, got {self.baseline_mm}")
        if self.depth_scale <= 0.0:
            raise ValueError(f"depth_scale must be positive, got {self.depth_scale}")

    @classmethod
    def for_calibration(cls) -> 'IrisDepthConfig':
        """Log every depth and triangle at INFO and dump landmarks at DEBUG."""
        return cls(mode='calibration', log_every_update=True, log_landmarks=True)

    @classmethod
    def for_session(cls) -> 'IrisDepthConfig':
        return cls(mode='session', log_every_update=False)
