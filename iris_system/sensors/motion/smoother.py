"""
Exponential low-pass smoothing for angle channels
"""

WRAPAROUND_THRESHOLD_DEG = 170.0


class ExponentialSmoother:
    """
    Per-channel low-pass filter with a discontinuity override.

    Each call blends the new input into the last output with a fixed alpha;
    a smaller alpha means more smoothing. When the input jumps by more than
    170 degrees from the last output (yaw crossing +/-180, for example) the
    filter snaps to the input instead of interpolating through the wrong
    side of the circle.

    Usage:
        yaw_filter = ExponentialSmoother(alpha=0.8)
        smoothed = yaw_filter.apply(raw_yaw)
    """

    def __init__(self, alpha: float, initial: float = 0.0):
        """
        Args:
            alpha: Smoothing coefficient in (0, 1]; fixed for the lifetime of the filter
            initial: Starting output value
        """
        if not 0.0 < alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        self._alpha = float(alpha)
        self.last_output = float(initial)

    @property
    def alpha(self) -> float:
        return self._alpha

    def apply(self, value: float) -> float:
        """
        Feed one sample.

        Args:
            value: New raw angle in degrees

        Returns:
            Smoothed angle in degrees
        """
        if abs(value - self.last_output) > WRAPAROUND_THRESHOLD_DEG:
            self.last_output = value
        else:
            self.last_output = self.last_output + self._alpha * (value - self.last_output)
        return self.last_output

    def __repr__(self):
        return f"<ExponentialSmoother(alpha={self._alpha}, last={self.last_output:.3f})>"
