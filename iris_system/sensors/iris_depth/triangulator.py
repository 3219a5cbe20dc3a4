"""
Depth Triangulator
Interior angles of the triangle formed by the two iris depths and the
interocular baseline, via the law of cosines

Sides: left depth, right depth and the baseline between the eyes.
- alpha: angle between the baseline and the right-eye ray
- beta:  angle at the camera, between the two rays
- gamma: the remaining angle, 180 - alpha - beta
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DepthPair:
    """One triangulation input, built fresh for every attempt"""
    left_mm: float
    right_mm: float
    baseline_mm: float = 6.3

    @property
    def difference(self) -> float:
        return abs(self.left_mm - self.right_mm)

    def is_valid(self) -> bool:
        """
        Check whether the pair can form a triangle.

        Returns:
            True if all sides are finite and positive and |left - right| < baseline
        """
        sides = (self.left_mm, self.right_mm, self.baseline_mm)
        if not all(math.isfinite(side) and side > 0.0 for side in sides):
            return False
        return self.difference < self.baseline_mm


@dataclass(frozen=True)
class TriangleAngles:
    """Triangle angles in degrees"""
    alpha: float
    beta: float
    gamma: float

    @property
    def total(self) -> float:
        return self.alpha + self.beta + self.gamma

    def as_tuple(self):
        return (self.alpha, self.beta, self.gamma)


def _clamped_acos_deg(cosine: float) -> float:
    # Measurement noise can push the cosine just outside [-1, 1]
    return math.degrees(math.acos(float(np.clip(cosine, -1.0, 1.0))))


def solve_pair(pair: DepthPair) -> Optional[TriangleAngles]:
    """
    Triangulate a DepthPair

    Args:
        pair: Left/right depth and baseline

    Returns:
        TriangleAngles in degrees, or None if the pair cannot form a triangle
    """
    if not pair.is_valid():
        logger.debug(
            f"No triangle for left={pair.left_mm} right={pair.right_mm} "
            f"baseline={pair.baseline_mm}"
        )
        return None

    left, right, baseline = pair.left_mm, pair.right_mm, pair.baseline_mm

    cos_alpha = (left ** 2 - baseline ** 2 - right ** 2) / (-2.0 * baseline * right)
    cos_beta = (baseline ** 2 - left ** 2 - right ** 2) / (-2.0 * left * right)

    alpha = _clamped_acos_deg(cos_alpha)
    beta = _clamped_acos_deg(cos_beta)
    gamma = 180.0 - alpha - beta

    return TriangleAngles(alpha=alpha, beta=beta, gamma=gamma)


def solve(left: float, right: float, baseline: float = 6.3) -> Optional[TriangleAngles]:
    """
    Triangulate two depths against a fixed baseline

    Args:
        left: Left iris depth (mm)
        right: Right iris depth (mm)
        baseline: Interocular distance (mm)

    Returns:
        TriangleAngles in degrees, or None when |left - right| >= baseline
        or any side is not a finite positive number
    """
    return solve_pair(DepthPair(left_mm=left, right_mm=right, baseline_mm=baseline))
