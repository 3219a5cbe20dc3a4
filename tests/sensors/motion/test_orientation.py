"""Tests for the accelerometer/magnetometer orientation estimator."""

from __future__ import annotations

import math

import numpy as np
import pytest

from iris_system.sensors.motion.config import MotionConfig
from iris_system.sensors.motion.orientation import (
    OrientationEstimator,
    euler_from_matrix,
    rotation_matrix,
)

G = 9.81
# Field pointing north and down, roughly mid-latitude (µT)
NORTH_DOWN = [0.0, 22.0, -40.0]


@pytest.fixture()
def estimator():
    return OrientationEstimator(MotionConfig())


def test_flat_device_facing_north(estimator):
    estimate = estimator.estimate([0.0, 0.0, G], NORTH_DOWN)

    assert estimate is not None
    assert estimate.yaw == pytest.approx(0.0, abs=1e-9)
    assert estimate.pitch == pytest.approx(0.0, abs=1e-9)
    assert estimate.roll == pytest.approx(0.0, abs=1e-9)


def test_flat_device_with_north_along_x_axis(estimator):
    estimate = estimator.estimate([0.0, 0.0, G], [22.0, 0.0, -40.0])

    assert estimate.yaw == pytest.approx(-90.0)
    assert estimate.pitch == pytest.approx(0.0, abs=1e-9)


def test_pitch_from_tilted_gravity(estimator):
    tilt = math.radians(30.0)
    accel = [0.0, G * math.sin(tilt), G * math.cos(tilt)]

    estimate = estimator.estimate(accel, NORTH_DOWN)

    assert estimate.pitch == pytest.approx(-30.0)
    assert estimate.roll == pytest.approx(0.0, abs=1e-9)


def test_roll_from_tilted_gravity(estimator):
    tilt = math.radians(20.0)
    accel = [G * math.sin(tilt), 0.0, G * math.cos(tilt)]

    estimate = estimator.estimate(accel, NORTH_DOWN)

    assert estimate.roll == pytest.approx(-20.0)
    assert estimate.pitch == pytest.approx(0.0, abs=1e-9)


def test_rotation_matrix_is_orthonormal():
    r = rotation_matrix([0.3, 2.0, 9.5], [10.0, 25.0, -35.0])

    assert r is not None
    np.testing.assert_allclose(r @ r.T, np.eye(3), atol=1e-12)
    assert np.linalg.det(r) == pytest.approx(1.0)


def test_parallel_vectors_give_no_estimate(estimator):
    assert estimator.estimate([0.0, 0.0, G], [0.0, 0.0, 40.0]) is None
    assert estimator.estimate([0.0, 0.0, G], [0.0, 0.0, -40.0]) is None


def test_zero_magnetometer_gives_no_estimate(estimator):
    assert estimator.estimate([0.0, 0.0, G], [0.0, 0.0, 0.0]) is None


def test_free_fall_gives_no_estimate(estimator):
    assert estimator.estimate([0.0, 0.0, 0.5], NORTH_DOWN) is None
    assert estimator.estimate([0.0, 0.0, 0.0], NORTH_DOWN) is None


def test_non_finite_input_gives_no_estimate(estimator):
    assert estimator.estimate([float('nan'), 0.0, G], NORTH_DOWN) is None
    assert estimator.estimate([0.0, 0.0, G], [float('inf'), 0.0, 0.0]) is None


def test_euler_from_identity():
    estimate = euler_from_matrix(np.eye(3))
    assert estimate.as_tuple() == pytest.approx((0.0, 0.0, 0.0))
