"""Tests for the per-angle exponential smoother."""

from __future__ import annotations

import pytest

from iris_system.sensors.motion.smoother import ExponentialSmoother, WRAPAROUND_THRESHOLD_DEG


def test_first_sample_blends_from_zero():
    smoother = ExponentialSmoother(alpha=0.8)
    assert smoother.apply(10.0) == pytest.approx(8.0)
    assert smoother.apply(10.0) == pytest.approx(9.6)


@pytest.mark.parametrize("alpha", [0.05, 0.3, 0.8, 0.99])
@pytest.mark.parametrize("start", [-150.0, 0.0, 42.0])
def test_converges_to_constant_without_overshoot(alpha, start):
    target = 60.0
    smoother = ExponentialSmoother(alpha=alpha, initial=start)

    previous_gap = abs(target - start)
    for _ in range(2000):
        output = smoother.apply(target)
        gap = abs(target - output)
        assert gap <= previous_gap
        # convex combination: never crosses the target
        assert (output - target) * (start - target) >= 0.0
        previous_gap = gap

    assert smoother.last_output == pytest.approx(target, abs=1e-6)


def test_alpha_one_tracks_input():
    smoother = ExponentialSmoother(alpha=1.0)
    assert smoother.apply(33.0) == 33.0
    assert smoother.apply(-12.5) == -12.5


def test_wraparound_snaps_to_input():
    smoother = ExponentialSmoother(alpha=0.8, initial=179.0)
    assert smoother.apply(-179.0) == -179.0


def test_jump_at_threshold_is_smoothed():
    smoother = ExponentialSmoother(alpha=0.5, initial=0.0)
    output = smoother.apply(WRAPAROUND_THRESHOLD_DEG)
    assert output == pytest.approx(WRAPAROUND_THRESHOLD_DEG / 2)


def test_jump_just_over_threshold_snaps():
    smoother = ExponentialSmoother(alpha=0.5, initial=0.0)
    assert smoother.apply(WRAPAROUND_THRESHOLD_DEG + 0.5) == WRAPAROUND_THRESHOLD_DEG + 0.5


@pytest.mark.parametrize("alpha", [0.0, -0.1, 1.5])
def test_rejects_alpha_outside_unit_interval(alpha):
    with pytest.raises(ValueError):
        ExponentialSmoother(alpha=alpha)


def test_alpha_is_read_only():
    smoother = ExponentialSmoother(alpha=0.4)
    with pytest.raises(AttributeError):
        smoother.alpha = 0.9
    smoother.apply(5.0)
    assert smoother.alpha == 0.4
