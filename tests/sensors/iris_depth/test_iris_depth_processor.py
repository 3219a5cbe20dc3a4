"""Tests for the iris depth processor."""

from __future__ import annotations

import threading

import pytest

from iris_system.coordinator import SensorCoordinator, TOPIC_DEPTH, TOPIC_TRIANGLE
from iris_system.sensors.iris_depth.config import IrisDepthConfig
from iris_system.sensors.iris_depth.processor import DepthReading, IrisDepthProcessor
from iris_system.sensors.iris_depth.triangulator import solve


@pytest.fixture()
def coordinator():
    return SensorCoordinator()


@pytest.fixture()
def topics(coordinator):
    received = {TOPIC_DEPTH: [], TOPIC_TRIANGLE: []}
    for topic, sink in received.items():
        coordinator.publisher.subscribe(topic, lambda payload, ts, sink=sink: sink.append(payload))
    return received


@pytest.fixture()
def processor(coordinator):
    proc = IrisDepthProcessor(coordinator=coordinator)
    proc.start()
    return proc


def test_raw_values_are_converted_from_tenths_of_mm(processor, topics):
    processor.on_depth('left', 503.0, timestamp=1000)

    assert processor.get_current_depths() == (pytest.approx(50.3), None)
    assert topics[TOPIC_DEPTH] == [DepthReading(side='left', depth_mm=pytest.approx(50.3), timestamp=1000)]
    assert topics[TOPIC_TRIANGLE] == []


def test_triangle_published_once_both_sides_known(processor, topics):
    assert processor.on_left_depth(500.0) is None
    angles = processor.on_right_depth(500.0)

    assert angles == solve(50.0, 50.0, 6.3)
    assert topics[TOPIC_TRIANGLE] == [angles]
    assert angles.total == pytest.approx(180.0)


def test_invalid_pair_keeps_last_good_angles(processor, topics):
    processor.on_left_depth(500.0)
    good = processor.on_right_depth(500.0)

    assert processor.on_left_depth(1000.0) is None

    assert processor.get_current_angles() == good
    assert len(topics[TOPIC_TRIANGLE]) == 1
    assert len(topics[TOPIC_DEPTH]) == 3
    assert processor.rejected_count == 1


def test_each_update_triangulates_with_latest_values(processor):
    processor.on_left_depth(500.0)
    processor.on_right_depth(500.0)

    angles = processor.on_right_depth(520.0)

    assert angles == solve(50.0, 52.0, 6.3)


def test_non_finite_depth_is_ignored(processor, topics):
    processor.on_left_depth(500.0)
    assert processor.on_left_depth(float('nan')) is None

    assert processor.get_current_depths()[0] == pytest.approx(50.0)
    assert len(topics[TOPIC_DEPTH]) == 1


def test_unknown_side_raises(processor):
    with pytest.raises(ValueError):
        processor.on_depth('center', 500.0)


def test_gate_suppresses_depth_updates(coordinator, topics):
    proc = IrisDepthProcessor(coordinator=coordinator, gate=lambda: False)
    proc.start()

    proc.on_left_depth(500.0)
    proc.on_right_depth(500.0)

    assert proc.get_current_depths() == (None, None)
    assert topics[TOPIC_DEPTH] == []


def test_custom_baseline_and_scale(coordinator):
    config = IrisDepthConfig(baseline_mm=3.0, depth_scale=1.0)
    proc = IrisDepthProcessor(coordinator=coordinator, config=config)
    proc.start()

    proc.on_left_depth(5.0)
    angles = proc.on_right_depth(4.0)

    assert angles.alpha == pytest.approx(90.0)


def test_stop_forgets_depths(processor, topics):
    processor.on_left_depth(500.0)
    processor.stop()

    assert processor.get_current_depths() == (None, None)
    assert processor.on_right_depth(500.0) is None
    assert topics[TOPIC_TRIANGLE] == []


def test_status_reports_rounded_values(processor):
    processor.on_left_depth(503.456)
    processor.on_right_depth(500.0)

    status = processor.get_status()

    assert status['left_depth_mm'] == 50.35
    assert status['right_depth_mm'] == 50.0
    assert status['triangles'] == 1
    assert sum(status['angles']) == pytest.approx(180.0, abs=0.02)


@pytest.mark.parametrize("baseline", [0.0, -6.3])
def test_config_rejects_non_positive_baseline(baseline):
    with pytest.raises(ValueError):
        IrisDepthConfig(baseline_mm=baseline)


def test_concurrent_sides_keep_counts_and_order(coordinator):
    proc = IrisDepthProcessor(coordinator=coordinator)
    proc.start()
    delivered = []
    coordinator.publisher.subscribe(TOPIC_TRIANGLE, lambda payload, ts: delivered.append((payload, ts)))
    proc.on_left_depth(500.0)
    proc.on_right_depth(500.0)

    def feed(handler, values):
        for value in values:
            handler(value)

    threads = [
        threading.Thread(target=feed, args=(proc.on_left_depth, [500.0, 505.0] * 100)),
        threading.Thread(target=feed, args=(proc.on_right_depth, [510.0, 495.0] * 100)),
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert proc.sample_count == 402
    assert proc.triangle_count == 401
    assert len(delivered) == 401
    stamps = [ts for _, ts in delivered]
    assert all(later > earlier for earlier, later in zip(stamps, stamps[1:]))
    assert delivered[-1][0] == proc.get_current_angles()
