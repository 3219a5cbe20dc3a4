"""Tests for the MediaPipe graph adapter, using a fake graph."""

from __future__ import annotations

import logging
from types import SimpleNamespace

import pytest

from iris_system.coordinator import SensorCoordinator
from iris_system.sensors.iris_depth import graph as graph_module
from iris_system.sensors.iris_depth.config import IrisDepthConfig
from iris_system.sensors.iris_depth.graph import (
    FOCAL_LENGTH_UNKNOWN,
    attach_depth_streams,
    build_side_packets,
)
from iris_system.sensors.iris_depth.processor import IrisDepthProcessor
from iris_system.sensors.iris_depth.utils import format_landmarks


class FakeGraph:
    def __init__(self):
        self.observers = {}

    def observe_output_stream(self, stream_name, callback):
        self.observers[stream_name] = callback

    def emit(self, stream_name, packet):
        self.observers[stream_name](stream_name, packet)


def read_value(packet):
    return packet.value


@pytest.fixture()
def processor():
    proc = IrisDepthProcessor(coordinator=SensorCoordinator())
    proc.start()
    return proc


def test_depth_streams_forward_to_processor(processor):
    graph = FakeGraph()

    observed = attach_depth_streams(graph, processor, get_float=read_value)

    assert observed == ['left_iris_depth_mm', 'right_iris_depth_mm']

    graph.emit('left_iris_depth_mm', SimpleNamespace(value=500.0, timestamp=10))
    graph.emit('right_iris_depth_mm', SimpleNamespace(value=510.0, timestamp=11))

    assert processor.get_current_depths() == (pytest.approx(50.0), pytest.approx(51.0))
    assert processor.get_current_angles() is not None


def test_unreadable_packet_is_logged_and_skipped(processor, caplog):
    graph = FakeGraph()

    def broken_reader(packet):
        raise TypeError("not a float packet")

    attach_depth_streams(graph, processor, get_float=broken_reader)

    with caplog.at_level(logging.ERROR, logger=graph_module.__name__):
        graph.emit('left_iris_depth_mm', SimpleNamespace(timestamp=1))

    assert processor.get_current_depths() == (None, None)
    assert "Could not read left_iris_depth_mm packet" in caplog.text


def test_landmark_stream_observed_only_with_debug_logging(processor, caplog):
    config = IrisDepthConfig(log_landmarks=True)
    landmarks = SimpleNamespace(landmark=[SimpleNamespace(x=0.1, y=0.2, z=0.3)])

    quiet_graph = FakeGraph()
    with caplog.at_level(logging.INFO, logger=graph_module.__name__):
        observed = attach_depth_streams(quiet_graph, processor, config, get_float=read_value)
    assert 'iris_landmarks' not in observed

    debug_graph = FakeGraph()
    with caplog.at_level(logging.DEBUG, logger=graph_module.__name__):
        observed = attach_depth_streams(
            debug_graph, processor, config,
            get_float=read_value, get_proto=lambda packet: packet.value,
        )
        debug_graph.emit('iris_landmarks', SimpleNamespace(value=landmarks, timestamp=42))

    assert observed[-1] == 'iris_landmarks'
    assert "[TS:42] #Landmarks for face (including iris): 1" in caplog.text
    assert "Landmark[0]: (0.1, 0.2, 0.3)" in caplog.text


def test_side_packets_include_focal_length():
    packets = build_side_packets(1200.5, create_float=lambda value: ('float', value))
    assert packets == {'focal_length_pixel': ('float', 1200.5)}


@pytest.mark.parametrize("focal_length", [None, FOCAL_LENGTH_UNKNOWN])
def test_side_packets_empty_when_focal_length_unknown(focal_length):
    def never_called(value):
        raise AssertionError("packet should not be created")

    assert build_side_packets(focal_length, create_float=never_called) == {}


def test_format_landmarks():
    landmarks = [SimpleNamespace(x=1, y=2, z=3), SimpleNamespace(x=4, y=5, z=6)]

    text = format_landmarks(landmarks)

    assert text == "\t\tLandmark[0]: (1, 2, 3)\n\t\tLandmark[1]: (4, 5, 6)\n"
    assert format_landmarks([]) == ""
