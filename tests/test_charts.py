"""Tests for channel chart geometry."""

import numpy as np
import pytest

from geometry.charts import (
    MARGIN_BOTTOM,
    MARGIN_LEFT,
    MARGIN_RIGHT,
    MARGIN_TOP,
    active_marker,
    build_line_chart,
    monotone_curve,
    pointer_to_distance,
)
from telemetry.model import LapTelemetry, Sample
from tests.conftest import make_lap

WIDTH, HEIGHT = 400, 200


@pytest.fixture
def lap():
    return make_lap(distances=[i * 10 for i in range(11)], speeds=[i * 20.0 for i in range(11)])


class TestBuildLineChart:
    def test_scales_span_plot_area(self, lap):
        chart = build_line_chart(lap, "speed", 100, WIDTH, HEIGHT)
        assert chart.x_scale.range == (MARGIN_LEFT, WIDTH - MARGIN_RIGHT)
        assert chart.y_scale.range == (HEIGHT - MARGIN_BOTTOM, MARGIN_TOP)
        assert chart.x_scale.domain == (0, 100)
        assert chart.y_scale.domain == (0, 200)
        assert len(chart.path) == 11
        assert chart.path[0] == pytest.approx([MARGIN_LEFT, HEIGHT - MARGIN_BOTTOM])
        assert chart.path[-1] == pytest.approx([WIDTH - MARGIN_RIGHT, MARGIN_TOP])

    def test_path_downsampled_but_domain_from_full_lap(self, lap):
        chart = build_line_chart(lap, "speed", 4, WIDTH, HEIGHT)
        assert len(chart.path) == 4
        assert chart.x_scale.domain == (0, 100)
        assert chart.y_scale.domain == (0, 200)

    def test_ticks(self, lap):
        chart = build_line_chart(lap, "speed", 100, WIDTH, HEIGHT)
        assert all(label.endswith("m") for _, label in chart.x_ticks)
        xs = [x for x, _ in chart.x_ticks]
        assert xs == sorted(xs)
        assert all(MARGIN_TOP <= y <= HEIGHT - MARGIN_BOTTOM for y, _ in chart.y_ticks)

    def test_constant_channel_not_drawn(self, lap):
        # throttle is 50 on every sample
        assert build_line_chart(lap, "throttle", 100, WIDTH, HEIGHT) is None

    @pytest.mark.parametrize("width,height", [(0, 200), (400, 0), (60, 200), (400, 40)])
    def test_viewport_too_small(self, lap, width, height):
        assert build_line_chart(lap, "speed", 100, width, height) is None

    def test_empty_lap(self):
        assert build_line_chart(LapTelemetry([]), "speed", 100, WIDTH, HEIGHT) is None

    def test_missing_values_are_left_out(self):
        samples = [
            Sample(distance=0, time=0, lat=0, long=0, channels={"speed": 10.0}),
            Sample(distance=5, time=1, lat=0, long=0, channels={}),
            Sample(distance=10, time=2, lat=0, long=0, channels={"speed": 30.0}),
        ]
        chart = build_line_chart(samples, "speed", 100, WIDTH, HEIGHT)
        assert len(chart.path) == 2
        assert np.all(np.isfinite(chart.path))


class TestMarkerAndPointer:
    def test_marker_for_cursor_distance(self, lap):
        chart = build_line_chart(lap, "speed", 100, WIDTH, HEIGHT)
        marker = active_marker(chart, 22)
        assert marker.sample.distance == 20
        assert marker.value == 40
        assert marker.x == pytest.approx(114)
        assert marker.y == pytest.approx(140)

    def test_marker_uses_full_lap_when_downsampled(self, lap):
        chart = build_line_chart(lap, "speed", 2, WIDTH, HEIGHT)
        assert active_marker(chart, 31).sample.distance == 30

    def test_no_marker_without_cursor(self, lap):
        chart = build_line_chart(lap, "speed", 100, WIDTH, HEIGHT)
        assert active_marker(chart, None) is None
        assert active_marker(None, 10) is None

    def test_pointer_clamped_to_domain(self, lap):
        chart = build_line_chart(lap, "speed", 100, WIDTH, HEIGHT)
        assert pointer_to_distance(chart, 1000) == 100
        assert pointer_to_distance(chart, 0) == 0
        assert pointer_to_distance(chart, 210) == pytest.approx(50)
        assert pointer_to_distance(chart, None) is None


class TestMonotoneCurve:
    def test_passes_through_every_point(self):
        path = np.array([[0, 10], [10, 30], [20, 25], [35, 40]], dtype=float)
        curve = monotone_curve(path, samples_per_segment=4)
        assert len(curve) == 3 * 4 + 1
        assert np.allclose(curve[::4], path)

    def test_no_overshoot_between_neighbours(self):
        path = np.array([[0, 0], [10, 0], [20, 100], [30, 100], [40, 0]], dtype=float)
        curve = monotone_curve(path, samples_per_segment=8)
        for (x0, y0), (x1, y1) in zip(path[:-1], path[1:]):
            inside = curve[(curve[:, 0] >= x0) & (curve[:, 0] <= x1), 1]
            assert inside.min() >= min(y0, y1) - 1e-9
            assert inside.max() <= max(y0, y1) + 1e-9

    def test_repeated_x_dropped(self):
        path = np.array([[0, 0], [10, 5], [10, 7], [20, 10]], dtype=float)
        curve = monotone_curve(path, samples_per_segment=2)
        assert np.all(np.diff(curve[:, 0]) > 0)
        assert curve[-1] == pytest.approx([20, 10])

    def test_short_paths_unchanged(self):
        assert len(monotone_curve(np.empty((0, 2)))) == 0
        single = np.array([[5.0, 5.0]])
        assert np.array_equal(monotone_curve(single), single)

    def test_chart_curve_follows_downsampled_path(self, lap):
        chart = build_line_chart(lap, "speed", 4, WIDTH, HEIGHT)
        assert chart.curve[0] == pytest.approx(chart.path[0])
        assert chart.curve[-1] == pytest.approx(chart.path[-1])
