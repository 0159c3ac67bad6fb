"""Tests for the pan/zoom transform and reset animation."""

import numpy as np
import pytest

from geometry.viewport import IDENTITY, ResetAnimation, ViewportTransform, ViewState


class TestViewportTransform:
    def test_identity_is_idle(self):
        assert IDENTITY.is_identity
        assert IDENTITY.state is ViewState.IDLE
        assert ViewportTransform(scale=2).state is ViewState.TRANSFORMED
        assert ViewportTransform(translate_x=1).state is ViewState.TRANSFORMED

    def test_scale_clamped(self):
        assert ViewportTransform(scale=30).clamped(15).scale == 15
        assert ViewportTransform(scale=0.2).clamped(15).scale == 1

    @pytest.mark.parametrize("factor", [0.01, 0.5, 1.7, 4, 1000])
    def test_zoom_stays_within_bounds(self, factor):
        t = IDENTITY
        for _ in range(10):
            t = t.zoomed(factor, 120, 80, max_scale=15)
            assert 1 <= t.scale <= 15

    def test_zoom_keeps_anchor_fixed(self):
        t = ViewportTransform(scale=2, translate_x=-40, translate_y=10)
        anchor = t.invert(100, 50)
        zoomed = t.zoomed(1.5, 100, 50)
        assert zoomed.invert(100, 50) == pytest.approx(anchor)

    def test_invert_then_apply_round_trips(self):
        t = ViewportTransform(scale=3.5, translate_x=-120.25, translate_y=47.0)
        for sx, sy in [(0, 0), (7, 9), (412.5, 318.75)]:
            assert t.apply(*t.invert(sx, sy)) == pytest.approx((sx, sy))

    def test_invert_subtracts_translation_then_divides(self):
        t = ViewportTransform(scale=2, translate_x=10, translate_y=20)
        assert t.invert(110, 120) == (50, 50)

    def test_apply_xy(self):
        t = ViewportTransform(scale=2, translate_x=1, translate_y=-1)
        assert np.allclose(t.apply_xy([[0, 0], [1, 2]]), [[1, -1], [3, 3]])

    def test_pan(self):
        t = IDENTITY.panned(5, -3).panned(1, 1)
        assert t.as_tuple() == (1.0, 6.0, -2.0)


class TestResetAnimation:
    def test_ends_exactly_at_identity(self):
        anim = ResetAnimation(ViewportTransform(scale=8, translate_x=-300, translate_y=120), 750)
        assert anim.at(750) is IDENTITY
        assert anim.at(10_000) is IDENTITY
        assert anim.finished(750)

    def test_starts_at_start(self):
        start = ViewportTransform(scale=8, translate_x=-300, translate_y=120)
        assert ResetAnimation(start, 750).at(0) == start

    def test_scale_moves_monotonically_toward_one(self):
        anim = ResetAnimation(ViewportTransform(scale=10, translate_x=50, translate_y=50), 500)
        scales = [anim.at(ms).scale for ms in range(0, 501, 25)]
        assert all(a >= b for a, b in zip(scales, scales[1:]))
        assert all(1 <= s <= 10 for s in scales)

    def test_zero_duration(self):
        assert ResetAnimation(ViewportTransform(scale=3), 0).at(0) is IDENTITY
