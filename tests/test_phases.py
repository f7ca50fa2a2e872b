"""Tests for Bézier evaluation and phase-divider placement."""

import logging
import math

import pytest

from phaseflow.phases import CubicBezier, Point, phase_dividers, phase_parameters

LINE = CubicBezier(Point(0, 0), Point(1, 0), Point(2, 0), Point(3, 0))
S_CURVE = CubicBezier(Point(0, 0), Point(40, 0), Point(60, 100), Point(100, 100))


class TestCubicBezier:
    def test_point_on_straight_line(self):
        assert LINE.point_at(0.5) == pytest.approx((1.5, 0))

    def test_s_curve_midpoint(self):
        assert S_CURVE.point_at(0.5) == pytest.approx((50, 50))

    def test_tangent_of_straight_line(self):
        assert LINE.tangent_at(0.3) == pytest.approx((3, 0))

    def test_flat_end_tangents(self):
        assert S_CURVE.tangent_at(0).y == 0
        assert S_CURVE.tangent_at(1).y == 0

    def test_tangent_matches_finite_difference(self):
        h = 1e-6
        t = 0.37
        a, b = S_CURVE.point_at(t - h), S_CURVE.point_at(t + h)
        fd = ((b.x - a.x) / (2 * h), (b.y - a.y) / (2 * h))
        assert S_CURVE.tangent_at(t) == pytest.approx(fd, rel=1e-5)

    def test_horizontal_normal_is_vertical(self):
        assert LINE.normal_at(0.5) == pytest.approx((0, 1))

    @pytest.mark.parametrize("t", [0.1, 0.25, 0.5, 0.8])
    def test_normal_orthogonal_and_unit(self, t):
        tx, ty = S_CURVE.tangent_at(t)
        nx, ny = S_CURVE.normal_at(t)
        assert tx * nx + ty * ny == pytest.approx(0, abs=1e-9)
        assert math.hypot(nx, ny) == pytest.approx(1)

    def test_zero_tangent_falls_back(self, caplog):
        point = Point(5, 5)
        curve = CubicBezier(point, point, point, point)
        with caplog.at_level(logging.WARNING, logger="phaseflow.phases"):
            assert curve.normal_at(0.5) == (0.0, 1.0)
        assert "Degenerate curve" in caplog.text

    def test_offset(self):
        moved = S_CURVE.offset(-4)
        assert moved.p0 == (0, -4)
        assert moved.c2 == (60, 96)

    def test_flatten_includes_endpoints(self):
        pts = S_CURVE.flatten(10)
        assert len(pts) == 11
        assert pts[0] == S_CURVE.p0
        assert pts[-1] == S_CURVE.p3


class TestPhaseDividers:
    def test_parameters(self):
        assert phase_parameters(4) == [0.25, 0.5, 0.75]
        assert phase_parameters(1) == []

    @pytest.mark.parametrize("phases", [1, 2, 3, 6])
    def test_count(self, phases):
        assert len(phase_dividers(S_CURVE, phases, 24)) == phases - 1

    def test_mark_geometry(self):
        thickness = 24
        for mark in phase_dividers(S_CURVE, 4, thickness):
            assert mark.center == pytest.approx(S_CURVE.point_at(mark.t))
            length = math.hypot(mark.p1.x - mark.p2.x, mark.p1.y - mark.p2.y)
            assert length == pytest.approx(thickness * 1.2)
            mid = ((mark.p1.x + mark.p2.x) / 2, (mark.p1.y + mark.p2.y) / 2)
            assert mid == pytest.approx(mark.center)

    def test_dividers_follow_upper_edge(self, pair_layout):
        ribbon = pair_layout.link("A->B")
        for mark in ribbon.dividers:
            assert mark.center == pytest.approx(ribbon.upper.point_at(mark.t))

    def test_ribbon_normals_orthogonal(self, sample_layout):
        for ribbon in sample_layout.ribbons:
            for mark in ribbon.dividers:
                tx, ty = ribbon.upper.tangent_at(mark.t)
                assert tx * mark.normal.x + ty * mark.normal.y == pytest.approx(0, abs=1e-9)
                assert math.hypot(*mark.normal) == pytest.approx(1)

    def test_standalone_dividers_vertical(self, sample_layout):
        for ribbon in sample_layout.standalone:
            for mark in ribbon.dividers:
                assert mark.p1.x == pytest.approx(mark.p2.x)
                assert mark.normal == pytest.approx((0, 1))
