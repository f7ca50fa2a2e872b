"""Tests for ribbon construction."""

from datetime import date

import pytest

from phaseflow.config import LayoutConfig
from phaseflow.curves import (
    PathCommand,
    blend_anchor,
    centreline,
    path_to_svg,
    ribbon_thickness,
)
from phaseflow.layout import PlacedNode
from phaseflow.phases import Point

TOL = 1e-9


def _node(y: float, half_height: float) -> PlacedNode:
    return PlacedNode(id="n", time=date(2022, 1, 1), x=0.0, y=y, half_height=half_height, width=8.0)


class TestThickness:
    def test_scales_with_phases(self):
        layout = LayoutConfig()
        assert ribbon_thickness(1, layout) == 8
        assert ribbon_thickness(4, layout) == 32

    def test_floor(self):
        layout = LayoutConfig(thickness_per_phase=2)
        assert ribbon_thickness(1, layout) == 3
        assert ribbon_thickness(3, layout) == 6


class TestAnchorBlending:
    def test_formula(self):
        # 100 - 20 + 20 * (1 - 205/410)
        assert blend_anchor(_node(100, 20), 205, 410) == pytest.approx(90)

    def test_other_end_at_bottom(self):
        assert blend_anchor(_node(100, 20), 410, 410) == pytest.approx(80)

    def test_other_end_at_top(self):
        assert blend_anchor(_node(100, 20), 0, 410) == pytest.approx(100)

    def test_link_anchors(self, pair_layout, config):
        a, b = pair_layout.nodes["A"], pair_layout.nodes["B"]
        h = config.layout.plot_height
        ribbon = pair_layout.link("A->B")
        assert ribbon.centre.p0.y == pytest.approx(a.y - a.half_height * b.y / h)
        assert ribbon.centre.p3.y == pytest.approx(b.y - b.half_height * a.y / h)
        assert ribbon.centre.p0.x == pytest.approx(a.right)


class TestRibbonGeometry:
    def test_control_points(self):
        curve = centreline(Point(10, 50), Point(110, 80), LayoutConfig())
        assert curve.c1 == pytest.approx((50, 50))
        assert curve.c2 == pytest.approx((70, 80))

    def test_upper_and_lower_offsets(self, pair_layout):
        ribbon = pair_layout.link("A->B")
        half = ribbon.thickness / 2
        assert ribbon.thickness == 32
        for attr in ("p0", "c1", "c2", "p3"):
            centre = getattr(ribbon.centre, attr)
            assert getattr(ribbon.upper, attr) == pytest.approx((centre.x, centre.y - half))
            assert getattr(ribbon.lower, attr) == pytest.approx((centre.x, centre.y + half))

    def test_outline_commands(self, pair_layout):
        ribbon = pair_layout.link("A->B")
        assert [c.op for c in ribbon.path] == ["M", "C", "L", "C", "Z"]
        assert ribbon.path[0].points == (ribbon.upper.p0,)
        assert ribbon.path[1].points == (ribbon.upper.c1, ribbon.upper.c2, ribbon.upper.p3)
        assert ribbon.path[2].points == (ribbon.lower.p3,)
        assert ribbon.path[3].points == (ribbon.lower.c2, ribbon.lower.c1, ribbon.lower.p0)

    def test_endpoint_exactness(self, sample_layout):
        for ribbon in sample_layout.ribbons:
            for curve in (ribbon.centre, ribbon.upper, ribbon.lower):
                start, end = curve.point_at(0), curve.point_at(1)
                assert abs(start.x - curve.p0.x) < TOL and abs(start.y - curve.p0.y) < TOL
                assert abs(end.x - curve.p3.x) < TOL and abs(end.y - curve.p3.y) < TOL

    def test_standalone_is_horizontal(self, sample_layout):
        for ribbon in sample_layout.standalone:
            node = sample_layout.nodes[ribbon.source]
            assert ribbon.target is None
            assert {p.y for p in (ribbon.centre.p0, ribbon.centre.c1, ribbon.centre.c2, ribbon.centre.p3)} == {node.y}

    def test_standalone_end_x(self, sample_layout):
        # project5: Mar 15 2022 + 4 months
        ribbon = next(r for r in sample_layout.standalone if r.source == "project5")
        assert ribbon.centre.p3.x == sample_layout.scales.x(date(2022, 7, 15))

    def test_touches(self, sample_layout):
        ribbon = sample_layout.link("project1->project3")
        assert ribbon.touches("project1") and ribbon.touches("project3")
        assert not ribbon.touches("project2")


class TestSvgPath:
    def test_serialisation(self):
        commands = [
            PathCommand("M", (Point(0, 1.5),)),
            PathCommand("C", (Point(1, 2), Point(3, 4), Point(5.125, 6))),
            PathCommand("L", (Point(5, 7),)),
            PathCommand("Z"),
        ]
        assert path_to_svg(commands) == "M 0 1.5 C 1 2, 3 4, 5.12 6 L 5 7 Z"

    def test_ribbon_svg_path(self, pair_layout):
        d = pair_layout.link("A->B").svg_path
        assert d.startswith("M ")
        assert d.endswith("Z")
        assert d.count("C ") == 2
