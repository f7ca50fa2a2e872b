"""Phase sampler: cubic Bézier evaluation and phase-divider placement.

A ribbon with N phases gets N-1 divider marks at t = i/N on its upper
boundary curve. Each mark is a short segment through the curve point along
the unit normal, so dividers follow the ribbon as it bends.
"""

import logging
import math
from dataclasses import dataclass
from typing import NamedTuple

logger = logging.getLogger(__name__)

# Used when the tangent vanishes and no normal can be derived
DEFAULT_NORMAL = (0.0, 1.0)


class Point(NamedTuple):
    x: float
    y: float


@dataclass(frozen=True)
class CubicBezier:
    p0: Point
    c1: Point
    c2: Point
    p3: Point

    def point_at(self, t: float) -> Point:
        mt = 1 - t
        a, b, c, d = mt * mt * mt, 3 * mt * mt * t, 3 * mt * t * t, t * t * t
        return Point(
            a * self.p0.x + b * self.c1.x + c * self.c2.x + d * self.p3.x,
            a * self.p0.y + b * self.c1.y + c * self.c2.y + d * self.p3.y,
        )

    def tangent_at(self, t: float) -> Point:
        """First derivative B'(t)."""
        mt = 1 - t
        a, b, c = 3 * mt * mt, 6 * mt * t, 3 * t * t
        return Point(
            a * (self.c1.x - self.p0.x) + b * (self.c2.x - self.c1.x) + c * (self.p3.x - self.c2.x),
            a * (self.c1.y - self.p0.y) + b * (self.c2.y - self.c1.y) + c * (self.p3.y - self.c2.y),
        )

    def normal_at(self, t: float) -> Point:
        """Unit normal (tangent rotated 90°). Falls back to vertical on a zero tangent."""
        tx, ty = self.tangent_at(t)
        length = math.hypot(tx, ty)
        if length == 0:
            logger.warning("Degenerate curve %s: zero tangent at t=%.3f, using vertical normal", self, t)
            return Point(*DEFAULT_NORMAL)
        return Point(-ty / length, tx / length)

    def offset(self, dy: float) -> "CubicBezier":
        """Same curve translated vertically by dy."""
        return CubicBezier(
            Point(self.p0.x, self.p0.y + dy),
            Point(self.c1.x, self.c1.y + dy),
            Point(self.c2.x, self.c2.y + dy),
            Point(self.p3.x, self.p3.y + dy),
        )

    def flatten(self, segments: int = 32) -> list[Point]:
        """Polyline approximation with segments+1 points, endpoints included."""
        return [self.point_at(i / segments) for i in range(segments + 1)]


@dataclass(frozen=True)
class DividerMark:
    t: float
    center: Point
    normal: Point
    p1: Point
    p2: Point


def phase_parameters(phases: int) -> list[float]:
    """Curve parameters of the phase boundaries: i/phases for i in 1..phases-1."""
    return [i / phases for i in range(1, phases)]


def phase_dividers(curve: CubicBezier, phases: int, thickness: float, scale: float = 1.2) -> list[DividerMark]:
    """Divider marks on `curve`, each `thickness * scale` long and centred on the curve."""
    half = thickness * scale / 2
    marks: list[DividerMark] = []
    for t in phase_parameters(phases):
        center = curve.point_at(t)
        normal = curve.normal_at(t)
        marks.append(DividerMark(
            t=t,
            center=center,
            normal=normal,
            p1=Point(center.x + normal.x * half, center.y + normal.y * half),
            p2=Point(center.x - normal.x * half, center.y - normal.y * half),
        ))
    return marks
