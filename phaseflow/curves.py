"""Curve generator: filled Bézier ribbons for links and standalone phases.

A ribbon is a centreline cubic with flat tangents at both ends (control
points at 40%/60% of the horizontal span, each at its own end's height),
thickened into a closed outline: forward along the upper edge, down, and
back along the lower edge.

Where a link meets a bar, its anchor is shifted along the bar according to
how high the *other* end sits on the plot:

    anchor = node.y - hh + hh * (1 - other_y / plot_height)

with hh the bar half-height, so the anchor stays on the upper half of the
bar. This spreads ribbons that share a node across it. Standalone phases
stay at the project's own y.
"""

from dataclasses import dataclass, field
from typing import NamedTuple

from phaseflow.config import LayoutConfig
from phaseflow.layout import PlacedNode
from phaseflow.models import Link, StandalonePhase
from phaseflow.phases import CubicBezier, DividerMark, Point, phase_dividers
from phaseflow.scales import TimeScale, add_months


class PathCommand(NamedTuple):
    op: str  # "M", "C", "L" or "Z"
    points: tuple[Point, ...] = ()

    def to_svg(self) -> str:
        if self.op == "Z":
            return "Z"
        coords = ", ".join(f"{_num(p.x)} {_num(p.y)}" for p in self.points)
        return f"{self.op} {coords}"


def _num(v: float) -> str:
    return f"{v:.2f}".rstrip("0").rstrip(".") or "0"


def path_to_svg(commands: list[PathCommand]) -> str:
    return " ".join(c.to_svg() for c in commands)


@dataclass
class Ribbon:
    kind: str  # "link" or "standalone"
    key: str
    source: str
    target: str | None
    phases: int
    duration: int
    thickness: float
    centre: CubicBezier
    upper: CubicBezier
    lower: CubicBezier
    path: list[PathCommand]
    dividers: list[DividerMark] = field(default_factory=list)

    @property
    def svg_path(self) -> str:
        return path_to_svg(self.path)

    def touches(self, project_id: str) -> bool:
        return project_id == self.source or project_id == self.target


def ribbon_thickness(phases: int, layout: LayoutConfig) -> float:
    return max(layout.min_thickness, phases * layout.thickness_per_phase)


def blend_anchor(node: PlacedNode, other_y: float, plot_height: float) -> float:
    """Vertical anchor on `node` for a ribbon whose other end sits at `other_y`."""
    hh = node.half_height
    return node.y - hh + hh * (1 - other_y / plot_height)


def centreline(start: Point, end: Point, layout: LayoutConfig) -> CubicBezier:
    dx = end.x - start.x
    return CubicBezier(
        start,
        Point(start.x + dx * layout.control_near, start.y),
        Point(start.x + dx * layout.control_far, end.y),
        end,
    )


def ribbon_outline(upper: CubicBezier, lower: CubicBezier) -> list[PathCommand]:
    """Closed outline: M, C (upper, forward), L, C (lower, backward), Z."""
    return [
        PathCommand("M", (upper.p0,)),
        PathCommand("C", (upper.c1, upper.c2, upper.p3)),
        PathCommand("L", (lower.p3,)),
        PathCommand("C", (lower.c2, lower.c1, lower.p0)),
        PathCommand("Z"),
    ]


def _build_ribbon(
    kind: str,
    key: str,
    source: PlacedNode,
    target_id: str | None,
    start_y: float,
    end: Point,
    phases: int,
    duration: int,
    layout: LayoutConfig,
) -> Ribbon:
    thickness = ribbon_thickness(phases, layout)
    centre = centreline(Point(source.right, start_y), end, layout)
    upper = centre.offset(-thickness / 2)
    lower = centre.offset(thickness / 2)
    return Ribbon(
        kind=kind,
        key=key,
        source=source.id,
        target=target_id,
        phases=phases,
        duration=duration,
        thickness=thickness,
        centre=centre,
        upper=upper,
        lower=lower,
        path=ribbon_outline(upper, lower),
        dividers=phase_dividers(upper, phases, thickness, layout.divider_scale),
    )


def end_x(source: PlacedNode, duration: int, x_scale: TimeScale) -> float:
    """x of source time + duration months."""
    return x_scale(add_months(source.time, duration))


def build_link_ribbon(
    link: Link,
    nodes: dict[str, PlacedNode],
    x_scale: TimeScale,
    layout: LayoutConfig,
    key: str | None = None,
) -> Ribbon:
    source = nodes[link.source]
    target = nodes[link.target]
    start_y = blend_anchor(source, target.y, layout.plot_height)
    end_y = blend_anchor(target, source.y, layout.plot_height)
    return _build_ribbon(
        "link", key or link.key, source, target.id, start_y,
        Point(end_x(source, link.duration, x_scale), end_y),
        link.phases, link.duration, layout,
    )


def build_standalone_ribbon(
    phase: StandalonePhase,
    nodes: dict[str, PlacedNode],
    x_scale: TimeScale,
    layout: LayoutConfig,
    key: str | None = None,
) -> Ribbon:
    source = nodes[phase.source]
    return _build_ribbon(
        "standalone", key or phase.key, source, None, source.y,
        Point(end_x(source, phase.duration, x_scale), source.y),
        phase.phases, phase.duration, layout,
    )
