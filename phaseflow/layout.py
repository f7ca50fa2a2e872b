"""Node placement: screen position and bar footprint for each project."""

import math
from dataclasses import dataclass
from datetime import date

from phaseflow.config import LayoutConfig
from phaseflow.models import Project
from phaseflow.scales import Scales


@dataclass(frozen=True)
class PlacedNode:
    """A project's bar: centred on (x, y), `width` wide, spanning y ± half_height."""

    id: str
    time: date
    x: float
    y: float
    half_height: float
    width: float

    @property
    def height(self) -> float:
        return 2 * self.half_height

    @property
    def top(self) -> float:
        return self.y - self.half_height

    @property
    def bottom(self) -> float:
        return self.y + self.half_height

    @property
    def right(self) -> float:
        return self.x + self.width / 2

    def rect(self) -> tuple[float, float, float, float]:
        """(x0, y0, x1, y1) footprint."""
        return (self.x - self.width / 2, self.top, self.right, self.bottom)


def half_height(size: float, layout: LayoutConfig) -> float:
    return math.sqrt(size) * layout.bar_scale


def place_node(project: Project, scales: Scales, layout: LayoutConfig) -> PlacedNode:
    return PlacedNode(
        id=project.id,
        time=project.time,
        x=scales.x(project.time),
        y=scales.y(project.size),
        half_height=half_height(project.size, layout),
        width=layout.bar_width,
    )


def place_nodes(projects: list[Project], scales: Scales, layout: LayoutConfig) -> dict[str, PlacedNode]:
    """Place every project. Keyed by project id, in input order."""
    return {p.id: place_node(p, scales, layout) for p in projects}
