"""One full layout pass: dataset → scales → nodes → ribbons → axis ticks.

`compute_layout` is a pure function of its inputs. It never mutates the
dataset; all derived geometry lives on the returned DiagramLayout.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Any

from phaseflow.config import Config
from phaseflow.curves import Ribbon, build_link_ribbon, build_standalone_ribbon
from phaseflow.layout import PlacedNode, place_nodes
from phaseflow.models import FlowDataset
from phaseflow.scales import AxisTick, Scales, build_scales

logger = logging.getLogger(__name__)


@dataclass
class DiagramLayout:
    scales: Scales
    nodes: dict[str, PlacedNode]
    links: list[Ribbon]
    standalone: list[Ribbon]
    x_ticks: list[AxisTick]
    y_ticks: list[AxisTick]
    plot_width: float
    plot_height: float

    @property
    def ribbons(self) -> list[Ribbon]:
        return self.links + self.standalone

    def link(self, key: str) -> Ribbon:
        for r in self.links:
            if r.key == key:
                return r
        raise KeyError(key)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready geometry for rendering collaborators."""
        return {
            "plot": {"width": self.plot_width, "height": self.plot_height},
            "nodes": [
                {
                    "id": n.id,
                    "x": n.x,
                    "y": n.y,
                    "half_height": n.half_height,
                    "rect": list(n.rect()),
                }
                for n in self.nodes.values()
            ],
            "links": [_ribbon_dict(r) for r in self.links],
            "standalone": [_ribbon_dict(r) for r in self.standalone],
            "x_ticks": [_tick_dict(t) for t in self.x_ticks],
            "y_ticks": [_tick_dict(t) for t in self.y_ticks],
        }


def _ribbon_dict(r: Ribbon) -> dict[str, Any]:
    return {
        "key": r.key,
        "kind": r.kind,
        "source": r.source,
        "target": r.target,
        "phases": r.phases,
        "duration": r.duration,
        "thickness": r.thickness,
        "path": r.svg_path,
        "commands": [{"op": c.op, "points": [list(p) for p in c.points]} for c in r.path],
        "dividers": [[list(d.p1), list(d.p2)] for d in r.dividers],
    }


def _tick_dict(t: AxisTick) -> dict[str, Any]:
    value = t.value.isoformat() if isinstance(t.value, date) else t.value
    return {"value": value, "position": t.position, "label": t.label}


def _unique_keys(keys: list[str]) -> list[str]:
    """Suffix repeated keys (#2, #3, ...) so every ribbon is addressable."""
    counts: Counter[str] = Counter()
    out = []
    for k in keys:
        counts[k] += 1
        out.append(k if counts[k] == 1 else f"{k}#{counts[k]}")
    return out


def compute_layout(dataset: FlowDataset, config: Config) -> DiagramLayout:
    """Lay out a validated dataset."""
    layout = config.layout
    scales = build_scales(dataset, layout)
    nodes = place_nodes(dataset.projects, scales, layout)

    links = [
        build_link_ribbon(link, nodes, scales.x, layout, key=key)
        for link, key in zip(dataset.links, _unique_keys([lk.key for lk in dataset.links]))
    ]
    standalone = [
        build_standalone_ribbon(phase, nodes, scales.x, layout, key=key)
        for phase, key in zip(dataset.standalone, _unique_keys([s.key for s in dataset.standalone]))
    ]

    result = DiagramLayout(
        scales=scales,
        nodes=nodes,
        links=links,
        standalone=standalone,
        x_ticks=scales.x.ticks(),
        y_ticks=scales.y.ticks(),
        plot_width=layout.plot_width,
        plot_height=layout.plot_height,
    )
    logger.debug(
        "Layout: %d nodes, %d links, %d standalone, %d dividers",
        len(nodes), len(links), len(standalone),
        sum(len(r.dividers) for r in result.ribbons),
    )
    return result
