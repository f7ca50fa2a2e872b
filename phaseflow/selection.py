"""Selection state machine and emphasis derivation.

At most one project is selected at a time. Clicking a project selects it,
clicking it again clears the selection, clicking a different project moves
the selection, and a background click or reset clears it.

Emphasis is a pure function of (state, element): a rendering adapter
restyles existing geometry from it, the geometry itself is never touched.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from phaseflow.config import RenderConfig
from phaseflow.curves import Ribbon
from phaseflow.engine import DiagramLayout
from phaseflow.models import FlowDataset, ProjectInfo, UnknownProjectError

logger = logging.getLogger(__name__)


class Emphasis(str, Enum):
    EMPHASIZED = "emphasized"
    NORMAL = "normal"
    DIMMED = "dimmed"


# --- State ---


@dataclass(frozen=True)
class SelectionState:
    selected: str | None = None

    @property
    def is_selected(self) -> bool:
        return self.selected is not None

    def click_project(self, project_id: str) -> "SelectionState":
        if self.selected == project_id:
            return SelectionState()
        return SelectionState(project_id)

    def click_background(self) -> "SelectionState":
        return SelectionState()

    def reset(self) -> "SelectionState":
        return SelectionState()


# --- Emphasis derivation ---


def project_emphasis(state: SelectionState, project_id: str) -> Emphasis:
    if not state.is_selected:
        return Emphasis.NORMAL
    return Emphasis.EMPHASIZED if state.selected == project_id else Emphasis.DIMMED


def link_emphasis(state: SelectionState, source: str, target: str) -> Emphasis:
    if not state.is_selected:
        return Emphasis.NORMAL
    return Emphasis.EMPHASIZED if state.selected in (source, target) else Emphasis.DIMMED


def standalone_emphasis(state: SelectionState, source: str) -> Emphasis:
    if not state.is_selected:
        return Emphasis.NORMAL
    return Emphasis.EMPHASIZED if state.selected == source else Emphasis.DIMMED


def ribbon_emphasis(state: SelectionState, ribbon: Ribbon) -> Emphasis:
    if ribbon.target is None:
        return standalone_emphasis(state, ribbon.source)
    return link_emphasis(state, ribbon.source, ribbon.target)


@dataclass
class EmphasisMap:
    """Emphasis for every element of a layout, keyed by project id / ribbon key."""

    projects: dict[str, Emphasis] = field(default_factory=dict)
    links: dict[str, Emphasis] = field(default_factory=dict)
    standalone: dict[str, Emphasis] = field(default_factory=dict)

    def to_dict(self) -> dict[str, dict[str, str]]:
        return {
            "projects": {k: v.value for k, v in self.projects.items()},
            "links": {k: v.value for k, v in self.links.items()},
            "standalone": {k: v.value for k, v in self.standalone.items()},
        }


def derive_emphasis(state: SelectionState, layout: DiagramLayout) -> EmphasisMap:
    return EmphasisMap(
        projects={pid: project_emphasis(state, pid) for pid in layout.nodes},
        links={r.key: ribbon_emphasis(state, r) for r in layout.links},
        standalone={r.key: ribbon_emphasis(state, r) for r in layout.standalone},
    )


@dataclass(frozen=True)
class EmphasisStyle:
    opacity: float
    stroke_width: float
    grayscale: bool


def node_style(emphasis: Emphasis, render: RenderConfig) -> EmphasisStyle:
    if emphasis is Emphasis.EMPHASIZED:
        return EmphasisStyle(1.0, render.emphasized_stroke, False)
    if emphasis is Emphasis.DIMMED:
        return EmphasisStyle(render.dimmed_opacity, render.node_stroke, True)
    return EmphasisStyle(1.0, render.node_stroke, False)


def ribbon_style(emphasis: Emphasis, render: RenderConfig) -> EmphasisStyle:
    if emphasis is Emphasis.EMPHASIZED:
        return EmphasisStyle(1.0, render.emphasized_ribbon_stroke, False)
    if emphasis is Emphasis.DIMMED:
        return EmphasisStyle(render.dimmed_opacity, render.ribbon_stroke, True)
    return EmphasisStyle(1.0, render.ribbon_stroke, False)


# --- Controller ---


class SelectionController:
    """Owns the current selection. One event in, one new EmphasisMap out."""

    def __init__(self, layout: DiagramLayout) -> None:
        self.layout = layout
        self.state = SelectionState()

    @property
    def emphasis(self) -> EmphasisMap:
        return derive_emphasis(self.state, self.layout)

    def _apply(self, new_state: SelectionState, event: str) -> EmphasisMap:
        logger.debug("Selection %s: %s -> %s", event, self.state.selected, new_state.selected)
        self.state = new_state
        return self.emphasis

    def click_project(self, project_id: str) -> EmphasisMap:
        if project_id not in self.layout.nodes:
            raise UnknownProjectError(f"Project not found: {project_id}")
        return self._apply(self.state.click_project(project_id), f"click({project_id})")

    def click_background(self) -> EmphasisMap:
        return self._apply(self.state.click_background(), "background")

    def reset(self) -> EmphasisMap:
        return self._apply(self.state.reset(), "reset")


# --- Details ---


def describe_project(dataset: FlowDataset, project_id: str) -> ProjectInfo:
    """Name, size, upstream and downstream projects of one project."""
    project = dataset.project(project_id)
    names = {p.id: p.name for p in dataset.projects}

    depends_on = [names[link.source] for link in dataset.links if link.target == project_id]
    influences = [names[link.target] for link in dataset.links if link.source == project_id]

    lines = []
    if depends_on:
        lines.append(f"Depends on: {', '.join(depends_on)}")
    if influences:
        lines.append(f"Influences: {', '.join(influences)}")

    return ProjectInfo(
        id=project.id,
        name=project.name,
        size=project.size,
        depends_on=depends_on,
        influences=influences,
        summary="\n".join(lines) or "Standalone project",
    )
