#!/usr/bin/env python3
"""phaseflow MCP server: diagram layout and selection as tools."""

import json
import logging
import sys
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from phaseflow.config import Config, load_config
from phaseflow.engine import DiagramLayout, compute_layout
from phaseflow.models import FlowDataset
from phaseflow.sample_data import sample_dataset
from phaseflow.selection import SelectionState, derive_emphasis, describe_project

mcp = FastMCP("phaseflow")
logger = logging.getLogger(__name__)

# Redirect all logging to stderr so stdout stays clean for MCP stdio transport
logging.basicConfig(
    stream=sys.stderr,
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

_config: Config | None = None
_dataset: FlowDataset | None = None
_layout: DiagramLayout | None = None


def _get_config() -> Config:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def _get_dataset() -> FlowDataset:
    global _dataset
    if _dataset is None:
        _dataset = sample_dataset()
    return _dataset


def _get_layout() -> DiagramLayout:
    global _layout
    if _layout is None:
        _layout = compute_layout(_get_dataset(), _get_config())
    return _layout


def _layout_json(layout: DiagramLayout, selected: Optional[str]) -> str:
    data = layout.to_dict()
    if selected is not None and selected not in layout.nodes:
        raise LookupError(f"Project not found: {selected}")
    data["emphasis"] = derive_emphasis(SelectionState(selected), layout).to_dict()
    return json.dumps(data)


@mcp.tool()
def get_layout(selected: Optional[str] = None) -> str:
    """Get node, ribbon and axis geometry for the diagram, with emphasis for an optional selected project id."""
    try:
        return _layout_json(_get_layout(), selected)
    except (ValueError, LookupError) as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def get_project_info(project_id: str) -> str:
    """Get a project's size, the projects it depends on and the projects it influences."""
    try:
        return json.dumps(describe_project(_get_dataset(), project_id).model_dump())
    except (ValueError, LookupError) as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def layout_records(
    projects: list[dict[str, Any]],
    links: Optional[list[dict[str, Any]]] = None,
    standalone: Optional[list[dict[str, Any]]] = None,
    selected: Optional[str] = None,
) -> str:
    """Lay out caller-supplied records. Projects: {id, name, time (YYYY-MM-DD), size, color}.
    Links: {source, target, strength, duration (months), phases}. Standalone: {source, duration, phases}."""
    try:
        dataset = FlowDataset.from_records(projects, links, standalone)
        return _layout_json(compute_layout(dataset, _get_config()), selected)
    except (ValueError, LookupError) as e:
        return json.dumps({"error": str(e)})


if __name__ == "__main__":
    mcp.run()
