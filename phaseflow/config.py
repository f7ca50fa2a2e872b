"""Configuration loading for phaseflow."""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_ENV = "PHASEFLOW_CONFIG"


class LayoutConfig(BaseModel):
    width: int = 900
    height: int = 500
    margin_top: int = 40
    margin_right: int = 100
    margin_bottom: int = 50
    margin_left: int = 50
    bar_width: float = 8.0
    bar_scale: float = 4.0  # bar half-height = sqrt(size) * bar_scale
    min_thickness: float = 3.0
    thickness_per_phase: float = 8.0
    divider_scale: float = 1.2  # divider length as a multiple of ribbon thickness
    control_near: float = 0.4
    control_far: float = 0.6

    @property
    def plot_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def plot_height(self) -> float:
        return self.height - self.margin_top - self.margin_bottom


class RenderConfig(BaseModel):
    title: str = "Project Timeline Sankey Diagram"
    transition_ms: int = 300
    ribbon_opacity: float = 0.9
    dimmed_opacity: float = 0.2
    node_stroke: float = 2.0
    emphasized_stroke: float = 4.0
    ribbon_stroke: float = 0.5
    emphasized_ribbon_stroke: float = 2.0
    divider_stroke: float = 1.5
    darken: float = 0.5
    png_scale: int = 2
    output_dir: str = "data/diagrams"


class Config(BaseModel):
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)

    @property
    def resolved_output_dir(self) -> Path:
        """Resolve output_dir relative to project root."""
        p = Path(self.render.output_dir)
        if p.is_absolute():
            return p
        return _project_root() / p


def _project_root() -> Path:
    return Path(__file__).parent.parent


def load_config(config_path: Path | None = None) -> Config:
    """Read layout and render settings from YAML.

    Lookup order: the explicit path, then $PHASEFLOW_CONFIG, then
    <project root>/config.yaml. A missing file means all defaults; sections
    and keys left out of the file keep their defaults.
    """
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV)
        config_path = Path(env_path) if env_path else _project_root() / "config.yaml"

    if not config_path.exists():
        logger.debug("No config at %s, using defaults", config_path)
        return Config()

    raw: Any = yaml.safe_load(config_path.read_text()) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config {config_path} must be a mapping, got {type(raw).__name__}")
    logger.debug("Loaded config from %s", config_path)
    return Config(**raw)
