"""Self-contained HTML/SVG page for a laid-out diagram.

Geometry and emphasis come from the engine. The page embeds a table of
precomputed emphasis classes for every possible selection; a few lines of
JS only toggle the selected id and swap classes, and CSS transitions the
style change.
"""

import json
import logging
from pathlib import Path

from phaseflow.config import Config
from phaseflow.engine import DiagramLayout
from phaseflow.models import FlowDataset, UnknownProjectError
from phaseflow.output.colors import darken
from phaseflow.selection import SelectionState, derive_emphasis

logger = logging.getLogger(__name__)

GRAYSCALE_MATRIX = "0.3333 0.3333 0.3333 0 0 0.3333 0.3333 0.3333 0 0 0.3333 0.3333 0.3333 0 0 0 0 0 1 0"


def _esc(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;").replace("'", "&#39;")


def _f(v: float) -> str:
    return f"{v:.2f}"


def emphasis_table(layout: DiagramLayout) -> dict[str, dict[str, dict[str, str]]]:
    """Emphasis classes for no selection ("") and for each project selected."""
    table = {"": derive_emphasis(SelectionState(), layout).to_dict()}
    for pid in layout.nodes:
        table[pid] = derive_emphasis(SelectionState(pid), layout).to_dict()
    return table


def _axes_svg(layout: DiagramLayout, config: Config) -> str:
    h = layout.plot_height
    parts = [f'<g class="x-axis" transform="translate(0,{_f(h)})">',
             f'<line x1="0" y1="0" x2="{_f(layout.plot_width)}" y2="0" class="domain"/>']
    for t in layout.x_ticks:
        parts.append(
            f'<g transform="translate({_f(t.position)},0)"><line y2="6"/>'
            f'<text dx="-.8em" dy="1.2em" transform="rotate(-45)" text-anchor="end">{_esc(t.label)}</text></g>'
        )
    parts.append("</g>")

    parts.append(f'<g class="y-axis"><line x1="0" y1="0" x2="0" y2="{_f(h)}" class="domain"/>')
    for t in layout.y_ticks:
        parts.append(
            f'<g transform="translate(0,{_f(t.position)})"><line x2="-6"/>'
            f'<text x="-9" dy=".32em" text-anchor="end">{_esc(t.label)}</text></g>'
        )
    parts.append("</g>")

    m = config.layout
    parts.append(
        f'<text class="axis-title" transform="translate({_f(layout.plot_width / 2)},{_f(h + m.margin_bottom - 5)})" '
        f'text-anchor="middle">Time</text>'
    )
    parts.append(
        f'<text class="axis-title" transform="rotate(-90)" y="{-m.margin_left + 15}" x="{_f(-h / 2)}" '
        f'dy="1em" text-anchor="middle">Project Size</text>'
    )
    return "\n".join(parts)


def _diagram_svg(layout: DiagramLayout, dataset: FlowDataset, config: Config) -> str:
    projects = dataset.project_index()
    render = config.render
    parts: list[str] = []

    for node in layout.nodes.values():
        p = projects[node.id]
        x0, y0, x1, y1 = node.rect()
        parts.append(
            f'<g class="project"><rect class="project-node" data-project="{_esc(p.id)}" '
            f'x="{_f(x0)}" y="{_f(y0)}" width="{_f(x1 - x0)}" height="{_f(y1 - y0)}" '
            f'fill="{p.color}" stroke="{darken(p.color, render.darken)}">'
            f'<title>{_esc(p.name)} (Size: {p.size:g})</title></rect>'
            f'<text class="project-label" x="{_f(node.x)}" y="{_f(node.bottom + 15)}" '
            f'text-anchor="middle">{_esc(p.name)}</text></g>'
        )

    for ribbon in layout.ribbons:
        source = projects[ribbon.source]
        stroke = darken(source.color, render.darken)
        if ribbon.target is None:
            attr, label = "data-standalone", f"{source.name} (Standalone)"
        else:
            attr, label = "data-link", f"{source.name} → {projects[ribbon.target].name}"
        parts.append(
            f'<g class="{ribbon.kind}"><path class="ribbon" {attr}="{_esc(ribbon.key)}" d="{ribbon.svg_path}" '
            f'fill="{source.color}" fill-opacity="{render.ribbon_opacity}" stroke="{stroke}" '
            f'stroke-width="{render.ribbon_stroke}">'
            f'<title>{_esc(label)}\nPhases: {ribbon.phases}, Duration: {ribbon.duration} months</title></path>'
        )
        for d in ribbon.dividers:
            parts.append(
                f'<line class="phase-divider" x1="{_f(d.p1.x)}" y1="{_f(d.p1.y)}" '
                f'x2="{_f(d.p2.x)}" y2="{_f(d.p2.y)}" stroke="{stroke}" '
                f'stroke-width="{render.divider_stroke}" stroke-dasharray="3,2"/>'
            )
        parts.append("</g>")

    return "\n".join(parts)


def render_html(
    layout: DiagramLayout,
    dataset: FlowDataset,
    config: Config,
    selected: str | None = None,
) -> str:
    if selected is not None and selected not in layout.nodes:
        raise UnknownProjectError(f"Project not found: {selected}")
    m = config.layout
    render = config.render
    table_json = json.dumps(emphasis_table(layout), ensure_ascii=False).replace("</", "<\\/")
    selected_json = json.dumps(selected).replace("</", "<\\/")
    title = _esc(render.title)
    ms = render.transition_ms

    return f'''<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
<style>
body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Helvetica, Arial, sans-serif; color: #333; margin: 16px; }}
svg text {{ font-size: 10px; fill: #333; }}
.x-axis line, .y-axis line {{ stroke: #333; }}
.axis-title {{ font-size: 12px; }}
.chart-title {{ font-size: 18px; font-weight: bold; }}
.project-label {{ font-weight: bold; }}
.project-node {{ stroke-width: {render.node_stroke}; cursor: pointer; transition: stroke-width {ms}ms, opacity {ms}ms; }}
.project-node:hover {{ stroke-width: 3; }}
.project-node.emphasized {{ stroke-width: {render.emphasized_stroke}; }}
.project-node.dimmed {{ opacity: {render.dimmed_opacity}; filter: url(#grayscale); }}
.ribbon {{ transition: opacity {ms}ms, stroke-width {ms}ms; }}
.ribbon:hover {{ fill-opacity: 1; stroke-width: 1.5; }}
.ribbon.emphasized {{ stroke-width: {render.emphasized_ribbon_stroke}; }}
.ribbon.dimmed {{ opacity: {render.dimmed_opacity}; filter: url(#grayscale); }}
.reset-button {{ cursor: pointer; opacity: 0; transition: opacity {ms}ms; }}
.reset-button.visible {{ opacity: 1; }}
</style>
</head>
<body>
<svg id="diagram" width="{m.width}" height="{m.height}">
<defs><filter id="grayscale"><feColorMatrix type="matrix" values="{GRAYSCALE_MATRIX}"/></filter></defs>
<g transform="translate({m.margin_left},{m.margin_top})">
<text class="chart-title" x="{_f(layout.plot_width / 2)}" y="-10" text-anchor="middle">{title}</text>
{_axes_svg(layout, config)}
{_diagram_svg(layout, dataset, config)}
<g class="reset-button" transform="translate({_f(layout.plot_width - 75)},{_f(layout.plot_height - 20)})">
<rect width="70" height="24" rx="4" fill="#f8f9fa" stroke="#dee2e6"/>
<text x="35" y="16" text-anchor="middle">Reset Selection</text>
</g>
</g>
</svg>
<script>
const emphasis = {table_json};
let selected = {selected_json};

function apply() {{
  const table = emphasis[selected === null ? "" : selected];
  const groups = [["data-project", "projects"], ["data-link", "links"], ["data-standalone", "standalone"]];
  for (const [attr, kind] of groups) {{
    document.querySelectorAll(`[${{attr}}]`).forEach(el => {{
      el.classList.remove("emphasized", "dimmed");
      const e = table[kind][el.getAttribute(attr)];
      if (e && e !== "normal") el.classList.add(e);
    }});
  }}
  document.querySelector(".reset-button").classList.toggle("visible", selected !== null);
}}

document.querySelectorAll("[data-project]").forEach(el => {{
  el.addEventListener("click", ev => {{
    ev.stopPropagation();
    const id = el.getAttribute("data-project");
    selected = selected === id ? null : id;
    apply();
  }});
}});
document.querySelector(".reset-button").addEventListener("click", ev => {{
  ev.stopPropagation();
  selected = null;
  apply();
}});
document.getElementById("diagram").addEventListener("click", () => {{
  selected = null;
  apply();
}});
apply();
</script>
</body>
</html>'''


def write_html(
    layout: DiagramLayout,
    dataset: FlowDataset,
    config: Config,
    output_path: Path,
    selected: str | None = None,
) -> Path:
    html = render_html(layout, dataset, config, selected=selected)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")
    logger.info("Diagram page saved to %s (%d nodes, %d ribbons)",
                output_path, len(layout.nodes), len(layout.ribbons))
    return output_path
