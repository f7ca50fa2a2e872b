"""PNG rendering of a laid-out diagram with Pillow.

Ribbons are flattened into polygons (upper edge forward, lower edge back)
and composited one layer at a time so their opacity blends. An optional
selected project restyles elements through the same emphasis derivation
the interactive page uses.
"""

import logging
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from phaseflow.config import Config
from phaseflow.engine import DiagramLayout
from phaseflow.models import FlowDataset, UnknownProjectError
from phaseflow.output.colors import darken, grayscale, hex_to_rgb
from phaseflow.phases import Point
from phaseflow.selection import (
    Emphasis,
    SelectionState,
    derive_emphasis,
    node_style,
    ribbon_style,
)

logger = logging.getLogger(__name__)

# --- Fonts ---

_FONT_BOLD = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"
_FONT_REGULAR = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"


def _font(size: int, bold: bool = False) -> ImageFont.ImageFont:
    path = _FONT_BOLD if bold else _FONT_REGULAR
    try:
        return ImageFont.truetype(path, size)
    except OSError:
        logger.debug("Font %s unavailable, using Pillow default", path)
        return ImageFont.load_default()


# --- Colors ---

BG = (255, 255, 255, 255)
TEXT = (51, 51, 51)
AXIS = (51, 51, 51)

CURVE_SEGMENTS = 48
DASH = (3, 2)


def _dashed_line(draw: ImageDraw.ImageDraw, p1: Point, p2: Point, fill, width: int, scale: float) -> None:
    """Straight dashed segment, DASH on/off lengths in unscaled units."""
    dx, dy = p2.x - p1.x, p2.y - p1.y
    length = (dx * dx + dy * dy) ** 0.5
    if length == 0:
        return
    on, off = DASH[0] * scale, DASH[1] * scale
    pos = 0.0
    while pos < length:
        end = min(pos + on, length)
        draw.line(
            [(p1.x + dx * pos / length, p1.y + dy * pos / length),
             (p1.x + dx * end / length, p1.y + dy * end / length)],
            fill=fill, width=width,
        )
        pos = end + off


def render_png(
    layout: DiagramLayout,
    dataset: FlowDataset,
    config: Config,
    selected: str | None = None,
) -> Image.Image:
    """Draw the diagram. Returns an RGB image scaled by render.png_scale."""
    if selected is not None and selected not in layout.nodes:
        raise UnknownProjectError(f"Project not found: {selected}")

    m = config.layout
    render = config.render
    s = render.png_scale
    projects = dataset.project_index()
    emphasis = derive_emphasis(SelectionState(selected), layout)

    def tx(p: Point) -> tuple[float, float]:
        return ((p.x + m.margin_left) * s, (p.y + m.margin_top) * s)

    img = Image.new("RGBA", (m.width * s, m.height * s), BG)
    draw = ImageDraw.Draw(img)

    # --- Title & axes ---
    title_font = _font(18 * s, bold=True)
    tw = draw.textlength(render.title, font=title_font)
    draw.text(((m.margin_left + layout.plot_width / 2) * s - tw / 2, 8 * s), render.title,
              font=title_font, fill=TEXT)

    origin = tx(Point(0, layout.plot_height))
    draw.line([origin, tx(Point(layout.plot_width, layout.plot_height))], fill=AXIS, width=s)
    draw.line([tx(Point(0, 0)), origin], fill=AXIS, width=s)

    tick_font = _font(10 * s)
    for t in layout.x_ticks:
        x, y = tx(Point(t.position, layout.plot_height))
        draw.line([(x, y), (x, y + 6 * s)], fill=AXIS, width=s)
        label_w = int(draw.textlength(t.label, font=tick_font)) + 2
        txt_img = Image.new("RGBA", (label_w, 14 * s), (0, 0, 0, 0))
        ImageDraw.Draw(txt_img).text((0, 0), t.label, font=tick_font, fill=TEXT)
        rotated = txt_img.rotate(45, expand=True, resample=Image.BICUBIC)
        img.alpha_composite(rotated, (max(0, int(x - rotated.width)), int(y + 8 * s)))

    for t in layout.y_ticks:
        x, y = tx(Point(0, t.position))
        draw.line([(x - 6 * s, y), (x, y)], fill=AXIS, width=s)
        label_w = draw.textlength(t.label, font=tick_font)
        draw.text((x - 9 * s - label_w, y - 6 * s), t.label, font=tick_font, fill=TEXT)

    axis_font = _font(12 * s)
    ax, ay = tx(Point(layout.plot_width / 2, layout.plot_height + m.margin_bottom - 18))
    draw.text((ax - draw.textlength("Time", font=axis_font) / 2, ay), "Time", font=axis_font, fill=TEXT)
    label = "Project Size"
    txt_img = Image.new("RGBA", (int(draw.textlength(label, font=axis_font)) + 2, 16 * s), (0, 0, 0, 0))
    ImageDraw.Draw(txt_img).text((0, 0), label, font=axis_font, fill=TEXT)
    rotated = txt_img.rotate(90, expand=True, resample=Image.BICUBIC)
    img.alpha_composite(rotated, (4 * s, max(0, int(tx(Point(0, layout.plot_height / 2))[1] - rotated.height / 2))))

    # --- Project bars ---
    label_font = _font(10 * s, bold=True)
    bars = Image.new("RGBA", img.size, (0, 0, 0, 0))
    bars_draw = ImageDraw.Draw(bars)
    for node in layout.nodes.values():
        p = projects[node.id]
        style = node_style(emphasis.projects[node.id], render)
        fill = hex_to_rgb(p.color)
        stroke = hex_to_rgb(darken(p.color, render.darken))
        if style.grayscale:
            fill, stroke = grayscale(fill), grayscale(stroke)
        alpha = round(255 * style.opacity)
        x0, y0, x1, y1 = node.rect()
        bars_draw.rectangle([tx(Point(x0, y0)), tx(Point(x1, y1))], fill=(*fill, alpha), outline=(*stroke, alpha),
                            width=max(1, round(style.stroke_width * s / 2)))
    img.alpha_composite(bars)

    for node in layout.nodes.values():
        p = projects[node.id]
        lw = draw.textlength(p.name, font=label_font)
        lx, ly = tx(Point(node.x, node.bottom + 5))
        draw.text((lx - lw / 2, ly), p.name, font=label_font, fill=TEXT)

    # --- Ribbons ---
    for ribbon in layout.ribbons:
        source = projects[ribbon.source]
        mapping = emphasis.standalone if ribbon.target is None else emphasis.links
        style = ribbon_style(mapping.get(ribbon.key, Emphasis.NORMAL), render)
        fill = hex_to_rgb(source.color)
        stroke = hex_to_rgb(darken(source.color, render.darken))
        if style.grayscale:
            fill, stroke = grayscale(fill), grayscale(stroke)
        alpha = round(255 * render.ribbon_opacity * style.opacity)

        outline = ribbon.upper.flatten(CURVE_SEGMENTS) + ribbon.lower.flatten(CURVE_SEGMENTS)[::-1]
        layer = Image.new("RGBA", img.size, (0, 0, 0, 0))
        layer_draw = ImageDraw.Draw(layer)
        layer_draw.polygon([tx(p) for p in outline], fill=(*fill, alpha),
                           outline=(*stroke, round(255 * style.opacity)),
                           width=max(1, round(style.stroke_width * s)))
        for d in ribbon.dividers:
            p1, p2 = tx(d.p1), tx(d.p2)
            _dashed_line(layer_draw, Point(*p1), Point(*p2), (*stroke, round(255 * style.opacity)),
                         width=max(1, round(render.divider_stroke * s)), scale=s)
        img = Image.alpha_composite(img, layer)

    return img.convert("RGB")


def write_png(
    layout: DiagramLayout,
    dataset: FlowDataset,
    config: Config,
    output_path: Path,
    selected: str | None = None,
) -> Path:
    img = render_png(layout, dataset, config, selected=selected)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    img.save(str(output_path), "PNG")
    logger.info("Diagram saved to %s (%dx%d)", output_path, img.width, img.height)
    return output_path
