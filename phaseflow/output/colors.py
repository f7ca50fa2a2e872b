"""Color helpers shared by the HTML and PNG renderers."""

# Per-step channel multiplier for darker shades
_DARKER = 0.7


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    c = color.lstrip("#")
    return int(c[0:2], 16), int(c[2:4], 16), int(c[4:6], 16)


def rgb_to_hex(rgb: tuple[int, int, int]) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def darken(color: str, k: float = 0.5) -> str:
    """Darker shade of a hex color, k steps of 0.7× per channel."""
    f = _DARKER ** k
    r, g, b = hex_to_rgb(color)
    return rgb_to_hex((round(r * f), round(g * f), round(b * f)))


def grayscale(rgb: tuple[int, int, int]) -> tuple[int, int, int]:
    """Equal-weight desaturation, matching the SVG grayscale filter matrix."""
    v = round(sum(rgb) / 3)
    return v, v, v
