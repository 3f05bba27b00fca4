"""Cell color derivation from age and crowding."""

from typing import NamedTuple


class Color(NamedTuple):
    """RGBA color with channels in the range 0.0-1.0."""

    r: float
    g: float
    b: float
    a: float = 1.0


# Young cells are drawn blue, settled cells green
ACTIVE_COLOR = Color(0.0, 0.0, 1.0)
STABLE_COLOR = Color(0.0, 1.0, 0.0)

ACTIVE_AGE_LIMIT = 10
DARKEN_PER_NEIGHBOR = 0.05
MAX_DARKEN = 0.2


def cell_color(age: int, neighbor_count: int) -> Color:
    """Derive the display color of a living cell.

    Cells aged up to ACTIVE_AGE_LIMIT use the active color, older cells the
    stable color. Each neighbor darkens the color by 5%, up to 20% at four or
    more neighbors. Alpha is always opaque.

    Args:
        age: Consecutive generations the cell has been alive
        neighbor_count: Number of living neighbors (0-8)

    Returns:
        Color for the cell
    """
    base = ACTIVE_COLOR if age <= ACTIVE_AGE_LIMIT else STABLE_COLOR
    brightness = 1.0 - min(neighbor_count * DARKEN_PER_NEIGHBOR, MAX_DARKEN)
    return Color(base.r * brightness, base.g * brightness, base.b * brightness, 1.0)


def to_hex(color: Color) -> str:
    """Format a color as a Tk-compatible '#rrggbb' string (alpha is dropped)."""
    channels = (round(max(0.0, min(1.0, c)) * 255) for c in color[:3])
    return "#" + "".join(f"{c:02x}" for c in channels)
