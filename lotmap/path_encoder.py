"""Path descriptors (move / line / close) for polylines and polygons."""

# Lotmap imports
from lotmap.coordinate_transformer import TransformedPoint
from lotmap.geometry_utils import calculate_bounds

# Standard library imports
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

MOVE = "M"
LINE = "L"
CLOSE = "Z"


@dataclass(frozen=True)
class PathCommand:
    op: str
    x: Optional[float] = None
    y: Optional[float] = None

    def to_svg(self) -> str:
        if self.op == CLOSE:
            return CLOSE
        return f"{self.op} {_fmt(self.x)} {_fmt(self.y)}"


def _fmt(value: float) -> str:
    # 10.0 -> "10", 2.5 -> "2.5"
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def relative_to_origin(points: Sequence[TransformedPoint]) -> Tuple[List[TransformedPoint], Optional[TransformedPoint]]:
    """
    Shift points so their bounding-box origin sits at (0, 0).

    Returns:
        The shifted points and the original origin (None for empty input).
    """
    bounds = calculate_bounds(points)
    if bounds is None:
        return [], None
    origin = TransformedPoint(bounds.min_x, bounds.min_y)
    shifted = [TransformedPoint(p.x - origin.x, p.y - origin.y) for p in points]
    return shifted, origin


def encode_path(points: Sequence[TransformedPoint], close: bool = False) -> Tuple[PathCommand, ...]:
    """First point moves, each later point draws a line; ``close`` appends Z."""
    if not points:
        return ()
    commands = [PathCommand(MOVE, points[0].x, points[0].y)]
    commands.extend(PathCommand(LINE, p.x, p.y) for p in points[1:])
    if close:
        commands.append(PathCommand(CLOSE))
    return tuple(commands)


def to_svg_path(commands: Sequence[PathCommand]) -> str:
    return " ".join(c.to_svg() for c in commands)
