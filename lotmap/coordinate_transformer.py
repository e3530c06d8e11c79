"""
Coordinate transforms from AutoCAD space to canvas space.

Canvas x is the offset from the dataset minimum, scaled. Canvas y is the
absolute offset from the minimum, scaled, so it is never negative.
"""

# Lotmap imports
from lotmap import config
from lotmap.exceptions import DegenerateBoundsError
from lotmap.geometry_utils import Bounds, points_to_array

# Standard library imports
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

# Third-party imports
import numpy as np


@dataclass(frozen=True)
class TransformedPoint:
    """A point in canvas space."""

    x: float
    y: float


def transform_point(
    x: float,
    y: float,
    min_x: float,
    min_y: float,
    scale: float = 1.0,
    flip_y: bool = config.DEFAULT_FLIP_Y,
) -> TransformedPoint:
    """
    Map one raw CAD point to canvas space.

    Args:
        x, y: Raw CAD coordinates.
        min_x, min_y: Origin of the dataset (usually the bounds minimum).
        scale: Canvas units per CAD unit.
        flip_y: Express y as the absolute offset from min_y.

    Returns:
        TransformedPoint: ``((x - min_x) * scale, |y - min_y| * scale)`` when
        flipping, ``((x - min_x) * scale, (y - min_y) * scale)`` otherwise.
    """
    out_x = (x - min_x) * scale
    if flip_y:
        out_y = abs(y - min_y) * scale
    else:
        out_y = (y - min_y) * scale
    return TransformedPoint(out_x, out_y)


def transform_points(
    points: Iterable[Any],
    min_x: float,
    min_y: float,
    scale: float = 1.0,
    flip_y: bool = config.DEFAULT_FLIP_Y,
) -> List[TransformedPoint]:
    """Vectorised ``transform_point`` over Rows, TransformedPoints or (x, y) pairs."""
    coords = points_to_array(points)
    if coords.shape[0] == 0:
        return []

    out = np.empty_like(coords)
    out[:, 0] = (coords[:, 0] - min_x) * scale
    dy = coords[:, 1] - min_y
    out[:, 1] = (np.abs(dy) if flip_y else dy) * scale
    return [TransformedPoint(float(px), float(py)) for px, py in out]


def compute_global_scale(
    bounds: Optional[Bounds],
    target_pixel_width: float = config.TARGET_PIXEL_WIDTH,
) -> float:
    """
    Scale factor that fits the dataset width onto ``target_pixel_width`` pixels.

    Raises:
        DegenerateBoundsError: bounds are None (no data) or have zero width.
    """
    if bounds is None:
        raise DegenerateBoundsError("Cannot compute a scale without bounds (empty dataset)")

    width = bounds.width
    if not np.isfinite(width) or width <= 0:
        raise DegenerateBoundsError(
            f"Cannot compute a scale for zero-width bounds (minX={bounds.min_x}, maxX={bounds.max_x})"
        )
    return target_pixel_width / width
