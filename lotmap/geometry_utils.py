# Standard library imports
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple

# Third-party imports
import numpy as np
import pandas as pd


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box over a set of raw or canvas coordinates."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def as_dict(self) -> dict:
        return {"minX": self.min_x, "minY": self.min_y, "maxX": self.max_x, "maxY": self.max_y}


def _xy(point: Any) -> Tuple[float, float]:
    """Return (x, y) from a Row, TransformedPoint or plain pair."""
    if hasattr(point, "x") and hasattr(point, "y"):
        return point.x, point.y
    return point[0], point[1]


def points_to_array(points: Iterable[Any]) -> np.ndarray:
    """Stack points into an (N, 2) float array."""
    coords = [_xy(p) for p in points]
    if not coords:
        return np.empty((0, 2), dtype=float)
    return np.asarray(coords, dtype=float)


def calculate_bounds(points: Iterable[Any]) -> Optional[Bounds]:
    """
    Calculates the min/max reduction over x and y of a point set.

    Args:
        points: Rows, TransformedPoints or (x, y) tuples.

    Returns:
        Bounds or None: None when the input is empty, so callers cannot
        derive a scale from "no data" by accident.
    """
    coords = points_to_array(points)
    if coords.shape[0] == 0:
        return None

    min_x, min_y = coords.min(axis=0)
    max_x, max_y = coords.max(axis=0)
    return Bounds(float(min_x), float(min_y), float(max_x), float(max_y))


def merge_bounds(bounds: Iterable[Optional[Bounds]]) -> Optional[Bounds]:
    """Union of several bounds, ignoring None entries."""
    valid = [b for b in bounds if b is not None]
    if not valid:
        return None
    return Bounds(
        min(b.min_x for b in valid),
        min(b.min_y for b in valid),
        max(b.max_x for b in valid),
        max(b.max_y for b in valid),
    )


def calc_centroid_of_points(
        df: pd.DataFrame,
        x_col: str = "x_coords",
        y_col: str = "y_coords") -> Optional[Tuple[float, float]]:
    """
    Calculates the arithmetic-mean centroid from coordinates in a DataFrame.

    Args:
        df (pd.DataFrame): The DataFrame containing the coordinates.
        x_col (str): The name of the column containing x-coordinates.
        y_col (str): The name of the column containing y-coordinates.

    Returns:
        tuple or None: A tuple (x, y) for the centroid, or None if the DataFrame is empty.
    """
    if df.empty:
        return None

    centroid_x = df[x_col].mean()
    centroid_y = df[y_col].mean()

    return (float(centroid_x), float(centroid_y))
