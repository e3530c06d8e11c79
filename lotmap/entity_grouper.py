"""
Entity and layer grouping for parsed CSV rows.

Rows sharing a ``(layer, entity_handle)`` pair form one drawable entity. The
row order inside an entity is the vertex order of the shape.
"""

# Lotmap imports
from lotmap.csv_parser import Row, rows_to_dataframe
from lotmap.geometry_utils import Bounds, calculate_bounds, merge_bounds

# Standard library imports
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# Layers that may render as filled polygons once closed
POLYGON_LAYER_PREFIX = "p-parking-"
POLYGON_LAYER_SUBSTRING = "area"
ELEVATOR_LAYER = "e-elevator"

# Ordering used when listing layers, lower first; anything else sorts after
LAYER_PRIORITY: Dict[str, int] = {
    # Boundaries
    "OUTLINE": 1,
    "BOUNDARY": 1,
    "BORDER": 1,
    # Structural elements
    "INNER_LINE": 2,
    "LINE": 2,
    "WALL": 2,
    "STRUCTURE": 2,
    # Parking areas
    "PARKING_SPOT": 3,
    "PARKING": 3,
    "SPOT": 3,
    # Objects
    "CCTV": 4,
    "CHARGER": 4,
    "SENSOR": 4,
    "CAMERA": 4,
    "EV_CHARGER": 4,
    # Annotations
    "TEXT": 5,
    "LABEL": 5,
    "ANNOTATION": 5,
}
DEFAULT_LAYER_PRIORITY = 99


def entity_key(layer: str, entity_handle: str) -> str:
    return f"{layer}_{entity_handle}"


def is_closed_shape(points: Sequence[Row]) -> bool:
    """Three or more points whose first and last (x, y) are exactly equal."""
    if len(points) < 3:
        return False
    first, last = points[0], points[-1]
    return first.x == last.x and first.y == last.y


def is_polygon_layer_name(layer: str) -> bool:
    return (
        layer.startswith(POLYGON_LAYER_PREFIX)
        or POLYGON_LAYER_SUBSTRING in layer
        or layer == ELEVATOR_LAYER
    )


@dataclass(frozen=True)
class Entity:
    """
    One drawable shape: every row sharing a (layer, entity_handle) key.

    Attributes:
        layer: Layer of the first row in the group.
        entity_handle: CAD handle shared by all rows.
        points: Rows in CSV order, which is also vertex order.
        is_closed: First and last point coincide and there are >= 3 points.
        is_polygon: Closed and on a polygon-eligible layer.
    """

    layer: str
    entity_handle: str
    points: Tuple[Row, ...]
    is_closed: bool
    is_polygon: bool

    @property
    def key(self) -> str:
        return entity_key(self.layer, self.entity_handle)

    @classmethod
    def from_rows(cls, rows: Sequence[Row]) -> "Entity":
        if not rows:
            raise ValueError("An entity needs at least one row")
        layer = rows[0].layer
        closed = is_closed_shape(rows)
        return cls(
            layer=layer,
            entity_handle=rows[0].entity_handle,
            points=tuple(rows),
            is_closed=closed,
            is_polygon=closed and is_polygon_layer_name(layer),
        )


def group_by_entity(rows: Iterable[Row]) -> List[Entity]:
    """
    Group rows into entities keyed by ``layer + "_" + entity_handle``.

    Groups appear in first-seen order and keep their rows in input order,
    so the groups form a partition of the input.
    """
    groups: Dict[str, List[Row]] = {}
    for row in rows:
        groups.setdefault(entity_key(row.layer, row.entity_handle), []).append(row)

    entities = [Entity.from_rows(points) for points in groups.values()]
    logger.info(f"Grouped into {len(entities)} entities")
    return entities


def get_layer_stats(rows: Iterable[Row]) -> Dict[str, int]:
    """Number of rows per layer, in first-seen layer order."""
    df = rows_to_dataframe(rows)
    if df.empty:
        return {}
    counts = df.groupby("layer", sort=False).size()
    return {str(layer): int(count) for layer, count in counts.items()}


@dataclass
class LayerGroup:
    """All entities sharing one layer, with their combined raw bounds."""

    layer: str
    entities: List[Entity] = field(default_factory=list)
    bounds: Optional[Bounds] = None

    @property
    def count(self) -> int:
        return len(self.entities)


@dataclass(frozen=True)
class LayerSummary:
    total_layers: int
    total_entities: int
    layer_names: List[str]
    global_bounds: Optional[Bounds]


def layer_priority(layer: str) -> int:
    return LAYER_PRIORITY.get(layer.upper(), DEFAULT_LAYER_PRIORITY)


def sort_layers_by_priority(groups: List[LayerGroup]) -> List[LayerGroup]:
    """Priority table order first, then case-insensitive alphabetical within the same priority."""
    return sorted(groups, key=lambda g: (layer_priority(g.layer), g.layer.lower(), g.layer))


def group_by_layer(entities: Iterable[Entity]) -> List[LayerGroup]:
    """
    Group entities by layer name and compute per-layer bounds.

    Entities with an empty layer name are filed under ``UNKNOWN``.
    """
    layer_map: Dict[str, LayerGroup] = {}
    for entity in entities:
        name = entity.layer or "UNKNOWN"
        layer_map.setdefault(name, LayerGroup(layer=name)).entities.append(entity)

    for group in layer_map.values():
        group.bounds = calculate_bounds(p for e in group.entities for p in e.points)

    return sort_layers_by_priority(list(layer_map.values()))


def get_layer_summary(groups: Sequence[LayerGroup]) -> LayerSummary:
    return LayerSummary(
        total_layers=len(groups),
        total_entities=sum(g.count for g in groups),
        layer_names=[g.layer for g in groups],
        global_bounds=merge_bounds(g.bounds for g in groups),
    )
