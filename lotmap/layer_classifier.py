"""
Layer Classifier
================

Static lookup tables that map a CAD layer name to a rendering category, a
fill/stroke colour pair and, for icon layers, an asset path and icon size.

All tables are ordered and evaluated top to bottom; the first matching prefix
wins. Classification depends on the layer string alone, except for the
closed-shape fallback in ``resolve_render_category``.
"""

# Lotmap imports
from lotmap import config

# Standard library imports
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class LayerCategory(str, Enum):
    POINT = "point"
    POLYGON = "polygon"
    LINE = "line"
    TEXT = "text"
    UNCLASSIFIED = "unclassified"


# Category tables, checked in this order: point, text, polygon, line
POINT_LAYER_PREFIXES: Tuple[str, ...] = (
    "c-cctv",
    "c-emergencybell",
    "e-charger",
    "e-pillar",
    "l-occupancylight",
    "e-entrance",
    "e-onepassreader",
)

TEXT_LAYER_PREFIXES: Tuple[str, ...] = (
    "l-lightinglineframe",
    "p-parking-cctvid",
    "c-cctv-ip",
    "c-cctv-id",
    "e-zone-nametext",
)

POLYGON_LAYER_PREFIXES: Tuple[str, ...] = (
    "p-parking-",
    "e-zone-area",
    "p-guideboard-area",
    "e-elevator",
)

LINE_LAYER_PREFIXES: Tuple[str, ...] = (
    "e-outline",
    "e-innerline",
    "l-lightingline",
    "e-drivewayline",
)

# Palette tables, more specific prefixes first
FILL_COLORS: Tuple[Tuple[str, str], ...] = (
    ("p-parking-large-electric", "var(--color-map-parking-electric-fill)"),
    ("p-parking-large-women", "var(--color-map-parking-women-fill)"),
    ("p-parking-disable", "var(--color-map-parking-disable-fill)"),
    ("p-parking-small", "var(--color-map-parking-basic-fill)"),
    ("p-parking-large", "var(--color-map-parking-basic-fill)"),
    ("p-parking-basic", "var(--color-map-parking-basic-fill)"),
    ("e-elevator", "rgba(198, 176, 188, 0.3)"),
    ("e-zone-area", "var(--color-map-line)"),
    ("p-guideboard-area", "var(--color-map-line)"),
)

STROKE_COLORS: Tuple[Tuple[str, str], ...] = (
    ("p-parking-large-electric", "var(--color-map-parking-electric-stroke)"),
    ("p-parking-large-women", "var(--color-map-parking-women-stroke)"),
    ("p-parking-disable", "var(--color-map-parking-disable-stroke)"),
    ("p-parking-small", "var(--color-map-parking-basic-stroke)"),
    ("p-parking-large", "var(--color-map-parking-basic-stroke)"),
    ("p-parking-basic", "var(--color-map-parking-basic-stroke)"),
    ("e-elevator", "#c6b0bc"),
    ("e-outline", "var(--color-map-line)"),
    ("e-innerline", "var(--color-map-line)"),
    ("l-lightingline", "var(--color-map-line)"),
)

# Icon assets: exact names are tried before prefixes
ASSET_PATHS: Tuple[Tuple[str, str], ...] = (
    # CCTV
    ("c-cctv", "/assets/cctv.svg"),
    ("c-cctv-ip", "/assets/cctv.svg"),
    ("c-cctv-id", "/assets/cctv.svg"),
    # Emergency
    ("c-emergencybell", "/assets/warning.svg"),
    # Chargers & electric
    ("e-charger", "/assets/charger.svg"),
    ("p-parking-large-electric", "/assets/electric.svg"),
    ("p-parking-electric", "/assets/electric.svg"),
    # Parking types
    ("p-parking-basic", "/assets/common.svg"),
    ("p-parking-large", "/assets/common.svg"),
    ("p-parking-large-women", "/assets/common.svg"),
    ("p-parking-small", "/assets/small_car.svg"),
    ("p-parking-disable", "/assets/handicap.svg"),
    ("p-parking-disabled", "/assets/handicap.svg"),
    # Facilities
    ("e-elevator", "/assets/elevator.svg"),
    ("e-entrance", "/assets/marker.svg"),
    ("e-onepassreader", "/assets/marker.svg"),
    # Lighting
    ("l-occupancylight", "/assets/light.svg"),
    ("l-preventionlight", "/assets/preventionLights.svg"),
)

ICON_SIZES: Tuple[Tuple[str, Tuple[int, int]], ...] = (
    ("c-cctv", (30, 30)),
    ("e-charger", (25, 25)),
    ("c-emergencybell", (20, 20)),
    ("e-elevator", (35, 35)),
    ("l-occupancylight", (15, 15)),
    ("e-entrance", (25, 25)),
)


@dataclass(frozen=True)
class LayerStyle:
    fill: str
    stroke: str
    icon_path: str
    icon_size: Tuple[int, int]


def _match_prefix(layer: str, table: Sequence[Tuple[str, object]]):
    for prefix, value in table:
        if layer.startswith(prefix):
            return value
    return None


def _has_prefix(layer: str, prefixes: Sequence[str]) -> bool:
    return any(layer.startswith(prefix) for prefix in prefixes)


def is_point_layer(layer: str) -> bool:
    return _has_prefix(layer, POINT_LAYER_PREFIXES)


def is_text_layer(layer: str) -> bool:
    return _has_prefix(layer, TEXT_LAYER_PREFIXES)


def is_polygon_layer(layer: str) -> bool:
    return _has_prefix(layer, POLYGON_LAYER_PREFIXES)


def is_line_layer(layer: str) -> bool:
    return _has_prefix(layer, LINE_LAYER_PREFIXES)


# Category checks in precedence order
CATEGORY_CHECKS: Tuple[Tuple[LayerCategory, Callable[[str], bool]], ...] = (
    (LayerCategory.POINT, is_point_layer),
    (LayerCategory.TEXT, is_text_layer),
    (LayerCategory.POLYGON, is_polygon_layer),
    (LayerCategory.LINE, is_line_layer),
)


def classify_layer(layer: str) -> LayerCategory:
    """First matching category check wins; UNCLASSIFIED when none match."""
    for category, check in CATEGORY_CHECKS:
        if check(layer):
            return category
    return LayerCategory.UNCLASSIFIED


def resolve_render_category(layer: str, is_closed: bool, point_count: int) -> LayerCategory:
    """
    Category used for rendering an entity.

    Unclassified layers fall back to line rendering when the entity is a
    closed shape with at least three points.
    """
    category = classify_layer(layer)
    if category is LayerCategory.UNCLASSIFIED and is_closed and point_count >= 3:
        logger.debug(f"Layer {layer!r} unclassified, rendering closed shape as line")
        return LayerCategory.LINE
    return category


def get_fill_color(layer: str, default: str = config.DEFAULT_FILL_COLOR) -> str:
    return _match_prefix(layer, FILL_COLORS) or default


def get_stroke_color(layer: str, default: str = config.DEFAULT_STROKE_COLOR) -> str:
    return _match_prefix(layer, STROKE_COLORS) or default


def get_asset_path(layer: str, default: str = config.DEFAULT_ASSET_PATH) -> str:
    """Exact layer name first, then the first prefix match, then the default asset."""
    for name, path in ASSET_PATHS:
        if layer == name:
            return path
    return _match_prefix(layer, ASSET_PATHS) or default


def get_icon_size(
    layer: str,
    default: Tuple[int, int] = config.DEFAULT_ICON_SIZE,
) -> Tuple[int, int]:
    return _match_prefix(layer, ICON_SIZES) or default


def get_layer_style(layer: str, settings: Optional[config.PipelineSettings] = None) -> LayerStyle:
    """Resolve every style attribute of a layer, using settings for the fallbacks."""
    if settings is None:
        return LayerStyle(
            fill=get_fill_color(layer),
            stroke=get_stroke_color(layer),
            icon_path=get_asset_path(layer),
            icon_size=get_icon_size(layer),
        )
    return LayerStyle(
        fill=get_fill_color(layer, settings.fill_color),
        stroke=get_stroke_color(layer, settings.stroke_color),
        icon_path=get_asset_path(layer, settings.asset_path),
        icon_size=get_icon_size(layer, tuple(settings.icon_size)),
    )
