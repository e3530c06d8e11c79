"""
Element Factory
===============

Builds render-ready geometry descriptors from grouped entities.

Dispatch order per entity:
    1. point layer recorded as a closed shape -> icon at the raw centroid
    2. polygon layer and polygon entity       -> closed path
    3. point layer                            -> icon at the first point
    4. line layer (or closed fallback)        -> open path
    5. text layer with a text payload         -> label box
    otherwise no geometry is produced.
"""

# Lotmap imports
from lotmap import config
from lotmap.coordinate_transformer import TransformedPoint, transform_point, transform_points
from lotmap.csv_parser import rows_to_dataframe
from lotmap.entity_grouper import Entity
from lotmap.geometry_utils import Bounds, calc_centroid_of_points
from lotmap.layer_classifier import (
    LayerCategory,
    get_layer_style,
    is_point_layer,
    resolve_render_category,
)
from lotmap.path_encoder import PathCommand, encode_path, relative_to_origin, to_svg_path

# Standard library imports
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

KIND_POLYGON = "polygon"
KIND_POINT = "point"
KIND_LINE = "line"
KIND_TEXT = "text"


@dataclass(frozen=True)
class ElementStyle:
    fill: str
    stroke: str
    stroke_width: float = 0.0
    opacity: float = config.DEFAULT_OPACITY


@dataclass(frozen=True)
class GeometryDescriptor:
    """
    One render-ready element handed to the drawing layer.

    Attributes:
        id: Stable identifier, ``layer + "_" + entity_handle``.
        kind: polygon, point, line or text.
        position: Canvas top-left of the element.
        size: Canvas (width, height); zero extents collapse to 1.
        path: Path commands relative to ``position`` (polygon and line only).
        icon_path: Asset path (point only).
        style: Fill, stroke, stroke width and opacity.
        text: Label text, when the source row carried one.
        original_coords: Raw CAD anchor of point and text elements.
    """

    id: str
    layer: str
    entity_handle: str
    kind: str
    position: Tuple[float, float]
    size: Tuple[float, float]
    style: ElementStyle
    path: Tuple[PathCommand, ...] = ()
    icon_path: Optional[str] = None
    text: Optional[str] = None
    original_coords: Optional[Tuple[float, float]] = None

    @property
    def svg_path(self) -> str:
        return to_svg_path(self.path)

    @property
    def center(self) -> Tuple[float, float]:
        return (self.position[0] + self.size[0] / 2, self.position[1] + self.size[1] / 2)


@dataclass
class ElementFactory:
    """
    Turns entities into geometry descriptors for one dataset.

    Attributes:
        bounds: Raw bounds whose minimum is the canvas origin.
        scale: Canvas units per CAD unit.
        flip_y: Passed through to the coordinate transform.
        settings: Style fallbacks.
        diagnostics: One message per entity that failed to build.
    """

    bounds: Bounds
    scale: float = 1.0
    flip_y: bool = config.DEFAULT_FLIP_Y
    settings: Optional[config.PipelineSettings] = None
    diagnostics: List[str] = field(default_factory=list)

    def create_elements(self, entities: Iterable[Entity]) -> List[GeometryDescriptor]:
        """Build descriptors for every entity; a failing entity is logged and skipped."""
        elements: List[GeometryDescriptor] = []
        total = 0
        for entity in entities:
            total += 1
            try:
                element = self.create_element(entity)
            except Exception as e:
                message = f"Error creating element for {entity.key}: {e}"
                logger.error(message)
                self.diagnostics.append(message)
                continue
            if element is not None:
                elements.append(element)

        logger.info(f"Created {len(elements)} elements from {total} entities")
        return elements

    def create_element(self, entity: Entity) -> Optional[GeometryDescriptor]:
        if not entity.points:
            return None

        layer = entity.layer

        # Icons recorded as closed outlines sit at the outline's centroid
        if is_point_layer(layer) and entity.is_closed:
            return self._create_centroid_point(entity)

        category = resolve_render_category(layer, entity.is_closed, len(entity.points))
        if category is LayerCategory.POLYGON and entity.is_polygon:
            return self._create_polygon(entity)
        if category is LayerCategory.POINT:
            return self._create_point(entity)
        if category is LayerCategory.LINE:
            return self._create_line(entity)
        if category is LayerCategory.TEXT:
            return self._create_text(entity)

        logger.debug(f"No geometry for {entity.key} (category {category.value})")
        return None

    def _transform(self, x: float, y: float) -> TransformedPoint:
        return transform_point(x, y, self.bounds.min_x, self.bounds.min_y, self.scale, self.flip_y)

    def _path_element(self, entity: Entity, kind: str, close: bool, style: ElementStyle) -> GeometryDescriptor:
        canvas_points = transform_points(
            entity.points, self.bounds.min_x, self.bounds.min_y, self.scale, self.flip_y
        )
        relative, origin = relative_to_origin(canvas_points)
        width = max(p.x for p in relative) or 1
        height = max(p.y for p in relative) or 1
        return GeometryDescriptor(
            id=entity.key,
            layer=entity.layer,
            entity_handle=entity.entity_handle,
            kind=kind,
            position=(origin.x, origin.y),
            size=(width, height),
            style=style,
            path=encode_path(relative, close=close),
        )

    def _create_polygon(self, entity: Entity) -> GeometryDescriptor:
        layer_style = get_layer_style(entity.layer, self.settings)
        style = ElementStyle(
            fill=layer_style.fill,
            stroke=layer_style.stroke,
            stroke_width=config.POLYGON_STROKE_WIDTH,
        )
        return self._path_element(entity, KIND_POLYGON, close=True, style=style)

    def _create_line(self, entity: Entity) -> Optional[GeometryDescriptor]:
        if len(entity.points) < 2:
            return None
        layer_style = get_layer_style(entity.layer, self.settings)
        style = ElementStyle(
            fill="none",
            stroke=layer_style.stroke,
            stroke_width=config.POLYGON_STROKE_WIDTH if entity.is_closed else config.OPEN_LINE_STROKE_WIDTH,
        )
        return self._path_element(entity, KIND_LINE, close=False, style=style)

    def _icon_element(
        self,
        entity: Entity,
        anchor: TransformedPoint,
        raw: Tuple[float, float],
        text: Optional[str],
    ) -> GeometryDescriptor:
        layer_style = get_layer_style(entity.layer, self.settings)
        width, height = layer_style.icon_size
        return GeometryDescriptor(
            id=entity.key,
            layer=entity.layer,
            entity_handle=entity.entity_handle,
            kind=KIND_POINT,
            position=(anchor.x - width / 2, anchor.y - height / 2),
            size=(width, height),
            style=ElementStyle(fill=layer_style.fill, stroke=layer_style.stroke, opacity=config.ICON_OPACITY),
            icon_path=layer_style.icon_path,
            text=text,
            original_coords=raw,
        )

    def _create_point(self, entity: Entity) -> GeometryDescriptor:
        point = entity.points[0]
        return self._icon_element(entity, self._transform(point.x, point.y), (point.x, point.y), point.text)

    def _create_centroid_point(self, entity: Entity) -> GeometryDescriptor:
        # Average the raw vertices first, then transform the single centroid
        centroid_x, centroid_y = calc_centroid_of_points(rows_to_dataframe(entity.points))
        anchor = self._transform(centroid_x, centroid_y)
        return self._icon_element(entity, anchor, (centroid_x, centroid_y), entity.points[0].text)

    def _create_text(self, entity: Entity) -> Optional[GeometryDescriptor]:
        point = entity.points[0]
        if not point.text:
            return None
        anchor = self._transform(point.x, point.y)
        width, height = config.TEXT_BOX_SIZE
        return GeometryDescriptor(
            id=entity.key,
            layer=entity.layer,
            entity_handle=entity.entity_handle,
            kind=KIND_TEXT,
            position=(anchor.x - width / 2, anchor.y - height / 2),
            size=(width, height),
            style=ElementStyle(fill=config.TEXT_BOX_FILL, stroke=config.TEXT_BOX_STROKE, stroke_width=1.0),
            text=point.text,
            original_coords=(point.x, point.y),
        )


def create_elements_from_entities(
    entities: Iterable[Entity],
    bounds: Bounds,
    scale: float = 1.0,
    flip_y: bool = config.DEFAULT_FLIP_Y,
    settings: Optional[config.PipelineSettings] = None,
) -> Tuple[List[GeometryDescriptor], List[str]]:
    """Convenience wrapper returning (elements, diagnostics)."""
    factory = ElementFactory(bounds=bounds, scale=scale, flip_y=flip_y, settings=settings)
    elements = factory.create_elements(entities)
    return elements, factory.diagnostics
