"""
CSV-to-geometry pipeline.

Runs parse -> group -> bounds -> scale -> element construction in one
synchronous pass. The only asynchronous step is reading the file, offered by
``load_csv_async``; callers discard stale loads through the request's
``cancelled`` flag.
"""

# Lotmap imports
from lotmap import config
from lotmap.csv_parser import Row, parse_rows
from lotmap.element_factory import ElementFactory, GeometryDescriptor
from lotmap.entity_grouper import Entity, get_layer_stats, group_by_entity
from lotmap.exceptions import DegenerateBoundsError, EmptyDatasetError
from lotmap.coordinate_transformer import compute_global_scale
from lotmap.geometry_utils import Bounds, calculate_bounds

# Standard library imports
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Set, Union

logger = logging.getLogger(__name__)

# Shared single worker for file reads
_LOADER = ThreadPoolExecutor(max_workers=1, thread_name_prefix="lotmap-loader")


@dataclass
class PipelineResult:
    rows: List[Row]
    entities: List[Entity]
    bounds: Bounds
    scale: float
    elements: List[GeometryDescriptor]
    layer_stats: Dict[str, int]
    diagnostics: List[str] = field(default_factory=list)

    @property
    def objects_by_layer(self) -> Dict[str, List[GeometryDescriptor]]:
        grouped: Dict[str, List[GeometryDescriptor]] = {}
        for element in self.elements:
            grouped.setdefault(element.layer, []).append(element)
        return grouped


@dataclass
class MapPipeline:
    """
    Converts one CSV export into geometry descriptors.

    Attributes:
        csv_text: Full CSV contents, header included.
        selected_layers: When given, only these layers are grouped, bounded
                         and rendered.
        settings: Canvas fitting and style fallbacks.

    Example:
        >>> result = MapPipeline(csv_text).run()
        >>> len(result.elements)
    """

    csv_text: str
    selected_layers: Optional[Set[str]] = None
    settings: config.PipelineSettings = field(default_factory=config.PipelineSettings)

    @classmethod
    def from_file(cls, csv_path: Union[str, Path], **kwargs) -> "MapPipeline":
        return cls(csv_text=Path(csv_path).read_text(encoding="utf-8-sig"), **kwargs)

    def run(self) -> PipelineResult:
        """
        Execute the full pipeline.

        Raises:
            EmptyDatasetError: no valid rows, or no rows left after layer selection.
            DegenerateBoundsError: the dataset has zero width or zero height.
        """
        rows = parse_rows(self.csv_text)
        if not rows:
            raise EmptyDatasetError("CSV contains no valid data rows")

        layer_stats = get_layer_stats(rows)
        logger.info(f"Layer statistics: {layer_stats}")

        if self.selected_layers is not None:
            rows = [r for r in rows if r.layer in self.selected_layers]
            if not rows:
                raise EmptyDatasetError(f"No rows on selected layers: {sorted(self.selected_layers)}")

        bounds = calculate_bounds(rows)
        scale = compute_global_scale(bounds, self.settings.target_pixel_width)
        if bounds.height == 0:
            raise DegenerateBoundsError(
                f"Dataset has zero height (minY={bounds.min_y}, maxY={bounds.max_y})"
            )
        logger.info(f"Map bounds: {bounds.as_dict()} (scale {scale:.6f})")

        entities = group_by_entity(rows)

        factory = ElementFactory(
            bounds=bounds,
            scale=scale,
            flip_y=self.settings.flip_y,
            settings=self.settings,
        )
        elements = factory.create_elements(entities)

        if not elements:
            logger.warning("No elements created from CSV")

        return PipelineResult(
            rows=rows,
            entities=entities,
            bounds=bounds,
            scale=scale,
            elements=elements,
            layer_stats=layer_stats,
            diagnostics=list(factory.diagnostics),
        )


@dataclass
class LoadRequest:
    """Handle for one in-flight CSV read. A cancelled request yields None."""

    path: Path
    future: Future
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True
        self.future.cancel()

    def result(self, timeout: Optional[float] = None) -> Optional[str]:
        if self.cancelled:
            return None
        text = self.future.result(timeout=timeout)
        # Cancelled while the read was running
        if self.cancelled:
            return None
        return text


def load_csv_async(csv_path: Union[str, Path]) -> LoadRequest:
    """Start reading a CSV file in the background and return its request handle."""
    path = Path(csv_path)
    future = _LOADER.submit(path.read_text, encoding="utf-8-sig")
    return LoadRequest(path=path, future=future)
