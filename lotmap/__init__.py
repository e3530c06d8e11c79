from .csv_parser import Row, parse_rows, read_csv_file, rows_to_dataframe
from .entity_grouper import Entity, group_by_entity, group_by_layer, get_layer_stats, get_layer_summary
from .geometry_utils import Bounds, calculate_bounds
from .coordinate_transformer import TransformedPoint, transform_point, transform_points, compute_global_scale
from .layer_classifier import LayerCategory, classify_layer, resolve_render_category, get_layer_style
from .path_encoder import PathCommand, encode_path, to_svg_path
from .element_factory import ElementFactory, GeometryDescriptor, create_elements_from_entities
from .export_utils import export_map, write_map_json
from .map_schema import MapDocument, validate_map_data, map_validation_errors
from .pipeline import MapPipeline, PipelineResult, load_csv_async
from .exceptions import LotMapError, EmptyDatasetError, DegenerateBoundsError
from . import config
