"""Serialize geometry descriptors to the map JSON document."""

# Lotmap imports
from lotmap.element_factory import GeometryDescriptor
from lotmap.map_schema import MapDocument

# Standard library imports
import json
import logging
import mimetypes
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

logger = logging.getLogger(__name__)

MAP_FORMAT_VERSION = "1.0.0"

DEFAULT_METADATA = {
    "author": "Map Editor",
    "lotName": "Unnamed Lot",
    "floorName": "Floor 1",
    "floorOrder": 1,
}

UNKNOWN_LAYER = "UNKNOWN"


def _asset_record(url: str, asset_id: str) -> Dict[str, Any]:
    mime_type = mimetypes.guess_type(url)[0] or "application/octet-stream"
    return {
        "id": asset_id,
        "name": Path(url).name,
        "type": "svg" if mime_type == "image/svg+xml" else "image",
        "url": url,
        "mimeType": mime_type,
    }


def collect_assets(elements: Iterable[GeometryDescriptor]) -> Dict[str, Dict[str, Any]]:
    """
    One asset record per distinct icon path, keyed by path, in first-seen order.

    The asset id is the file stem ("/assets/cctv.svg" -> "cctv"); the full
    path is used instead when two paths share a stem.
    """
    assets: Dict[str, Dict[str, Any]] = {}
    taken = set()
    for element in elements:
        url = element.icon_path
        if not url or url in assets:
            continue
        asset_id = Path(url).stem or url
        if asset_id in taken:
            asset_id = url
        taken.add(asset_id)
        assets[url] = _asset_record(url, asset_id)
    return assets


def _export_object(element: GeometryDescriptor, asset_id: Optional[str]) -> Dict[str, Any]:
    x, y = element.position
    width, height = element.size
    style = asdict(element.style)
    obj: Dict[str, Any] = {
        "id": element.id,
        "type": element.kind,
        "name": element.text or f"Object-{element.id[:8]}",
        "layer": element.layer or UNKNOWN_LAYER,
        "entityHandle": element.entity_handle,
        "geometry": {
            "type": "point",
            "coordinates": list(element.center),
        },
        "style": {
            "fillColor": style["fill"],
            "strokeColor": style["stroke"],
            "opacity": style["opacity"],
        },
        "properties": {
            "position": {"x": x, "y": y},
            "size": {"width": width, "height": height},
        },
    }
    if style["stroke_width"] > 0:
        obj["style"]["strokeWidth"] = style["stroke_width"]
    if element.path:
        obj["properties"]["path"] = element.svg_path
    if asset_id:
        obj["assetRefs"] = [asset_id]
    return obj


def export_map(
    elements: Iterable[GeometryDescriptor],
    metadata: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Build and validate the map JSON document from geometry descriptors.

    Args:
        elements: Descriptors produced by the element factory.
        metadata: Optional overrides for lotName, floorName, floorOrder,
                  author and description. None values keep the default.

    Returns:
        dict: ``{"version", "metadata", "assets", "objects"}`` ready for json.dump.

    Raises:
        pydantic.ValidationError: the assembled document breaks the map schema,
            for example an empty lotName override.
    """
    elements = list(elements)
    now = datetime.now(timezone.utc).isoformat()
    meta = {"created": now, "modified": now, **DEFAULT_METADATA}
    if metadata:
        meta.update({k: v for k, v in metadata.items() if v is not None})

    assets = collect_assets(elements)
    objects: List[Dict[str, Any]] = []
    for element in elements:
        asset = assets.get(element.icon_path) if element.icon_path else None
        objects.append(_export_object(element, asset["id"] if asset else None))

    document = MapDocument.model_validate({
        "version": MAP_FORMAT_VERSION,
        "metadata": meta,
        "assets": list(assets.values()),
        "objects": objects,
    })
    logger.info(f"Map document built: {len(objects)} objects, {len(assets)} assets")
    return document.to_json_dict()


def write_map_json(data: Dict[str, Any], output_path: Union[str, Path]) -> Path:
    """Write a map document as indented UTF-8 JSON, creating parent directories."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    logger.info(f"Map exported to: {output_path}")
    return output_path
