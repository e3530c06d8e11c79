"""
Map Document Schema
===================

Pydantic models for the exported map JSON. Field names are snake_case in
Python and camelCase on the wire (``entityHandle``, ``assetRefs``...).

``validate_map_data`` raises ``pydantic.ValidationError`` on the first
invalid document; ``map_validation_errors`` returns readable
``"path: message"`` strings instead.
"""

# Standard library imports
from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union
from urllib.parse import urlparse

# Third-party imports
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

# Hex colours, CSS custom properties, rgb()/rgba() and "none"
COLOR_PATTERN = r"^(#[0-9A-Fa-f]{6}|var\(--[\w-]+\)|rgba?\([0-9.,\s%]+\)|none)$"

Coordinate = Tuple[float, float]


class MapMetadata(BaseModel):
    created: datetime
    modified: datetime
    author: Optional[str] = None
    lot_name: str = Field(alias="lotName", min_length=1)
    floor_name: str = Field(alias="floorName", min_length=1)
    floor_order: int = Field(alias="floorOrder")
    description: Optional[str] = None


class MapAsset(BaseModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    type: Literal["image", "icon", "svg"]
    url: str = Field(min_length=1)
    mime_type: str = Field(alias="mimeType", min_length=1)
    size: Optional[float] = Field(default=None, gt=0)
    width: Optional[float] = Field(default=None, gt=0)
    height: Optional[float] = Field(default=None, gt=0)

    @field_validator("url")
    @classmethod
    def _relative_or_absolute(cls, value: str) -> str:
        if value.startswith("/") or urlparse(value).scheme:
            return value
        raise ValueError("Asset URL must be a valid URL or relative path")


class MapStyle(BaseModel):
    color: Optional[str] = Field(default=None, pattern=COLOR_PATTERN)
    stroke_width: Optional[float] = Field(default=None, alias="strokeWidth", gt=0)
    stroke_color: Optional[str] = Field(default=None, alias="strokeColor", pattern=COLOR_PATTERN)
    fill_color: Optional[str] = Field(default=None, alias="fillColor", pattern=COLOR_PATTERN)
    opacity: Optional[float] = Field(default=None, ge=0, le=1)
    z_index: Optional[int] = Field(default=None, alias="zIndex")


class PointGeometry(BaseModel):
    type: Literal["point"]
    coordinates: Coordinate


class PolylineGeometry(BaseModel):
    type: Literal["polyline"]
    coordinates: List[Coordinate] = Field(min_length=2)


class PolygonGeometry(BaseModel):
    type: Literal["polygon"]
    coordinates: List[Coordinate] = Field(min_length=3)
    closed: bool


Geometry = Annotated[
    Union[PointGeometry, PolylineGeometry, PolygonGeometry],
    Field(discriminator="type"),
]


class MapRelation(BaseModel):
    target_id: str = Field(alias="targetId", min_length=1)
    type: Literal["required", "optional", "reference"]
    meta: Optional[Dict[str, Any]] = None


class MapObject(BaseModel):
    id: str = Field(min_length=1)
    type: str = Field(min_length=1)
    name: str = Field(min_length=1)
    layer: str = Field(min_length=1)
    entity_handle: Optional[str] = Field(default=None, alias="entityHandle")
    geometry: Geometry
    style: MapStyle
    properties: Dict[str, Any]
    asset_refs: Optional[List[str]] = Field(default=None, alias="assetRefs")
    relations: Optional[List[MapRelation]] = None


class MapDocument(BaseModel):
    version: str = Field(min_length=1)
    metadata: MapMetadata
    assets: List[MapAsset]
    objects: List[MapObject]

    @model_validator(mode="after")
    def _check_references(self) -> "MapDocument":
        asset_ids = [a.id for a in self.assets]
        object_ids = [o.id for o in self.objects]

        if len(asset_ids) != len(set(asset_ids)):
            raise ValueError("All asset IDs must be unique")
        if len(object_ids) != len(set(object_ids)):
            raise ValueError("All object IDs must be unique")

        known_assets = set(asset_ids)
        known_objects = set(object_ids)
        for obj in self.objects:
            for ref in obj.asset_refs or []:
                if ref not in known_assets:
                    raise ValueError(f"Object {obj.id!r} references unknown asset {ref!r}")
            for relation in obj.relations or []:
                if relation.target_id not in known_objects:
                    raise ValueError(f"Object {obj.id!r} relates to unknown object {relation.target_id!r}")
        return self

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def validate_map_data(data: Any) -> MapDocument:
    return MapDocument.model_validate(data)


def map_validation_errors(data: Any) -> List[str]:
    """Validate without raising; empty list means the document is valid."""
    try:
        MapDocument.model_validate(data)
    except ValidationError as e:
        errors = []
        for err in e.errors():
            path = ".".join(str(part) for part in err["loc"]) or "root"
            errors.append(f"{path}: {err['msg']}")
        return errors
    return []
