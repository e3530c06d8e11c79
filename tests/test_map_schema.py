# Third-party imports
import pytest
from pydantic import ValidationError

# Lotmap imports
from lotmap.map_schema import (
    MapAsset,
    MapDocument,
    MapMetadata,
    MapObject,
    MapStyle,
    map_validation_errors,
    validate_map_data,
)


# Test fixtures
@pytest.fixture
def metadata():
    return {
        "created": "2025-01-15T09:00:00Z",
        "modified": "2025-01-15T09:30:00Z",
        "lotName": "Banpo",
        "floorName": "B1",
        "floorOrder": -1,
    }


@pytest.fixture
def asset():
    return {"id": "cctv", "name": "cctv.svg", "type": "svg", "url": "/assets/cctv.svg", "mimeType": "image/svg+xml"}


@pytest.fixture
def camera():
    return {
        "id": "c-cctv_c1",
        "type": "point",
        "name": "CAM-01",
        "layer": "c-cctv",
        "geometry": {"type": "point", "coordinates": [10.0, 20.0]},
        "style": {"fillColor": "#9E9E9E", "opacity": 0.9},
        "properties": {"anything": {"goes": [1, 2]}},
        "assetRefs": ["cctv"],
    }


@pytest.fixture
def document(metadata, asset, camera):
    return {"version": "1.0.0", "metadata": metadata, "assets": [asset], "objects": [camera]}


class TestMetadata:
    """Tests for MapMetadata"""

    def test_valid_metadata(self, metadata):
        """Test camelCase input maps onto snake_case fields"""
        meta = MapMetadata.model_validate(metadata)

        assert meta.lot_name == "Banpo"
        assert meta.floor_order == -1
        assert meta.created.year == 2025

    @pytest.mark.parametrize("key, value", [
        ("lotName", ""),
        ("floorName", ""),
        ("floorOrder", 1.5),
        ("created", "yesterday"),
    ])
    def test_invalid_fields(self, metadata, key, value):
        """Test required names, integer floor order and ISO timestamps"""
        metadata[key] = value

        with pytest.raises(ValidationError):
            MapMetadata.model_validate(metadata)


class TestAsset:
    """Tests for MapAsset"""

    @pytest.mark.parametrize("url", ["/assets/cctv.svg", "https://cdn.example.com/cctv.svg"])
    def test_relative_and_absolute_urls(self, asset, url):
        """Test that relative paths and absolute URLs are both accepted"""
        asset["url"] = url

        assert MapAsset.model_validate(asset).url == url

    @pytest.mark.parametrize("key, value", [
        ("url", "assets/cctv.svg"),
        ("type", "sound"),
        ("id", ""),
        ("width", 0),
    ])
    def test_invalid_fields(self, asset, key, value):
        """Test URL form, type enum, non-empty id and positive sizes"""
        asset[key] = value

        with pytest.raises(ValidationError):
            MapAsset.model_validate(asset)


class TestStyle:
    """Tests for MapStyle colours and ranges"""

    @pytest.mark.parametrize("color", [
        "#FF0000",
        "#c6b0bc",
        "var(--color-map-parking-basic-fill)",
        "rgba(198, 176, 188, 0.3)",
        "none",
    ])
    def test_accepted_colors(self, color):
        """Test hex, CSS variable, rgba and none colours"""
        assert MapStyle.model_validate({"fillColor": color}).fill_color == color

    @pytest.mark.parametrize("style", [
        {"fillColor": "red"},
        {"strokeColor": "#FFF"},
        {"opacity": 1.5},
        {"strokeWidth": 0},
    ])
    def test_rejected_styles(self, style):
        """Test colour format, opacity range and positive stroke width"""
        with pytest.raises(ValidationError):
            MapStyle.model_validate(style)

    def test_empty_style(self):
        """Test that every style field is optional"""
        assert MapStyle.model_validate({}).fill_color is None


class TestGeometry:
    """Tests for the geometry union on MapObject"""

    @pytest.mark.parametrize("geometry", [
        {"type": "polyline", "coordinates": [[0, 0], [1, 1]]},
        {"type": "polygon", "coordinates": [[0, 0], [1, 0], [1, 1]], "closed": True},
    ])
    def test_valid_geometries(self, camera, geometry):
        """Test polyline and polygon geometry"""
        camera["geometry"] = geometry

        assert MapObject.model_validate(camera).geometry.type == geometry["type"]

    @pytest.mark.parametrize("geometry", [
        {"type": "polyline", "coordinates": [[0, 0]]},
        {"type": "polygon", "coordinates": [[0, 0], [1, 1]], "closed": True},
        {"type": "circle", "coordinates": [0, 0]},
    ])
    def test_invalid_geometries(self, camera, geometry):
        """Test minimum point counts and unknown geometry types"""
        camera["geometry"] = geometry

        with pytest.raises(ValidationError):
            MapObject.model_validate(camera)


class TestMapDocument:
    """Tests for cross-reference checks and the validation helpers"""

    def test_valid_document(self, document):
        """Test a complete document and its camelCase dump"""
        parsed = validate_map_data(document)

        dumped = parsed.to_json_dict()
        assert dumped["objects"][0]["assetRefs"] == ["cctv"]
        assert "relations" not in dumped["objects"][0]
        assert dumped["assets"][0]["mimeType"] == "image/svg+xml"

    def test_duplicate_object_ids(self, document, camera):
        """Test that object ids must be unique"""
        document["objects"].append(dict(camera))

        with pytest.raises(ValidationError, match="object IDs must be unique"):
            validate_map_data(document)

    def test_duplicate_asset_ids(self, document, asset):
        """Test that asset ids must be unique"""
        document["assets"].append(dict(asset))

        with pytest.raises(ValidationError, match="asset IDs must be unique"):
            validate_map_data(document)

    def test_unknown_asset_reference(self, document, camera):
        """Test that assetRefs must name an existing asset"""
        camera["assetRefs"] = ["missing"]

        with pytest.raises(ValidationError, match="unknown asset"):
            validate_map_data(document)

    def test_relation_targets(self, document, camera):
        """Test that relations must point at existing objects"""
        camera["relations"] = [{"targetId": "c-cctv_c1", "type": "reference"}]
        assert validate_map_data(document).objects[0].relations[0].target_id == "c-cctv_c1"

        camera["relations"] = [{"targetId": "nowhere", "type": "reference"}]
        with pytest.raises(ValidationError, match="unknown object"):
            validate_map_data(document)

    def test_error_messages(self, document):
        """Test readable error paths without raising"""
        del document["version"]
        document["metadata"]["lotName"] = ""

        errors = map_validation_errors(document)

        assert any(e.startswith("version: ") for e in errors)
        assert any(e.startswith("metadata.lotName: ") for e in errors)

    def test_no_errors_for_valid_document(self, document):
        """Test that a valid document yields no messages"""
        assert map_validation_errors(document) == []
        assert isinstance(validate_map_data(document), MapDocument)
