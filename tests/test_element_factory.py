# Third-party imports
import pytest

# Lotmap imports
from lotmap import config
from lotmap.csv_parser import Row
from lotmap.element_factory import (
    KIND_LINE,
    KIND_POINT,
    KIND_POLYGON,
    KIND_TEXT,
    ElementFactory,
    create_elements_from_entities,
)
from lotmap.entity_grouper import Entity
from lotmap.geometry_utils import Bounds


def make_entity(layer, coords, handle="h1", text=None):
    rows = [Row(x=x, y=y, z=0.0, layer=layer, entity_handle=handle, text=text) for x, y in coords]
    return Entity.from_rows(rows)


SQUARE = [(0, 0), (10, 0), (10, 10), (0, 10), (0, 0)]


@pytest.fixture
def factory():
    """Factory with the origin at (0, 0), unit scale and no flip"""
    return ElementFactory(bounds=Bounds(0, 0, 100, 100), scale=1.0, flip_y=False)


class TestElementDispatch:
    """Test suite for ElementFactory.create_element"""

    def test_parking_polygon(self, factory):
        """Test that a closed parking square becomes a closed path"""
        element = factory.create_element(make_entity("p-parking-basic", SQUARE))

        assert element.kind == KIND_POLYGON
        assert element.id == "p-parking-basic_h1"
        assert element.position == (0, 0)
        assert element.size == (10, 10)
        assert element.svg_path == "M 0 0 L 10 0 L 10 10 L 0 10 L 0 0 Z"
        assert element.style.fill == "var(--color-map-parking-basic-fill)"
        assert element.style.opacity == config.DEFAULT_OPACITY

    def test_polygon_path_is_relative_to_own_origin(self):
        """Test that position carries the offset and the path starts near zero"""
        factory = ElementFactory(bounds=Bounds(0, 0, 100, 100), scale=2.0, flip_y=False)
        coords = [(20, 30), (30, 30), (30, 40), (20, 30)]

        element = factory.create_element(make_entity("e-zone-area", coords))

        assert element.position == (40, 60)
        assert element.size == (20, 20)
        assert element.path[0].x == 0 and element.path[0].y == 0

    def test_open_parking_shape_produces_nothing(self, factory):
        """Test that an open polyline on a polygon layer is not rendered"""
        assert factory.create_element(make_entity("p-parking-basic", [(0, 0), (5, 5), (9, 9)])) is None

    def test_point_icon_centred_on_first_point(self, factory):
        """Test that point layers become icons centred on their anchor"""
        element = factory.create_element(make_entity("c-cctv", [(50, 40)], text="CAM-1"))

        assert element.kind == KIND_POINT
        assert element.icon_path == "/assets/cctv.svg"
        assert element.size == (30, 30)
        assert element.position == (35, 25)
        assert element.center == (50, 40)
        assert element.text == "CAM-1"
        assert element.style.opacity == config.ICON_OPACITY

    def test_closed_point_layer_uses_raw_centroid(self, factory):
        """Test that an icon recorded as a closed outline sits at the vertex mean"""
        coords = [(0, 0), (12, 0), (12, 6), (0, 0)]

        element = factory.create_element(make_entity("e-charger", coords))

        assert element.kind == KIND_POINT
        assert element.original_coords == (6.0, 1.5)
        assert element.center == pytest.approx((6.0, 1.5))

    def test_line_layer(self, factory):
        """Test that outline layers become open paths"""
        element = factory.create_element(make_entity("e-outline", [(0, 0), (20, 0), (20, 5)]))

        assert element.kind == KIND_LINE
        assert element.svg_path == "M 0 0 L 20 0 L 20 5"
        assert element.style.fill == "none"
        assert element.style.stroke_width == config.OPEN_LINE_STROKE_WIDTH

    def test_line_needs_two_points(self, factory):
        """Test that a single vertex on a line layer yields nothing"""
        assert factory.create_element(make_entity("e-outline", [(1, 1)])) is None

    def test_unknown_closed_triangle_falls_back_to_line(self, factory):
        """Test the closed-shape fallback for unclassified layers"""
        element = factory.create_element(make_entity("mystery", [(0, 0), (4, 0), (0, 0)]))

        assert element.kind == KIND_LINE
        assert element.style.stroke_width == config.POLYGON_STROKE_WIDTH
        assert not any(c.op == "Z" for c in element.path)

    def test_unknown_open_shape_produces_nothing(self, factory):
        """Test that open shapes on unknown layers are silently skipped"""
        assert factory.create_element(make_entity("mystery", [(0, 0), (4, 0)])) is None

    def test_text_label(self, factory):
        """Test that text layers become label boxes"""
        element = factory.create_element(make_entity("e-zone-nametext", [(30, 30)], text="Zone A"))

        assert element.kind == KIND_TEXT
        assert element.text == "Zone A"
        assert element.size == config.TEXT_BOX_SIZE
        assert element.center == (30, 30)

    def test_text_without_payload_produces_nothing(self, factory):
        """Test that a text layer row with no text is skipped"""
        assert factory.create_element(make_entity("e-zone-nametext", [(30, 30)])) is None

    def test_zero_extent_collapses_to_one(self, factory):
        """Test that a horizontal line gets height 1"""
        element = factory.create_element(make_entity("e-outline", [(0, 5), (10, 5)]))

        assert element.size == (10, 1)


class TestCreateElements:
    """Tests for batch construction and failure isolation"""

    def test_failing_entity_is_isolated(self, factory, monkeypatch):
        """Test that one broken entity does not abort the batch"""
        good = make_entity("p-parking-basic", SQUARE, handle="ok")
        bad = make_entity("p-parking-basic", SQUARE, handle="bad")
        original = factory.create_element

        def flaky(entity):
            if entity.entity_handle == "bad":
                raise RuntimeError("boom")
            return original(entity)

        monkeypatch.setattr(factory, "create_element", flaky)

        elements = factory.create_elements([bad, good])

        assert [e.id for e in elements] == ["p-parking-basic_ok"]
        assert len(factory.diagnostics) == 1
        assert "p-parking-basic_bad" in factory.diagnostics[0]

    def test_wrapper_returns_diagnostics(self):
        """Test the functional wrapper"""
        entities = [make_entity("c-cctv", [(1, 1)]), make_entity("mystery", [(0, 0), (1, 1)])]

        elements, diagnostics = create_elements_from_entities(entities, Bounds(0, 0, 10, 10))

        assert len(elements) == 1
        assert diagnostics == []
