"""
test_loader.py — Tests for TaggedPolyline, PolylineStore and GeoJSON loading.
"""

import json

import pytest

from polyline_tap.crs import LatLng
from polyline_tap.loader import (
    PolylineStore,
    TaggedPolyline,
    load_polylines,
    parse_feature,
    parse_features,
)


# ════════════════════════════════════════════════════════════════
#  TaggedPolyline
# ════════════════════════════════════════════════════════════════

class TestTaggedPolyline:

    def test_defaults(self):
        line = TaggedPolyline(points=[LatLng(0, 0), LatLng(1, 1)])
        assert line.stroke_width == 1.0
        assert line.border_stroke_width == 0.0
        assert line.use_stroke_width_in_meter is False
        assert line.tag is None

    def test_bounding_box(self):
        line = TaggedPolyline(points=[LatLng(1, 5), LatLng(-2, 3)])
        b = line.bounding_box
        assert (b.south, b.west, b.north, b.east) == (-2, 3, 1, 5)

    def test_identity_equality(self):
        a = TaggedPolyline(points=[LatLng(0, 0)], tag="x")
        b = TaggedPolyline(points=[LatLng(0, 0)], tag="x")
        assert a != b
        assert a == a

    def test_to_feature_uses_lon_lat_order(self):
        feature = TaggedPolyline(points=[LatLng(12.9, 77.5)], tag="t").to_feature()
        assert feature["geometry"] == {"type": "LineString", "coordinates": [[77.5, 12.9]]}
        assert feature["properties"]["tag"] == "t"


# ════════════════════════════════════════════════════════════════
#  parse_feature
# ════════════════════════════════════════════════════════════════

class TestParseFeature:

    def test_linestring(self, sample_features):
        [line] = parse_feature(sample_features[0])
        assert line.tag == "MG Road"
        assert line.stroke_width == 4.0
        assert line.points == [LatLng(12.9716, 77.5946), LatLng(12.9750, 77.6100)]

    def test_multilinestring_yields_one_polyline_per_part(self, sample_features):
        parts = parse_feature(sample_features[1])
        assert len(parts) == 2
        assert {p.tag for p in parts} == {"Purple Line"}
        assert all(p.border_stroke_width == 2.0 for p in parts)

    def test_name_used_when_tag_missing(self, sample_features):
        assert parse_feature(sample_features[1])[0].tag == "Purple Line"

    def test_altitude_dropped(self):
        feature = {"geometry": {"type": "LineString", "coordinates": [[1, 2, 300], [3, 4, 310]]}}
        assert parse_feature(feature)[0].points == [LatLng(2, 1), LatLng(4, 3)]

    def test_meter_mode_property(self):
        feature = {
            "properties": {"use_stroke_width_in_meter": True, "stroke_width": 25},
            "geometry": {"type": "LineString", "coordinates": [[0, 0], [1, 1]]},
        }
        line = parse_feature(feature)[0]
        assert line.use_stroke_width_in_meter is True
        assert line.stroke_width == 25.0

    def test_polygon_rejected(self):
        feature = {"geometry": {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [0, 0]]]}}
        with pytest.raises(ValueError, match="Unsupported geometry type"):
            parse_feature(feature)

    def test_missing_geometry_rejected(self):
        with pytest.raises(ValueError):
            parse_feature({"type": "Feature", "properties": {}})


class TestParseFeatures:

    def test_skips_malformed_features(self, sample_features):
        bad = [
            {"geometry": {"type": "Point", "coordinates": [0, 0]}},
            {"geometry": {"type": "LineString", "coordinates": [["a", "b"]]}},
            {"geometry": {"type": "LineString", "coordinates": [[1]]}},
        ]
        polylines = parse_features(bad + sample_features)
        assert len(polylines) == 3

    def test_single_point_line_is_kept(self):
        feature = {"geometry": {"type": "LineString", "coordinates": [[1, 2]]}}
        assert len(parse_features([feature])) == 1


# ════════════════════════════════════════════════════════════════
#  load_polylines / PolylineStore
# ════════════════════════════════════════════════════════════════

class TestLoadPolylines:

    def test_loads_feature_collection(self, tmp_path, sample_features):
        path = tmp_path / "lines.geojson"
        path.write_text(json.dumps({"type": "FeatureCollection", "features": sample_features}),
                        encoding="utf-8")
        store = load_polylines(path)
        assert len(store.polylines) == 3
        assert store.source == path

    def test_missing_file_gives_empty_store(self, tmp_path):
        store = load_polylines(tmp_path / "nope.geojson")
        assert store.polylines == []

    def test_invalid_json_gives_empty_store(self, tmp_path):
        path = tmp_path / "broken.geojson"
        path.write_text("{not json", encoding="utf-8")
        assert load_polylines(path).polylines == []


class TestPolylineStore:

    def test_tags_skip_untagged(self):
        store = PolylineStore(polylines=[
            TaggedPolyline(points=[], tag="a"),
            TaggedPolyline(points=[]),
            TaggedPolyline(points=[], tag="b"),
        ])
        assert store.tags() == ["a", "b"]

    def test_find_by_tag_is_case_insensitive(self):
        line = TaggedPolyline(points=[], tag="MG Road")
        store = PolylineStore(polylines=[line])
        assert store.find_by_tag("mg road") == [line]
        assert store.find_by_tag("Brigade Road") == []
