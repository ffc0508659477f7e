"""
conftest.py — Shared pytest fixtures for the polyline-tap test suite.

Provides:
    - A planar CRS whose projection maps (lat, lng) straight onto screen (y, x),
      so hit-test geometry can be written in pixels.
    - Cameras for that CRS and for Web Mercator.
    - Sample polylines and a PolylineStore for the API tests.
"""

from __future__ import annotations

import math

import pytest

from polyline_tap.camera import MapCamera, MapController
from polyline_tap.crs import Crs, Epsg3857, LatLng
from polyline_tap.geometry import Offset
from polyline_tap.loader import PolylineStore, TaggedPolyline


class PlanarCrs(Crs):
    """x = longitude, y = latitude, both scaled by 2^zoom. No axis flip."""

    code = "Planar"

    def scale(self, zoom):
        return math.pow(2.0, zoom)

    def latlng_to_point(self, latlng, zoom):
        s = self.scale(zoom)
        return Offset(latlng.longitude * s, latlng.latitude * s)

    def point_to_latlng(self, point, zoom):
        s = self.scale(zoom)
        return LatLng(latitude=point.dy / s, longitude=point.dx / s)


def screen_line(*xy, **kwargs) -> TaggedPolyline:
    """Build a polyline from (x, y) pixel pairs for a ``pixel_camera``."""
    return TaggedPolyline(points=[LatLng(latitude=y, longitude=x) for x, y in xy], **kwargs)


# ── Camera fixtures ────────────────────────────────────────────────────────────

@pytest.fixture
def pixel_camera() -> MapCamera:
    """
    100 x 100 viewport at zoom 0 centred on (50, 50): the viewport origin is
    (0, 0), so a LatLng(lat=y, lng=x) lands exactly on screen pixel (x, y).
    """
    return MapCamera(center=LatLng(50.0, 50.0), zoom=0.0, width=100.0, height=100.0,
                     crs=PlanarCrs())


@pytest.fixture
def pixel_controller(pixel_camera) -> MapController:
    return MapController(pixel_camera)


@pytest.fixture
def mercator_camera() -> MapCamera:
    """800 x 600 Web Mercator viewport over Bangalore at zoom 12."""
    return MapCamera(center=LatLng(12.9716, 77.5946), zoom=12.0, width=800.0, height=600.0,
                     crs=Epsg3857())


# ── Polyline fixtures ──────────────────────────────────────────────────────────

@pytest.fixture
def make_line():
    """Factory: ``make_line((x0, y0), (x1, y1), ..., tag=...)``."""
    return screen_line


@pytest.fixture
def vertical_line() -> TaggedPolyline:
    """Screen segment (0, 0) → (0, 10)."""
    return screen_line((0, 0), (0, 10), tag="vertical")


@pytest.fixture
def sample_features() -> list[dict]:
    """Two GeoJSON features in Bangalore: a LineString and a two-part MultiLineString."""
    return [
        {
            "type": "Feature",
            "properties": {"tag": "MG Road", "stroke_width": 4.0},
            "geometry": {
                "type": "LineString",
                "coordinates": [[77.5946, 12.9716], [77.6100, 12.9750]],
            },
        },
        {
            "type": "Feature",
            "properties": {"name": "Purple Line", "border_stroke_width": 2.0},
            "geometry": {
                "type": "MultiLineString",
                "coordinates": [
                    [[77.5700, 12.9760], [77.5800, 12.9765]],
                    [[77.5800, 12.9765], [77.5900, 12.9770]],
                ],
            },
        },
    ]


# ── PolylineStore fixture ─────────────────────────────────────────────────────

@pytest.fixture
def fake_store() -> PolylineStore:
    """
    Store for the "Simple" CRS camera used in the API tests.

    With CrsSimple a point (lat, lng) projects to (lng, -lat), so these lines
    sit on screen at x = 0 (y 0..10) and y = 50 (x 20..80) for a camera
    centred on (-50, 50).
    """
    return PolylineStore(polylines=[
        TaggedPolyline(points=[LatLng(0.0, 0.0), LatLng(-10.0, 0.0)], tag="Left"),
        TaggedPolyline(points=[LatLng(-50.0, 20.0), LatLng(-50.0, 80.0)], tag="Middle"),
    ])
