"""
crs.py — Geographic coordinates and coordinate reference systems.

A CRS turns a LatLng into a pixel-space point at a given zoom level and
back again. Two are provided:

    EPSG:3857  — Web Mercator, the projection used by slippy-map tiles.
                 WGS84 degrees go through pyproj to Mercator metres, then
                 an affine transformation maps metres onto a 256 px world
                 square that doubles in size with every zoom level.
    Simple     — planar, longitude is x and latitude is y (flipped), used
                 for non-geographic images and tests.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, NamedTuple

from pyproj import Transformer

from polyline_tap.geometry import Offset

# ── Web Mercator constants ────────────────────────────────────────────────────
EARTH_RADIUS_M = 6378137.0
MAX_MERCATOR_LATITUDE = 85.0511287798
TILE_SIZE = 256.0

_TO_MERCATOR = Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)
_FROM_MERCATOR = Transformer.from_crs("EPSG:3857", "EPSG:4326", always_xy=True)


class LatLng(NamedTuple):
    """A geographic coordinate in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class LatLngBounds:
    """
    Axis-aligned geographic bounding box.

    Attributes:
        south: Minimum latitude.
        west:  Minimum longitude.
        north: Maximum latitude.
        east:  Maximum longitude.
    """
    south: float
    west:  float
    north: float
    east:  float

    @classmethod
    def from_points(cls, points: Iterable[LatLng]) -> "LatLngBounds":
        """
        Build the smallest bounds containing every point.

        Raises:
            ValueError: If ``points`` is empty.
        """
        points = list(points)
        if not points:
            raise ValueError("Cannot build bounds from an empty point list")
        lats = [p.latitude for p in points]
        lngs = [p.longitude for p in points]
        return cls(south=min(lats), west=min(lngs), north=max(lats), east=max(lngs))

    def is_overlapping(self, other: "LatLngBounds") -> bool:
        """True if the two boxes share any point, edges included."""
        return not (
            other.north < self.south
            or other.south > self.north
            or other.east < self.west
            or other.west > self.east
        )


# ── Coordinate reference systems ─────────────────────────────────────────────

class Crs:
    """Base class: projects LatLng to pixel points at a zoom level."""

    code: str = ""

    def scale(self, zoom: float) -> float:
        raise NotImplementedError

    def latlng_to_point(self, latlng: LatLng, zoom: float) -> Offset:
        raise NotImplementedError

    def point_to_latlng(self, point: Offset, zoom: float) -> LatLng:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r})"


class Epsg3857(Crs):
    """Spherical (pseudo) Mercator, as used by OpenStreetMap tiles."""

    code = "EPSG:3857"

    # Affine coefficients mapping Mercator metres onto the unit square
    _A = 0.5 / (math.pi * EARTH_RADIUS_M)
    _B = 0.5
    _C = -0.5 / (math.pi * EARTH_RADIUS_M)
    _D = 0.5

    def scale(self, zoom: float) -> float:
        return TILE_SIZE * math.pow(2.0, zoom)

    def latlng_to_point(self, latlng: LatLng, zoom: float) -> Offset:
        lat = max(min(latlng.latitude, MAX_MERCATOR_LATITUDE), -MAX_MERCATOR_LATITUDE)
        x, y = _TO_MERCATOR.transform(latlng.longitude, lat)
        scale = self.scale(zoom)
        return Offset(
            scale * (self._A * x + self._B),
            scale * (self._C * y + self._D),
        )

    def point_to_latlng(self, point: Offset, zoom: float) -> LatLng:
        scale = self.scale(zoom)
        x = (point.dx / scale - self._B) / self._A
        y = (point.dy / scale - self._D) / self._C
        _, lat = _FROM_MERCATOR.transform(x, y)
        # PROJ wraps longitude into [-180, 180]; points left or right of the
        # world square must keep their unwrapped longitude.
        return LatLng(latitude=lat, longitude=math.degrees(x / EARTH_RADIUS_M))


class CrsSimple(Crs):
    """Planar CRS: one degree is one pixel at zoom 0, y grows downwards."""

    code = "Simple"

    def scale(self, zoom: float) -> float:
        return math.pow(2.0, zoom)

    def latlng_to_point(self, latlng: LatLng, zoom: float) -> Offset:
        scale = self.scale(zoom)
        return Offset(latlng.longitude * scale, -latlng.latitude * scale)

    def point_to_latlng(self, point: Offset, zoom: float) -> LatLng:
        scale = self.scale(zoom)
        return LatLng(latitude=-point.dy / scale, longitude=point.dx / scale)


_CRS_BY_CODE: dict[str, type[Crs]] = {
    Epsg3857.code: Epsg3857,
    CrsSimple.code: CrsSimple,
}


def get_crs(code: str) -> Crs:
    """
    Resolve a CRS code ("EPSG:3857" or "Simple") to a CRS instance.

    Raises:
        ValueError: If the code is not supported.
    """
    try:
        return _CRS_BY_CODE[code]()
    except KeyError:
        raise ValueError(f"Unsupported CRS: {code!r}") from None
