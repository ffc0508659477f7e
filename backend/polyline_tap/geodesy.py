"""
geodesy.py — Real-world distances and offsets on the WGS84 ellipsoid.

Used to turn a stroke width given in metres into an on-screen width:
the line's first vertex is displaced by that many metres and both points
are projected, so the pixel gap reflects the current zoom and latitude.
"""

from __future__ import annotations

from pyproj import Geod

from polyline_tap.crs import LatLng


class Distance:
    """Geodesic calculator backed by ``pyproj.Geod``."""

    def __init__(self, ellps: str = "WGS84"):
        self.ellps = ellps
        self._geod = Geod(ellps=ellps)

    def offset(self, point: LatLng, distance_m: float, bearing_deg: float) -> LatLng:
        """
        Point reached by travelling ``distance_m`` metres from ``point``
        along the initial bearing ``bearing_deg`` (0 = north, 180 = south).
        """
        lng, lat, _ = self._geod.fwd(point.longitude, point.latitude, bearing_deg, distance_m)
        return LatLng(latitude=lat, longitude=lng)

    def __repr__(self) -> str:
        return f"Distance(ellps={self.ellps!r})"
