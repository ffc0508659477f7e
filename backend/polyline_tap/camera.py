"""
camera.py — Map viewport state and the controller that moves it.

The hit-tester never owns camera state. It reads a MapCamera snapshot
(center, zoom, viewport size, CRS) and, for double-tap zooming, asks a
MapController to move. MapOptions carries the host's tap hook so every
tap can be observed regardless of hit outcome.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from polyline_tap import config
from polyline_tap.crs import Crs, Epsg3857, LatLng, LatLngBounds
from polyline_tap.geometry import Offset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TapPosition:
    """Tap location forwarded to the host hook."""
    global_position: Offset
    relative: Optional[Offset]


TapCallback = Callable[[TapPosition, LatLng], None]


@dataclass(frozen=True)
class MapCamera:
    """
    Immutable snapshot of the map viewport.

    Attributes:
        center: Geographic point at the middle of the viewport.
        zoom:   Current zoom level.
        width:  Viewport width in pixels.
        height: Viewport height in pixels.
        crs:    Coordinate reference system used for projection.
    """
    center: LatLng
    zoom:   float
    width:  float
    height: float
    crs:    Crs = field(default_factory=Epsg3857)

    @property
    def size(self) -> Offset:
        return Offset(self.width, self.height)

    def project(self, latlng: LatLng, zoom: Optional[float] = None) -> Offset:
        """Project a geographic point to world pixels (defaults to the camera zoom)."""
        return self.crs.latlng_to_point(latlng, self.zoom if zoom is None else zoom)

    def unproject(self, point: Offset, zoom: Optional[float] = None) -> LatLng:
        """Inverse of :meth:`project`."""
        return self.crs.point_to_latlng(point, self.zoom if zoom is None else zoom)

    @property
    def pixel_origin(self) -> Offset:
        """World pixel shown at the viewport's top-left corner."""
        return self.project(self.center) - self.size / 2

    @property
    def visible_bounds(self) -> LatLngBounds:
        origin = self.pixel_origin
        corners = [
            self.unproject(origin),
            self.unproject(origin + Offset(self.width, 0)),
            self.unproject(origin + Offset(0, self.height)),
            self.unproject(origin + self.size),
        ]
        return LatLngBounds.from_points(corners)


@dataclass
class MapOptions:
    """Host-level map settings: the tap hook and the allowed zoom range."""
    on_tap:   Optional[TapCallback] = None
    min_zoom: float = config.MIN_ZOOM
    max_zoom: float = config.MAX_ZOOM


class MapController:
    """Holds the live camera and applies move requests to it."""

    def __init__(self, camera: MapCamera, options: Optional[MapOptions] = None):
        self.camera = camera
        self.options = options or MapOptions()

    def move(self, center: LatLng, zoom: float) -> MapCamera:
        """
        Re-center the camera, clamping ``zoom`` to the configured range.

        Returns:
            The new camera, which also replaces ``self.camera``.
        """
        zoom = max(self.options.min_zoom, min(zoom, self.options.max_zoom))
        self.camera = replace(self.camera, center=center, zoom=zoom)
        logger.debug("Camera moved to (%.6f, %.6f) @ z%.2f",
                     center.latitude, center.longitude, zoom)
        return self.camera
