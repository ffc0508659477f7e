"""
layer.py — Tappable polyline layer: the public entry points for tap gestures.

The host forwards gestures here:
    on_tap_up          — forwards the tap to the map's own tap hook, then
                         hit-tests and calls on_tap(matches, details) or
                         on_miss(details), exactly one of them.
    on_double_tap_down — zooms in by half a level centred on the tap.

Drawing and gesture recognition belong to the host; this layer only does
the coordinate math and dispatch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from polyline_tap import config
from polyline_tap.camera import MapCamera, MapController, TapPosition
from polyline_tap.crs import LatLng
from polyline_tap.geodesy import Distance
from polyline_tap.geometry import Offset
from polyline_tap.hit_test import HitResult, hit_test
from polyline_tap.loader import TaggedPolyline

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TapUpDetails:
    local_position:  Offset
    global_position: Offset


@dataclass(frozen=True)
class TapDownDetails:
    local_position:  Offset
    global_position: Offset


OnTap = Callable[[list[TaggedPolyline], TapUpDetails], None]
OnMiss = Callable[[TapUpDetails], None]


def offset_to_latlng(offset: Offset, width: float, height: float, camera: MapCamera) -> LatLng:
    """
    Geographic point under a viewport-relative offset.

    The offset's displacement from the viewport center is applied to the
    camera's projected center, then unprojected.
    """
    center_distance = Offset(width / 2 - offset.dx, height / 2 - offset.dy)
    map_center = camera.project(camera.center)
    return camera.unproject(map_center - center_distance)


class TappablePolylineLayer:
    """
    Configuration bundle plus tap handlers for a set of tagged polylines.

    Args:
        polylines:                  Polylines that can be tapped.
        on_tap:                     Called with the matched polylines and the tap.
        on_miss:                    Called with the tap when nothing was hit.
        pointer_distance_tolerance: Minimum hit distance in pixels.
        distance:                   Geodesic calculator for metre-width strokes.
        polyline_culling:           Skip polylines whose bounds are off-screen.
    """

    def __init__(
        self,
        polylines: Optional[list[TaggedPolyline]] = None,
        on_tap: Optional[OnTap] = None,
        on_miss: Optional[OnMiss] = None,
        pointer_distance_tolerance: float = config.POINTER_DISTANCE_TOLERANCE,
        distance: Optional[Distance] = None,
        polyline_culling: bool = False,
    ):
        self.polylines = list(polylines or [])
        self.on_tap = on_tap
        self.on_miss = on_miss
        self.pointer_distance_tolerance = pointer_distance_tolerance
        self.distance = distance or Distance()
        self.polyline_culling = polyline_culling

    def visible_polylines(self, camera: MapCamera) -> list[TaggedPolyline]:
        """Polylines the renderer draws, culled to the viewport when enabled."""
        if not self.polyline_culling:
            return self.polylines
        bounds = camera.visible_bounds
        return [
            p for p in self.polylines
            if p.points and p.bounding_box.is_overlapping(bounds)
        ]

    def on_tap_up(self, details: TapUpDetails, controller: MapController) -> HitResult:
        """Handle a single tap: forward it to the map, then hit-test."""
        self._forward_call_to_map_options(details, controller)
        return self._handle_polyline_tap(details, controller.camera)

    def on_double_tap_down(self, details: TapDownDetails, controller: MapController) -> MapCamera:
        """Zoom in one step, re-centred on the tapped point."""
        camera = controller.camera
        new_center = offset_to_latlng(details.local_position, camera.width, camera.height, camera)
        return controller.move(new_center, camera.zoom + config.DOUBLE_TAP_ZOOM_DELTA)

    # ── Helpers ─────────────────────────────────────────────────────────────

    def _handle_polyline_tap(self, details: TapUpDetails, camera: MapCamera) -> HitResult:
        result = hit_test(
            details.local_position,
            self.visible_polylines(camera),
            camera,
            self.pointer_distance_tolerance,
            self.distance,
        )
        if result.is_miss:
            if self.on_miss is not None:
                self.on_miss(details)
        elif self.on_tap is not None:
            self.on_tap(result.matches, details)
        return result

    def _forward_call_to_map_options(self, details: TapUpDetails, controller: MapController) -> None:
        on_tap = controller.options.on_tap
        if on_tap is None:
            return
        camera = controller.camera
        latlng = offset_to_latlng(details.local_position, camera.width, camera.height, camera)
        on_tap(TapPosition(details.global_position, details.local_position), latlng)
