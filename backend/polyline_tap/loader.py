"""
loader.py — Polyline data types and GeoJSON loading for polyline-tap.

Responsible for:
    - The TaggedPolyline value handed to the hit-tester.
    - Converting GeoJSON LineString / MultiLineString features into polylines.
    - Reading an optional GeoJSON file into a PolylineStore at startup.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from polyline_tap import config
from polyline_tap.crs import LatLng, LatLngBounds

logger = logging.getLogger(__name__)


# ── Polyline ──────────────────────────────────────────────────────────────────
@dataclass(eq=False)
class TaggedPolyline:
    """
    A renderable line plus an opaque caller-defined tag.

    Compared by identity: two polylines with the same points are still two
    distinct lines on the map.

    Attributes:
        points:                    Ordered vertices. Fewer than two can never be hit.
        stroke_width:              Line width, in pixels unless metre mode is on.
        border_stroke_width:       Border width in pixels.
        use_stroke_width_in_meter: Interpret ``stroke_width`` as metres on the ground.
        tag:                       Identifier returned to the caller on a hit.
        color, border_color, is_dotted: Display attributes for the renderer.
    """
    points:                    list[LatLng]
    stroke_width:              float = 1.0
    border_stroke_width:       float = 0.0
    use_stroke_width_in_meter: bool = False
    tag:                       Optional[str] = None
    color:                     str = "#00FF00"
    border_color:              str = "#FFFF00"
    is_dotted:                 bool = False

    @property
    def bounding_box(self) -> LatLngBounds:
        return LatLngBounds.from_points(self.points)

    def to_feature(self) -> dict:
        """Serialise as a GeoJSON LineString Feature."""
        return {
            "type": "Feature",
            "properties": {
                "tag": self.tag,
                "stroke_width": self.stroke_width,
                "border_stroke_width": self.border_stroke_width,
                "use_stroke_width_in_meter": self.use_stroke_width_in_meter,
                "color": self.color,
                "border_color": self.border_color,
                "is_dotted": self.is_dotted,
            },
            "geometry": {
                "type": "LineString",
                "coordinates": [[p.longitude, p.latitude] for p in self.points],
            },
        }


# ── PolylineStore ────────────────────────────────────────────────────────────
@dataclass
class PolylineStore:
    """
    Polylines preloaded for the HTTP service.

    Attributes:
        polylines: Every polyline read from the data file, in file order.
        source:    Path the polylines were read from, if any.
    """
    polylines: list[TaggedPolyline] = field(default_factory=list)
    source:    Optional[Path] = None

    def tags(self) -> list[str]:
        return [p.tag for p in self.polylines if p.tag is not None]

    def find_by_tag(self, tag: str) -> list[TaggedPolyline]:
        """Case-insensitive tag lookup; several polylines may share a tag."""
        lower = tag.lower()
        return [p for p in self.polylines if p.tag is not None and p.tag.lower() == lower]


# ── GeoJSON parsing ──────────────────────────────────────────────────────────

def _to_latlngs(coordinates: list[list[float]]) -> list[LatLng]:
    """GeoJSON positions are [lon, lat(, alt)]; altitude is dropped."""
    return [LatLng(latitude=float(c[1]), longitude=float(c[0])) for c in coordinates]


def parse_feature(feature: dict) -> list[TaggedPolyline]:
    """
    Convert one GeoJSON Feature into polylines.

    A LineString yields one polyline; a MultiLineString yields one per part,
    all sharing the feature's tag and style properties.

    Args:
        feature: GeoJSON Feature dict with "geometry" and optional "properties".

    Returns:
        List of TaggedPolyline objects.

    Raises:
        ValueError: If the geometry type is not a line type.
    """
    geometry   = feature.get("geometry") or {}
    properties = feature.get("properties") or {}
    geo_type   = geometry.get("type")
    coords     = geometry.get("coordinates", [])

    if geo_type == "LineString":
        parts = [coords]
    elif geo_type == "MultiLineString":
        parts = coords
    else:
        raise ValueError(f"Unsupported geometry type: {geo_type!r}")

    tag = properties.get("tag", properties.get("name"))
    return [
        TaggedPolyline(
            points=_to_latlngs(part),
            stroke_width=float(properties.get("stroke_width", 1.0)),
            border_stroke_width=float(properties.get("border_stroke_width", 0.0)),
            use_stroke_width_in_meter=bool(properties.get("use_stroke_width_in_meter", False)),
            tag=None if tag is None else str(tag),
            color=properties.get("color", "#00FF00"),
            border_color=properties.get("border_color", "#FFFF00"),
            is_dotted=bool(properties.get("is_dotted", False)),
        )
        for part in parts
    ]


def parse_features(features: list[dict]) -> list[TaggedPolyline]:
    """Parse many features, skipping (and logging) the malformed ones."""
    polylines: list[TaggedPolyline] = []
    for index, feature in enumerate(features):
        try:
            polylines.extend(parse_feature(feature))
        except (ValueError, TypeError, IndexError, AttributeError) as exc:
            logger.warning("Skipping malformed feature #%d: %s", index, exc)
    return polylines


def load_polylines(path: Optional[Path] = None) -> PolylineStore:
    """
    Load a GeoJSON FeatureCollection of lines from disk.

    Args:
        path: File to read; defaults to ``config.POLYLINES_PATH``.

    Returns:
        PolylineStore, empty if the file is missing or not valid JSON.
    """
    path = path or config.POLYLINES_PATH
    try:
        with path.open(encoding="utf-8") as fh:
            collection = json.load(fh)
    except FileNotFoundError:
        logger.error("GeoJSON file not found: %s", path)
        return PolylineStore(source=path)
    except json.JSONDecodeError as exc:
        logger.error("Invalid JSON in %s: %s", path.name, exc)
        return PolylineStore(source=path)

    polylines = parse_features(collection.get("features", []))
    logger.info("Loaded %d polylines from %s", len(polylines), path.name)
    return PolylineStore(polylines=polylines, source=path)
