"""
Pydantic models for the polyline-tap HTTP API.
Each request model knows how to build the matching domain object.

Coordinates are unbounded at the model level: the "Simple" CRS is planar,
so its latitudes can sit anywhere. Geographic limits are checked on the
request only when the camera uses EPSG:3857.
"""

from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, model_validator

from polyline_tap import config
from polyline_tap.camera import MapCamera
from polyline_tap.crs import Epsg3857, LatLng, get_crs
from polyline_tap.geometry import Offset
from polyline_tap.loader import TaggedPolyline


class LatLngModel(BaseModel):
    lat: float
    lng: float

    def to_latlng(self) -> LatLng:
        return LatLng(latitude=self.lat, longitude=self.lng)

    @classmethod
    def from_latlng(cls, latlng: LatLng) -> "LatLngModel":
        return cls(lat=latlng.latitude, lng=latlng.longitude)


def _check_geographic(points: List[LatLngModel]) -> None:
    for p in points:
        if not -90.0 <= p.lat <= 90.0:
            raise ValueError(f"Latitude {p.lat} outside [-90, 90] for {Epsg3857.code}")


class CameraModel(BaseModel):
    center: LatLngModel
    zoom: float = Field(..., ge=0.0, le=30.0)
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    crs: Literal["EPSG:3857", "Simple"] = config.DEFAULT_CRS

    @model_validator(mode="after")
    def _geographic_center(self) -> "CameraModel":
        if self.crs == Epsg3857.code:
            _check_geographic([self.center])
        return self

    def to_camera(self) -> MapCamera:
        return MapCamera(
            center=self.center.to_latlng(),
            zoom=self.zoom,
            width=self.width,
            height=self.height,
            crs=get_crs(self.crs),
        )


class TapModel(BaseModel):
    local_position: Tuple[float, float]
    global_position: Optional[Tuple[float, float]] = None

    def local_offset(self) -> Offset:
        return Offset(*self.local_position)

    def global_offset(self) -> Offset:
        return Offset(*(self.global_position or self.local_position))


class PolylineModel(BaseModel):
    points: List[LatLngModel] = []
    stroke_width: float = Field(1.0, ge=0)
    border_stroke_width: float = Field(0.0, ge=0)
    use_stroke_width_in_meter: bool = False
    tag: Optional[str] = None
    color: str = "#00FF00"
    border_color: str = "#FFFF00"
    is_dotted: bool = False

    def to_polyline(self) -> TaggedPolyline:
        return TaggedPolyline(
            points=[p.to_latlng() for p in self.points],
            stroke_width=self.stroke_width,
            border_stroke_width=self.border_stroke_width,
            use_stroke_width_in_meter=self.use_stroke_width_in_meter,
            tag=self.tag,
            color=self.color,
            border_color=self.border_color,
            is_dotted=self.is_dotted,
        )

    @classmethod
    def from_polyline(cls, polyline: TaggedPolyline) -> "PolylineModel":
        return cls(
            points=[LatLngModel.from_latlng(p) for p in polyline.points],
            stroke_width=polyline.stroke_width,
            border_stroke_width=polyline.border_stroke_width,
            use_stroke_width_in_meter=polyline.use_stroke_width_in_meter,
            tag=polyline.tag,
            color=polyline.color,
            border_color=polyline.border_color,
            is_dotted=polyline.is_dotted,
        )


class HitTestRequest(BaseModel):
    camera: CameraModel
    tap: TapModel
    polylines: Optional[List[PolylineModel]] = None
    pointer_distance_tolerance: float = Field(config.POINTER_DISTANCE_TOLERANCE, ge=0)
    polyline_culling: bool = False

    @model_validator(mode="after")
    def _geographic_polylines(self) -> "HitTestRequest":
        if self.camera.crs == Epsg3857.code:
            for polyline in self.polylines or []:
                _check_geographic(polyline.points)
        return self


class HitTestResponse(BaseModel):
    hit: bool
    tags: List[Optional[str]] = []
    matches: List[PolylineModel] = []
    distance: Optional[float] = None
    latlng: LatLngModel


class DoubleTapRequest(BaseModel):
    camera: CameraModel
    tap: TapModel
    min_zoom: float = config.MIN_ZOOM
    max_zoom: float = config.MAX_ZOOM


class DoubleTapResponse(BaseModel):
    center: LatLngModel
    zoom: float


class ScreenToLatLngRequest(BaseModel):
    camera: CameraModel
    offset: Tuple[float, float]
