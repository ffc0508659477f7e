"""
main.py — FastAPI application entry point for polyline-tap.

Exposes:
    GET  /                                  — health check (root)
    GET  /health                            — detailed health info
    GET  /api/v1/polylines                  — tags of all preloaded polylines
    GET  /api/v1/polylines/geojson/{tag}    — GeoJSON for the polylines with a tag
    POST /api/v1/hit-test                   — which polylines a tap landed on
    POST /api/v1/double-tap                 — camera after a double-tap zoom
    POST /api/v1/screen-to-latlng           — geographic point under a screen offset
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from polyline_tap import config
from polyline_tap.camera import MapController, MapOptions
from polyline_tap.geometry import Offset
from polyline_tap.layer import TapDownDetails, TapUpDetails, TappablePolylineLayer, offset_to_latlng
from polyline_tap.loader import PolylineStore, load_polylines
from polyline_tap.models import (
    DoubleTapRequest,
    DoubleTapResponse,
    HitTestRequest,
    HitTestResponse,
    LatLngModel,
    PolylineModel,
    ScreenToLatLngRequest,
)

# ── Logging ──────────────────────────────────────────────────────────────────
logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

# ── Application-level polyline store (loaded once at startup) ─────────────────
polyline_store: PolylineStore | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the preloaded polyline GeoJSON before accepting requests."""
    global polyline_store
    polyline_store = load_polylines()
    logger.info("Loaded %d polylines", len(polyline_store.polylines))
    yield
    logger.info("Shutting down — releasing polyline store.")


# ── FastAPI app ───────────────────────────────────────────────────────────────
app = FastAPI(
    title="Polyline Tap API",
    description=(
        "Hit-test taps against map polylines: find which lines lie within "
        "tolerance of a tapped screen point for a given map camera."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# ── Routes ────────────────────────────────────────────────────────────────────

@app.get("/", tags=["health"])
def root():
    """Root health-check endpoint."""
    return {"status": "ok", "message": "Polyline Tap API is running."}


@app.get("/health", tags=["health"])
def health():
    """Detailed health check: returns the preloaded polyline count."""
    if polyline_store is None:
        raise HTTPException(status_code=503, detail="Polylines not yet loaded.")
    return {
        "status": "ok",
        "polylines_loaded": len(polyline_store.polylines),
        "pointer_distance_tolerance": config.POINTER_DISTANCE_TOLERANCE,
    }


@app.get("/api/v1/polylines", tags=["metadata"])
def list_polylines():
    """Return the sorted, de-duplicated tags of the preloaded polylines."""
    if polyline_store is None:
        raise HTTPException(status_code=503, detail="Polyline store not initialised.")
    return {"tags": sorted(set(polyline_store.tags()))}


@app.get("/api/v1/polylines/geojson/{tag}", tags=["metadata"])
def get_polyline_geojson(tag: str):
    """
    Return every preloaded polyline carrying ``tag`` as a FeatureCollection.

    Raises:
        HTTPException 404: If no polyline has the tag.
        HTTPException 503: If the store has not been initialised.
    """
    if polyline_store is None:
        raise HTTPException(status_code=503, detail="Polyline store not initialised.")

    matches = polyline_store.find_by_tag(tag)
    if not matches:
        raise HTTPException(status_code=404, detail=f"Polyline '{tag}' not found.")

    return {"type": "FeatureCollection", "features": [p.to_feature() for p in matches]}


@app.post("/api/v1/hit-test", tags=["tap"], response_model=HitTestResponse)
def hit_test_endpoint(request: HitTestRequest):
    """
    Hit-test one tap against polylines.

    Uses ``request.polylines`` when given, otherwise the preloaded store.
    A miss is a normal response with ``hit: false``.

    Raises:
        HTTPException 503: If no polylines were sent and the store is not loaded.
    """
    if request.polylines is not None:
        polylines = [p.to_polyline() for p in request.polylines]
    elif polyline_store is not None:
        polylines = polyline_store.polylines
    else:
        raise HTTPException(status_code=503, detail="Polyline store not initialised.")

    tapped: dict = {}

    def on_map_tap(position, latlng):
        tapped["latlng"] = latlng

    controller = MapController(request.camera.to_camera(), MapOptions(on_tap=on_map_tap))
    layer = TappablePolylineLayer(
        polylines=polylines,
        pointer_distance_tolerance=request.pointer_distance_tolerance,
        polyline_culling=request.polyline_culling,
    )
    details = TapUpDetails(
        local_position=request.tap.local_offset(),
        global_position=request.tap.global_offset(),
    )
    result = layer.on_tap_up(details, controller)

    logger.info("Hit-test (%.1f, %.1f) → %s", details.local_position.dx,
                details.local_position.dy, result.tags if not result.is_miss else "miss")
    return HitTestResponse(
        hit=not result.is_miss,
        tags=result.tags,
        matches=[PolylineModel.from_polyline(p) for p in result.matches],
        distance=result.distance,
        latlng=LatLngModel.from_latlng(tapped["latlng"]),
    )


@app.post("/api/v1/double-tap", tags=["tap"], response_model=DoubleTapResponse)
def double_tap(request: DoubleTapRequest):
    """Return the camera center and zoom after a double-tap at ``request.tap``."""
    controller = MapController(
        request.camera.to_camera(),
        MapOptions(min_zoom=request.min_zoom, max_zoom=request.max_zoom),
    )
    details = TapDownDetails(
        local_position=request.tap.local_offset(),
        global_position=request.tap.global_offset(),
    )
    camera = TappablePolylineLayer().on_double_tap_down(details, controller)
    return DoubleTapResponse(center=LatLngModel.from_latlng(camera.center), zoom=camera.zoom)


@app.post("/api/v1/screen-to-latlng", tags=["tap"], response_model=LatLngModel)
def screen_to_latlng(request: ScreenToLatLngRequest):
    """Return the geographic point under a viewport-relative offset."""
    camera = request.camera.to_camera()
    latlng = offset_to_latlng(Offset(*request.offset), camera.width, camera.height, camera)
    return LatLngModel.from_latlng(latlng)
