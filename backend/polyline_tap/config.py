"""Global paths, constants, and defaults for polyline-tap."""

import os
from pathlib import Path

# ── Paths ──────────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(os.environ.get("POLYLINE_TAP_ROOT", Path(__file__).resolve().parent.parent))
DATA_DIR = PROJECT_ROOT / "data"
POLYLINES_PATH = Path(os.environ.get("POLYLINE_TAP_DATA", DATA_DIR / "polylines.geojson"))

# ── Hit-testing ────────────────────────────────────────────────────────────
POINTER_DISTANCE_TOLERANCE = float(os.environ.get("POLYLINE_TAP_TOLERANCE", "15"))  # px
METER_STROKE_BEARING = 180.0  # due south

# ── Camera ─────────────────────────────────────────────────────────────────
DEFAULT_CRS = os.environ.get("POLYLINE_TAP_CRS", "EPSG:3857")
DOUBLE_TAP_ZOOM_DELTA = 0.5
MIN_ZOOM = 0.0
MAX_ZOOM = 22.0

# ── Logging ────────────────────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("POLYLINE_TAP_LOG_LEVEL", "INFO").upper()
