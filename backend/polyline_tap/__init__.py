"""polyline-tap: hit-testing taps against map polylines."""

__version__ = "1.0.0"
