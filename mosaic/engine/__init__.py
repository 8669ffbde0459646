"""Silhouette placement engine."""

from mosaic.engine.config import ConfigError, PlacementConfig
from mosaic.engine.context import CaptureContext, Contour, PlacedRectangle, RectangleSpec, ShapeInfo
from mosaic.engine.pipeline import Pipeline

__all__ = [
    "ConfigError",
    "PlacementConfig",
    "CaptureContext",
    "Contour",
    "PlacedRectangle",
    "RectangleSpec",
    "ShapeInfo",
    "Pipeline",
]
