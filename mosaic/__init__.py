"""Silhouette mosaic — packs image rectangles inside a body outline from a segmentation mask."""

from mosaic.engine.config import ConfigError, PlacementConfig
from mosaic.engine.context import ImageAsset, PlacedRectangle
from mosaic.engine.pipeline import Pipeline, create_pipeline, run_capture

__all__ = [
    "ConfigError",
    "ImageAsset",
    "PlacedRectangle",
    "PlacementConfig",
    "Pipeline",
    "create_pipeline",
    "run_capture",
]
