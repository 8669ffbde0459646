"""Deployment configuration from environment variables."""

from __future__ import annotations

import logging

from pydantic import Field
from pydantic_settings import BaseSettings

from mosaic.engine.config import PlacementConfig


class Settings(BaseSettings):
    log_level: str = "info"
    env: str = "development"

    # Image pool directory, read once at startup
    image_dir: str = "images"
    # Rectangles requested per capture
    target_count: int = Field(default=7, ge=0)
    # Fixed seed for reproducible layouts; None = fresh randomness per process
    seed: int | None = None

    # Optional PlacementConfig overrides
    min_spacing: float | None = Field(default=None, ge=0)
    min_image_size: float | None = Field(default=None, gt=0)
    max_image_size: float | None = Field(default=None, gt=0)

    model_config = {"env_prefix": "MOSAIC_", "env_file": ".env", "env_file_encoding": "utf-8"}

    def placement_config(self) -> PlacementConfig:
        """Validated PlacementConfig with this deployment's overrides applied."""
        overrides = {
            name: value
            for name, value in (
                ("min_spacing", self.min_spacing),
                ("min_image_size", self.min_image_size),
                ("max_image_size", self.max_image_size),
            )
            if value is not None
        }
        return PlacementConfig(**overrides)


def configure_logging(level: str | None = None) -> None:
    """Root logging setup for the installation process."""
    name = (level or Settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
