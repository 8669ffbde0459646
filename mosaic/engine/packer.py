"""Iterative Packer — random candidate centers, validity gate, shrink on failure."""

from __future__ import annotations

import logging
import random

import numpy as np

from mosaic.engine.config import PlacementConfig
from mosaic.engine.context import PlacedRectangle, RectangleSpec, ShapeInfo
from mosaic.engine.validity import is_valid

logger = logging.getLogger(__name__)


class Packer:
    """Places specs one at a time; at most one rectangle per spec.

    A spec that finds no valid spot at its current size is shrunk by
    ``shrink_factor`` (attempt budget reset) until its longer side would fall
    below ``min_image_size``, after which it is skipped.
    """

    def __init__(self, config: PlacementConfig | None = None, rng: random.Random | None = None) -> None:
        self.config = config or PlacementConfig()
        self.rng = rng or random.Random()

    def place(self, specs: list[RectangleSpec], shape_info: ShapeInfo) -> list[PlacedRectangle]:
        placed: list[PlacedRectangle] = []
        if not specs or shape_info.is_empty:
            return placed

        for i, spec in enumerate(specs):
            rect = self._place_one(spec, shape_info, placed)
            if rect is None:
                logger.warning(
                    "Spec %d (%s, %.0fx%.0f) abandoned: no valid position down to floor size",
                    i,
                    spec.tier or "untiered",
                    spec.width,
                    spec.height,
                )
                continue
            logger.debug(
                "Spec %d placed at (%.1f, %.1f) size %.1fx%.1f", i, rect.x, rect.y, rect.width, rect.height
            )
            placed.append(rect)

        return placed

    def _place_one(
        self,
        spec: RectangleSpec,
        shape_info: ShapeInfo,
        placed: list[PlacedRectangle],
    ) -> PlacedRectangle | None:
        cfg = self.config
        width, height = spec.width, spec.height
        space = shape_info.local_space

        while True:
            candidates = np.flatnonzero(space >= min(width, height) / 2)
            if len(candidates):
                for _ in range(cfg.max_attempts):
                    cx, cy = shape_info.samples[self.rng.choice(candidates), :2]
                    rect = PlacedRectangle.centered(
                        float(cx), float(cy), width, height, spec.aspect_ratio, spec.image
                    )
                    if is_valid(rect, shape_info, placed, cfg):
                        return rect

            if max(width, height) * cfg.shrink_factor < cfg.min_image_size:
                return None
            width *= cfg.shrink_factor
            height *= cfg.shrink_factor


def place(
    specs: list[RectangleSpec],
    shape_info: ShapeInfo,
    config: PlacementConfig | None = None,
    rng: random.Random | None = None,
) -> list[PlacedRectangle]:
    """Functional form of ``Packer(config, rng).place(specs, shape_info)``."""
    return Packer(config, rng).place(specs, shape_info)
