"""Rectangle Spec Generator — sized, image-tagged placement requests, largest first."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence

import numpy as np

from mosaic.engine.config import PlacementConfig
from mosaic.engine.context import ImageAsset, RectangleSpec, ShapeInfo

logger = logging.getLogger(__name__)

# (tier name, priority) in placement order
_TIERS = (("large", 3), ("medium", 2), ("small", 1))


def tier_counts(target_count: int, fractions: tuple[float, float, float]) -> tuple[int, int, int]:
    """Split ``target_count`` into (large, medium, small); medium absorbs rounding."""
    if target_count <= 0:
        return (0, 0, 0)
    large = round(target_count * fractions[0])
    small = round(target_count * fractions[2])
    medium = target_count - large - small
    if medium < 0:
        small += medium
        medium = 0
    return (large, medium, small)


def fit_aspect(base_size: float, aspect: float) -> tuple[float, float]:
    """Width/height with the longer side equal to ``base_size`` and ratio ``aspect``."""
    if aspect >= 1:
        return (base_size, base_size / aspect)
    return (base_size * aspect, base_size)


def generate_specs(
    shape_info: ShapeInfo,
    images: Sequence[ImageAsset],
    target_count: int,
    config: PlacementConfig | None = None,
    rng: random.Random | None = None,
) -> list[RectangleSpec]:
    """Produce up to ``target_count`` specs sorted by tier priority, then area, descending.

    Images are drawn uniformly at random from ``images``; with an empty pool the
    aspect ratio comes from ``config.fallback_aspect_ratios`` and no image is attached.
    """
    config = config or PlacementConfig()
    rng = rng or random.Random()
    if target_count <= 0 or shape_info.is_empty:
        return []

    mean_space = shape_info.mean_local_space
    counts = tier_counts(target_count, config.tier_fractions)
    specs: list[RectangleSpec] = []

    for (tier, priority), count, multiplier in zip(_TIERS, counts, config.tier_multipliers):
        base = float(np.clip(mean_space * multiplier, config.min_image_size, config.max_image_size))
        for _ in range(count):
            image = rng.choice(images) if images else None
            aspect = image.aspect_ratio if image is not None else rng.choice(config.fallback_aspect_ratios)
            width, height = fit_aspect(base, aspect)
            specs.append(
                RectangleSpec(
                    width=width,
                    height=height,
                    aspect_ratio=aspect,
                    priority=priority,
                    tier=tier,
                    image=image,
                )
            )

    specs.sort(key=lambda s: (s.priority, s.area), reverse=True)
    logger.debug("Generated %d specs %s from mean local space %.1f", len(specs), counts, mean_space)
    return specs
