"""Placement Optimizer — one relaxation pass pushing rectangles away from the group centroid."""

from __future__ import annotations

import logging
import math

from mosaic.engine.config import PlacementConfig
from mosaic.engine.context import PlacedRectangle, ShapeInfo
from mosaic.engine.validity import is_valid

logger = logging.getLogger(__name__)


def optimize(
    placed: list[PlacedRectangle],
    shape_info: ShapeInfo,
    config: PlacementConfig | None = None,
) -> list[PlacedRectangle]:
    """Nudge each rectangle ``nudge_distance`` away from the centroid of all centers.

    A nudge is kept only if the moved rectangle is still valid against every other
    rectangle (already-nudged ones at their new position). Returns a new list.
    """
    config = config or PlacementConfig()
    result = list(placed)
    if len(result) < 2 or config.nudge_distance <= 0:
        return result

    cx = sum(r.center_x for r in result) / len(result)
    cy = sum(r.center_y for r in result) / len(result)

    moved = 0
    for i, rect in enumerate(result):
        dx = rect.center_x - cx
        dy = rect.center_y - cy
        dist = math.hypot(dx, dy)
        if dist < 1e-9:
            continue
        step = config.nudge_distance / dist
        candidate = rect.translated(dx * step, dy * step)
        others = result[:i] + result[i + 1 :]
        if is_valid(candidate, shape_info, others, config):
            result[i] = candidate
            moved += 1

    logger.debug("Optimizer nudged %d/%d rectangles", moved, len(result))
    return result
