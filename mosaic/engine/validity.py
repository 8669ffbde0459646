"""Validity Predicate — the single gate every committed or nudged rectangle passes."""

from __future__ import annotations

from collections.abc import Iterable

from mosaic.engine.config import PlacementConfig
from mosaic.engine.context import PlacedRectangle, ShapeInfo
from mosaic.utils.geometry import boxes_overlap


def gap(a: PlacedRectangle, b: PlacedRectangle) -> float:
    """Shortest edge-to-edge (or corner-to-corner) distance; 0 when touching or overlapping."""
    return float(a.as_box().distance(b.as_box()))


def is_contained(rect: PlacedRectangle, shape_info: ShapeInfo) -> bool:
    """Corners, edge midpoints and center all inside the shape boundary."""
    return bool(shape_info.contains(rect.probe_points()).all())


def is_clear_of(rect: PlacedRectangle, others: Iterable[PlacedRectangle], min_spacing: float) -> bool:
    """No overlap with, and at least ``min_spacing`` away from, every rectangle in ``others``."""
    for other in others:
        if boxes_overlap(rect.bounds, other.bounds):
            return False
        if min_spacing > 0 and gap(rect, other) < min_spacing:
            return False
    return True


def is_valid(
    rect: PlacedRectangle,
    shape_info: ShapeInfo,
    placed: Iterable[PlacedRectangle],
    config: PlacementConfig,
) -> bool:
    if rect.area < 0.5 * config.min_image_size**2:
        return False
    if not is_clear_of(rect, placed, config.min_spacing):
        return False
    return is_contained(rect, shape_info)
