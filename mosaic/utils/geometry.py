"""Leaf-node geometry helpers. No engine imports.

``points_in_polygon`` is the single containment primitive for the whole package;
everything that asks "is this inside the silhouette?" goes through it.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

# Upper bound on (points x edges) booleans held in memory per batch.
_MAX_BATCH_ELEMENTS = 1 << 20


def bbox(points: NDArray[np.float64]) -> tuple[float, float, float, float]:
    """Compute (xmin, ymin, xmax, ymax) bounding box."""
    if len(points) == 0:
        return (0.0, 0.0, 0.0, 0.0)
    return (
        float(np.min(points[:, 0])),
        float(np.min(points[:, 1])),
        float(np.max(points[:, 0])),
        float(np.max(points[:, 1])),
    )


def centroid(points: NDArray[np.float64]) -> tuple[float, float]:
    """Compute centroid of a point set."""
    if len(points) == 0:
        return (0.0, 0.0)
    return (float(np.mean(points[:, 0])), float(np.mean(points[:, 1])))


def points_in_polygon(points: ArrayLike, polygon: ArrayLike) -> NDArray[np.bool_]:
    """Ray-casting parity test for many points against one closed polygon.

    A ray is cast from each point in the +x direction and the crossings with the
    polygon edges (last vertex wraps to the first) are counted; an odd count means
    inside. Polygons with fewer than 3 vertices contain nothing.
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    poly = np.asarray(polygon, dtype=np.float64).reshape(-1, 2)
    inside = np.zeros(len(pts), dtype=bool)
    if len(pts) == 0 or len(poly) < 3:
        return inside

    x1 = poly[:, 0]
    y1 = poly[:, 1]
    x2 = np.roll(x1, -1)
    y2 = np.roll(y1, -1)
    dy = y2 - y1

    batch = max(1, _MAX_BATCH_ELEMENTS // len(poly))
    for start in range(0, len(pts), batch):
        px = pts[start : start + batch, 0:1]
        py = pts[start : start + batch, 1:2]
        straddles = (y1 > py) != (y2 > py)
        # Horizontal edges never straddle, so their inf/nan crossings are masked out.
        with np.errstate(divide="ignore", invalid="ignore"):
            x_cross = x1 + (py - y1) * (x2 - x1) / dy
        crossings = np.count_nonzero(straddles & (px < x_cross), axis=1)
        inside[start : start + batch] = crossings % 2 == 1
    return inside


def is_inside(x: float, y: float, polygon: ArrayLike) -> bool:
    """Single-point form of ``points_in_polygon``."""
    return bool(points_in_polygon(((x, y),), polygon)[0])


def intervals_overlap(a0: float, a1: float, b0: float, b1: float) -> bool:
    """Open-interval overlap: touching intervals do not overlap."""
    return a0 < b1 and b0 < a1


def boxes_overlap(
    a: tuple[float, float, float, float],
    b: tuple[float, float, float, float],
) -> bool:
    """Axis-aligned overlap of two (xmin, ymin, xmax, ymax) boxes."""
    return intervals_overlap(a[0], a[2], b[0], b[2]) and intervals_overlap(a[1], a[3], b[1], b[3])
