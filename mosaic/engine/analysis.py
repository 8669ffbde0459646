"""Shape Analyzer — interior grid sampling and per-sample clearance estimate.

Deterministic: the same contours and config always give the same ShapeInfo.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from mosaic.engine.config import PlacementConfig
from mosaic.engine.context import Contour, ShapeInfo
from mosaic.engine.extraction import main_contour
from mosaic.utils.contour import simplify_closed
from mosaic.utils.geometry import bbox, points_in_polygon

logger = logging.getLogger(__name__)

_DIAG = np.sqrt(0.5)
# Cardinal + diagonal unit vectors; diagonals are normalized so every ray
# measures Euclidean distance.
_DIRECTIONS = np.array(
    [
        (1.0, 0.0), (_DIAG, _DIAG), (0.0, 1.0), (-_DIAG, _DIAG),
        (-1.0, 0.0), (-_DIAG, -_DIAG), (0.0, -1.0), (_DIAG, -_DIAG),
    ]
)


def analyze(contours: list[Contour], config: PlacementConfig | None = None) -> ShapeInfo:
    """Sample the main contour's interior and estimate the free space around each sample."""
    config = config or PlacementConfig()
    main = main_contour(contours)
    if main is None or len(main) < 3:
        return ShapeInfo.empty()

    bounds = bbox(np.vstack([c.points for c in contours]))
    boundary = simplify_closed(main.points, config.boundary_tolerance)

    grid = sample_grid(bounds, config.grid_step)
    interior = grid[points_in_polygon(grid, boundary)]
    space = local_space(interior, boundary, config)

    info = ShapeInfo(
        bounds=bounds,
        samples=np.column_stack([interior, space]) if len(interior) else np.empty((0, 3)),
        boundary=boundary,
        total_area=float(len(interior) * config.grid_step**2),
    )
    logger.debug(
        "Shape analysis: %d samples, boundary %d→%d vertices, mean local space %.1f",
        len(interior),
        len(main),
        len(boundary),
        info.mean_local_space,
    )
    return info


def sample_grid(bounds: tuple[float, float, float, float], step: float) -> NDArray[np.float64]:
    """Grid points covering ``bounds`` in raster order (rows of y, then x)."""
    xmin, ymin, xmax, ymax = bounds
    xs = np.arange(xmin, xmax + 1e-9, step)
    ys = np.arange(ymin, ymax + 1e-9, step)
    gx, gy = np.meshgrid(xs, ys)
    return np.column_stack([gx.ravel(), gy.ravel()])


def local_space(
    samples: NDArray[np.float64],
    boundary: NDArray[np.float64],
    config: PlacementConfig,
) -> NDArray[np.float64]:
    """Mean distance a ray can travel in 8 directions before leaving the shape.

    Each ray advances in ``march_step`` increments and stops at the first probe
    found outside, or at ``max_march_distance``.
    """
    if len(samples) == 0:
        return np.empty(0)

    n_dirs = len(_DIRECTIONS)
    stops = np.full((len(samples), n_dirs), float(config.max_march_distance))
    alive = np.ones((len(samples), n_dirs), dtype=bool)
    n_steps = int(config.max_march_distance // config.march_step)

    for k in range(1, n_steps + 1):
        rows, dirs = np.nonzero(alive)
        if len(rows) == 0:
            break
        distance = k * config.march_step
        probes = samples[rows] + _DIRECTIONS[dirs] * distance
        outside = ~points_in_polygon(probes, boundary)
        stops[rows[outside], dirs[outside]] = distance
        alive[rows[outside], dirs[outside]] = False

    return stops.mean(axis=1)
