"""Contour extraction — Sobel edge map, component tracing, boundary walk, smoothing, RDP."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage
from skimage import measure

_SOBEL_X = np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]], dtype=np.float64)
_SOBEL_Y = _SOBEL_X.T

# 4-connected neighborhood as (drow, dcol). Diagonal steps are left out so the
# trace cannot shortcut across thin gaps in the silhouette.
_NEIGHBORS_4 = ((-1, 0), (0, -1), (0, 1), (1, 0))


def gradient_magnitude(alpha: NDArray) -> NDArray[np.float64]:
    """Euclidean magnitude of the Sobel gradients of an alpha grid."""
    grid = np.asarray(alpha, dtype=np.float64)
    gx = ndimage.correlate(grid, _SOBEL_X, mode="nearest")
    gy = ndimage.correlate(grid, _SOBEL_Y, mode="nearest")
    return np.hypot(gx, gy)


def edge_map(alpha: NDArray, threshold: float) -> NDArray[np.bool_]:
    """Mark pixels whose gradient magnitude exceeds ``threshold``.

    Border pixels are never edges.
    """
    grid = np.asarray(alpha)
    edges = np.zeros(grid.shape, dtype=bool)
    if grid.shape[0] < 3 or grid.shape[1] < 3:
        return edges
    magnitude = gradient_magnitude(grid)
    edges[1:-1, 1:-1] = magnitude[1:-1, 1:-1] > threshold
    return edges


def trace_components(edges: NDArray[np.bool_], min_points: int = 10) -> list[NDArray[np.int64]]:
    """Flood-trace connected edge components in raster order.

    Each component is returned as a Kx2 array of (x, y) pixel coordinates in
    visiting order; components with ``min_points`` points or fewer are dropped.
    """
    rows, cols = edges.shape
    visited = np.zeros_like(edges, dtype=bool)
    components: list[NDArray[np.int64]] = []

    for r0, c0 in np.argwhere(edges):
        if visited[r0, c0]:
            continue
        stack = [(int(r0), int(c0))]
        visited[r0, c0] = True
        pixels: list[tuple[int, int]] = []
        while stack:
            r, c = stack.pop()
            pixels.append((c, r))
            for dr, dc in _NEIGHBORS_4:
                nr, nc = r + dr, c + dc
                if 0 <= nr < rows and 0 <= nc < cols and edges[nr, nc] and not visited[nr, nc]:
                    visited[nr, nc] = True
                    stack.append((nr, nc))
        if len(pixels) > min_points:
            components.append(np.array(pixels, dtype=np.int64))

    return components


def trace_outline(component: NDArray, opaque: NDArray[np.bool_]) -> NDArray[np.float64]:
    """Walk the boundary of the opaque region enclosed by one edge component.

    The component's pixel band is closed against the frame wherever the
    silhouette is cut by the image border, its interior filled and clipped to
    ``opaque``. The outer boundary of the largest resulting region is traced
    with marching squares. Returns Kx2 (x, y) points without the closing
    duplicate, or an empty array if the component encloses nothing opaque.
    """
    rows, cols = opaque.shape
    xs = np.asarray(component[:, 0], dtype=np.intp)
    ys = np.asarray(component[:, 1], dtype=np.intp)
    r0, r1 = max(int(ys.min()) - 1, 0), min(int(ys.max()) + 2, rows)
    c0, c1 = max(int(xs.min()) - 1, 0), min(int(xs.max()) + 2, cols)
    window = opaque[r0:r1, c0:c1]

    band = np.zeros(window.shape, dtype=bool)
    band[ys - r0, xs - c0] = True
    frame = np.zeros((rows, cols), dtype=bool)
    frame[[0, -1], :] = True
    frame[:, [0, -1]] = True
    band |= frame[r0:r1, c0:c1] & window

    region = ndimage.binary_fill_holes(band) & window
    labels, count = ndimage.label(region)
    hits = labels[band & region]
    if count == 0 or hits.size == 0:
        return np.empty((0, 2))
    keep = labels == np.bincount(hits).argmax()

    outlines = measure.find_contours(np.pad(keep, 1).astype(np.float64), 0.5)
    outline = max(outlines, key=len)
    if len(outline) > 1 and np.allclose(outline[0], outline[-1]):
        outline = outline[:-1]
    # Undo the padding and the window offset; find_contours yields (row, col)
    return np.column_stack([outline[:, 1] + c0 - 1, outline[:, 0] + r0 - 1])


def smooth_closed(points: NDArray[np.float64], window: int = 3) -> NDArray[np.float64]:
    """Replace each point with the mean of its ±window neighbors, wrapping around."""
    pts = np.asarray(points, dtype=np.float64)
    if window <= 0 or len(pts) < 5:
        return pts.copy()
    total = np.zeros_like(pts)
    for shift in range(-window, window + 1):
        total += np.roll(pts, shift, axis=0)
    return total / (2 * window + 1)


def rdp_simplify(
    points: NDArray[np.float64],
    epsilon: float,
) -> NDArray[np.float64]:
    """Ramer-Douglas-Peucker line simplification.

    Reduces point count while preserving shape within epsilon tolerance.
    """
    if len(points) <= 2:
        return points

    start = points[0]
    end = points[-1]

    line_vec = end - start
    line_len = np.linalg.norm(line_vec)

    if line_len < 1e-10:
        distances = np.linalg.norm(points - start, axis=1)
    else:
        line_unit = line_vec / line_len
        vecs = points - start
        projections = np.dot(vecs, line_unit)
        closest = start + np.outer(projections, line_unit)
        distances = np.linalg.norm(points - closest, axis=1)

    max_idx = int(np.argmax(distances))
    max_dist = distances[max_idx]

    if max_dist > epsilon and 0 < max_idx < len(points) - 1:
        left = rdp_simplify(points[: max_idx + 1], epsilon)
        right = rdp_simplify(points[max_idx:], epsilon)
        return np.vstack([left[:-1], right])
    return points[[0, -1]]


def simplify_closed(points: NDArray[np.float64], epsilon: float) -> NDArray[np.float64]:
    """RDP for a closed outline: split at the vertex farthest from the first one."""
    pts = np.asarray(points, dtype=np.float64)
    if epsilon <= 0 or len(pts) < 4:
        return pts.copy()
    far = int(np.argmax(np.linalg.norm(pts - pts[0], axis=1)))
    if far == 0:
        return pts[:1].copy()
    first = rdp_simplify(pts[: far + 1], epsilon)
    second = rdp_simplify(np.vstack([pts[far:], pts[:1]]), epsilon)
    return np.vstack([first[:-1], second[:-1]])
