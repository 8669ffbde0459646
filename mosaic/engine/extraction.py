"""Contour Extractor — alpha mask to a small set of smoothed silhouette outlines.

Edge map (Sobel magnitude > threshold) → 4-connected component trace →
boundary walk around each component → moving-average smoothing → length filtering.
"""

from __future__ import annotations

import logging
from typing import Any

from mosaic.engine.config import PlacementConfig
from mosaic.engine.context import Contour
from mosaic.utils.contour import edge_map, smooth_closed, trace_components, trace_outline
from mosaic.utils.morphology import as_alpha

logger = logging.getLogger(__name__)


def extract_contours(mask: Any, config: PlacementConfig | None = None) -> list[Contour]:
    """Convert an alpha mask into at most ``config.max_contours`` outlines, longest first.

    ``None``, zero-sized masks and masks without edges yield an empty list.
    """
    config = config or PlacementConfig()
    alpha = as_alpha(mask)
    if alpha is None:
        return []

    edges = edge_map(alpha, config.edge_threshold)
    components = trace_components(edges, config.min_component_points)
    opaque = alpha > config.alpha_threshold
    candidates = []
    for component in components:
        outline = trace_outline(component, opaque)
        if len(outline):
            candidates.append(Contour(smooth_closed(outline, config.smoothing_window)))
    contours = filter_contours(candidates, config)
    logger.debug(
        "Extracted %d contour(s) from %d component(s), %d edge pixels",
        len(contours),
        len(components),
        int(edges.sum()),
    )
    return contours


def filter_contours(candidates: list[Contour], config: PlacementConfig) -> list[Contour]:
    """Keep the longest outlines; drop short ones and ones dwarfed by the longest."""
    ranked = sorted(candidates, key=len, reverse=True)
    ranked = [c for c in ranked if len(c) >= config.min_contour_length]
    if not ranked:
        return []
    floor = len(ranked[0]) * config.min_length_ratio
    return [c for c in ranked if len(c) >= floor][: config.max_contours]


def main_contour(contours: list[Contour]) -> Contour | None:
    """The longest contour by point count; the only one used for containment."""
    if not contours:
        return None
    return max(contours, key=len)


def contour_stats(contours: list[Contour]) -> dict[str, int]:
    """Summary counts for logging and debug overlays."""
    if not contours:
        return {"total_contours": 0, "total_points": 0, "average_length": 0, "longest_contour": 0}
    lengths = [len(c) for c in contours]
    return {
        "total_contours": len(lengths),
        "total_points": sum(lengths),
        "average_length": round(sum(lengths) / len(lengths)),
        "longest_contour": max(lengths),
    }
