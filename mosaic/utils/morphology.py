"""Mask helpers — alpha extraction, grey dilation, person-area estimate."""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage

# Every 4th pixel of the flattened mask is counted; each hit stands for 4 pixels.
_AREA_SAMPLE_STRIDE = 4


def as_alpha(mask: Any) -> NDArray[np.uint8] | None:
    """Return the mask's alpha channel as a 2D uint8 grid, or None if there is no mask.

    Accepts an HxW opacity grid or an HxWxC array whose last channel is alpha.
    """
    if mask is None:
        return None
    grid = np.asarray(mask)
    if grid.ndim == 3:
        grid = grid[..., -1]
    if grid.ndim != 2 or grid.shape[0] == 0 or grid.shape[1] == 0:
        return None
    if grid.dtype == bool:
        return grid.astype(np.uint8) * 255
    return np.clip(grid, 0, 255).astype(np.uint8)


def dilate_mask(alpha: NDArray[np.uint8], size: int = 3) -> NDArray[np.uint8]:
    """Grey dilation: each pixel takes the max alpha of its size×size neighborhood.

    Fills pinholes and hairline gaps left by the segmentation model.
    """
    if size <= 1:
        return alpha
    return ndimage.grey_dilation(alpha, size=(size, size))


def person_area(alpha: NDArray[np.uint8], threshold: int = 128) -> int:
    """Estimate the number of foreground pixels by sampling the flattened mask."""
    if alpha is None or alpha.size == 0:
        return 0
    hits = np.count_nonzero(alpha.ravel()[::_AREA_SAMPLE_STRIDE] > threshold)
    return int(hits * _AREA_SAMPLE_STRIDE)
