"""Shared test fixtures."""

from __future__ import annotations

import random

import numpy as np
import pytest
from scipy import ndimage

from mosaic.engine.context import Contour, ImageAsset

CANVAS_W = 640
CANVAS_H = 480


def rect_mask(x: int, y: int, w: int, h: int, canvas: tuple[int, int] = (CANVAS_W, CANVAS_H)) -> np.ndarray:
    """Opaque axis-aligned rectangle on a transparent canvas."""
    mask = np.zeros((canvas[1], canvas[0]), dtype=np.uint8)
    mask[y : y + h, x : x + w] = 255
    return mask


def disc_mask(cx: int, cy: int, r: int, canvas: tuple[int, int] = (CANVAS_W, CANVAS_H)) -> np.ndarray:
    yy, xx = np.mgrid[0 : canvas[1], 0 : canvas[0]]
    return np.where((xx - cx) ** 2 + (yy - cy) ** 2 <= r * r, 255, 0).astype(np.uint8)


def square_contour(x0: float, y0: float, size: float, per_side: int = 40) -> Contour:
    """Densely sampled closed square, clockwise from the top-left corner."""
    t = np.linspace(0.0, size, per_side, endpoint=False)
    top = np.column_stack([x0 + t, np.full_like(t, y0)])
    right = np.column_stack([np.full_like(t, x0 + size), y0 + t])
    bottom = np.column_stack([x0 + size - t, np.full_like(t, y0 + size)])
    left = np.column_stack([np.full_like(t, x0), y0 + size - t])
    return Contour(np.vstack([top, right, bottom, left]))


# 200×400 silhouette stand-in on the 640×480 webcam canvas
RECT_MASK = rect_mask(220, 40, 200, 400)

# Two 100×400 arms joined by a 400×100 base; the 200px gap between the arms is transparent
U_MASK = rect_mask(120, 40, 100, 400) | rect_mask(420, 40, 100, 400) | rect_mask(120, 340, 400, 100)
U_AREA = 2 * 100 * 300 + 400 * 100


def on_silhouette(mask: np.ndarray, points: np.ndarray, slack: int = 3) -> np.ndarray:
    """True where an (x, y) point lies on an opaque pixel, give or take ``slack`` pixels."""
    grown = ndimage.maximum_filter(mask, size=2 * slack + 1)
    h, w = mask.shape
    cols = np.clip(np.rint(points[:, 0]).astype(int), 0, w - 1)
    rows = np.clip(np.rint(points[:, 1]).astype(int), 0, h - 1)
    return grown[rows, cols] > 128


IMAGE_POOL = [
    ImageAsset("landscape.jpg", 300, 200),
    ImageAsset("portrait.jpg", 200, 300),
    ImageAsset("square.jpg", 100, 100),
    ImageAsset("wide.jpg", 400, 250),
]


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def image_pool() -> list[ImageAsset]:
    return list(IMAGE_POOL)
