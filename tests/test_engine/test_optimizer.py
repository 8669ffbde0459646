"""Tests for the Placement Optimizer."""

from __future__ import annotations

from dataclasses import replace

import numpy as np
import pytest

from mosaic.engine.config import PlacementConfig
from mosaic.engine.context import PlacedRectangle, ShapeInfo
from mosaic.engine.optimizer import optimize


def _square_shape(size: float) -> ShapeInfo:
    boundary = np.array([[0, 0], [size, 0], [size, size], [0, size]], dtype=np.float64)
    return ShapeInfo(
        bounds=(0, 0, size, size),
        samples=np.array([[size / 2, size / 2, size / 2]]),
        boundary=boundary,
    )


def test_single_rectangle_is_untouched():
    rect = PlacedRectangle.centered(100, 100, 60, 60, 1.0)
    placed = [rect]
    result = optimize(placed, _square_shape(400))
    assert result == [rect]
    assert result is not placed


def test_rectangles_spread_from_the_centroid():
    a = PlacedRectangle.centered(190, 200, 40, 40, 1.0)
    b = PlacedRectangle.centered(250, 200, 40, 40, 1.0)
    left, right = optimize([a, b], _square_shape(400))
    assert left.center_x == pytest.approx(187)
    assert right.center_x == pytest.approx(253)
    assert left.center_y == pytest.approx(200)
    assert (left.width, left.height) == (a.width, a.height)


def test_nudge_leaving_the_shape_is_rejected():
    edge = PlacedRectangle.centered(26, 100, 50, 50, 1.0)  # left side at x=1
    inner = PlacedRectangle.centered(150, 100, 50, 50, 1.0)
    first, second = optimize([edge, inner], _square_shape(200))
    assert first == edge
    assert second.center_x == pytest.approx(153)


def test_nudge_into_spacing_violation_is_rejected():
    # ``wall`` cannot move (it touches the left side), ``near`` sits 9px from it
    wall = PlacedRectangle(1, 180, 40, 40, 1.0)
    near = PlacedRectangle(50, 180, 40, 40, 1.0)
    far = PlacedRectangle.centered(300, 200, 40, 40, 1.0)
    result = optimize([wall, near, far], _square_shape(400))
    assert result[0] == wall
    assert result[1] == near
    assert result[2].center_x == pytest.approx(303)


def test_disabled_nudge_is_identity():
    a = PlacedRectangle.centered(150, 200, 40, 40, 1.0)
    b = PlacedRectangle.centered(250, 200, 40, 40, 1.0)
    cfg = replace(PlacementConfig(), nudge_distance=0.0)
    assert optimize([a, b], _square_shape(400), cfg) == [a, b]
