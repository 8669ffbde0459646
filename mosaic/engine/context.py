"""Data model — contours, shape statistics, rectangle requests and placements.

Per-capture working state lives in CaptureContext; everything it hands out
(Contour, ShapeInfo, PlacedRectangle) is immutable once produced.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

import numpy as np
from numpy.typing import NDArray
from shapely.geometry import Polygon, box

from mosaic.utils.geometry import bbox, points_in_polygon


def _frozen(array: NDArray, columns: int) -> NDArray[np.float64]:
    out = np.array(array, dtype=np.float64).reshape(-1, columns)
    out.setflags(write=False)
    return out


@dataclass(frozen=True, eq=False)
class Contour:
    """Ordered, closed outline: Nx2 array of (x, y) image-space points."""

    points: NDArray[np.float64]

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", _frozen(self.points, 2))

    def __len__(self) -> int:
        return len(self.points)

    @property
    def bbox(self) -> tuple[float, float, float, float]:
        return bbox(self.points)


@dataclass(frozen=True)
class SamplePoint:
    """Interior grid point annotated with its approximate clearance."""

    x: float
    y: float
    local_space: float


@dataclass(frozen=True, eq=False)
class ShapeInfo:
    """Aggregate statistics of one extracted shape, shared read-only by packer and optimizer."""

    # (xmin, ymin, xmax, ymax) over every point of every contour
    bounds: tuple[float, float, float, float]
    # Nx3 array of (x, y, local_space), raster order
    samples: NDArray[np.float64]
    # Polygon used for containment: the (decimated) main contour
    boundary: NDArray[np.float64]
    # Sample count × grid cell area
    total_area: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "samples", _frozen(self.samples, 3))
        object.__setattr__(self, "boundary", _frozen(self.boundary, 2))

    @classmethod
    def empty(cls) -> ShapeInfo:
        return cls(bounds=(0.0, 0.0, 0.0, 0.0), samples=np.empty((0, 3)), boundary=np.empty((0, 2)))

    @property
    def is_empty(self) -> bool:
        return len(self.samples) == 0

    @property
    def sample_points(self) -> list[SamplePoint]:
        return [SamplePoint(float(x), float(y), float(s)) for x, y, s in self.samples]

    @property
    def local_space(self) -> NDArray[np.float64]:
        return self.samples[:, 2]

    @property
    def mean_local_space(self) -> float:
        if self.is_empty:
            return 0.0
        return float(np.mean(self.samples[:, 2]))

    def contains(self, points: NDArray) -> NDArray[np.bool_]:
        return points_in_polygon(points, self.boundary)


@dataclass(frozen=True)
class ImageAsset:
    """An image from the pool; only its native size matters for placement."""

    name: str
    width: int
    height: int
    image: Any = field(default=None, compare=False, repr=False)

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


@dataclass(frozen=True)
class RectangleSpec:
    """A placement request. Higher priority is placed first."""

    width: float
    height: float
    aspect_ratio: float
    priority: int = 0
    tier: str = ""
    image: ImageAsset | None = None

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class PlacedRectangle:
    """Axis-aligned rectangle committed by the packer; (x, y) is the top-left corner."""

    x: float
    y: float
    width: float
    height: float
    aspect_ratio: float
    image: ImageAsset | None = None

    @classmethod
    def centered(
        cls,
        cx: float,
        cy: float,
        width: float,
        height: float,
        aspect_ratio: float,
        image: ImageAsset | None = None,
    ) -> PlacedRectangle:
        return cls(cx - width / 2, cy - height / 2, width, height, aspect_ratio, image)

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def probe_points(self) -> NDArray[np.float64]:
        """4 corners, 4 edge midpoints and the center."""
        x0, y0, x1, y1 = self.bounds
        xm, ym = self.center_x, self.center_y
        return np.array(
            [
                (x0, y0), (x1, y0), (x1, y1), (x0, y1),
                (xm, y0), (x1, ym), (xm, y1), (x0, ym),
                (xm, ym),
            ],
            dtype=np.float64,
        )

    def translated(self, dx: float, dy: float) -> PlacedRectangle:
        return replace(self, x=self.x + dx, y=self.y + dy)

    def as_box(self) -> Polygon:
        return box(*self.bounds)


@dataclass
class CaptureContext:
    """Working record for one capture event, filled in stage by stage."""

    # Raw mask from the segmentation collaborator (HxW or HxWxC), may be None
    mask: Any = None
    target_count: int = 7
    images: list[ImageAsset] = field(default_factory=list)

    # Prepared alpha grid; None means "no shape"
    alpha: NDArray[np.uint8] | None = None
    person_area: int = 0

    contours: list[Contour] = field(default_factory=list)
    shape_info: ShapeInfo | None = None
    specs: list[RectangleSpec] = field(default_factory=list)
    placements: list[PlacedRectangle] = field(default_factory=list)

    # --- Pipeline metadata ---
    completed_stages: list[str] = field(default_factory=list)
    timings: dict[str, float] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def has_shape(self) -> bool:
        return self.shape_info is not None and not self.shape_info.is_empty
