"""Placement configuration — every tunable of the capture pipeline in one frozen object."""

from __future__ import annotations

import math
from dataclasses import dataclass


class ConfigError(ValueError):
    """Raised when a PlacementConfig is internally inconsistent."""


@dataclass(frozen=True)
class PlacementConfig:
    """Controls edge extraction, shape analysis and rectangle packing.

    Instances are immutable; derive tuned variants with ``dataclasses.replace``.
    """

    # Mask pre-processing
    mask_dilation: int = 3  # grey dilation kernel, <=1 disables
    alpha_threshold: int = 128
    min_person_area: float = 5000.0

    # Edge detection (Sobel magnitude on 0-255 alpha)
    edge_threshold: float = 500.0

    # Contour tracing / filtering
    min_component_points: int = 10  # components must have MORE points than this
    smoothing_window: int = 3  # ±neighbors averaged along the contour
    min_contour_length: int = 50
    min_length_ratio: float = 0.3  # relative to the longest candidate
    max_contours: int = 2

    # RDP tolerance applied to the main contour before containment tests
    boundary_tolerance: float = 1.0

    # Shape analysis
    grid_step: float = 8.0
    march_step: float = 5.0
    max_march_distance: float = 100.0

    # Rectangle sizing
    min_image_size: float = 50.0
    max_image_size: float = 150.0
    tier_fractions: tuple[float, float, float] = (0.3, 0.45, 0.25)  # large, medium, small
    tier_multipliers: tuple[float, float, float] = (0.9, 0.7, 0.5)
    fallback_aspect_ratios: tuple[float, ...] = (1.0, 1.5, 0.67, 1.33, 0.8, 1.25)

    # Packing
    min_spacing: float = 8.0
    max_attempts: int = 75
    shrink_factor: float = 0.9

    # Optimizer
    optimize: bool = True
    nudge_distance: float = 3.0

    def __post_init__(self) -> None:
        positive = {
            "grid_step": self.grid_step,
            "march_step": self.march_step,
            "max_march_distance": self.max_march_distance,
            "min_image_size": self.min_image_size,
            "max_image_size": self.max_image_size,
            "edge_threshold": self.edge_threshold,
            "max_attempts": self.max_attempts,
            "max_contours": self.max_contours,
        }
        for name, value in positive.items():
            if not value > 0:
                raise ConfigError(f"{name} must be positive, got {value!r}")

        non_negative = {
            "mask_dilation": self.mask_dilation,
            "min_person_area": self.min_person_area,
            "min_component_points": self.min_component_points,
            "smoothing_window": self.smoothing_window,
            "min_contour_length": self.min_contour_length,
            "boundary_tolerance": self.boundary_tolerance,
            "min_spacing": self.min_spacing,
            "nudge_distance": self.nudge_distance,
        }
        for name, value in non_negative.items():
            if value < 0:
                raise ConfigError(f"{name} must not be negative, got {value!r}")

        if not 0 <= self.alpha_threshold <= 255:
            raise ConfigError(f"alpha_threshold must lie in [0, 255], got {self.alpha_threshold!r}")
        if not 0 <= self.min_length_ratio <= 1:
            raise ConfigError(f"min_length_ratio must lie in [0, 1], got {self.min_length_ratio!r}")
        if self.min_image_size > self.max_image_size:
            raise ConfigError(
                f"min_image_size ({self.min_image_size}) exceeds max_image_size ({self.max_image_size})"
            )
        if not 0 < self.shrink_factor < 1:
            raise ConfigError(f"shrink_factor must lie in (0, 1), got {self.shrink_factor!r}")

        if len(self.tier_fractions) != 3 or len(self.tier_multipliers) != 3:
            raise ConfigError("tier_fractions and tier_multipliers need exactly 3 entries")
        if any(f < 0 for f in self.tier_fractions) or not math.isclose(sum(self.tier_fractions), 1.0):
            raise ConfigError(f"tier_fractions must be non-negative and sum to 1, got {self.tier_fractions!r}")
        if any(m <= 0 for m in self.tier_multipliers):
            raise ConfigError(f"tier_multipliers must be positive, got {self.tier_multipliers!r}")

        if not self.fallback_aspect_ratios:
            raise ConfigError("fallback_aspect_ratios must not be empty")
        if any(a <= 0 for a in self.fallback_aspect_ratios):
            raise ConfigError(f"aspect ratios must be positive, got {self.fallback_aspect_ratios!r}")
