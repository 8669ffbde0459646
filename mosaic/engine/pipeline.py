"""Pipeline orchestrator — one synchronous pass per capture event.

mask → contours → shape info → specs → placements → optimized placements.
The whole run is a single unit of work: if any stage raises, the capture yields
no placements.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable, Sequence
from typing import Any

from mosaic.engine.analysis import analyze
from mosaic.engine.config import PlacementConfig
from mosaic.engine.context import CaptureContext, ImageAsset, PlacedRectangle
from mosaic.engine.extraction import contour_stats, extract_contours
from mosaic.engine.optimizer import optimize
from mosaic.engine.packer import Packer
from mosaic.engine.specs import generate_specs
from mosaic.utils.morphology import as_alpha, dilate_mask, person_area

logger = logging.getLogger(__name__)


class Pipeline:
    """Runs the capture stages in order on a CaptureContext."""

    def __init__(
        self,
        config: PlacementConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or PlacementConfig()
        self.rng = rng or random.Random()
        self.stages: list[tuple[str, Callable[[CaptureContext], None]]] = [
            ("mask", self._prepare_mask),
            ("contours", self._extract),
            ("analysis", self._analyze),
            ("specs", self._generate_specs),
            ("packing", self._pack),
            ("optimization", self._optimize),
        ]

    def run(self, ctx: CaptureContext) -> CaptureContext:
        """Run every stage on ``ctx``; a failing stage discards all placements."""
        start = time.perf_counter()

        for name, fn in self.stages:
            t0 = time.perf_counter()
            try:
                fn(ctx)
            except Exception as e:
                ctx.errors[name] = str(e)
                ctx.placements = []
                logger.warning("  %s FAILED: %s", name, e)
                break
            ctx.completed_stages.append(name)
            ctx.timings[name] = (time.perf_counter() - t0) * 1000
            logger.debug("  %s completed in %.1fms", name, ctx.timings[name])

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Capture complete: %d/%d rectangles placed in %.0fms",
            len(ctx.placements),
            ctx.target_count,
            total,
        )
        return ctx

    def _prepare_mask(self, ctx: CaptureContext) -> None:
        alpha = as_alpha(ctx.mask)
        if alpha is None:
            logger.info("No mask supplied, nothing to place")
            return
        ctx.person_area = person_area(alpha, self.config.alpha_threshold)
        if ctx.person_area < self.config.min_person_area:
            logger.info(
                "Person area %d below minimum %.0f, nothing to place",
                ctx.person_area,
                self.config.min_person_area,
            )
            return
        ctx.alpha = dilate_mask(alpha, self.config.mask_dilation)

    def _extract(self, ctx: CaptureContext) -> None:
        if ctx.alpha is None:
            return
        ctx.contours = extract_contours(ctx.alpha, self.config)
        logger.debug("Contours: %s", contour_stats(ctx.contours))

    def _analyze(self, ctx: CaptureContext) -> None:
        if ctx.contours:
            ctx.shape_info = analyze(ctx.contours, self.config)

    def _generate_specs(self, ctx: CaptureContext) -> None:
        if ctx.has_shape:
            ctx.specs = generate_specs(ctx.shape_info, ctx.images, ctx.target_count, self.config, self.rng)

    def _pack(self, ctx: CaptureContext) -> None:
        if ctx.specs:
            ctx.placements = Packer(self.config, self.rng).place(ctx.specs, ctx.shape_info)

    def _optimize(self, ctx: CaptureContext) -> None:
        if self.config.optimize and ctx.placements:
            ctx.placements = optimize(ctx.placements, ctx.shape_info, self.config)


def create_pipeline(config: PlacementConfig | None = None, seed: int | None = None) -> Pipeline:
    """Factory function for creating a pipeline instance."""
    return Pipeline(config=config, rng=random.Random(seed))


def run_capture(
    mask: Any,
    images: Sequence[ImageAsset] = (),
    target_count: int = 7,
    config: PlacementConfig | None = None,
    rng: random.Random | None = None,
) -> list[PlacedRectangle]:
    """Turn one segmentation mask into the final list of placed rectangles."""
    ctx = CaptureContext(mask=mask, target_count=target_count, images=list(images))
    return Pipeline(config, rng).run(ctx).placements
