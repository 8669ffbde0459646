"""CaptureSession — headless trigger state machine for the installation.

Segmentation results arrive continuously via ``on_mask``; the pipeline itself
only runs once per capture, when the pulse phase finishes or on ``force_capture``.

    WAITING → DETECTING → PULSING → PLACING → COMPLETE
"""

from __future__ import annotations

import enum
import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

from mosaic.engine.context import CaptureContext, ImageAsset, PlacedRectangle
from mosaic.engine.pipeline import Pipeline
from mosaic.utils.morphology import as_alpha, person_area

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    WAITING = "waiting"
    DETECTING = "detecting"
    PULSING = "pulsing"
    PLACING = "placing"
    COMPLETE = "complete"


class CaptureSession:
    """Tracks a visitor from first detection to the frozen composite."""

    def __init__(
        self,
        pipeline: Pipeline | None = None,
        images: Sequence[ImageAsset] = (),
        target_count: int = 7,
        *,
        stability_time: float = 2.0,
        pulse_duration: float = 3.0,
        min_consecutive: int = 10,
        stability_tolerance: float = 0.1,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.pipeline = pipeline or Pipeline()
        self.images = list(images)
        self.target_count = target_count
        self.stability_time = stability_time
        self.pulse_duration = pulse_duration
        self.min_consecutive = min_consecutive
        self.stability_tolerance = stability_tolerance
        self.clock = clock
        self.last_context: CaptureContext | None = None
        self.reset()

    def reset(self) -> None:
        self.state = SessionState.WAITING
        self.detected_at = 0.0
        self.pulse_started_at = 0.0
        self.last_area = 0
        self.consecutive = 0
        self.current_mask: Any = None
        self.placements: list[PlacedRectangle] = []

    @property
    def min_person_area(self) -> float:
        return self.pipeline.config.min_person_area

    def on_mask(self, mask: Any) -> SessionState:
        """Feed one segmentation result (``None`` when the model saw nobody)."""
        alpha = as_alpha(mask)
        area = person_area(alpha, self.pipeline.config.alpha_threshold) if alpha is not None else 0
        previous = self.last_area
        self.last_area = area

        if area > self.min_person_area:
            self.current_mask = mask
            self._person_detected(area, previous)
        else:
            self._person_lost()
        return self.tick()

    def tick(self) -> SessionState:
        """Advance time-based transitions; call once per displayed frame."""
        if self.state is SessionState.PULSING and self.clock() - self.pulse_started_at >= self.pulse_duration:
            self._capture()
        return self.state

    def force_capture(self) -> SessionState:
        """Manual trigger: capture immediately from the latest mask, if any."""
        if self.current_mask is not None:
            self._capture()
        return self.state

    def _person_detected(self, area: int, previous: int) -> None:
        stable = (
            self.consecutive > self.min_consecutive
            and abs(area - previous) < area * self.stability_tolerance
        )
        now = self.clock()

        if self.state is SessionState.WAITING:
            if stable:
                self.state = SessionState.DETECTING
                self.detected_at = now
                logger.info("Person detected, starting stability timer")
            self.consecutive += 1
        elif self.state is SessionState.DETECTING:
            if now - self.detected_at >= self.stability_time:
                self.state = SessionState.PULSING
                self.pulse_started_at = now
                logger.info("Starting pulse phase")
            elif not stable:
                self.state = SessionState.WAITING
                self.consecutive = 0
                logger.info("Person moved, waiting for stillness")

    def _person_lost(self) -> None:
        if self.state in (SessionState.WAITING, SessionState.DETECTING):
            self.state = SessionState.WAITING
            self.consecutive = 0
        self.current_mask = None

    def _capture(self) -> None:
        if self.current_mask is None:
            logger.info("Capture triggered with nobody in view, back to waiting")
            self.reset()
            return
        self.state = SessionState.PLACING
        ctx = CaptureContext(mask=self.current_mask, target_count=self.target_count, images=self.images)
        self.last_context = self.pipeline.run(ctx)
        self.placements = self.last_context.placements
        self.state = SessionState.COMPLETE
        logger.info("Placement complete: %d images placed", len(self.placements))
