"""Carousel controller: turns raw pointer/wheel/key input into scroll commands."""

import time
from dataclasses import dataclass, replace
from typing import Callable, Optional

from loguru import logger

from . import stepper
from .config import CarouselConfig
from .models import ScrollCommand, StepperState


@dataclass(frozen=True)
class Geometry:
    """Live layout readings supplied by the host."""
    item_count: int
    pitch: float
    viewport_extent: float
    content_extent: float
    scroll_offset: float = 0.0


class CarouselController:
    """
    Host-side glue around the stepper.

    Every input re-reads the current index from the live scroll offset,
    steps once and returns the scroll command to issue (or None when
    nothing should move).
    """

    def __init__(self,
                 geometry: Geometry,
                 config: Optional[CarouselConfig] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.config = config or CarouselConfig()
        self.geometry = geometry
        self.wheel_gate = stepper.WheelGate(self.config.wheel_debounce_ms, clock)

    def update_geometry(self, geometry: Geometry) -> None:
        self.geometry = geometry

    def state(self) -> StepperState:
        g = self.geometry
        return StepperState(
            current_index=stepper.index_from_offset(g.scroll_offset, g.pitch),
            item_count=g.item_count,
            pitch=g.pitch,
            viewport_extent=g.viewport_extent,
            content_extent=g.content_extent,
            visible_count=self.config.visible_count,
        )

    def go_to(self, index: int) -> Optional[ScrollCommand]:
        current = self.state()
        if current.pitch <= 0:
            return None
        return self._command(stepper.go_to(current, index))

    def scroll_by_one(self, direction: int) -> Optional[ScrollCommand]:
        current = self.state()
        if current.pitch <= 0:
            return None
        return self._command(stepper.step(current, direction))

    def on_wheel(self, delta_x: float, delta_y: float) -> Optional[ScrollCommand]:
        direction = stepper.wheel_direction(delta_x, delta_y, self.config.min_wheel_delta)
        if direction is None:
            return None
        if not self.wheel_gate.try_acquire():
            logger.debug("Wheel step suppressed by debounce window")
            return None
        return self.scroll_by_one(direction)

    def on_key(self, key: str) -> Optional[ScrollCommand]:
        direction = stepper.key_direction(key)
        if direction is None:
            return None
        return self.scroll_by_one(direction)

    def on_drag_end(self, total_dx: float) -> Optional[ScrollCommand]:
        direction = stepper.drag_direction(
            total_dx,
            self.geometry.pitch,
            self.config.drag_threshold_px,
            self.config.drag_threshold_ratio,
        )
        if direction is None:
            return None
        return self.scroll_by_one(direction)

    def _command(self, state: StepperState) -> ScrollCommand:
        offset = stepper.scroll_offset(state)
        # Commands are applied by the host, so the geometry we hold follows them
        self.geometry = replace(self.geometry, scroll_offset=offset)
        return ScrollCommand(index=state.current_index, offset=offset)
