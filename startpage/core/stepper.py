"""Discrete carousel stepping.

Continuous input (wheel deltas, drags, arrow keys) is reduced to a single
direction and the carousel moves exactly one card at a time. Geometry is
passed in on every call since resizes and font loads change it between
events; nothing is cached here.
"""

import time
from dataclasses import replace
from typing import Callable, Optional

from loguru import logger

from .models import StepperState


DEFAULT_WHEEL_DEBOUNCE_MS = 200
DEFAULT_DRAG_THRESHOLD_PX = 30.0
DEFAULT_DRAG_THRESHOLD_RATIO = 0.15


def max_index(state: StepperState) -> int:
    return state.max_index


def scroll_offset(state: StepperState) -> float:
    """Pixel offset for the state's index, never past the end of content."""
    if state.pitch <= 0:
        return 0.0
    return min(state.current_index * state.pitch, state.max_scroll)


def index_from_offset(offset: float, pitch: float) -> int:
    """Nearest card index for a live scroll offset."""
    if pitch <= 0:
        return 0
    return int(round(offset / pitch))


def go_to(state: StepperState, target_index: int) -> StepperState:
    """Clamp target_index into [0, max_index]. Zero pitch is a no-op."""
    if state.pitch <= 0:
        logger.debug("Ignoring carousel move, pitch is not positive")
        return state
    clamped = max(0, min(state.max_index, int(target_index)))
    if clamped == state.current_index:
        return state
    return replace(state, current_index=clamped)


def step(state: StepperState, direction: int) -> StepperState:
    """Move exactly one card in the sign of direction, then clamp."""
    if direction == 0:
        return state
    return go_to(state, state.current_index + (1 if direction > 0 else -1))


def wheel_direction(delta_x: float, delta_y: float, min_delta: float = 1.0) -> Optional[int]:
    """
    Direction for a wheel event.

    The axis with the larger magnitude wins (vertical on ties). Deltas
    smaller than min_delta are noise and produce no step.
    """
    delta = delta_y if abs(delta_y) >= abs(delta_x) else delta_x
    if abs(delta) < min_delta:
        return None
    return 1 if delta > 0 else -1


def drag_threshold(
    pitch: float,
    min_px: float = DEFAULT_DRAG_THRESHOLD_PX,
    ratio: float = DEFAULT_DRAG_THRESHOLD_RATIO,
) -> float:
    return max(min_px, pitch * ratio)


def drag_direction(
    total_dx: float,
    pitch: float,
    min_px: float = DEFAULT_DRAG_THRESHOLD_PX,
    ratio: float = DEFAULT_DRAG_THRESHOLD_RATIO,
) -> Optional[int]:
    """Dragging left advances, dragging right goes back; short drags snap back."""
    if abs(total_dx) < drag_threshold(pitch, min_px, ratio):
        return None
    return 1 if total_dx < 0 else -1


def key_direction(key: str) -> Optional[int]:
    if key == "ArrowRight":
        return 1
    if key == "ArrowLeft":
        return -1
    return None


class WheelGate:
    """
    Rate limiter for wheel driven steps.

    After a step is let through, further wheel steps are refused until
    window_ms has elapsed. The clock returns seconds and is injectable so
    tests don't have to sleep.
    """

    def __init__(self,
                 window_ms: float = DEFAULT_WHEEL_DEBOUNCE_MS,
                 clock: Callable[[], float] = time.monotonic):
        self.window_ms = window_ms
        self.clock = clock
        self._locked_until: Optional[float] = None

    @property
    def locked(self) -> bool:
        if self._locked_until is None:
            return False
        if self.clock() >= self._locked_until:
            self._locked_until = None
            return False
        return True

    def try_acquire(self) -> bool:
        """Let one step through and lock, or refuse while locked."""
        if self.locked:
            return False
        self._locked_until = self.clock() + self.window_ms / 1000.0
        return True

    def release(self) -> None:
        self._locked_until = None
