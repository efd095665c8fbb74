"""Pointer-driven line editing.

Two states only: IDLE and DRAGGING. Pointer coordinates are relative to the
editor's bounding box (top-left origin), so the controller can be driven
without any real pointer events.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from ..geometry.coords import pixel_to_percent
from ..geometry.lines import HORIZONTAL, Line, LineModel, normalize_axis
from ..utils import monotonic_ms

DEFAULT_CLICK_SUPPRESS_MS = 50


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class EditorBox:
    width: float
    height: float


class LineDragController:
    def __init__(
        self,
        lines: LineModel,
        *,
        mode: str = HORIZONTAL,
        click_suppress_ms: int = DEFAULT_CLICK_SUPPRESS_MS,
        clock: Callable[[], int] = monotonic_ms,
    ) -> None:
        self.lines = lines
        self.mode = normalize_axis(mode)
        self.click_suppress_ms = click_suppress_ms
        self._clock = clock
        self.state = DragState.IDLE
        self.active_line: Line | None = None
        self._released_at: int | None = None

    def set_mode(self, axis: str) -> None:
        self.mode = normalize_axis(axis)

    def reset(self) -> None:
        self.state = DragState.IDLE
        self.active_line = None
        self._released_at = None

    def pointer_down(self, axis: str, index: int) -> bool:
        if self.state is DragState.DRAGGING:
            return False
        lines = self.lines.lines(axis)
        if not 0 <= index < len(lines):
            return False
        self.active_line = lines[index]
        self.state = DragState.DRAGGING
        return True

    def pointer_move(self, x: float, y: float, box: EditorBox) -> float | None:
        line = self.active_line
        if self.state is not DragState.DRAGGING or line is None:
            return None
        if line.axis == HORIZONTAL:
            offset = max(0.0, min(y, box.height))
            line.percent = pixel_to_percent(offset, box.height)
        else:
            offset = max(0.0, min(x, box.width))
            line.percent = pixel_to_percent(offset, box.width)
        return line.percent

    def pointer_up(self) -> None:
        if self.state is not DragState.DRAGGING:
            return
        self.state = DragState.IDLE
        self.active_line = None
        self._released_at = self._clock()

    def click(self, x: float, y: float, box: EditorBox) -> Line | None:
        """Add a line on the current mode's axis unless the click ends a drag."""
        if self.state is DragState.DRAGGING or self._suppressed():
            return None
        if self.mode == HORIZONTAL:
            return self.lines.add_line(HORIZONTAL, pixel_to_percent(y, box.height))
        return self.lines.add_line(self.mode, pixel_to_percent(x, box.width))

    def _suppressed(self) -> bool:
        if self._released_at is None:
            return False
        return self._clock() - self._released_at < self.click_suppress_ms
