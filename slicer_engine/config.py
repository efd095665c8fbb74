"""Slicer settings resolved from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from PIL import ImageColor

from .editor.drag import DEFAULT_CLICK_SUPPRESS_MS
from .geometry.lines import parse_grid
from .utils import getenv_flag, getenv_float, load_dotenv

FAILURE_POLICIES = ("batch", "isolate")


@dataclass(frozen=True)
class SlicerSettings:
    force_square: bool = False
    background: str = "#ffffff"
    auto_grid: tuple[int, int] = (6, 4)
    click_suppress_ms: int = DEFAULT_CLICK_SUPPRESS_MS
    failure_policy: str = "batch"
    fetch_timeout_s: float = 60.0
    events_path: Path | None = None

    def __post_init__(self) -> None:
        ImageColor.getrgb(self.background)
        if self.failure_policy not in FAILURE_POLICIES:
            raise ValueError(
                f"Unknown failure policy '{self.failure_policy}'; expected one of {', '.join(FAILURE_POLICIES)}."
            )
        rows, cols = self.auto_grid
        if rows < 1 or cols < 1:
            raise ValueError(f"Auto grid must have at least one row and column, got {rows}x{cols}.")

    @classmethod
    def from_env(cls, *, dotenv: bool = True) -> "SlicerSettings":
        if dotenv:
            load_dotenv()
        defaults = cls()
        grid_raw = os.getenv("SLICER_AUTO_GRID")
        events_raw = os.getenv("SLICER_EVENTS")
        return cls(
            force_square=getenv_flag("SLICER_FORCE_SQUARE", defaults.force_square),
            background=os.getenv("SLICER_BACKGROUND") or defaults.background,
            auto_grid=parse_grid(grid_raw) if grid_raw else defaults.auto_grid,
            click_suppress_ms=int(getenv_float("SLICER_CLICK_SUPPRESS_MS", defaults.click_suppress_ms)),
            failure_policy=(os.getenv("SLICER_FAILURE_POLICY") or defaults.failure_policy).strip().lower(),
            fetch_timeout_s=getenv_float("SLICER_FETCH_TIMEOUT", defaults.fetch_timeout_s),
            events_path=Path(events_raw).expanduser() if events_raw else None,
        )
