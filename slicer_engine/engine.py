"""Core slicer engine orchestration."""

from __future__ import annotations

import asyncio
import os
import uuid
from pathlib import Path
from typing import Any, Callable

from PIL import ImageColor

from .config import SlicerSettings
from .editor.drag import LineDragController
from .errors import ArchiveUnavailableError, NoImageError, SliceProcessingError, SourceLoadError
from .geometry.cells import Cell, compute_cells
from .geometry.lines import Line, LineModel
from .render.canvas import SCALE, RenderOptions, RenderedCell, render_and_encode
from .render.source import ImageRef, load_source
from .runs.events import EventWriter
from .slices.packager import archive_name, build_archive
from .slices.store import HandleRegistry, SliceResult, SliceStore

Encoder = Callable[[Any, Cell, RenderOptions], RenderedCell]


class SlicerEngine:
    def __init__(
        self,
        settings: SlicerSettings | None = None,
        *,
        events_path: Path | None = None,
        session_id: str | None = None,
        encoder: Encoder = render_and_encode,
    ) -> None:
        self.settings = settings or SlicerSettings()
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self.events = EventWriter(events_path or self.settings.events_path, self.session_id)
        self.lines = LineModel()
        self.editor = LineDragController(self.lines, click_suppress_ms=self.settings.click_suppress_ms)
        self.store = SliceStore(HandleRegistry(self.session_id))
        self.image: ImageRef | None = None
        self.force_square = self.settings.force_square
        self.background = self.settings.background
        self.last_failures: list[str] = []
        self._encoder = encoder
        self._generation = 0
        self.events.emit("session_started", scale=SCALE, failure_policy=self.settings.failure_policy)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def slices(self) -> tuple[SliceResult, ...]:
        return self.store.results

    def _bump_generation(self) -> int:
        self._generation += 1
        return self._generation

    # Source lifecycle

    async def open_image(self, source: Any) -> ImageRef | None:
        """Load an image handed over from the gallery and lay out the default grid."""
        return await self.load_image(source, auto_grid=True)

    async def load_image(self, source: Any, *, auto_grid: bool = False) -> ImageRef | None:
        generation = self._bump_generation()
        self._reset_editor()
        self.image = None
        try:
            ref = await asyncio.to_thread(load_source, source, timeout_s=self.settings.fetch_timeout_s)
        except SourceLoadError as exc:
            self.events.emit("source_load_failed", error=str(exc))
            raise
        if generation != self._generation:
            return None
        self.image = ref
        self.events.emit(
            "source_loaded",
            source=ref.source,
            natural_width=ref.natural_width,
            natural_height=ref.natural_height,
        )
        if auto_grid:
            self.auto_grid(*self.settings.auto_grid)
        return ref

    def clear_image(self) -> None:
        self._bump_generation()
        self.image = None
        released = self._reset_editor()
        self.events.emit("source_cleared", released=released)

    def _reset_editor(self) -> int:
        self.editor.reset()
        self.lines.clear()
        self.last_failures = []
        return self.store.release_all()

    def _require_image(self) -> ImageRef:
        if self.image is None:
            raise NoImageError("No source image loaded.")
        return self.image

    # Line editing

    def add_line(self, axis: str, percent: float) -> Line:
        return self.lines.add_line(axis, percent)

    def remove_line(self, axis: str, index: int) -> Line | None:
        return self.lines.remove_line(axis, index)

    def move_line(self, axis: str, index: int, percent: float) -> Line | None:
        return self.lines.move_line(axis, index, percent)

    def clear_lines(self) -> None:
        self.lines.clear()

    def auto_grid(self, rows: int, cols: int) -> None:
        self.lines.auto_grid(rows, cols)
        self.events.emit("lines_auto_grid", rows=rows, cols=cols)

    def set_force_square(self, enabled: bool, background: str | None = None) -> None:
        if background is not None:
            ImageColor.getrgb(background)
            self.background = background
        self.force_square = bool(enabled)

    def preview_cells(self) -> list[Cell]:
        image = self._require_image()
        return compute_cells(self.lines, image.natural_width, image.natural_height)

    # Processing

    async def process(self) -> list[SliceResult]:
        """Recompute every slice for the current lines and image.

        A run that is overtaken by a newer process/load/clear discards its
        output and returns an empty list.
        """
        image = self._require_image()
        generation = self._bump_generation()
        self.store.release_all()
        self.last_failures = []
        cells = compute_cells(self.lines, image.natural_width, image.natural_height)
        options = RenderOptions(force_square=self.force_square, background=self.background)
        self.events.emit(
            "process_started",
            generation=generation,
            cells=len(cells),
            force_square=options.force_square,
            background=options.background,
        )

        outcomes = await asyncio.gather(
            *(asyncio.to_thread(self._encoder, image.image, cell, options) for cell in cells),
            return_exceptions=True,
        )

        if generation != self._generation:
            self.events.emit("process_superseded", generation=generation, current_generation=self._generation)
            return []

        rendered: list[RenderedCell] = []
        failures: list[tuple[Cell, Exception]] = []
        for cell, outcome in zip(cells, outcomes):
            if isinstance(outcome, Exception):
                failures.append((cell, outcome))
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                rendered.append(outcome)

        if failures and self.settings.failure_policy == "batch":
            _, error = failures[0]
            self.events.emit("process_failed", generation=generation, error=str(error), failed=len(failures))
            raise SliceProcessingError(f"Slicing failed: {error}") from error

        self.last_failures = [cell.name for cell, _ in failures]
        results = self.store.publish(rendered)
        self.events.emit(
            "slices_processed",
            generation=generation,
            count=len(results),
            names=[result.name for result in results],
            failed=self.last_failures,
        )
        return results

    # Export

    def download_one(self, target: int | SliceResult, out_dir: Path) -> Path:
        result = self.store.get(target) if isinstance(target, int) else target
        data = self.store.registry.resolve(result.handle)
        out_dir.mkdir(parents=True, exist_ok=True)
        out_path = out_dir / result.name
        out_path.write_bytes(data)
        self.events.emit("slice_downloaded", name=result.name, path=str(out_path), bytes=len(data))
        return out_path

    async def download_all(self, out_dir: Path) -> Path | None:
        results = self.store.results
        if not results:
            return None
        try:
            payload = await asyncio.to_thread(build_archive, results)
        except ArchiveUnavailableError as exc:
            self.events.emit("archive_failed", error=str(exc))
            raise
        out_dir.mkdir(parents=True, exist_ok=True)
        out_path = out_dir / archive_name()
        tmp_path = out_path.with_name(f".{out_path.name}.tmp")
        tmp_path.write_bytes(payload)
        os.replace(tmp_path, out_path)
        self.events.emit("archive_created", path=str(out_path), count=len(results), bytes=len(payload))
        return out_path

    # Teardown

    def close(self) -> None:
        self._bump_generation()
        released = self.store.release_all()
        self.events.emit("session_closed", released=released)

    def __enter__(self) -> "SlicerEngine":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
