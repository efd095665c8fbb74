"""Cut positions and grid cells."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .coords import percent_to_pixel
from .lines import HORIZONTAL, VERTICAL, LineModel

MIN_CELL_EXTENT = 1.0


@dataclass(frozen=True)
class Cell:
    row: int
    col: int
    src_x: float
    src_y: float
    src_w: float
    src_h: float

    @property
    def name(self) -> str:
        return f"slice_{self.row + 1}_{self.col + 1}.png"

    @property
    def box(self) -> tuple[float, float, float, float]:
        return (self.src_x, self.src_y, self.src_x + self.src_w, self.src_y + self.src_h)


def compute_cuts(percents: Iterable[float], dimension: float) -> list[float]:
    """Return sorted cut positions including the implicit bounds 0 and dimension.

    Duplicates are kept; they only ever yield degenerate cells, which
    enumerate_cells drops. Cuts closer than one pixel but not equal also
    produce a dropped sliver, so the surviving cells then leave that strip
    uncovered; exact tiling holds only when such cuts are identical.
    """
    cuts = [percent_to_pixel(percent, dimension) for percent in percents]
    cuts.extend((0.0, float(dimension)))
    cuts.sort()
    return cuts


def enumerate_cells(row_cuts: list[float], col_cuts: list[float]) -> list[Cell]:
    cells: list[Cell] = []
    for i in range(len(row_cuts) - 1):
        src_y = row_cuts[i]
        src_h = row_cuts[i + 1] - row_cuts[i]
        for j in range(len(col_cuts) - 1):
            src_x = col_cuts[j]
            src_w = col_cuts[j + 1] - col_cuts[j]
            if src_w < MIN_CELL_EXTENT or src_h < MIN_CELL_EXTENT:
                continue
            cells.append(Cell(row=i, col=j, src_x=src_x, src_y=src_y, src_w=src_w, src_h=src_h))
    return cells


def compute_cells(lines: LineModel, width: float, height: float) -> list[Cell]:
    """Row-major cells for the current lines against the given natural size."""
    row_cuts = compute_cuts(lines.percents(HORIZONTAL), height)
    col_cuts = compute_cuts(lines.percents(VERTICAL), width)
    return enumerate_cells(row_cuts, col_cuts)
