"""User-editable cut lines."""

from __future__ import annotations

from dataclasses import dataclass, field

from .coords import clamp_percent

HORIZONTAL = "horizontal"
VERTICAL = "vertical"

_AXIS_ALIASES = {
    "horizontal": HORIZONTAL,
    "h": HORIZONTAL,
    "vertical": VERTICAL,
    "v": VERTICAL,
}


def normalize_axis(axis: str) -> str:
    normalized = _AXIS_ALIASES.get(str(axis or "").strip().lower())
    if normalized is None:
        raise ValueError(f"Unknown line axis '{axis}'; expected 'horizontal' or 'vertical'.")
    return normalized


@dataclass(eq=False)
class Line:
    """A cut line; horizontal lines cut along the height, vertical along the width.

    Lines compare by identity so two lines at the same percent stay distinct.
    """

    axis: str
    percent: float

    def __post_init__(self) -> None:
        self.axis = normalize_axis(self.axis)
        self.percent = clamp_percent(self.percent)


@dataclass
class LineModel:
    horizontal: list[Line] = field(default_factory=list)
    vertical: list[Line] = field(default_factory=list)

    def lines(self, axis: str) -> list[Line]:
        return self.horizontal if normalize_axis(axis) == HORIZONTAL else self.vertical

    def percents(self, axis: str) -> list[float]:
        return [line.percent for line in self.lines(axis)]

    def add_line(self, axis: str, percent: float) -> Line:
        line = Line(axis, percent)
        self.lines(line.axis).append(line)
        return line

    def remove_line(self, axis: str, index: int) -> Line | None:
        lines = self.lines(axis)
        if not 0 <= index < len(lines):
            return None
        return lines.pop(index)

    def discard(self, line: Line) -> bool:
        lines = self.lines(line.axis)
        for idx, candidate in enumerate(lines):
            if candidate is line:
                del lines[idx]
                return True
        return False

    def move_line(self, axis: str, index: int, percent: float) -> Line | None:
        lines = self.lines(axis)
        if not 0 <= index < len(lines):
            return None
        line = lines[index]
        line.percent = clamp_percent(percent)
        return line

    def clear(self) -> None:
        self.horizontal.clear()
        self.vertical.clear()

    def auto_grid(self, rows: int, cols: int) -> None:
        """Replace all lines with an evenly spaced rows x cols grid."""
        if rows < 1 or cols < 1:
            raise ValueError(f"Auto grid needs at least one row and column, got {rows}x{cols}.")
        self.clear()
        for i in range(1, rows):
            self.add_line(HORIZONTAL, (i / rows) * 100)
        for j in range(1, cols):
            self.add_line(VERTICAL, (j / cols) * 100)

    def __len__(self) -> int:
        return len(self.horizontal) + len(self.vertical)


def parse_grid(value: str) -> tuple[int, int]:
    normalized = (value or "").strip().lower()
    if "x" not in normalized:
        raise ValueError(f"Grid must look like ROWSxCOLS, got '{value}'.")
    rows_raw, cols_raw = normalized.split("x", 1)
    try:
        rows, cols = int(rows_raw), int(cols_raw)
    except ValueError as exc:
        raise ValueError(f"Grid must look like ROWSxCOLS, got '{value}'.") from exc
    if rows < 1 or cols < 1:
        raise ValueError(f"Grid must have at least one row and column, got '{value}'.")
    return rows, cols
