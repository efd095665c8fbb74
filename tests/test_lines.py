from __future__ import annotations

import math

import pytest

from slicer_engine.geometry.coords import clamp_percent, percent_to_pixel, pixel_to_percent
from slicer_engine.geometry.lines import HORIZONTAL, VERTICAL, LineModel, normalize_axis, parse_grid


def test_add_line_clamps_percent() -> None:
    lines = LineModel()
    low = lines.add_line("horizontal", -12.5)
    high = lines.add_line("v", 140)
    assert low.percent == 0.0
    assert high.percent == 100.0
    assert lines.percents(HORIZONTAL) == [0.0]
    assert lines.percents(VERTICAL) == [100.0]


def test_duplicate_lines_are_kept() -> None:
    lines = LineModel()
    first = lines.add_line(VERTICAL, 30)
    second = lines.add_line(VERTICAL, 30)
    assert len(lines.vertical) == 2
    assert first is not second
    assert first != second


def test_remove_line_ignores_stale_index() -> None:
    lines = LineModel()
    lines.add_line(HORIZONTAL, 10)
    assert lines.remove_line(HORIZONTAL, 3) is None
    assert lines.remove_line(HORIZONTAL, -1) is None
    removed = lines.remove_line(HORIZONTAL, 0)
    assert removed is not None and removed.percent == 10
    assert lines.remove_line(HORIZONTAL, 0) is None
    assert len(lines) == 0


def test_discard_removes_exact_line_object() -> None:
    lines = LineModel()
    keep = lines.add_line(VERTICAL, 40)
    drop = lines.add_line(VERTICAL, 40)
    assert lines.discard(drop) is True
    assert lines.vertical == [keep]
    assert lines.discard(drop) is False


def test_move_line_reclamps() -> None:
    lines = LineModel()
    lines.add_line(HORIZONTAL, 50)
    assert lines.move_line(HORIZONTAL, 0, 250).percent == 100.0
    assert lines.move_line(HORIZONTAL, 0, -3).percent == 0.0
    assert lines.move_line(HORIZONTAL, 5, 20) is None


def test_clear_empties_both_axes() -> None:
    lines = LineModel()
    lines.add_line(HORIZONTAL, 10)
    lines.add_line(VERTICAL, 20)
    lines.clear()
    assert lines.horizontal == []
    assert lines.vertical == []


def test_auto_grid_replaces_lines() -> None:
    lines = LineModel()
    lines.add_line(HORIZONTAL, 3)
    lines.auto_grid(6, 4)
    assert len(lines.horizontal) == 5
    assert len(lines.vertical) == 3
    assert lines.percents(VERTICAL) == [25.0, 50.0, 75.0]
    assert math.isclose(lines.percents(HORIZONTAL)[0], 100 / 6)


def test_auto_grid_rejects_empty_grid() -> None:
    with pytest.raises(ValueError):
        LineModel().auto_grid(0, 3)


def test_axis_aliases_and_errors() -> None:
    assert normalize_axis("H") == HORIZONTAL
    assert normalize_axis(" vertical ") == VERTICAL
    with pytest.raises(ValueError):
        normalize_axis("diagonal")
    with pytest.raises(ValueError):
        clamp_percent(float("nan"))


def test_percent_to_pixel_and_back() -> None:
    assert percent_to_pixel(50, 800) == 400
    assert percent_to_pixel(0, 800) == 0
    assert percent_to_pixel(100, 1200) == 1200
    assert pixel_to_percent(200, 400) == 50.0
    assert pixel_to_percent(900, 400) == 100.0
    assert pixel_to_percent(10, 0) == 0.0


def test_parse_grid() -> None:
    assert parse_grid("6x4") == (6, 4)
    assert parse_grid(" 3X2 ") == (3, 2)
    for bad in ("", "6", "0x4", "axb"):
        with pytest.raises(ValueError):
            parse_grid(bad)
