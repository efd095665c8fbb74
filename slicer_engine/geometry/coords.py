"""Percent to pixel resolution."""

from __future__ import annotations

import math


def clamp_percent(percent: float) -> float:
    value = float(percent)
    if math.isnan(value):
        raise ValueError("Line percent must be a number, got NaN.")
    return max(0.0, min(100.0, value))


def percent_to_pixel(percent: float, dimension: float) -> float:
    # Evaluated against the image's current natural size at processing time.
    return (percent / 100.0) * dimension


def pixel_to_percent(offset: float, extent: float) -> float:
    if extent <= 0:
        return 0.0
    return clamp_percent((offset / extent) * 100.0)
