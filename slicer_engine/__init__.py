"""Grid-based image slicing and export engine."""

from .engine import SlicerEngine

__all__ = ["SlicerEngine"]
