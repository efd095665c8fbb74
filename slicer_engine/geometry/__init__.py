"""Headless slicing geometry.

Lines, cut positions and cells are plain data with no Pillow or UI dependency,
so every editor front end (and the tests) can share one implementation.
"""
