"""Slicer error taxonomy."""

from __future__ import annotations

from typing import Any


class SlicerError(RuntimeError):
    pass


class SourceLoadError(SlicerError):
    """The source bitmap could not be fetched or decoded."""


class NoImageError(SlicerError):
    pass


class SliceEncodeError(SlicerError):
    def __init__(self, message: str, cell: Any = None) -> None:
        super().__init__(message)
        self.cell = cell


class SliceProcessingError(SlicerError):
    """A whole process() batch failed; no slices were published."""


class ArchiveUnavailableError(SlicerError):
    pass


class HandleRevokedError(SlicerError, KeyError):
    def __str__(self) -> str:
        return RuntimeError.__str__(self)


class SliceNotFoundError(SlicerError):
    pass
