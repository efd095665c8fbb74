"""Bundle slice binaries into a single zip archive."""

from __future__ import annotations

import importlib
from io import BytesIO
from types import ModuleType
from typing import Sequence

from ..errors import ArchiveUnavailableError
from ..utils import epoch_ms
from .store import SliceResult

ARCHIVE_FOLDER = "slices"
ARCHIVE_BACKEND = "zipfile"

_backend: ModuleType | None = None


def load_backend() -> ModuleType:
    """Import the archive backend on first use."""
    global _backend
    if _backend is None:
        try:
            _backend = importlib.import_module(ARCHIVE_BACKEND)
        except ImportError as exc:
            raise ArchiveUnavailableError(f"Archive backend '{ARCHIVE_BACKEND}' failed to load: {exc}") from exc
    return _backend


def archive_name(stamp: int | None = None) -> str:
    return f"slices_{stamp if stamp is not None else epoch_ms()}.zip"


def build_archive(results: Sequence[SliceResult]) -> bytes:
    """Return the complete archive; nothing is produced if any step fails."""
    backend = load_backend()
    buffer = BytesIO()
    with backend.ZipFile(buffer, mode="w", compression=backend.ZIP_DEFLATED) as archive:
        for result in results:
            archive.writestr(f"{ARCHIVE_FOLDER}/{result.name}", result.data)
    return buffer.getvalue()
