"""Slice results and their revocable display handles."""

from __future__ import annotations

import base64
import threading
import uuid
from dataclasses import dataclass, field
from typing import Iterable

from ..errors import HandleRevokedError, SliceNotFoundError
from ..geometry.cells import Cell
from ..render.canvas import OUTPUT_MIME, SCALE, RenderedCell

HANDLE_SCHEME = "slice"


class HandleRegistry:
    """Owns the bytes behind every live handle until the handle is revoked."""

    def __init__(self, namespace: str | None = None) -> None:
        self.namespace = namespace or uuid.uuid4().hex[:12]
        self._entries: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def create(self, data: bytes) -> str:
        handle = f"{HANDLE_SCHEME}://{self.namespace}/{uuid.uuid4().hex}"
        with self._lock:
            self._entries[handle] = data
        return handle

    def resolve(self, handle: str) -> bytes:
        with self._lock:
            data = self._entries.get(handle)
        if data is None:
            raise HandleRevokedError(f"Handle {handle} is not live.")
        return data

    def revoke(self, handle: str) -> bool:
        with self._lock:
            return self._entries.pop(handle, None) is not None

    def is_live(self, handle: str) -> bool:
        with self._lock:
            return handle in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


@dataclass(frozen=True)
class SliceResult:
    cell: Cell
    data: bytes
    handle: str
    width: int
    height: int

    @property
    def name(self) -> str:
        return self.cell.name

    @property
    def label(self) -> str:
        return f"{round(self.width / SCALE)} x {round(self.height / SCALE)} ({SCALE}x)"

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{OUTPUT_MIME};base64,{encoded}"


@dataclass
class SliceStore:
    registry: HandleRegistry = field(default_factory=HandleRegistry)
    _results: list[SliceResult] = field(default_factory=list, init=False, repr=False)

    @property
    def results(self) -> tuple[SliceResult, ...]:
        return tuple(self._results)

    def publish(self, rendered: Iterable[RenderedCell]) -> list[SliceResult]:
        """Replace the current results; previous handles are released first."""
        self.release_all()
        results = [
            SliceResult(
                cell=item.cell,
                data=item.data,
                handle=self.registry.create(item.data),
                width=item.width,
                height=item.height,
            )
            for item in rendered
        ]
        self._results = results
        return list(results)

    def release_all(self) -> int:
        released = 0
        for result in self._results:
            if self.registry.revoke(result.handle):
                released += 1
        self._results = []
        return released

    def clear(self) -> int:
        return self.release_all()

    def get(self, index: int) -> SliceResult:
        if not 0 <= index < len(self._results):
            raise SliceNotFoundError(f"No slice at index {index}; {len(self._results)} available.")
        return self._results[index]

    def __len__(self) -> int:
        return len(self._results)
