from __future__ import annotations

import zipfile
from io import BytesIO

import pytest

from slicer_engine.errors import ArchiveUnavailableError
from slicer_engine.geometry.cells import Cell
from slicer_engine.render.canvas import RenderedCell
from slicer_engine.slices import packager
from slicer_engine.slices.store import SliceStore


def _results():
    store = SliceStore()
    rendered = [
        RenderedCell(cell=Cell(row=r, col=c, src_x=0, src_y=0, src_w=4, src_h=4), data=f"{r}{c}".encode(), width=8, height=8)
        for r in range(2)
        for c in range(2)
    ]
    return store.publish(rendered)


def test_archive_layout() -> None:
    payload = packager.build_archive(_results())
    with zipfile.ZipFile(BytesIO(payload)) as archive:
        names = archive.namelist()
        assert names == [
            "slices/slice_1_1.png",
            "slices/slice_1_2.png",
            "slices/slice_2_1.png",
            "slices/slice_2_2.png",
        ]
        assert archive.read("slices/slice_2_1.png") == b"10"


def test_archive_name_uses_epoch_ms() -> None:
    assert packager.archive_name(1700000000123) == "slices_1700000000123.zip"
    name = packager.archive_name()
    assert name.startswith("slices_") and name.endswith(".zip")
    assert name[len("slices_") : -len(".zip")].isdigit()


def test_backend_load_failure(monkeypatch) -> None:
    def fail_import(name):
        raise ImportError(f"no module named {name}")

    monkeypatch.setattr(packager, "_backend", None)
    monkeypatch.setattr(packager.importlib, "import_module", fail_import)
    with pytest.raises(ArchiveUnavailableError):
        packager.build_archive(_results())
