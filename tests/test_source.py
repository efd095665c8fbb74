from __future__ import annotations

import base64
from io import BytesIO
from pathlib import Path
from urllib.error import URLError

import pytest
from PIL import Image

from slicer_engine.errors import SourceLoadError
from slicer_engine.render.source import ImageRef, load_source


def _png_bytes(size: tuple[int, int] = (64, 32), color=(200, 10, 10)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def test_load_from_bytes_reports_natural_size() -> None:
    ref = load_source(_png_bytes((64, 32)))
    assert isinstance(ref, ImageRef)
    assert (ref.natural_width, ref.natural_height) == (64, 32)
    assert ref.image.mode == "RGBA"


def test_load_from_path(tmp_path: Path) -> None:
    path = tmp_path / "input.png"
    path.write_bytes(_png_bytes((10, 20)))
    assert load_source(path).natural_height == 20
    assert load_source(str(path)).source == str(path)


def test_load_from_data_url() -> None:
    encoded = base64.b64encode(_png_bytes((7, 9))).decode("ascii")
    ref = load_source(f"data:image/png;base64,{encoded}")
    assert (ref.natural_width, ref.natural_height) == (7, 9)
    assert ref.source == "<data-url>"


def test_load_from_remote_url(monkeypatch) -> None:
    payload = _png_bytes((12, 6))
    requested: list[str] = []

    class FakeResponse:
        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def read(self) -> bytes:
            return payload

    def fake_urlopen(req, timeout):
        requested.append(req.full_url)
        return FakeResponse()

    monkeypatch.setattr("slicer_engine.render.source.urlopen", fake_urlopen)
    ref = load_source("https://example.test/image.png")
    assert requested == ["https://example.test/image.png"]
    assert ref.natural_width == 12


def test_remote_failure_is_source_load_error(monkeypatch) -> None:
    def fake_urlopen(req, timeout):
        raise URLError("offline")

    monkeypatch.setattr("slicer_engine.render.source.urlopen", fake_urlopen)
    with pytest.raises(SourceLoadError):
        load_source("http://example.test/missing.png")


@pytest.mark.parametrize("value", [b"", b"not an image", "data:image/png;base64", 42])
def test_undecodable_sources_raise(value) -> None:
    with pytest.raises(SourceLoadError):
        load_source(value)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(SourceLoadError):
        load_source(tmp_path / "nope.png")


def test_exif_orientation_is_applied() -> None:
    exif = Image.Exif()
    exif[0x0112] = 6
    buffer = BytesIO()
    Image.new("RGB", (40, 20), (0, 0, 0)).save(buffer, format="JPEG", exif=exif)
    ref = load_source(buffer.getvalue())
    assert (ref.natural_width, ref.natural_height) == (20, 40)


def test_malformed_remote_url_is_source_load_error() -> None:
    with pytest.raises(SourceLoadError):
        load_source("http://example.test:abc/image.png")
