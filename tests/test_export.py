from __future__ import annotations

import asyncio
from io import BytesIO
from pathlib import Path

from PIL import Image

from slicer_engine.engine import SlicerEngine
from slicer_engine.runs.export import export_preview_html


def test_export_preview_html(tmp_path: Path) -> None:
    buffer = BytesIO()
    Image.new("RGB", (60, 30), (5, 5, 5)).save(buffer, format="PNG")
    engine = SlicerEngine()
    asyncio.run(engine.load_image(buffer.getvalue()))
    engine.add_line("vertical", 50)
    results = asyncio.run(engine.process())

    out_path = tmp_path / "preview" / "index.html"
    export_preview_html(results, out_path)
    assert out_path.exists()
    html = out_path.read_text(encoding="utf-8")
    assert "Slices (2)" in html
    assert "slice_1_2.png" in html
    assert "30 x 30 (2x)" in html
    assert html.count("data:image/png;base64,") == 2
