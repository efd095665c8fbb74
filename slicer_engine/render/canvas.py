"""Cell rasterization and PNG encoding."""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO

from PIL import Image, ImageColor

from ..errors import SliceEncodeError
from ..geometry.cells import Cell

SCALE = 2
OUTPUT_FORMAT = "PNG"
OUTPUT_MIME = "image/png"


@dataclass(frozen=True)
class RenderOptions:
    force_square: bool = False
    background: str = "#ffffff"


@dataclass(frozen=True)
class RenderedCell:
    cell: Cell
    data: bytes
    width: int
    height: int


def scaled_extent(value: float, scale: int = SCALE) -> int:
    return max(1, int(round(value))) * scale


def canvas_size(cell: Cell, options: RenderOptions, scale: int = SCALE) -> tuple[int, int]:
    if options.force_square:
        side = scaled_extent(max(cell.src_w, cell.src_h), scale)
        return side, side
    return scaled_extent(cell.src_w, scale), scaled_extent(cell.src_h, scale)


def render_cell(source: Image.Image, cell: Cell, options: RenderOptions, scale: int = SCALE) -> Image.Image:
    draw_w = scaled_extent(cell.src_w, scale)
    draw_h = scaled_extent(cell.src_h, scale)
    region = source.convert("RGBA") if source.mode != "RGBA" else source
    region = region.resize((draw_w, draw_h), Image.Resampling.LANCZOS, box=cell.box)
    if not options.force_square:
        return region

    width, height = canvas_size(cell, options, scale)
    fill = ImageColor.getcolor(options.background, "RGBA")
    canvas = Image.new("RGBA", (width, height), fill)
    offset_x = (width - draw_w) // 2
    offset_y = (height - draw_h) // 2
    canvas.alpha_composite(region, dest=(offset_x, offset_y))
    return canvas


def encode_png(image: Image.Image) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format=OUTPUT_FORMAT)
    return buffer.getvalue()


def render_and_encode(source: Image.Image, cell: Cell, options: RenderOptions) -> RenderedCell:
    try:
        canvas = render_cell(source, cell, options)
        data = encode_png(canvas)
    except (OSError, ValueError) as exc:
        raise SliceEncodeError(f"Failed to encode {cell.name}: {exc}", cell=cell) from exc
    return RenderedCell(cell=cell, data=data, width=canvas.width, height=canvas.height)
