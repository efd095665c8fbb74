"""Source bitmap loading."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import unquote_to_bytes
from urllib.request import Request, urlopen

from PIL import Image, ImageOps, UnidentifiedImageError

from ..errors import SourceLoadError


@dataclass
class ImageRef:
    image: Image.Image
    source: str

    @property
    def natural_width(self) -> int:
        return self.image.width

    @property
    def natural_height(self) -> int:
        return self.image.height


def load_source(value: Any, *, timeout_s: float = 60.0) -> ImageRef:
    """Decode bytes, a path, a data URL or an http(s) URL into an ImageRef."""
    if isinstance(value, ImageRef):
        return value
    if isinstance(value, Image.Image):
        return ImageRef(image=_normalize(value), source="<image>")
    if isinstance(value, (bytes, bytearray)):
        return ImageRef(image=_decode(bytes(value), "<bytes>"), source="<bytes>")
    if isinstance(value, Path):
        return ImageRef(image=_decode(_read_path(value), str(value)), source=str(value))
    if isinstance(value, str):
        text = value.strip()
        lowered = text[:16].lower()
        if lowered.startswith("data:"):
            return ImageRef(image=_decode(_decode_data_url(text), "<data-url>"), source="<data-url>")
        if lowered.startswith(("http://", "https://")):
            return ImageRef(image=_decode(_download_bytes(text, timeout_s), text), source=text)
        return ImageRef(image=_decode(_read_path(Path(text)), text), source=text)
    raise SourceLoadError(f"Unsupported image source type: {type(value).__name__}")


def _read_path(path: Path) -> bytes:
    try:
        return path.expanduser().read_bytes()
    except OSError as exc:
        raise SourceLoadError(f"Unable to read image file {path}: {exc}") from exc


def _decode_data_url(url: str) -> bytes:
    header, sep, payload = url.partition(",")
    if not sep:
        raise SourceLoadError("Malformed data URL: missing ',' separator.")
    try:
        if header.lower().endswith(";base64"):
            return base64.b64decode(payload, validate=False)
        return unquote_to_bytes(payload)
    except (binascii.Error, ValueError) as exc:
        raise SourceLoadError(f"Malformed data URL payload: {exc}") from exc


def _download_bytes(url: str, timeout_s: float) -> bytes:
    try:
        req = Request(url, method="GET", headers={"Accept": "image/*"})
        with urlopen(req, timeout=timeout_s) as response:
            return response.read()
    except HTTPError as exc:
        raise SourceLoadError(f"Image fetch failed ({exc.code}): {url}") from exc
    except (URLError, TimeoutError) as exc:
        raise SourceLoadError(f"Image fetch failed: {exc}") from exc
    except ValueError as exc:
        raise SourceLoadError(f"Invalid image URL {url}: {exc}") from exc


def _decode(data: bytes, label: str) -> Image.Image:
    if not data:
        raise SourceLoadError(f"Image source {label} is empty.")
    try:
        with Image.open(BytesIO(data)) as opened:
            opened.load()
            image = _normalize(opened)
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as exc:
        raise SourceLoadError(f"Unable to decode image {label}: {exc}") from exc
    return image


def _normalize(image: Image.Image) -> Image.Image:
    # Browsers honour EXIF orientation, so natural size is post-rotation.
    oriented = ImageOps.exif_transpose(image)
    if oriented.mode != "RGBA":
        oriented = oriented.convert("RGBA")
    elif oriented is image:
        oriented = oriented.copy()
    return oriented
