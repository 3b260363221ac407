from __future__ import annotations

import os

from PIL import Image, ImageOps

SUPPORTED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".bmp"}


def load_image(path: str, width: int, height: int) -> Image.Image:
    """Open an image file and fit it to the display canvas."""
    ext = os.path.splitext(path)[1].lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise ValueError("Supported formats: " + ", ".join(sorted(SUPPORTED_EXTENSIONS)))
    with Image.open(path) as img:
        img = ImageOps.exif_transpose(img)
        img = _normalize_image(img)
        return _resize_to_canvas(img, width, height).copy()


def _normalize_image(img: Image.Image) -> Image.Image:
    if img.mode != "RGB":
        return img.convert("RGB")
    return img


def _resize_to_canvas(img: Image.Image, width: int, height: int) -> Image.Image:
    if img.size == (width, height):
        return img
    return img.resize((width, height), Image.LANCZOS)
