from __future__ import annotations

from PIL import Image

from ..protocol.palette import PALETTE, Color, rgb565_to_rgb
from ..protocol.types import ImageGrid

_BLACK_CODE = PALETTE.index(Color.BLACK)


def _palette_image() -> Image.Image:
    flat = []
    for color in PALETTE:
        flat.extend(rgb565_to_rgb(color))
    # Unused palette entries repeat black so stray indices still mean black.
    flat.extend(rgb565_to_rgb(Color.BLACK) * (256 - len(PALETTE)))
    img = Image.new("P", (1, 1))
    img.putpalette(flat)
    return img


def image_to_grid(img: Image.Image, dither: bool = True) -> ImageGrid:
    """Map every pixel of ``img`` onto the nearest display color."""
    method = Image.Dither.FLOYDSTEINBERG if dither else Image.Dither.NONE
    quantized = img.convert("RGB").quantize(palette=_palette_image(), dither=method)
    indices = quantized.tobytes()
    width = quantized.width
    values = [int(PALETTE[min(index, _BLACK_CODE)]) for index in indices]
    rows = [values[offset : offset + width] for offset in range(0, len(values), width)] if width else []
    return ImageGrid(width, rows)


def grid_to_image(grid: ImageGrid) -> Image.Image:
    grid.validate()
    data = bytearray()
    for row in grid.rows:
        for value in row:
            data.extend(rgb565_to_rgb(value))
    return Image.frombytes("RGB", (grid.width, grid.height), bytes(data))
