"""16-bit (RGB565) BMP files.

Rows are stored bottom-up on disk; everything outside this module sees
top-down grids.
"""

from __future__ import annotations

import os
import struct
from typing import List, Optional, Tuple, Union

from ..protocol.errors import CorruptBitmap
from ..protocol.types import ImageGrid

FILE_HEADER_FORMAT = "<2sIHHI"
INFO_HEADER_FORMAT = "<IiiHHIIiiII"
FILE_HEADER_SIZE = struct.calcsize(FILE_HEADER_FORMAT)
INFO_HEADER_SIZE = struct.calcsize(INFO_HEADER_FORMAT)
HEADER_SIZE = FILE_HEADER_SIZE + INFO_HEADER_SIZE
BITS_PER_PIXEL = 16
WIDTH_OFFSET = 18
HEIGHT_OFFSET = 22

PathLike = Union[str, "os.PathLike[str]"]


def row_padding(width: int) -> int:
    return (4 - (width * 2) % 4) % 4


def pixel_data_size(width: int, height: int) -> int:
    return (width * 2 + row_padding(width)) * height


def build_headers(width: int, height: int) -> bytes:
    image_size = pixel_data_size(width, height)
    file_header = struct.pack(FILE_HEADER_FORMAT, b"BM", HEADER_SIZE + image_size, 0, 0, HEADER_SIZE)
    info_header = struct.pack(
        INFO_HEADER_FORMAT,
        INFO_HEADER_SIZE,
        width,
        height,
        1,
        BITS_PER_PIXEL,
        0,
        image_size,
        0,
        0,
        0,
        0,
    )
    return file_header + info_header


def serialize_bitmap(grid: ImageGrid) -> bytes:
    grid.validate()
    padding = bytes(row_padding(grid.width))
    out = bytearray(build_headers(grid.width, grid.height))
    for row in reversed(grid.rows):
        out += struct.pack(f"<{grid.width}H", *row)
        out += padding
    return bytes(out)


def read_dimensions(data: bytes) -> Optional[Tuple[int, int]]:
    """Return (width, height) from a BMP header, or None if it is too short."""
    if len(data) < HEADER_SIZE:
        return None
    (width,) = struct.unpack_from("<I", data, WIDTH_OFFSET)
    (height,) = struct.unpack_from("<I", data, HEIGHT_OFFSET)
    return width, height


def deserialize_bitmap(data: Optional[bytes], width: int, height: int) -> ImageGrid:
    """Decode a BMP produced by :func:`serialize_bitmap`.

    Missing data, or data declaring other dimensions than expected, gives a
    blank grid of the expected size instead of an error.
    """
    dimensions = read_dimensions(data) if data is not None else None
    if dimensions != (width, height):
        return ImageGrid.blank(width, height)
    stride = width * 2 + row_padding(width)
    if len(data) < HEADER_SIZE + stride * height:
        raise CorruptBitmap(
            f"Pixel data truncated: need {stride * height} bytes, have {len(data) - HEADER_SIZE}"
        )
    rows: List[List[int]] = []
    offset = HEADER_SIZE
    for _ in range(height):
        rows.append(list(struct.unpack_from(f"<{width}H", data, offset)))
        offset += stride
    rows.reverse()
    return ImageGrid(width, rows)


def save_bitmap(path: PathLike, grid: ImageGrid) -> None:
    data = serialize_bitmap(grid)
    with open(path, "wb") as handle:
        handle.write(data)


def read_bitmap_file(path: PathLike) -> Optional[bytes]:
    try:
        with open(path, "rb") as handle:
            return handle.read()
    except FileNotFoundError:
        return None


def load_bitmap(path: PathLike, width: int, height: int) -> ImageGrid:
    return deserialize_bitmap(read_bitmap_file(path), width, height)
