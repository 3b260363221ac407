from __future__ import annotations

from enum import IntEnum
from typing import Dict, Tuple

from .errors import InvalidCode, UnknownColor


class Color(IntEnum):
    """The nine RGB565 colors the display can draw."""

    RED = 0xF800
    GREEN = 0x07E0
    BLUE = 0x001F
    CYAN = 0x07FF
    MAGENTA = 0xF81F
    YELLOW = 0xFFE0
    WHITE = 0xFFFF
    GRAY = 0x520A
    BLACK = 0x0000


# Index is the wire color code.
PALETTE: Tuple[Color, ...] = (
    Color.RED,
    Color.GREEN,
    Color.BLUE,
    Color.CYAN,
    Color.MAGENTA,
    Color.YELLOW,
    Color.WHITE,
    Color.GRAY,
    Color.BLACK,
)

_CODES: Dict[int, int] = {int(color): code for code, color in enumerate(PALETTE)}


def code_to_color(code: int) -> Color:
    """Translate a wire color code (0-8) into its RGB565 value."""
    if not 0 <= code < len(PALETTE):
        raise InvalidCode(code)
    return PALETTE[code]


def color_to_code(value: int) -> int:
    """Translate an RGB565 value back into its wire color code."""
    code = _CODES.get(value)
    if code is None:
        raise UnknownColor(value)
    return code


def rgb565_to_rgb(value: int) -> Tuple[int, int, int]:
    red = (value >> 11) & 0x1F
    green = (value >> 5) & 0x3F
    blue = value & 0x1F
    return (
        (red << 3) | (red >> 2),
        (green << 2) | (green >> 4),
        (blue << 3) | (blue >> 2),
    )


def rgb_to_rgb565(red: int, green: int, blue: int) -> int:
    return ((red & 0xF8) << 8) | ((green & 0xFC) << 3) | (blue >> 3)
