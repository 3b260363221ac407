import pytest

from canvasserver.protocol import PALETTE, Color, InvalidCode, UnknownColor, code_to_color, color_to_code
from canvasserver.protocol.palette import rgb565_to_rgb, rgb_to_rgb565

EXPECTED = [0xF800, 0x07E0, 0x001F, 0x07FF, 0xF81F, 0xFFE0, 0xFFFF, 0x520A, 0x0000]


def test_code_table_matches_display_palette():
    assert [int(code_to_color(code)) for code in range(9)] == EXPECTED


def test_color_table_is_a_bijection():
    for value in EXPECTED:
        assert code_to_color(color_to_code(value)) == value
    assert len(set(PALETTE)) == 9


@pytest.mark.parametrize("code", [9, 15, 255, -1])
def test_invalid_codes_are_rejected(code):
    with pytest.raises(InvalidCode):
        code_to_color(code)


@pytest.mark.parametrize("value", [0x0001, 0xF801, 0x1234, 0xFFFE])
def test_unknown_colors_are_rejected(value):
    with pytest.raises(UnknownColor) as info:
        color_to_code(value)
    assert info.value.value == value


def test_unknown_color_covers_every_non_palette_value():
    known = set(EXPECTED)
    for value in range(0x10000):
        if value in known:
            continue
        with pytest.raises(UnknownColor):
            color_to_code(value)


def test_rgb_expansion_hits_channel_extremes():
    assert rgb565_to_rgb(Color.RED) == (255, 0, 0)
    assert rgb565_to_rgb(Color.WHITE) == (255, 255, 255)
    assert rgb565_to_rgb(Color.BLACK) == (0, 0, 0)
    for color in PALETTE:
        assert rgb_to_rgb565(*rgb565_to_rgb(color)) == color
