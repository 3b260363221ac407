import pytest
from PIL import Image

from canvasserver.protocol import PALETTE, Color, ImageGrid
from canvasserver.rendering import grid_to_image, image_to_grid, load_image


def test_grid_to_image_expands_rgb565():
    img = grid_to_image(ImageGrid(2, [[Color.RED, Color.WHITE], [Color.BLUE, Color.BLACK]]))
    assert img.size == (2, 2)
    assert img.getpixel((0, 0)) == (255, 0, 0)
    assert img.getpixel((1, 0)) == (255, 255, 255)
    assert img.getpixel((0, 1)) == (0, 0, 255)
    assert img.getpixel((1, 1)) == (0, 0, 0)


def test_palette_image_maps_back_exactly():
    grid = ImageGrid(len(PALETTE), [[int(c) for c in PALETTE], [int(c) for c in reversed(PALETTE)]])
    assert image_to_grid(grid_to_image(grid), dither=False) == grid


def test_off_palette_colors_snap_to_nearest():
    img = Image.new("RGB", (3, 1))
    img.putpixel((0, 0), (250, 10, 5))
    img.putpixel((1, 0), (5, 5, 5))
    img.putpixel((2, 0), (240, 240, 250))
    grid = image_to_grid(img, dither=False)
    assert grid.rows == [[Color.RED, Color.BLACK, Color.WHITE]]


def test_load_image_fits_canvas(tmp_path):
    path = tmp_path / "drawing.png"
    Image.new("RGBA", (64, 20), (0, 255, 0, 255)).save(path)
    img = load_image(str(path), 32, 24)
    assert img.mode == "RGB"
    assert img.size == (32, 24)
    assert image_to_grid(img).rows[0][0] == Color.GREEN


def test_load_image_rejects_unknown_extension(tmp_path):
    with pytest.raises(ValueError):
        load_image(str(tmp_path / "notes.txt"), 4, 4)
