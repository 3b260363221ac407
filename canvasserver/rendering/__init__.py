from .loader import SUPPORTED_EXTENSIONS, load_image
from .renderer import grid_to_image, image_to_grid

__all__ = ["SUPPORTED_EXTENSIONS", "grid_to_image", "image_to_grid", "load_image"]
