from pathlib import Path
from typing import Union
import numpy as np

from ..models.raster import RasterImage
from ..repositories.image_repository import ImageRepository


class ImageService:
    """I/O helpers and small pixel utilities. No extraction logic."""

    def __init__(self):
        self.image_repository = ImageRepository()

    def create_image(self, pixels: np.ndarray, path: Union[str, Path] = None) -> RasterImage:
        return self.image_repository.create_image(pixels, path)

    def load(self, path: Union[str, Path]) -> RasterImage:
        """Load a single image from disk as RGBA."""
        return self.image_repository.load(path)

    def decode(self, data: bytes) -> RasterImage:
        return self.image_repository.decode(data)

    def save(self, image: RasterImage, path: Union[str, Path] = None) -> RasterImage:
        """
        Save the image. When *path* is given the image is re-targeted first.
        """
        if path is not None:
            image.path = Path(path)
        self.image_repository.save(image)
        return image

    def to_png_bytes(self, image: RasterImage) -> bytes:
        return self.image_repository.encode_png(image)

    def get_image_dimensions(self, img: RasterImage):
        return self.image_repository.retrieve_image_dimensions(img)

    def sample_pixel(self, img: RasterImage, x: int, y: int):
        """RGBA tuple at (x, y), coordinates clamped to the image."""
        h, w = self.get_image_dimensions(img)
        x = min(max(x, 0), w - 1)
        y = min(max(y, 0), h - 1)
        return tuple(int(v) for v in img.pixels[y, x])

    def monochrome_from(self, img: RasterImage) -> RasterImage:
        """
        White layer carrying only the alpha of *img*; launchers tint it.
        """
        pixels = np.zeros_like(img.pixels)
        pixels[..., :3] = 255
        pixels[..., 3] = img.pixels[..., 3]
        return self.create_image(pixels)
