from __future__ import annotations
from io import BytesIO
from pathlib import Path
from typing import Union
import logging
import numpy as np
import cv2
from PIL import Image as PILImage

from ..models.raster import RasterImage

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles PNG decode/encode and pixel updates for RasterImage entities.
    Everything that leaves this class is RGBA uint8.
    """

    @staticmethod
    def create_image(pixels: np.ndarray, path: Union[str, Path] = None) -> RasterImage:
        if path is None:
            return RasterImage(pixels)
        return RasterImage(pixels=pixels, path=Path(path))

    @staticmethod
    def retrieve_image_dimensions(img: RasterImage):
        return img.pixels.shape[:2]

    @staticmethod
    def _to_rgba(arr: np.ndarray) -> np.ndarray:
        """OpenCV channel order (gray / BGR / BGRA, 8 or 16 bit) → RGBA uint8."""
        if arr.dtype == np.uint16:
            arr = (arr >> 8).astype(np.uint8)

        if arr.ndim == 2:
            return cv2.cvtColor(arr, cv2.COLOR_GRAY2RGBA)
        if arr.shape[2] == 3:
            return cv2.cvtColor(arr, cv2.COLOR_BGR2RGBA)
        return cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA)

    def load(self, path: Union[str, Path]) -> RasterImage:
        path = Path(path)
        arr = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        if arr is None:
            raise FileNotFoundError(f"Image not found or unreadable: {path}")

        logger.debug("Loaded %s (%s, %s)", path, arr.shape, arr.dtype)
        return RasterImage(pixels=self._to_rgba(arr), path=path)

    def decode(self, data: bytes) -> RasterImage:
        """Decode an in-memory PNG (e.g. an HTTP upload)."""
        arr = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
        if arr is None:
            raise ValueError("Uploaded data is not a decodable image")
        return RasterImage(pixels=self._to_rgba(arr))

    @staticmethod
    def save(image: RasterImage) -> None:
        if image.path is None:
            raise ValueError("Cannot save an image without a path")
        Path(image.path).parent.mkdir(parents=True, exist_ok=True)
        PILImage.fromarray(np.ascontiguousarray(image.pixels)).save(image.path, format="PNG")

    @staticmethod
    def encode_png(image: RasterImage) -> bytes:
        buffer = BytesIO()
        PILImage.fromarray(np.ascontiguousarray(image.pixels)).save(buffer, format="PNG")
        return buffer.getvalue()
