from __future__ import annotations
from typing import Tuple
import logging
import numpy as np
import cv2

from ..models.raster import RasterImage
from ..models.safe_area import SafeArea
from ..repositories.image_repository import ImageRepository

logger = logging.getLogger(__name__)


class SafeAreaService:
    """
    Letterboxes an RGBA image into a square transparent canvas so that it
    fits inside the centred safe area.
    """

    def __init__(self, safe_area: SafeArea | None = None):
        self.safe_area = safe_area or SafeArea.from_env()
        self.image_repository = ImageRepository()

    @staticmethod
    def get_layout(width: int, height: int, canvas_size: int, safe_area_size: int) -> Tuple[int, int, int, int]:
        """
        Returns (new_width, new_height, offset_x, offset_y) for the scaled image.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Cannot fit an empty image ({width}x{height})")
        if not 0 < safe_area_size <= canvas_size:
            raise ValueError(
                f"Safe area {safe_area_size} must be positive and no larger than canvas {canvas_size}"
            )

        scale = min(safe_area_size / width, safe_area_size / height)
        new_w = max(1, int(width * scale + 0.5))
        new_h = max(1, int(height * scale + 0.5))
        offset_x = int((canvas_size - new_w) / 2 + 0.5)
        offset_y = int((canvas_size - new_h) / 2 + 0.5)
        return new_w, new_h, offset_x, offset_y

    @staticmethod
    def _resize_rgba(pixels: np.ndarray, new_w: int, new_h: int) -> np.ndarray:
        """
        Resample on premultiplied alpha so that colour hidden under transparent
        pixels does not bleed into the edges.
        """
        h, w = pixels.shape[:2]
        if (new_w, new_h) == (w, h):
            return pixels.copy()

        interpolation = cv2.INTER_AREA if new_w < w or new_h < h else cv2.INTER_CUBIC

        rgba = pixels.astype(np.float32)
        alpha = rgba[..., 3:4] / 255.0
        rgba[..., :3] *= alpha

        resized = cv2.resize(rgba, (new_w, new_h), interpolation=interpolation)
        resized = np.clip(resized, 0, 255)

        out_alpha = resized[..., 3:4] / 255.0
        with np.errstate(divide="ignore", invalid="ignore"):
            rgb = np.where(out_alpha > 0, resized[..., :3] / out_alpha, 0)
        resized[..., :3] = np.clip(rgb, 0, 255)
        return (resized + 0.5).astype(np.uint8)

    def fit(self, image: RasterImage, canvas_size: int | None = None, safe_area_size: int | None = None) -> RasterImage:
        if canvas_size is None:
            canvas_size = self.safe_area.canvas_size
        if safe_area_size is None:
            safe_area_size = self.safe_area.safe_area_size

        new_w, new_h, x, y = self.get_layout(image.width, image.height, canvas_size, safe_area_size)
        logger.debug(
            "Fitting %dx%d into %d canvas: %dx%d at (%d, %d)",
            image.width, image.height, canvas_size, new_w, new_h, x, y,
        )

        canvas = np.zeros((canvas_size, canvas_size, 4), dtype=np.uint8)
        canvas[y:y + new_h, x:x + new_w] = self._resize_rgba(image.pixels, new_w, new_h)
        return self.image_repository.create_image(canvas)
