from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np


@dataclass
class RasterImage:
    """
    Simple data object: RGBA pixels (+ optional source path for bookkeeping).
    Values are display-gamma 0-255, straight (non-premultiplied) alpha.
    """
    pixels: np.ndarray  # Shape (H, W, 4), dtype uint8, RGBA order.
    path: Path | None = None  # Source or destination of the image.

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        """(width, height), the order used in diagnostics."""
        return self.width, self.height
