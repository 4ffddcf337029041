# services/foreground_extraction_service.py
"""
Recovers the foreground layer of an icon from two flattened renders.

Given the full composite and the background-only render, every pixel is
solved independently for a foreground colour Cfg and opacity α with

    Cfull = α · Cfg + (1 - α) · Cbg        (per RGB channel)

The equation is under-determined, and clamping Cfg to [0, 255] makes it
non-linear, so α is found by a 1-D grid scan from the smallest α that can
explain the observed difference up to 1.0.
"""
from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence, Tuple
import logging
import math
import os

import numpy as np
from dotenv import load_dotenv

from ..errors import DimensionMismatchError
from ..models.extraction_settings import ExtractionThresholds
from ..models.raster import RasterImage
from ..repositories.image_repository import ImageRepository

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

Pixel = Tuple[int, int, int, int]
TRANSPARENT: Pixel = (0, 0, 0, 0)


def _round_half_up(x):
    """Rounds .5 away from zero for positive values, unlike np.round's banker's rounding."""
    return np.floor(x + 0.5)


class ForegroundExtractionService:
    """
    Turns (full, background) RGBA renders into a foreground RGBA layer that,
    composited over the background, reproduces the full render.
    """

    def __init__(self, thresholds: ExtractionThresholds | None = None, workers: int | None = None):
        self.thresholds = thresholds or ExtractionThresholds.from_env()
        self.workers = workers if workers is not None else int(os.getenv("EXTRACT_WORKERS", "1"))
        self.image_repository = ImageRepository()

    # ---------- reference (one pixel) ----------
    def extract_pixel(self, full: Sequence[int], background: Sequence[int]) -> Pixel:
        """
        Solve a single pixel pair. Slow, but mirrors the vectorised path
        operation for operation and is used to check it.
        """
        t = self.thresholds
        full = [int(v) for v in full]
        background = [int(v) for v in background]

        if max(abs(f - b) for f, b in zip(full, background)) < t.identity_threshold:
            return TRANSPARENT

        c_full, c_bg = full[:3], background[:3]
        max_abs_diff = max(abs(f - b) for f, b in zip(c_full, c_bg))

        alpha = max(t.min_alpha, max_abs_diff / 255)
        best_alpha, best_error, best_fg = alpha, math.inf, (0, 0, 0)

        while alpha <= 1.0:
            fg = tuple(
                min(255, max(0, math.floor((f - (1 - alpha) * b) / alpha + 0.5)))
                for f, b in zip(c_full, c_bg)
            )
            d = [abs(alpha * cf + (1 - alpha) * b - f) for cf, b, f in zip(fg, c_bg, c_full)]
            error = d[0] + d[1] + d[2]

            if error < best_error:
                best_alpha, best_error, best_fg = alpha, error, fg
            if error < t.perfect_error:
                break
            alpha += t.alpha_step

        if best_error > t.noise_error and max_abs_diff < t.noise_max_diff:
            return TRANSPARENT

        return best_fg + (math.floor(best_alpha * 255 + 0.5),)

    # ---------- vectorised ----------
    def _solve(self, full: np.ndarray, background: np.ndarray) -> np.ndarray:
        """
        full, background : (N, 4) uint8 → (N, 4) uint8.

        Runs the same α scan as extract_pixel for all pixels at once; a pixel
        drops out of the scan once it reconstructs perfectly or passes α = 1.
        """
        t = self.thresholds
        out = np.zeros(full.shape, dtype=np.uint8)

        diff = np.abs(full.astype(np.int16) - background.astype(np.int16))
        content = np.nonzero(diff.max(axis=1) >= t.identity_threshold)[0]
        if content.size == 0:
            return out

        c_full = full[content, :3].astype(np.float64)
        c_bg = background[content, :3].astype(np.float64)
        max_abs_diff = diff[content, :3].max(axis=1)

        alpha = np.maximum(t.min_alpha, max_abs_diff / 255)
        best_alpha = alpha.copy()
        best_error = np.full(content.size, np.inf)
        best_fg = np.zeros((content.size, 3))

        active = np.nonzero(alpha <= 1.0)[0]
        while active.size:
            a = alpha[active][:, None]
            cf, cb = c_full[active], c_bg[active]

            fg = np.clip(_round_half_up((cf - (1 - a) * cb) / a), 0, 255)
            d = np.abs(a * fg + (1 - a) * cb - cf)
            error = d[:, 0] + d[:, 1] + d[:, 2]

            better = error < best_error[active]
            upd = active[better]
            best_error[upd] = error[better]
            best_alpha[upd] = alpha[upd]
            best_fg[upd] = fg[better]

            alpha[active] += t.alpha_step
            keep = (error >= t.perfect_error) & (alpha[active] <= 1.0)
            active = active[keep]

        noise = (best_error > t.noise_error) & (max_abs_diff < t.noise_max_diff)
        solved = content[~noise]
        out[solved, :3] = best_fg[~noise].astype(np.uint8)
        out[solved, 3] = _round_half_up(best_alpha[~noise] * 255).astype(np.uint8)

        logger.debug(
            "Solved %d content pixels (%d rejected as noise) of %d",
            solved.size, int(noise.sum()), full.shape[0],
        )
        return out

    def _solve_rows(self, full: np.ndarray, background: np.ndarray) -> np.ndarray:
        h, w = full.shape[:2]
        return self._solve(full.reshape(-1, 4), background.reshape(-1, 4)).reshape(h, w, 4)

    def extract_pixels(self, full: np.ndarray, background: np.ndarray) -> np.ndarray:
        """
        full, background : (H, W, 4) uint8 RGBA.
        Returns a new (H, W, 4) uint8 foreground; inputs are not modified.
        """
        if full.shape[:2] != background.shape[:2]:
            raise DimensionMismatchError(
                (full.shape[1], full.shape[0]),
                (background.shape[1], background.shape[0]),
            )

        h = full.shape[0]
        workers = max(1, min(self.workers, h))
        if workers == 1:
            return self._solve_rows(full, background)

        # Pixels are independent: each worker fills its own band of rows.
        out = np.empty(full.shape, dtype=np.uint8)
        bands = np.array_split(np.arange(h), workers)

        def run(rows: np.ndarray) -> None:
            lo, hi = rows[0], rows[-1] + 1
            out[lo:hi] = self._solve_rows(full[lo:hi], background[lo:hi])

        with ThreadPoolExecutor(max_workers=workers) as executor:
            for future in [executor.submit(run, rows) for rows in bands if rows.size]:
                future.result()
        return out

    def extract(self, full: RasterImage, background: RasterImage) -> RasterImage:
        """Business-level entry point: two renders in, a new foreground image out."""
        if full.size != background.size:
            raise DimensionMismatchError(full.size, background.size)

        logger.info("Extracting foreground from %dx%d renders", full.width, full.height)
        pixels = self.extract_pixels(full.pixels, background.pixels)

        coverage = float((pixels[..., 3] > 0).mean()) if pixels.size else 0.0
        logger.info("Foreground covers %.1f%% of the canvas", coverage * 100)
        return self.image_repository.create_image(pixels)
