from __future__ import annotations
from typing import Tuple


class DimensionMismatchError(ValueError):
    """Full and background renders do not share width and height."""

    def __init__(self, full_size: Tuple[int, int], background_size: Tuple[int, int]):
        self.full_size = full_size
        self.background_size = background_size
        super().__init__(
            f"Image size mismatch: full {full_size[0]}x{full_size[1]}, "
            f"background {background_size[0]}x{background_size[1]}"
        )


class RenderError(RuntimeError):
    """The icon renderer is missing or exited unsuccessfully."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


class IconDescriptorError(ValueError):
    """icon.json exists but cannot be used."""
