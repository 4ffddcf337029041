from __future__ import annotations
from pathlib import Path
from typing import Union
import logging
import os
from dotenv import load_dotenv

from ..errors import RenderError
from ..models.raster import RasterImage
from ..repositories.ictool_repository import IctoolRepository
from .image_service import ImageService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class RenderService:
    """
    Produces flattened PNG renders of an Icon Composer icon.
    """

    def __init__(self, ictool_repository: IctoolRepository | None = None):
        self.ictool = ictool_repository or IctoolRepository()
        self.image_service = ImageService()
        self.icon_size = int(os.getenv("ICON_SIZE", "1024"))
        self.platform = os.getenv("ICTOOL_PLATFORM", "iOS")
        self.rendition = os.getenv("ICTOOL_RENDITION", "Default")  # light appearance

    def verify_available(self) -> None:
        if not self.ictool.exists():
            raise RenderError(
                f"ictool not found at {self.ictool.ictool_path}. Please ensure Xcode is installed."
            )

    def render(self, icon_folder: Union[str, Path], output_path: Union[str, Path]) -> RasterImage:
        """Export *icon_folder* to *output_path* and load the result."""
        logger.info("Rendering %s at %dpx", Path(icon_folder).name, self.icon_size)
        self.ictool.export_image(
            icon_folder,
            output_path,
            width=self.icon_size,
            height=self.icon_size,
            platform=self.platform,
            rendition=self.rendition,
        )
        return self.image_service.load(output_path)
