from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union
import logging

from ..models.icon_descriptor import Color, IconDescriptor
from ..models.raster import RasterImage
from ..repositories.android_resource_repository import AndroidResourceRepository
from .icon_descriptor_service import IconDescriptorService
from .image_service import ImageService

logger = logging.getLogger(__name__)

LAUNCHER = "ic_launcher"
BACKGROUND = "ic_launcher_background"
FOREGROUND = "ic_launcher_foreground"
MONOCHROME = "ic_launcher_monochrome"

# Max per-channel difference for two sampled colours to count as one.
SOLID_COLOR_TOLERANCE = 2


@dataclass
class ResourcePaths:
    anydpi_dir: Path
    drawable_dir: Path
    mipmap_dir: Path
    files: List[Path] = field(default_factory=list)


class AndroidResourceService:
    """
    Lays out an Android Adaptive Icon resource tree:

        res/mipmap-anydpi-v26/ic_launcher.xml
        res/drawable/ic_launcher_background.xml
        res/mipmap-xxxhdpi/ic_launcher.png
        res/mipmap-xxxhdpi/ic_launcher_foreground.png
        res/mipmap-xxxhdpi/ic_launcher_monochrome.png   (optional)
    """

    def __init__(self):
        self.repository = AndroidResourceRepository()
        self.descriptor_service = IconDescriptorService()
        self.image_service = ImageService()

    def sample_background_colors(self, background: RasterImage) -> List[Color]:
        """Top-centre and bottom-centre colours; one colour if they match."""
        x = background.width // 2
        top = self.image_service.sample_pixel(background, x, 0)
        bottom = self.image_service.sample_pixel(background, x, background.height - 1)

        if max(abs(a - b) for a, b in zip(top, bottom)) <= SOLID_COLOR_TOLERANCE:
            return [top]
        return [top, bottom]

    def background_colors(self, descriptor: IconDescriptor | None, background: RasterImage) -> List[Color]:
        """
        Prefer the descriptor's declared fill; fall back to sampling the
        unpadded background render.
        """
        if descriptor is not None:
            fill = self.descriptor_service.get_fill(descriptor)
            if fill.kind != "none":
                logger.info("Background from %s fill: %s", fill.kind, fill.colors)
                return fill.colors

        colors = self.sample_background_colors(background)
        logger.info("Background sampled from render: %s", colors)
        return colors

    def create_resource_structure(
        self,
        output_dir: Union[str, Path],
        descriptor: IconDescriptor | None,
        full: RasterImage,
        background: RasterImage,
        foreground: RasterImage,
        monochrome: RasterImage | None = None,
    ) -> ResourcePaths:
        """
        full / foreground / monochrome are expected already fitted to the
        adaptive icon canvas; background is the unpadded render.
        """
        res = Path(output_dir) / "res"
        paths = ResourcePaths(
            anydpi_dir=res / "mipmap-anydpi-v26",
            drawable_dir=res / "drawable",
            mipmap_dir=res / "mipmap-xxxhdpi",
        )

        paths.files.append(self.repository.write_adaptive_icon_xml(
            paths.anydpi_dir / f"{LAUNCHER}.xml",
            background=f"@drawable/{BACKGROUND}",
            foreground=f"@mipmap/{FOREGROUND}",
            monochrome=f"@mipmap/{MONOCHROME}" if monochrome is not None else None,
        ))
        paths.files.append(self.repository.write_background_drawable(
            paths.drawable_dir / f"{BACKGROUND}.xml",
            self.background_colors(descriptor, background),
        ))

        paths.files.append(self.repository.write_png(paths.mipmap_dir / f"{LAUNCHER}.png", full))
        paths.files.append(self.repository.write_png(paths.mipmap_dir / f"{FOREGROUND}.png", foreground))
        if monochrome is not None:
            paths.files.append(self.repository.write_png(paths.mipmap_dir / f"{MONOCHROME}.png", monochrome))

        logger.info("Wrote %d resource files under %s", len(paths.files), res)
        return paths
