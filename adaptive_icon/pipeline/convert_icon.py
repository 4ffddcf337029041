"""
Icon Composer → Android Adaptive Icon conversion pipeline.

1. render the full icon (background + foreground)
2. render the background only (descriptor with its groups removed)
3. extract the foreground by differencing the two renders
4. fit full / background / foreground into the adaptive icon safe area
5. write the Android resource tree
"""
from __future__ import annotations
from pathlib import Path
from typing import Union
import logging
import shutil
import tempfile

from ..models.raster import RasterImage
from ..services.android_resource_service import AndroidResourceService, ResourcePaths
from ..services.foreground_extraction_service import ForegroundExtractionService
from ..services.icon_descriptor_service import IconDescriptorService
from ..services.image_service import ImageService
from ..services.render_service import RenderService
from ..services.safe_area_service import SafeAreaService

logger = logging.getLogger(__name__)


def convert_icon(
    icon_folder: Union[str, Path],
    output_dir: Union[str, Path],
    *,
    monochrome: bool = False,
    keep_temp: bool = False,
    render_service: RenderService = None,
    descriptor_service: IconDescriptorService = IconDescriptorService(),
    extraction_service: ForegroundExtractionService = None,
    safe_area_service: SafeAreaService = None,
    resource_service: AndroidResourceService = AndroidResourceService(),
    image_service: ImageService = ImageService(),
) -> ResourcePaths:
    """
    Convert one ``.icon`` folder. Intermediate PNGs live in a temporary
    directory that is removed afterwards unless *keep_temp* is set.
    """
    # env-dependent services are built per call so .env changes are picked up
    render_service = render_service or RenderService()
    extraction_service = extraction_service or ForegroundExtractionService()
    safe_area_service = safe_area_service or SafeAreaService()

    icon_folder = Path(icon_folder)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    descriptor = descriptor_service.load(icon_folder)
    temp_dir = Path(tempfile.mkdtemp(prefix="icon-convert-"))
    logger.info("Working directory: %s", temp_dir)

    try:
        print("Step 1/5: Exporting full icon...")
        full = render_service.render(icon_folder, temp_dir / "full.png")

        print("Step 2/5: Exporting background only...")
        background_folder = descriptor_service.prepare_background_only(descriptor, temp_dir / "background")
        background = render_service.render(background_folder, temp_dir / "background.png")

        print("Step 3/5: Extracting foreground...")
        foreground = extraction_service.extract(full, background)
        image_service.save(foreground, temp_dir / "foreground.png")

        print("Step 4/5: Preparing images for Android Adaptive Icon format...")
        padded: dict[str, RasterImage] = {}
        for name, img in (("full", full), ("background", background), ("foreground", foreground)):
            padded[name] = safe_area_service.fit(img)
            image_service.save(padded[name], temp_dir / f"{name}-padded.png")

        mono = image_service.monochrome_from(padded["foreground"]) if monochrome else None

        print("Step 5/5: Generating Android resources...")
        resources = resource_service.create_resource_structure(
            output_dir,
            descriptor,
            full=padded["full"],
            background=background,  # unpadded, for colour sampling
            foreground=padded["foreground"],
            monochrome=mono,
        )
    finally:
        if keep_temp:
            logger.info("Keeping intermediate files in %s", temp_dir)
        else:
            shutil.rmtree(temp_dir, ignore_errors=True)

    return resources
