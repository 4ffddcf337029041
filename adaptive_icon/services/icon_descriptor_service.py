from pathlib import Path
from typing import Union
import logging
import shutil

from ..models.icon_descriptor import FillSpec, IconDescriptor
from ..repositories.icon_descriptor_repository import IconDescriptorRepository

logger = logging.getLogger(__name__)

ASSETS_DIR = "Assets"


class IconDescriptorService:
    """
    Business logic around icon.json: loading, the background-only variant
    and the fill description used for the Android background drawable.
    """

    def __init__(self):
        self.repository = IconDescriptorRepository()

    def load(self, icon_folder: Union[str, Path]) -> IconDescriptor:
        descriptor = self.repository.read(icon_folder)
        logger.info("Loaded %s with %d layer group(s)", descriptor.name, len(descriptor.groups))
        return descriptor

    def get_fill(self, descriptor: IconDescriptor) -> FillSpec:
        try:
            return descriptor.fill
        except ValueError as err:
            logger.warning("Ignoring unreadable fill in %s: %s", descriptor.name, err)
            return FillSpec()

    def prepare_background_only(self, descriptor: IconDescriptor, work_dir: Union[str, Path]) -> Path:
        """
        Build a copy of the icon folder whose descriptor has no layer groups,
        so the renderer draws the background fill alone.
        """
        if descriptor.folder is None:
            raise ValueError("Descriptor has no source folder to copy assets from")

        target = Path(work_dir) / descriptor.folder.name
        target.mkdir(parents=True, exist_ok=True)

        assets = descriptor.folder / ASSETS_DIR
        if assets.is_dir():
            shutil.copytree(assets, target / ASSETS_DIR, dirs_exist_ok=True)

        self.repository.write(target, descriptor.background_only())
        return target
