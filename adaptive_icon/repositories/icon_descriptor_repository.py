from __future__ import annotations
from pathlib import Path
from typing import Union
import json

from ..errors import IconDescriptorError
from ..models.icon_descriptor import IconDescriptor

DESCRIPTOR_NAME = "icon.json"


class IconDescriptorRepository:
    """
    Reads and writes the icon.json of an Icon Composer ``.icon`` folder.
    """

    @staticmethod
    def descriptor_path(folder: Union[str, Path]) -> Path:
        return Path(folder) / DESCRIPTOR_NAME

    def read(self, folder: Union[str, Path]) -> IconDescriptor:
        folder = Path(folder)
        path = self.descriptor_path(folder)
        if not path.is_file():
            raise FileNotFoundError(f"icon.json not found in {folder}")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as err:
            raise IconDescriptorError(f"Failed to parse {path}: {err}") from err

        if not isinstance(data, dict):
            raise IconDescriptorError(f"{path} must contain a JSON object")

        return IconDescriptor(data=data, folder=folder)

    def write(self, folder: Union[str, Path], descriptor: IconDescriptor) -> Path:
        path = self.descriptor_path(folder)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(descriptor.data, indent=2), encoding="utf-8")
        return path
