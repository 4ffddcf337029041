"""
Thin wrapper around Apple's ``ictool`` (ships inside Icon Composer.app).

Only this module knows the command line; callers hand in an icon folder
and get a PNG on disk.
"""
from __future__ import annotations
from pathlib import Path
from typing import List, Union
import logging
import os
import subprocess
from dotenv import load_dotenv

from ..errors import RenderError

# Load environment variables
load_dotenv()

DEFAULT_ICTOOL_PATH = (
    "/Applications/Xcode.app/Contents/Applications/Icon Composer.app"
    "/Contents/Executables/ictool"
)

logger = logging.getLogger(__name__)


class IctoolRepository:
    def __init__(self, ictool_path: Union[str, Path, None] = None):
        self.ictool_path = Path(ictool_path or os.getenv("ICTOOL_PATH", DEFAULT_ICTOOL_PATH))

    def exists(self) -> bool:
        return self.ictool_path.is_file()

    def build_command(
        self,
        icon_folder: Union[str, Path],
        output_path: Union[str, Path],
        *,
        width: int,
        height: int,
        platform: str,
        rendition: str,
    ) -> List[str]:
        return [
            str(self.ictool_path),
            str(icon_folder),
            "--export-image",
            "--output-file", str(output_path),
            "--platform", platform,
            "--rendition", rendition,
            "--width", str(width),
            "--height", str(height),
            "--scale", "1",
        ]

    def export_image(
        self,
        icon_folder: Union[str, Path],
        output_path: Union[str, Path],
        *,
        width: int = 1024,
        height: int = 1024,
        platform: str = "iOS",
        rendition: str = "Default",
    ) -> Path:
        cmd = self.build_command(icon_folder, output_path, width=width, height=height,
                                 platform=platform, rendition=rendition)
        logger.debug("Running %s", " ".join(cmd))

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as err:
            raise RenderError(f"Failed to spawn ictool: {err}") from err

        if result.returncode != 0:
            raise RenderError(
                f"ictool failed with code {result.returncode}: {result.stderr}",
                returncode=result.returncode,
                stderr=result.stderr,
            )
        return Path(output_path)
