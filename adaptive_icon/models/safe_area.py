from __future__ import annotations
from dataclasses import dataclass
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass(frozen=True)
class SafeArea:
    """
    Square canvas with a centred safe zone that no launcher mask clips.
    Defaults are the Android adaptive icon at xxxhdpi: 108 dp / 66 dp at 4x.
    """
    canvas_size: int = 432
    safe_area_size: int = 264

    @classmethod
    def from_env(cls) -> "SafeArea":
        return cls(
            canvas_size=int(os.getenv("ANDROID_CANVAS_SIZE", "432")),
            safe_area_size=int(os.getenv("ANDROID_SAFE_AREA_SIZE", "264")),
        )
