import json
from pathlib import Path

import numpy as np
import pytest
from PIL import Image as PILImage

from adaptive_icon.models.raster import RasterImage


def solid(height, width, rgba):
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[...] = rgba
    return pixels


def write_png(path, pixels):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    PILImage.fromarray(pixels).save(path, format="PNG")
    return path


def read_png(path):
    return np.asarray(PILImage.open(path).convert("RGBA"))


@pytest.fixture
def make_image():
    def _make(height, width, rgba=(0, 0, 0, 0)):
        return RasterImage(pixels=solid(height, width, rgba))
    return _make


@pytest.fixture
def icon_folder(tmp_path):
    """A minimal Icon Composer folder: icon.json with one group plus an asset."""
    folder = tmp_path / "Turntable.icon"
    (folder / "Assets").mkdir(parents=True)
    write_png(folder / "Assets" / "disc.png", solid(8, 8, (255, 255, 255, 255)))

    descriptor = {
        "fill": {"solid": "srgb:0.2,0.4,0.8,1.0"},
        "groups": [
            {"layers": [{"image-name": "disc.png", "name": "disc"}]},
        ],
        "supported-platforms": {"squares": "shared"},
    }
    (folder / "icon.json").write_text(json.dumps(descriptor), encoding="utf-8")
    return folder


class FakeRenderService:
    """
    Stands in for ictool: a blue background, plus a white square in the
    middle when the descriptor still has layer groups.
    """

    def __init__(self, size=64):
        self.size = size
        self.calls = []

    def verify_available(self):
        return None

    def render(self, icon_folder, output_path):
        icon_folder = Path(icon_folder)
        self.calls.append(icon_folder)
        data = json.loads((icon_folder / "icon.json").read_text(encoding="utf-8"))

        pixels = solid(self.size, self.size, (0, 0, 255, 255))
        if data.get("groups"):
            q = self.size // 4
            pixels[q:self.size - q, q:self.size - q] = (255, 255, 255, 255)

        write_png(output_path, pixels)
        return RasterImage(pixels=pixels, path=Path(output_path))


@pytest.fixture
def fake_render_service():
    return FakeRenderService()
