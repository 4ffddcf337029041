from __future__ import annotations
from pathlib import Path
from typing import Sequence, Tuple, Union

from ..models.raster import RasterImage
from .image_repository import ImageRepository

Color = Tuple[int, int, int, int]


def android_color(color: Color) -> str:
    """(r, g, b, a) → ``#AARRGGBB``."""
    r, g, b, a = color
    return f"#{a:02X}{r:02X}{g:02X}{b:02X}"


class AndroidResourceRepository:
    """
    Writes Android resource files. Knows the XML formats and file names,
    nothing about where the pixels came from.
    """

    def __init__(self):
        self.image_repository = ImageRepository()

    @staticmethod
    def write_text(path: Union[str, Path], content: str) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def write_png(self, path: Union[str, Path], image: RasterImage) -> Path:
        out = self.image_repository.create_image(image.pixels, path)
        self.image_repository.save(out)
        return Path(path)

    def write_adaptive_icon_xml(
        self,
        path: Union[str, Path],
        background: str,
        foreground: str,
        monochrome: str | None = None,
    ) -> Path:
        """
        background / foreground / monochrome are drawable references,
        e.g. ``@drawable/ic_launcher_background``.
        """
        lines = [
            '<?xml version="1.0" encoding="utf-8"?>',
            '<adaptive-icon xmlns:android="http://schemas.android.com/apk/res/android">',
            f'    <background android:drawable="{background}" />',
            f'    <foreground android:drawable="{foreground}" />',
        ]
        if monochrome:
            lines.append(f'    <monochrome android:drawable="{monochrome}" />')
        lines.append("</adaptive-icon>")
        return self.write_text(path, "\n".join(lines) + "\n")

    def write_background_drawable(self, path: Union[str, Path], colors: Sequence[Color]) -> Path:
        """One colour → solid shape, two colours → top-to-bottom linear gradient."""
        if not colors:
            raise ValueError("Background drawable needs at least one colour")

        if len(colors) == 1:
            body = f'    <solid android:color="{android_color(colors[0])}" />'
        else:
            body = (
                "    <gradient\n"
                '        android:type="linear"\n'
                '        android:angle="270"\n'
                f'        android:startColor="{android_color(colors[0])}"\n'
                f'        android:endColor="{android_color(colors[-1])}" />'
            )

        xml = (
            '<?xml version="1.0" encoding="utf-8"?>\n'
            '<shape xmlns:android="http://schemas.android.com/apk/res/android"\n'
            '    android:shape="rectangle">\n'
            f"{body}\n"
            "</shape>\n"
        )
        return self.write_text(path, xml)
