from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple
import copy

Color = Tuple[int, int, int, int]  # RGBA, 0-255

# Bottom stop of an automatic gradient, as a fraction of the base colour.
AUTOMATIC_GRADIENT_SHADE = 0.8

_RGB_SPACES = {"srgb", "extended-srgb", "display-p3"}
_GRAY_SPACES = {"gray", "extended-gray"}


def _to_u8(component: float) -> int:
    return max(0, min(255, int(component * 255 + 0.5)))


def parse_color(value: str) -> Color:
    """
    Parse an Icon Composer colour string such as ``"display-p3:0.2,0.4,0.8,1.0"``
    or ``"extended-gray:1.0,1.0"``. Colour spaces are not converted.
    """
    if not isinstance(value, str) or ":" not in value:
        raise ValueError(f"Unsupported colour value: {value!r}")

    space, _, raw = value.partition(":")
    comps = [float(c) for c in raw.split(",") if c.strip()]

    if space in _GRAY_SPACES:
        if len(comps) == 1:
            comps.append(1.0)
        if len(comps) != 2:
            raise ValueError(f"Expected gray,alpha in {value!r}")
        gray = _to_u8(comps[0])
        return gray, gray, gray, _to_u8(comps[1])

    if space in _RGB_SPACES:
        if len(comps) == 3:
            comps.append(1.0)
        if len(comps) != 4:
            raise ValueError(f"Expected r,g,b,alpha in {value!r}")
        r, g, b, a = (_to_u8(c) for c in comps)
        return r, g, b, a

    raise ValueError(f"Unknown colour space {space!r} in {value!r}")


@dataclass
class FillSpec:
    """Background fill of the icon: a solid colour, a two-stop gradient or nothing usable."""
    kind: str = "none"  # "solid" | "gradient" | "none"
    colors: List[Color] = field(default_factory=list)

    @classmethod
    def from_descriptor_fill(cls, fill: Any) -> "FillSpec":
        if not isinstance(fill, dict):
            # "automatic", "system-light", ... depend on the renderer
            return cls()

        if "solid" in fill:
            return cls("solid", [parse_color(fill["solid"])])

        if "automatic-gradient" in fill:
            base = parse_color(fill["automatic-gradient"])
            shade = tuple(int(c * AUTOMATIC_GRADIENT_SHADE + 0.5) for c in base[:3]) + (base[3],)
            return cls("gradient", [base, shade])

        if "linear-gradient" in fill:
            stops = [parse_color(c) for c in fill["linear-gradient"]]
            if len(stops) == 1:
                return cls("solid", stops)
            if stops:
                return cls("gradient", [stops[0], stops[-1]])

        return cls()


@dataclass
class IconDescriptor:
    """
    Parsed icon.json of an Icon Composer ``.icon`` folder.
    ``data`` is kept verbatim so that writing it back loses nothing.
    """
    data: Dict[str, Any]
    folder: Path | None = None

    @property
    def name(self) -> str:
        return self.folder.stem if self.folder else "icon"

    @property
    def groups(self) -> List[Dict[str, Any]]:
        return self.data.get("groups", [])

    @property
    def fill(self) -> FillSpec:
        return FillSpec.from_descriptor_fill(self.data.get("fill"))

    def background_only(self) -> "IconDescriptor":
        """Copy of this descriptor with every layer group removed."""
        data = copy.deepcopy(self.data)
        data["groups"] = []
        return IconDescriptor(data=data, folder=self.folder)
