"""Drawing style presets: colours and sizes.

The drawing tool only offers a fixed palette of colours and a fixed set
of sizes. Imported styles are matched against these tables; anything
that does not match falls back to ``RED`` / ``SMALL`` (icons) or
``MEDIUM`` (text).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mapviewer.utils.colors import hex_to_rgb

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True, slots=True)
class FeatureStyleColor:
    """A colour from the drawing palette.

    Attributes:
        name: Palette name (e.g. ``"red"``).
        fill: Fill colour as ``#RRGGBB``.
        border: Contrasting border colour as ``#RRGGBB``.
    """

    name: str
    fill: str
    border: str

    @property
    def rgb(self) -> tuple[int, int, int]:
        return hex_to_rgb(self.fill)


@dataclass(frozen=True, slots=True)
class FeatureStyleSize:
    """A size preset.

    Attributes:
        label: Preset name (e.g. ``"small_size"``).
        text_scale: Scale applied to labels.
        icon_scale: Scale applied to marker icons.
    """

    label: str
    text_scale: float
    icon_scale: float


BLACK = FeatureStyleColor("black", "#000000", "#ffffff")
BLUE = FeatureStyleColor("blue", "#0000ff", "#ffffff")
GRAY = FeatureStyleColor("gray", "#808080", "#ffffff")
GREEN = FeatureStyleColor("green", "#008000", "#ffffff")
ORANGE = FeatureStyleColor("orange", "#ffa500", "#000000")
RED = FeatureStyleColor("red", "#ff0000", "#ffffff")
WHITE = FeatureStyleColor("white", "#ffffff", "#000000")
YELLOW = FeatureStyleColor("yellow", "#ffff00", "#000000")

ALL_COLORS: tuple[FeatureStyleColor, ...] = (BLACK, BLUE, GRAY, GREEN, ORANGE, RED, WHITE, YELLOW)

SMALL = FeatureStyleSize("small_size", 1.0, 0.5)
MEDIUM = FeatureStyleSize("medium_size", 1.5, 1.0)
LARGE = FeatureStyleSize("large_size", 2.0, 1.5)
EXTRA_LARGE = FeatureStyleSize("extra_large_size", 2.5, 2.0)

ALL_SIZES: tuple[FeatureStyleSize, ...] = (SMALL, MEDIUM, LARGE, EXTRA_LARGE)


def get_feature_style_color(rgb: Sequence[float] | None) -> FeatureStyleColor:
    """Return the palette colour matching *rgb* (alpha ignored), ``RED`` if none."""
    if not rgb or len(rgb) < 3:
        return RED
    wanted = tuple(int(channel) for channel in rgb[:3])
    for color in ALL_COLORS:
        if color.rgb == wanted:
            return color
    return RED


def get_text_size(text_scale: float | None) -> FeatureStyleSize:
    """Return the size preset matching *text_scale*, ``MEDIUM`` if none."""
    if text_scale is None:
        return MEDIUM
    for size in ALL_SIZES:
        if size.text_scale == text_scale:
            return size
    return MEDIUM
